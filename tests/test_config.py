import logging

import pytest

from layer_status.config import ConfigManager
from layer_status.logging_config import setup_logging


@pytest.fixture
def user_config_dir(tmp_path, monkeypatch):
    config_dir = tmp_path / "config"
    monkeypatch.setenv("LAYER_STATUS_CONFIG_DIR", str(config_dir))
    ConfigManager.reset()
    yield config_dir
    ConfigManager.reset()


def test_packaged_logging_config_is_loaded(user_config_dir):
    cfg = ConfigManager().get_logging_config()
    assert cfg["version"] == 1
    assert "console" in cfg["handlers"]


def test_defaults_are_copied_to_user_dir(user_config_dir):
    ConfigManager()
    assert (user_config_dir / "logging.yml").exists()


def test_user_overrides_are_merged(user_config_dir):
    user_config_dir.mkdir(parents=True)
    (user_config_dir / "logging.yml").write_text("root:\n  level: WARNING\n", encoding="utf-8")
    cfg = ConfigManager().get_logging_config()
    assert cfg["root"] == {"level": "WARNING"}
    assert cfg["version"] == 1


def test_config_manager_is_shared(user_config_dir):
    assert ConfigManager() is ConfigManager()


def test_setup_logging_with_debug_override(user_config_dir, tmp_path, monkeypatch):
    monkeypatch.setenv("LAYER_STATUS_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("LAYER_STATUS_DEBUG_SYNC", "true")
    setup_logging()
    try:
        assert (tmp_path / "logs").is_dir()
        sync_logger = logging.getLogger("layer_status.core.services.node_status_service")
        assert sync_logger.level == logging.DEBUG
    finally:
        for handler in list(logging.getLogger().handlers):
            if isinstance(handler, logging.FileHandler):
                handler.close()
                logging.getLogger().removeHandler(handler)
        logging.getLogger("layer_status.core.services.node_status_service").setLevel(logging.NOTSET)
