from __future__ import annotations

"""Central logging configuration for the layer status package.

Import and call :func:`setup_logging` at application start-up.
"""

import logging
import logging.config
import os

from layer_status.config import ConfigManager

__all__ = ["setup_logging"]

_SYNC_LOGGERS = (
    "layer_status.core.services.node_status_service",
    "layer_status.core.services.editor_service",
)


def setup_logging() -> None:
    """Configure logging for the application using configuration from YAML files."""
    log_dir = os.environ.get("LAYER_STATUS_LOG_DIR", "logs")
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, "app.log")

    try:
        logging_config = ConfigManager().get_logging_config()

        if logging_config and isinstance(logging_config, dict) and logging_config.get("version"):
            # Update the filename dynamically
            if "handlers" in logging_config and "file" in logging_config["handlers"]:
                logging_config["handlers"]["file"]["filename"] = log_file

            logging.config.dictConfig(logging_config)
            logging.info("===== Logging initialised from config files =====")
        else:
            _setup_minimal_logging()
    except (ValueError, TypeError, AttributeError, ImportError, OSError) as exc:
        # dictConfig reports every bad entry as one of these
        print(f"Error loading logging config: {exc}")
        _setup_minimal_logging()

    _apply_debug_overrides()


def _setup_minimal_logging() -> None:
    """Set up minimal console-only logging when config is unavailable."""
    minimal_config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'simple': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'simple',
                'level': 'INFO',
            },
        },
        'root': {
            'level': 'INFO',
            'handlers': ['console'],
        },
    }

    logging.config.dictConfig(minimal_config)
    logging.error("===== Logging initialised with minimal fallback (config error) =====")


def _apply_debug_overrides() -> None:
    """Turn on DEBUG for the status synchronizers when LAYER_STATUS_DEBUG_SYNC is set."""
    if os.environ.get("LAYER_STATUS_DEBUG_SYNC", "").strip().lower() not in {"1", "true", "yes", "on"}:
        return
    for name in _SYNC_LOGGERS:
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        # Root handlers filter at INFO; give the logger its own DEBUG output
        if not logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
            logger.addHandler(handler)
        logger.info("Debug override active for logger '%s'", name)
