"""Controllers coordinating panel actions with core services."""

from .layer_controller import LayerPanelController, LayerRow

__all__ = ["LayerPanelController", "LayerRow"]
