"""Rendering-side helpers for the layer panel (no GUI toolkit code)."""
