"""Layered indexed-color texture editing engine."""
from __future__ import annotations

from .colors import EMPTY, Color, from_hex, rgba, to_hex
from .errors import EmptyRegionError, LastLayerError, NonSquareRegionError, TextureError
from .grid import Grid, Selection
from .layers import Layer, LayerStack
from .session import TextureSession, ToolSettings

__all__ = [
    "EMPTY",
    "Color",
    "EmptyRegionError",
    "Grid",
    "LastLayerError",
    "Layer",
    "LayerStack",
    "NonSquareRegionError",
    "Selection",
    "TextureError",
    "TextureSession",
    "ToolSettings",
    "from_hex",
    "rgba",
    "to_hex",
]

__version__ = "0.1.0"
