"""Flattening of the layer stack: the topmost visible non-empty pixel wins."""
from __future__ import annotations

import numpy as np

from .colors import EMPTY, Color
from .grid import Grid
from .layers import LayerStack


def composite_color(stack: LayerStack, row: int, col: int) -> Color:
    for layer in stack:
        if not layer.visible:
            continue
        color = layer.grid.get(row, col)
        if color != EMPTY:
            return color
    return EMPTY


def flatten(stack: LayerStack) -> Grid:
    """Composite every coordinate of ``stack`` into a single grid."""

    result = np.zeros((stack.height, stack.width), dtype=np.uint32)
    for layer in stack:
        if not layer.visible:
            continue
        take = (result == 0) & (layer.grid.pixels != 0)
        result[take] = layer.grid.pixels[take]
    return Grid(result)
