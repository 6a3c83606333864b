"""Connected-region fill and global color replacement."""
from __future__ import annotations

import logging
from typing import List, Tuple

from .colors import Color, to_hex
from .grid import Grid, Selection, in_selection, selection_mask


logger = logging.getLogger(__name__)


def flood_fill(
    grid: Grid, row: int, col: int, color: Color, selection: Selection | None = None
) -> Grid:
    """4-connected fill of the region holding the seed's color.

    The target color is read once at the seed. Cells outside the selection act
    as walls. Returns ``grid`` unchanged when there is nothing to do.
    """

    if not grid.in_bounds(row, col):
        return grid
    pixels = grid.pixels.copy()
    target = int(pixels[row, col])
    if target == color:
        return grid
    height, width = pixels.shape
    stack: List[Tuple[int, int]] = [(row, col)]
    filled = 0
    while stack:
        r, c = stack.pop()
        if r < 0 or r >= height or c < 0 or c >= width:
            continue
        if not in_selection(selection, r, c):
            continue
        if pixels[r, c] != target:
            continue
        pixels[r, c] = color
        filled += 1
        stack.extend(((r + 1, c), (r - 1, c), (r, c + 1), (r, c - 1)))
    logger.debug(
        "flood_fill seed=(%s,%s) target=%s fill=%s cells=%s",
        row,
        col,
        to_hex(target),
        to_hex(color),
        filled,
    )
    if not filled:
        return grid
    return Grid(pixels)


def replace_color(
    grid: Grid, row: int, col: int, color: Color, selection: Selection | None = None
) -> Grid:
    """Recolor every cell matching the seed's color inside the selection."""

    if not grid.in_bounds(row, col):
        return grid
    target = grid.get(row, col)
    if target == color:
        return grid
    mask = (grid.pixels == target) & selection_mask(selection, grid.width, grid.height)
    count = int(mask.sum())
    logger.debug("replace_color target=%s fill=%s cells=%s", to_hex(target), to_hex(color), count)
    if not count:
        return grid
    pixels = grid.pixels.copy()
    pixels[mask] = color
    return Grid(pixels)
