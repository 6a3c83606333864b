"""Flips, rotations and translation of a layer grid."""
from __future__ import annotations

import logging

import numpy as np
from PIL import Image

from .colors import EMPTY
from .errors import EmptyRegionError, NonSquareRegionError
from .grid import Grid, Selection
from .image_io import pixels_from_rgba, pixels_to_rgba


logger = logging.getLogger(__name__)


def resolve_region(selection: Selection | None, width: int, height: int) -> Selection:
    """Selection clipped to the canvas, or the whole canvas when there is none."""

    if selection is None:
        return Selection(x=0, y=0, w=width, h=height)
    clipped = selection.clip(width, height)
    if clipped is None:
        raise EmptyRegionError(
            f"Selection {selection.x},{selection.y} {selection.w}x{selection.h} does not overlap the "
            f"{width}x{height} canvas"
        )
    return clipped


def _apply_to_region(grid: Grid, region: Selection, block: np.ndarray) -> Grid:
    pixels = grid.pixels.copy()
    pixels[region.y : region.y + region.h, region.x : region.x + region.w] = block
    return Grid(pixels)


def _region_block(grid: Grid, region: Selection) -> np.ndarray:
    return grid.pixels[region.y : region.y + region.h, region.x : region.x + region.w]


def flip_horizontal(grid: Grid, selection: Selection | None = None) -> Grid:
    region = resolve_region(selection, grid.width, grid.height)
    return _apply_to_region(grid, region, _region_block(grid, region)[:, ::-1])


def flip_vertical(grid: Grid, selection: Selection | None = None) -> Grid:
    region = resolve_region(selection, grid.width, grid.height)
    return _apply_to_region(grid, region, _region_block(grid, region)[::-1, :])


def rotate_90(grid: Grid, selection: Selection | None = None) -> Grid:
    """Rotate a square region a quarter turn clockwise."""

    region = resolve_region(selection, grid.width, grid.height)
    if region.w != region.h:
        raise NonSquareRegionError(f"90 degree rotation needs a square region, got {region.w}x{region.h}")
    # dest[r][c] = src[n - 1 - c][r]
    rotated = np.swapaxes(_region_block(grid, region)[::-1, :], 0, 1)
    return _apply_to_region(grid, region, rotated)


def rotate_by_angle(grid: Grid, selection: Selection | None, degrees: float) -> Grid:
    """Rotate the region clockwise by ``degrees`` with nearest-neighbour sampling.

    Lossy for angles that are not multiples of 90: cells that fall outside the
    region are dropped and uncovered cells become empty.
    """

    if degrees == 0:
        return grid
    region = resolve_region(selection, grid.width, grid.height)
    buffer = Image.fromarray(pixels_to_rgba(_region_block(grid, region)))
    # Pillow rotates counter-clockwise; the region centre is the default pivot
    rotated = buffer.rotate(-degrees, resample=Image.Resampling.NEAREST, expand=False)
    block = pixels_from_rgba(np.asarray(rotated.convert("RGBA")))
    logger.debug(
        "rotate_by_angle region=%s,%s %sx%s degrees=%s filled=%s",
        region.x,
        region.y,
        region.w,
        region.h,
        degrees,
        int(np.count_nonzero(block)),
    )
    return _apply_to_region(grid, region, block)


def shift_grid(grid: Grid, dx: int, dy: int) -> Grid:
    """Translate every pixel by ``(dx, dy)``; pixels pushed off the edge are lost."""

    shifted = np.full_like(grid.pixels, EMPTY)
    height, width = grid.pixels.shape
    if abs(dx) >= width or abs(dy) >= height:
        return Grid(shifted)
    src_rows = slice(max(0, -dy), height - max(0, dy))
    dst_rows = slice(max(0, dy), height - max(0, -dy))
    src_cols = slice(max(0, -dx), width - max(0, dx))
    dst_cols = slice(max(0, dx), width - max(0, -dx))
    shifted[dst_rows, dst_cols] = grid.pixels[src_rows, src_cols]
    return Grid(shifted)
