"""Pixel grids, rectangular selections and canvas dimension changes."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence

import numpy as np

from .colors import EMPTY, Color, from_hex, to_hex


logger = logging.getLogger(__name__)

PIXEL_DTYPE = np.uint32


class Grid:
    """A ``height x width`` buffer of packed colors.

    Reads outside the grid return ``EMPTY`` and writes outside it are ignored;
    callers that want clamping (scaling) do it themselves.
    """

    __slots__ = ("pixels",)

    def __init__(self, pixels: np.ndarray) -> None:
        if pixels.ndim != 2 or pixels.shape[0] < 1 or pixels.shape[1] < 1:
            raise ValueError(f"Grid needs a non-empty 2-D array, got shape {pixels.shape}")
        self.pixels = np.ascontiguousarray(pixels, dtype=PIXEL_DTYPE)

    @classmethod
    def empty(cls, width: int, height: int) -> "Grid":
        if width < 1 or height < 1:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        return cls(np.zeros((height, width), dtype=PIXEL_DTYPE))

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Color]]) -> "Grid":
        widths = {len(row) for row in rows}
        if len(widths) != 1:
            raise ValueError("Every grid row must have the same width")
        return cls(np.array(rows, dtype=PIXEL_DTYPE))

    @classmethod
    def from_hex_rows(cls, rows: Iterable[Sequence[str]]) -> "Grid":
        return cls.from_rows([[from_hex(value) for value in row] for row in rows])

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def get(self, row: int, col: int) -> Color:
        if not self.in_bounds(row, col):
            return EMPTY
        return int(self.pixels[row, col])

    def set(self, row: int, col: int, color: Color) -> bool:
        """Write ``color`` and report whether the cell changed."""

        if not self.in_bounds(row, col):
            return False
        if int(self.pixels[row, col]) == color:
            return False
        self.pixels[row, col] = color
        return True

    def copy(self) -> "Grid":
        return Grid(self.pixels.copy())

    def non_empty_count(self) -> int:
        return int(np.count_nonzero(self.pixels))

    def hex_rows(self) -> List[List[str]]:
        return [[to_hex(value) for value in row] for row in self.pixels.tolist()]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return np.array_equal(self.pixels, other.pixels)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Grid({self.width}x{self.height}, filled={self.non_empty_count()})"


@dataclass(frozen=True, slots=True)
class Selection:
    """Axis-aligned rectangle in grid coordinates, at least 1x1."""

    x: int
    y: int
    w: int
    h: int

    def __post_init__(self) -> None:
        if self.w < 1 or self.h < 1:
            raise ValueError(f"Selection must be at least 1x1, got {self.w}x{self.h}")

    @classmethod
    def from_corners(cls, row0: int, col0: int, row1: int, col1: int) -> "Selection":
        top, bottom = min(row0, row1), max(row0, row1)
        left, right = min(col0, col1), max(col0, col1)
        return cls(x=left, y=top, w=right - left + 1, h=bottom - top + 1)

    def contains(self, row: int, col: int) -> bool:
        return self.x <= col < self.x + self.w and self.y <= row < self.y + self.h

    def clip(self, width: int, height: int) -> "Selection | None":
        left = max(0, self.x)
        top = max(0, self.y)
        right = min(width, self.x + self.w)
        bottom = min(height, self.y + self.h)
        if right <= left or bottom <= top:
            return None
        return Selection(x=left, y=top, w=right - left, h=bottom - top)


def in_selection(selection: Selection | None, row: int, col: int) -> bool:
    if selection is None:
        return True
    return selection.contains(row, col)


def selection_mask(selection: Selection | None, width: int, height: int) -> np.ndarray:
    """Boolean ``height x width`` mask of the cells a mutation may touch."""

    if selection is None:
        return np.ones((height, width), dtype=bool)
    mask = np.zeros((height, width), dtype=bool)
    clipped = selection.clip(width, height)
    if clipped is not None:
        mask[clipped.y : clipped.y + clipped.h, clipped.x : clipped.x + clipped.w] = True
    return mask


def resize_grid(grid: Grid, width: int, height: int) -> Grid:
    """Crop or pad ``grid`` keeping the top-left aligned overlap."""

    resized = Grid.empty(width, height)
    copy_h = min(grid.height, height)
    copy_w = min(grid.width, width)
    resized.pixels[:copy_h, :copy_w] = grid.pixels[:copy_h, :copy_w]
    logger.debug(
        "resize_grid src=%sx%s dst=%sx%s copy=%sx%s",
        grid.width,
        grid.height,
        width,
        height,
        copy_w,
        copy_h,
    )
    return resized


def _nearest_sources(old: int, new: int) -> np.ndarray:
    ratio = new / old
    sources = np.floor(np.arange(new) / ratio).astype(np.intp)
    return np.minimum(sources, old - 1)


def scale_grid(grid: Grid, width: int, height: int) -> Grid:
    """Nearest-neighbour resample of ``grid`` to ``width x height``."""

    if width < 1 or height < 1:
        raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
    rows = _nearest_sources(grid.height, height)
    cols = _nearest_sources(grid.width, width)
    logger.debug("scale_grid src=%sx%s dst=%sx%s", grid.width, grid.height, width, height)
    return Grid(grid.pixels[np.ix_(rows, cols)])
