"""Palette indexing: distinct colors of a grid with stable first-seen ids."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Sequence

import numpy as np

from .colors import EMPTY, Color, ColorTuple, RGBATuple, channels, rgba, to_hex
from .errors import TextureError
from .grid import Grid


logger = logging.getLogger(__name__)

NO_ENTRY = 0


class PaletteError(TextureError):
    """Raised when palette processing fails."""

    code = "palette"


@dataclass(slots=True)
class PaletteEntry:
    id: int
    color: Color

    @property
    def hex(self) -> str:
        return to_hex(self.color)

    @property
    def rgba(self) -> RGBATuple:
        return channels(self.color)


@dataclass(slots=True)
class PaletteIndex:
    """Palette list plus a grid-shaped map of entry ids (``NO_ENTRY`` for empty cells)."""

    entries: List[PaletteEntry]
    index_map: np.ndarray

    @property
    def size(self) -> int:
        return len(self.entries)

    def entry(self, entry_id: int) -> PaletteEntry:
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        raise PaletteError(f"Palette has no entry with id {entry_id}")

    def id_at(self, row: int, col: int) -> int | None:
        value = int(self.index_map[row, col])
        return None if value == NO_ENTRY else value

    def index_rows(self) -> List[List[int | None]]:
        return [[None if value == NO_ENTRY else value for value in row] for row in self.index_map.tolist()]

    def colors(self) -> List[Color]:
        return [entry.color for entry in self.entries]


def generate_palette(grid: Grid) -> PaletteIndex:
    """Scan ``grid`` row-major and number each distinct color from 1."""

    color_to_id: Dict[int, int] = {}
    entries: List[PaletteEntry] = []
    index_rows: List[List[int]] = []
    for row in grid.pixels.tolist():
        ids: List[int] = []
        for color in row:
            if color == EMPTY:
                ids.append(NO_ENTRY)
                continue
            entry_id = color_to_id.get(color)
            if entry_id is None:
                entry_id = len(entries) + 1
                color_to_id[color] = entry_id
                entries.append(PaletteEntry(id=entry_id, color=color))
            ids.append(entry_id)
        index_rows.append(ids)
    logger.debug("generate_palette size=%sx%s colors=%s", grid.width, grid.height, len(entries))
    return PaletteIndex(entries=entries, index_map=np.array(index_rows, dtype=np.int32))


def update_entry(palette: PaletteIndex, grid: Grid, entry_id: int, color: Color) -> Grid:
    """Recolor every cell mapped to ``entry_id`` and update the entry in place.

    A color with zero alpha becomes EMPTY, both in the grid and in the entry.
    """

    if palette.index_map.shape != grid.pixels.shape:
        raise PaletteError(
            f"Palette map is {palette.index_map.shape[1]}x{palette.index_map.shape[0]}, "
            f"grid is {grid.width}x{grid.height}"
        )
    color = rgba(*channels(color))
    entry = palette.entry(entry_id)
    entry.color = color
    pixels = grid.pixels.copy()
    pixels[palette.index_map == entry_id] = color
    logger.debug("update_entry id=%s color=%s", entry_id, to_hex(color))
    return Grid(pixels)


def apply_colors(palette: PaletteIndex, grid: Grid, colors: Sequence[Color]) -> Grid:
    """Load ``colors`` onto the palette entries in order; extra colors are ignored."""

    result = grid
    for entry, color in zip(palette.entries, colors):
        result = update_entry(palette, result, entry.id, color)
    return result


def palette_slots(palette: PaletteIndex) -> List[ColorTuple]:
    """RGB per slot where slot ``id`` holds entry ``id`` and slot 0 is reserved."""

    slots: List[ColorTuple] = [(0, 0, 0)]
    for entry in sorted(palette.entries, key=lambda item: item.id):
        r, g, b, _a = entry.rgba
        slots.append((r, g, b))
    return slots


def write_act(path: Path, palette: PaletteIndex) -> None:
    """Write a 256 slot Adobe ACT palette file."""

    colors = palette_slots(palette)[:256]
    padded = colors + [(0, 0, 0)] * (256 - len(colors))
    with path.open("wb") as fh:
        for r, g, b in padded:
            fh.write(bytes((r, g, b)))
