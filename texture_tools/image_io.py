"""Decode/encode boundary between grids and Pillow images."""
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import List

import numpy as np
from PIL import Image

from .grid import Grid
from .palette import PaletteError, PaletteIndex, generate_palette, palette_slots


logger = logging.getLogger(__name__)

MAX_INDEXED_COLORS = 255


def pixels_to_rgba(pixels: np.ndarray) -> np.ndarray:
    """Unpack ``0xRRGGBBAA`` values into an ``h x w x 4`` uint8 array."""

    packed = pixels.astype(np.uint32)
    return np.stack(
        [(packed >> 24) & 0xFF, (packed >> 16) & 0xFF, (packed >> 8) & 0xFF, packed & 0xFF],
        axis=-1,
    ).astype(np.uint8)


def pixels_from_rgba(rgba: np.ndarray) -> np.ndarray:
    """Pack an ``h x w x 4`` uint8 array; fully transparent pixels become empty."""

    channels = rgba.astype(np.uint32)
    packed = (channels[..., 0] << 24) | (channels[..., 1] << 16) | (channels[..., 2] << 8) | channels[..., 3]
    packed[channels[..., 3] == 0] = 0
    return packed.astype(np.uint32)


def grid_from_image(image: Image.Image) -> Grid:
    rgba = image.convert("RGBA")
    return Grid(pixels_from_rgba(np.asarray(rgba)))


def grid_to_image(grid: Grid) -> Image.Image:
    return Image.fromarray(pixels_to_rgba(grid.pixels))


def decode_image(data: bytes) -> Grid:
    with Image.open(io.BytesIO(data)) as img:
        grid = grid_from_image(img)
    logger.debug("decode_image bytes=%s size=%sx%s", len(data), grid.width, grid.height)
    return grid


def encode_grid(grid: Grid, format: str = "PNG") -> bytes:
    buffer = io.BytesIO()
    grid_to_image(grid).save(buffer, format=format)
    return buffer.getvalue()


def load_grid(path: Path) -> Grid:
    with Image.open(path) as img:
        return grid_from_image(img)


def save_grid(path: Path, grid: Grid) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    grid_to_image(grid).save(path)


def _alpha_table(palette: PaletteIndex) -> bytes:
    table: List[int] = [255] * 256
    table[0] = 0
    for entry in palette.entries:
        table[entry.id] = entry.rgba[3]
    return bytes(table[: palette.size + 1])


def indexed_image(grid: Grid, palette: PaletteIndex | None = None) -> Image.Image:
    """Mode "P" image whose slot numbers are the palette ids; slot 0 is transparent."""

    if palette is None:
        palette = generate_palette(grid)
    if palette.size > MAX_INDEXED_COLORS:
        raise PaletteError(
            f"Indexed export supports {MAX_INDEXED_COLORS} colors plus transparency, grid has {palette.size}"
        )
    indices = palette.index_map.astype(np.uint8)
    image = Image.frombytes("P", (grid.width, grid.height), indices.tobytes())
    flat: List[int] = []
    for color in palette_slots(palette):
        flat.extend(color)
    image.putpalette(flat)
    image.info["transparency"] = _alpha_table(palette)
    logger.debug("indexed_image size=%sx%s colors=%s", grid.width, grid.height, palette.size)
    return image


def encode_indexed(grid: Grid, palette: PaletteIndex | None = None) -> bytes:
    image = indexed_image(grid, palette)
    buffer = io.BytesIO()
    image.save(buffer, format="PNG", transparency=image.info["transparency"])
    return buffer.getvalue()
