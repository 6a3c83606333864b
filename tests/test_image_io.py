"""
Tests for the Pillow decode/encode boundary.
"""
import io

import pytest
from PIL import Image

from texture_tools.grid import Grid
from texture_tools.image_io import (
    decode_image,
    encode_grid,
    encode_indexed,
    grid_from_image,
    grid_to_image,
    load_grid,
    save_grid,
)
from texture_tools.palette import PaletteError

from conftest import BLUE, EMPTY, HALF_GREEN, RED, grid_of


class TestRgbaBoundary:

    def test_empty_becomes_fully_transparent(self):
        image = grid_to_image(Grid.empty(2, 1))
        assert image.mode == "RGBA"
        assert image.getpixel((0, 0)) == (0, 0, 0, 0)

    def test_pixels_keep_rgba(self):
        image = grid_to_image(grid_of(["#FF0000", "#00FF0080"]))
        assert image.getpixel((0, 0)) == (255, 0, 0, 255)
        assert image.getpixel((1, 0)) == (0, 255, 0, 128)

    def test_transparent_source_pixels_become_empty(self):
        image = Image.new("RGBA", (2, 2), (10, 20, 30, 0))
        image.putpixel((1, 0), (255, 0, 0, 255))
        grid = grid_from_image(image)
        assert grid.get(0, 1) == RED
        assert grid.get(0, 0) == EMPTY

    def test_rgb_source_is_opaque(self):
        grid = grid_from_image(Image.new("RGB", (1, 1), (0, 0, 255)))
        assert grid.get(0, 0) == BLUE

    def test_png_round_trip(self, two_region_grid):
        assert decode_image(encode_grid(two_region_grid)) == two_region_grid

    def test_translucent_round_trip(self):
        grid = grid_of(["#00FF0080", "."])
        assert decode_image(encode_grid(grid)).get(0, 0) == HALF_GREEN

    def test_file_round_trip(self, tmp_path, two_region_grid):
        path = tmp_path / "nested" / "tex.png"
        save_grid(path, two_region_grid)
        assert load_grid(path) == two_region_grid


class TestIndexedExport:

    def test_slots_follow_palette_ids(self, two_region_grid):
        data = encode_indexed(two_region_grid)
        with Image.open(io.BytesIO(data)) as image:
            assert image.mode == "P"
            assert image.getpixel((0, 0)) == 1
            assert image.getpixel((3, 0)) == 2
            assert image.getpixel((2, 0)) == 0

    def test_decodes_back_to_same_grid(self, two_region_grid):
        assert decode_image(encode_indexed(two_region_grid)) == two_region_grid

    def test_too_many_colors(self):
        grid = Grid.from_rows([[(value << 8) | 0xFF for value in range(1, 301)]])
        with pytest.raises(PaletteError):
            encode_indexed(grid)
