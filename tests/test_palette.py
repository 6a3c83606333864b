"""
Tests for palette indexing and palette edits.
"""
import numpy as np
import pytest

from texture_tools.grid import Grid
from texture_tools.palette import (
    PaletteError,
    apply_colors,
    generate_palette,
    palette_slots,
    update_entry,
    write_act,
)

from conftest import BLUE, EMPTY, GREEN, RED, grid_of

WHITE = 0xFFFFFFFF


class TestGenerate:

    def test_first_seen_ids(self):
        grid = Grid.from_rows([[RED, RED, GREEN, EMPTY, BLUE]])
        palette = generate_palette(grid)
        assert [(e.id, e.color) for e in palette.entries] == [(1, RED), (2, GREEN), (3, BLUE)]
        assert palette.index_rows() == [[1, 1, 2, None, 3]]

    def test_row_major_order(self):
        grid = grid_of([".", "#0000FF"], ["#FF0000", "#0000FF"])
        palette = generate_palette(grid)
        assert [e.hex for e in palette.entries] == ["#0000FF", "#FF0000"]
        assert palette.id_at(1, 0) == 2
        assert palette.id_at(0, 0) is None

    def test_empty_grid_has_empty_palette(self):
        palette = generate_palette(Grid.empty(3, 3))
        assert palette.size == 0
        assert not np.any(palette.index_map)

    def test_translucent_colors_are_distinct(self):
        grid = grid_of(["#00FF00", "#00FF0080"])
        assert generate_palette(grid).size == 2

    def test_regeneration_is_stable_for_unchanged_grid(self, two_region_grid):
        first = generate_palette(two_region_grid)
        second = generate_palette(two_region_grid)
        assert first.colors() == second.colors()
        assert first.index_rows() == second.index_rows()


class TestUpdateEntry:

    def test_recolors_every_mapped_cell(self, two_region_grid):
        palette = generate_palette(two_region_grid)
        updated = update_entry(palette, two_region_grid, 1, GREEN)
        assert updated.get(3, 0) == GREEN
        assert updated.get(0, 0) == GREEN
        assert updated.get(0, 3) == BLUE
        assert palette.entry(1).color == GREEN
        assert two_region_grid.get(0, 0) == RED

    def test_map_drives_the_edit(self, two_region_grid):
        palette = generate_palette(two_region_grid)
        grid = update_entry(palette, two_region_grid, 1, BLUE)
        # ids stay attached to cells even after two entries share a color
        grid = update_entry(palette, grid, 1, WHITE)
        assert grid.get(0, 0) == WHITE
        assert grid.get(0, 3) == BLUE

    def test_zero_alpha_color_becomes_empty(self, two_region_grid):
        palette = generate_palette(two_region_grid)
        grid = update_entry(palette, two_region_grid, 1, 0x12345600)
        assert grid.get(0, 0) == EMPTY
        assert grid.get(3, 0) == EMPTY
        assert palette.entry(1).color == EMPTY

    def test_unknown_id(self, two_region_grid):
        palette = generate_palette(two_region_grid)
        with pytest.raises(PaletteError):
            update_entry(palette, two_region_grid, 9, GREEN)

    def test_shape_mismatch(self, two_region_grid):
        palette = generate_palette(two_region_grid)
        with pytest.raises(PaletteError):
            update_entry(palette, Grid.empty(2, 2), 1, GREEN)

    def test_apply_colors_positionally(self, two_region_grid):
        palette = generate_palette(two_region_grid)
        grid = apply_colors(palette, two_region_grid, [GREEN, RED, WHITE])
        assert grid.get(0, 0) == GREEN
        assert grid.get(0, 3) == RED
        assert palette.colors() == [GREEN, RED]


class TestActExport:

    def test_slots_reserve_zero(self, two_region_grid):
        slots = palette_slots(generate_palette(two_region_grid))
        assert slots == [(0, 0, 0), (255, 0, 0), (0, 0, 255)]

    def test_write_act(self, tmp_path, two_region_grid):
        path = tmp_path / "out.act"
        write_act(path, generate_palette(two_region_grid))
        data = path.read_bytes()
        assert len(data) == 768
        assert data[3:6] == bytes((255, 0, 0))
        assert data[6:9] == bytes((0, 0, 255))
