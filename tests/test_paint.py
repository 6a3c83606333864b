"""
Tests for the paint engine: symmetry, dithering, selection and shading.
"""
import pytest

from texture_tools.colors import channels, darken, lighten, with_opacity
from texture_tools.grid import Grid, Selection
from texture_tools.layers import LayerStack
from texture_tools.paint import Brush, candidate_color, paint_at, pick_color, symmetry_points

from conftest import BLUE, EMPTY, RED


def painted_cells(grid):
    return {(r, c) for r in range(grid.height) for c in range(grid.width) if grid.get(r, c) != EMPTY}


class TestSymmetry:

    def test_both_mirrors_on_even_grid(self, empty_4x4):
        grid, changed = paint_at(empty_4x4, 0, 0, Brush(color=RED, mirror_x=True, mirror_y=True))
        assert changed
        assert painted_cells(grid) == {(0, 0), (0, 3), (3, 0), (3, 3)}
        assert all(grid.get(r, c) == RED for r, c in painted_cells(grid))

    def test_points_collapse_on_centre_of_odd_grid(self):
        assert symmetry_points(1, 1, 3, 3, True, True) == [(1, 1)]
        assert symmetry_points(0, 1, 3, 3, True, True) == [(0, 1), (2, 1)]

    def test_single_mirror(self, empty_4x4):
        grid, _ = paint_at(empty_4x4, 1, 0, Brush(color=RED, mirror_x=True))
        assert painted_cells(grid) == {(1, 0), (1, 3)}
        grid, _ = paint_at(empty_4x4, 1, 0, Brush(color=RED, mirror_y=True))
        assert painted_cells(grid) == {(1, 0), (2, 0)}


class TestPaintAt:

    def test_source_grid_untouched(self, empty_4x4):
        paint_at(empty_4x4, 0, 0, Brush(color=RED))
        assert empty_4x4.non_empty_count() == 0

    def test_repainting_same_color_is_no_change(self, empty_4x4):
        grid, _ = paint_at(empty_4x4, 0, 0, Brush(color=RED))
        again, changed = paint_at(grid, 0, 0, Brush(color=RED))
        assert not changed
        assert again is grid

    def test_out_of_bounds_is_silent(self, empty_4x4):
        grid, changed = paint_at(empty_4x4, -1, 7, Brush(color=RED))
        assert not changed

    def test_dither_skips_odd_cells(self, empty_4x4):
        brush = Brush(color=RED, dither=True)
        _, changed = paint_at(empty_4x4, 0, 1, brush)
        assert not changed
        grid, changed = paint_at(empty_4x4, 1, 1, brush)
        assert changed and grid.get(1, 1) == RED

    def test_dither_applies_to_mirrored_points_individually(self, empty_4x4):
        grid, _ = paint_at(empty_4x4, 0, 0, Brush(color=RED, dither=True, mirror_x=True))
        # (0, 3) has an odd coordinate sum
        assert painted_cells(grid) == {(0, 0)}

    def test_selection_masks_points(self, empty_4x4):
        brush = Brush(color=RED, mirror_x=True)
        grid, _ = paint_at(empty_4x4, 0, 0, brush, Selection(x=0, y=0, w=2, h=2))
        assert painted_cells(grid) == {(0, 0)}

    def test_eraser(self):
        grid = Grid.from_rows([[RED, RED]])
        erased, changed = paint_at(grid, 0, 1, Brush(color=BLUE, eraser=True))
        assert changed
        assert erased.get(0, 1) == EMPTY
        assert erased.get(0, 0) == RED

    def test_opacity_sets_alpha(self, empty_4x4):
        grid, _ = paint_at(empty_4x4, 0, 0, Brush(color=RED, opacity=50))
        assert channels(grid.get(0, 0)) == (255, 0, 0, 128)


class TestShading:

    def test_shade_darkens_existing_pixel(self):
        base = with_opacity(BLUE, 100)
        grid = Grid.from_rows([[base]])
        shaded, changed = paint_at(grid, 0, 0, Brush(color=RED, shade=True))
        assert changed
        assert shaded.get(0, 0) == darken(base)

    def test_lighten(self):
        grid = Grid.from_rows([[RED]])
        shaded, _ = paint_at(grid, 0, 0, Brush(lighten=True))
        assert shaded.get(0, 0) == lighten(RED)

    def test_shade_on_empty_pixel_is_noop(self, empty_4x4):
        brush = Brush(color=RED, shade=True, mirror_x=True)
        assert candidate_color(empty_4x4, 0, 0, brush) is None
        grid, changed = paint_at(empty_4x4, 0, 0, brush)
        assert not changed

    def test_shade_ignored_outside_freehand(self, empty_4x4):
        assert candidate_color(empty_4x4, 0, 0, Brush(color=RED, shade=True, freehand=False)) == RED

    def test_mirrored_points_get_primary_shade(self):
        grid = Grid.from_rows([[RED, BLUE]])
        shaded, _ = paint_at(grid, 0, 0, Brush(shade=True, mirror_x=True))
        assert shaded.get(0, 0) == darken(RED)
        assert shaded.get(0, 1) == darken(RED)


class TestPicker:

    def test_picks_composited_color(self):
        stack = LayerStack(2, 2)
        stack.active_layer.grid.set(0, 0, RED)
        stack.add()
        assert pick_color(stack, 0, 0) == RED
        assert pick_color(stack, 1, 1) == EMPTY
