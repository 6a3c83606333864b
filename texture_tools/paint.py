"""Single-pixel painting with symmetry, dithering and shading."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from .colors import BLACK, EMPTY, SHADE_DELTA, Color, darken, lighten, with_opacity
from .compositor import composite_color
from .grid import Grid, Selection, in_selection
from .layers import LayerStack

Point = Tuple[int, int]


@dataclass(frozen=True, slots=True)
class Brush:
    """Everything a paint action needs besides the target coordinate.

    ``mirror_x`` mirrors across the vertical axis (column ``w - 1 - c``),
    ``mirror_y`` across the horizontal axis (row ``h - 1 - r``). Shading and
    lightening only apply in freehand mode.
    """

    color: Color = BLACK
    opacity: int = 100
    eraser: bool = False
    shade: bool = False
    lighten: bool = False
    freehand: bool = True
    mirror_x: bool = False
    mirror_y: bool = False
    dither: bool = False
    shade_delta: int = SHADE_DELTA

    def base_color(self) -> Color:
        if self.eraser:
            return EMPTY
        return with_opacity(self.color, self.opacity)


def candidate_color(grid: Grid, row: int, col: int, brush: Brush) -> Color | None:
    """Color the brush would write at ``(row, col)``; None means leave it alone."""

    if brush.eraser:
        return EMPTY
    if brush.freehand and (brush.shade or brush.lighten):
        current = grid.get(row, col)
        if current == EMPTY:
            return None
        if brush.shade:
            return darken(current, brush.shade_delta)
        return lighten(current, brush.shade_delta)
    return brush.base_color()


def symmetry_points(
    row: int, col: int, width: int, height: int, mirror_x: bool, mirror_y: bool
) -> List[Point]:
    candidates = [(row, col)]
    if mirror_x:
        candidates.append((row, width - 1 - col))
    if mirror_y:
        candidates.append((height - 1 - row, col))
    if mirror_x and mirror_y:
        candidates.append((height - 1 - row, width - 1 - col))
    points: List[Point] = []
    for point in candidates:
        if point not in points:
            points.append(point)
    return points


def paint_at(
    grid: Grid, row: int, col: int, brush: Brush, selection: Selection | None = None
) -> Tuple[Grid, bool]:
    """Apply one paint action; returns the resulting grid and whether it changed.

    ``grid`` itself is never modified. When nothing changes it is returned as-is.
    """

    color = candidate_color(grid, row, col, brush)
    if color is None:
        return grid, False
    result = grid.copy()
    changed = False
    for r, c in symmetry_points(row, col, grid.width, grid.height, brush.mirror_x, brush.mirror_y):
        if not result.in_bounds(r, c):
            continue
        if brush.dither and (r + c) % 2 != 0:
            continue
        if not in_selection(selection, r, c):
            continue
        changed = result.set(r, c, color) or changed
    if not changed:
        return grid, False
    return result, True


def pick_color(stack: LayerStack, row: int, col: int) -> Color:
    """Eyedropper read of the composited color, not just the active layer."""

    return composite_color(stack, row, col)
