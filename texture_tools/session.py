"""Editing session: layer stack, tool settings, selection, palette and history."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Literal, Sequence, Tuple

from .colors import BLACK, EMPTY, SHADE_DELTA, Color, to_hex
from .compositor import composite_color, flatten
from .config import EditorConfig, parse_dimension
from .errors import LastLayerError
from .grid import Grid, Selection, resize_grid
from .history import HistoryManager
from .interchange import export_layer_text, import_layer_text
from .layers import Layer, LayerStack
from .paint import Brush, paint_at, pick_color
from .palette import PaletteError, PaletteIndex, apply_colors, generate_palette, update_entry
from .regions import flood_fill, replace_color
from .transforms import flip_horizontal, flip_vertical, rotate_90, rotate_by_angle, shift_grid


logger = logging.getLogger(__name__)

Tool = Literal["pencil", "eraser", "picker", "bucket", "replace", "marquee"]
TOOLS: Tuple[str, ...] = ("pencil", "eraser", "picker", "bucket", "replace", "marquee")
FREEHAND_TOOLS = ("pencil", "eraser")


@dataclass(slots=True)
class ToolSettings:
    tool: Tool = "pencil"
    color: Color = BLACK
    opacity: int = 100
    shading: bool = False
    lighten: bool = False
    dither: bool = False
    mirror_x: bool = False
    mirror_y: bool = False
    shade_delta: int = SHADE_DELTA

    def brush(self) -> Brush:
        return Brush(
            color=self.color,
            opacity=self.opacity,
            eraser=self.tool == "eraser",
            shade=self.shading,
            lighten=self.lighten,
            freehand=self.tool == "pencil",
            mirror_x=self.mirror_x,
            mirror_y=self.mirror_y,
            dither=self.dither,
            shade_delta=self.shade_delta,
        )

    def current_color(self) -> Color:
        return self.brush().base_color()


class TextureSession:
    """One editing session over a fixed-size canvas.

    Every intent that changes pixels, canvas size or the layer list records a
    snapshot of the state right before the change, and only when something
    actually changes. A freehand stroke captures at ``press`` and records on
    its first real change, so a whole drag is a single undo step.
    """

    def __init__(
        self,
        width: Any = None,
        height: Any = None,
        *,
        config: EditorConfig | None = None,
    ) -> None:
        self.config = config or EditorConfig.from_env()
        canvas_w = parse_dimension(
            self.config.width if width is None else width, self.config.width, self.config.max_canvas_size
        )
        canvas_h = parse_dimension(
            self.config.height if height is None else height, self.config.height, self.config.max_canvas_size
        )
        self._stack = LayerStack(canvas_w, canvas_h, name_prefix=self.config.layer_name_prefix)
        self._selection: Selection | None = None
        self.settings = ToolSettings(shade_delta=self.config.shade_delta)
        self.history = HistoryManager(limit=self.config.history_limit)
        self.history.register_field("layers", self._capture_layers, self._restore_layers)
        self.history.register_field("selection", lambda: self._selection, self._restore_selection)
        self._palette_mode = False
        self._palette: PaletteIndex | None = None
        self._dragging = False
        self._stroke_state: Dict[str, Any] | None = None
        self._stroke_recorded = False
        self._marquee_anchor: Tuple[int, int] | None = None
        logger.debug("Session created size=%sx%s", canvas_w, canvas_h)

    # ── state access ────────────────────────────────────────────────

    @property
    def stack(self) -> LayerStack:
        return self._stack

    @property
    def width(self) -> int:
        return self._stack.width

    @property
    def height(self) -> int:
        return self._stack.height

    @property
    def active_layer(self) -> Layer:
        return self._stack.active_layer

    @property
    def selection(self) -> Selection | None:
        return self._selection

    @property
    def palette_mode(self) -> bool:
        return self._palette_mode

    @property
    def palette(self) -> PaletteIndex | None:
        return self._palette

    def composite_color(self, row: int, col: int) -> Color:
        return composite_color(self._stack, row, col)

    def flatten(self) -> Grid:
        return flatten(self._stack)

    def set_tool(self, tool: str) -> None:
        if tool not in TOOLS:
            raise ValueError(f"Unknown tool {tool!r}; expected one of {', '.join(TOOLS)}")
        self.settings.tool = tool  # type: ignore[assignment]

    # ── history plumbing ────────────────────────────────────────────

    def _capture_layers(self) -> LayerStack:
        return self._stack.copy()

    def _restore_layers(self, stack: LayerStack) -> None:
        self._stack = stack

    def _restore_selection(self, selection: Selection | None) -> None:
        self._selection = selection

    def _refresh_palette(self) -> None:
        if self._palette_mode:
            self._palette = generate_palette(self._stack.active_layer.grid)

    def _record(self, label: str) -> None:
        # any intent other than the stroke itself ends the open stroke
        self.release()
        self.history.record(label)

    def _commit_active(
        self, grid: Grid, label: str, *, refresh_palette: bool = True, stroke: bool = False
    ) -> bool:
        layer = self._stack.active_layer
        if grid is layer.grid or grid == layer.grid:
            logger.debug("Session %s no-op layer=%s", label, layer.id)
            return False
        if stroke and self._stroke_state is not None:
            if not self._stroke_recorded:
                self.history.record(label, self._stroke_state)
                self._stroke_recorded = True
        else:
            self._record(label)
        self._stack.replace_grid(layer.id, grid)
        if refresh_palette:
            self._refresh_palette()
        return True

    def _mutate_stack(self, label: str, action: Callable[[], Any]) -> Any:
        self._record(label)
        result = action()
        self._refresh_palette()
        return result

    def undo(self) -> bool:
        self.release()
        applied = self.history.undo()
        if applied:
            self._refresh_palette()
        return applied

    def redo(self) -> bool:
        self.release()
        applied = self.history.redo()
        if applied:
            self._refresh_palette()
        return applied

    # ── pointer gestures ────────────────────────────────────────────

    def press(self, row: int, col: int) -> bool:
        """Start a gesture with the current tool; True when pixels changed."""

        tool = self.settings.tool
        if tool == "marquee":
            self._marquee_anchor = (row, col)
            self._selection = Selection(x=col, y=row, w=1, h=1)
            self._dragging = True
            return False
        if tool == "picker":
            self.pick(row, col)
            return False
        if tool == "bucket":
            return self.fill(row, col)
        if tool == "replace":
            return self.replace(row, col)
        self._stroke_state = self.history.capture()
        self._stroke_recorded = False
        self._dragging = True
        return self._paint(row, col, stroke=True)

    def drag(self, row: int, col: int) -> bool:
        if not self._dragging:
            return False
        tool = self.settings.tool
        if tool == "marquee" and self._marquee_anchor is not None:
            anchor_row, anchor_col = self._marquee_anchor
            self._selection = Selection.from_corners(anchor_row, anchor_col, row, col)
            return False
        if tool in FREEHAND_TOOLS:
            return self._paint(row, col, stroke=True)
        return False

    def release(self) -> None:
        if self._stroke_state is not None:
            logger.debug("Session stroke end recorded=%s", self._stroke_recorded)
        self._dragging = False
        self._stroke_state = None
        self._stroke_recorded = False
        self._marquee_anchor = None

    # ── painting intents ────────────────────────────────────────────

    def _paint(self, row: int, col: int, *, stroke: bool = False) -> bool:
        layer = self._stack.active_layer
        if not layer.visible:
            return False
        grid, changed = paint_at(layer.grid, row, col, self.settings.brush(), self._selection)
        if not changed:
            return False
        return self._commit_active(grid, "stroke" if stroke else "paint", stroke=stroke)

    def paint(self, row: int, col: int) -> bool:
        """Single paint action outside of a gesture, recorded on its own."""

        return self._paint(row, col)

    def pick(self, row: int, col: int) -> Color:
        if not self._stack.active_layer.grid.in_bounds(row, col):
            return EMPTY
        color = pick_color(self._stack, row, col)
        if color != EMPTY:
            self.settings.color = color
        self.settings.tool = "pencil"
        logger.debug("Session pick at=(%s,%s) color=%s", row, col, to_hex(color))
        return color

    def fill(self, row: int, col: int) -> bool:
        layer = self._stack.active_layer
        if not layer.visible:
            return False
        grid = flood_fill(layer.grid, row, col, self.settings.current_color(), self._selection)
        return self._commit_active(grid, "fill")

    def replace(self, row: int, col: int) -> bool:
        layer = self._stack.active_layer
        if not layer.visible:
            return False
        grid = replace_color(layer.grid, row, col, self.settings.current_color(), self._selection)
        return self._commit_active(grid, "replace")

    def clear_layer(self) -> bool:
        return self._commit_active(Grid.empty(self.width, self.height), "clear layer")

    def shift_layer(self, dx: int, dy: int) -> bool:
        return self._commit_active(shift_grid(self._stack.active_layer.grid, dx, dy), "shift layer")

    # ── selection ───────────────────────────────────────────────────

    def select(self, x: int, y: int, w: int, h: int) -> Selection:
        self._selection = Selection(x=x, y=y, w=w, h=h)
        return self._selection

    def clear_selection(self) -> None:
        self._selection = None

    # ── transforms ──────────────────────────────────────────────────

    def flip_horizontal(self) -> bool:
        return self._commit_active(flip_horizontal(self._stack.active_layer.grid, self._selection), "flip horizontal")

    def flip_vertical(self) -> bool:
        return self._commit_active(flip_vertical(self._stack.active_layer.grid, self._selection), "flip vertical")

    def rotate_90(self) -> bool:
        return self._commit_active(rotate_90(self._stack.active_layer.grid, self._selection), "rotate 90")

    def rotate(self, degrees: float) -> bool:
        grid = rotate_by_angle(self._stack.active_layer.grid, self._selection, degrees)
        return self._commit_active(grid, "rotate")

    # ── layers ──────────────────────────────────────────────────────

    def add_layer(self, name: str | None = None, grid: Grid | None = None) -> Layer:
        if grid is not None and grid.size != self._stack.size:
            raise ValueError(
                f"Layer grid is {grid.width}x{grid.height}, canvas is {self.width}x{self.height}"
            )
        return self._mutate_stack("add layer", lambda: self._stack.add(name, grid))

    def remove_layer(self, layer_id: int | None = None) -> Layer:
        layer_id = self._stack.active_id if layer_id is None else layer_id
        self._stack.index_of(layer_id)
        if len(self._stack) <= 1:
            raise LastLayerError("Cannot delete the last remaining layer")
        return self._mutate_stack("remove layer", lambda: self._stack.remove(layer_id))

    def toggle_visibility(self, layer_id: int) -> bool:
        return self._stack.toggle_visibility(layer_id)

    def move_layer(self, index: int, direction: int) -> bool:
        return self._stack.move(index, direction)

    def rename_layer(self, layer_id: int, name: str) -> None:
        self._stack.rename(layer_id, name)

    def set_active_layer(self, layer_id: int) -> None:
        self._stack.set_active(layer_id)
        self._refresh_palette()

    # ── canvas dimensions ───────────────────────────────────────────

    def _dimensions(self, width: Any, height: Any) -> Tuple[int, int]:
        maximum = self.config.max_canvas_size
        return (
            parse_dimension(width, self.config.width, maximum),
            parse_dimension(height, self.config.height, maximum),
        )

    def resize_canvas(self, width: Any, height: Any) -> bool:
        """Crop or pad every layer, keeping the top-left corner."""

        new_w, new_h = self._dimensions(width, height)
        if (new_w, new_h) == self._stack.size:
            return False
        self._record("resize canvas")
        self._stack.resize(new_w, new_h)
        self._palette_off()
        logger.debug("Session resize size=%sx%s", new_w, new_h)
        return True

    def scale_canvas(self, width: Any, height: Any) -> bool:
        """Nearest-neighbour rescale of every layer."""

        new_w, new_h = self._dimensions(width, height)
        if (new_w, new_h) == self._stack.size:
            return False
        self._record("scale canvas")
        self._stack.scale(new_w, new_h)
        self._palette_off()
        logger.debug("Session scale size=%sx%s", new_w, new_h)
        return True

    def set_square_size(self, size: Any) -> bool:
        return self.resize_canvas(size, size)

    # ── import / export ─────────────────────────────────────────────

    def import_grid(self, grid: Grid, name: str | None = None, *, resize_canvas: bool = False) -> Layer:
        """Add ``grid`` as a new top layer.

        A grid of another size either resizes the whole canvas to match, or is
        cropped/padded onto the current canvas.
        """

        if grid.size == self._stack.size:
            return self.add_layer(name, grid)
        if not resize_canvas:
            return self.add_layer(name, resize_grid(grid, self.width, self.height))
        self._record("import layer")
        self._stack.resize(grid.width, grid.height)
        layer = self._stack.add(name, grid)
        self._palette_off()
        logger.debug("Session import resized canvas size=%sx%s layer=%s", grid.width, grid.height, layer.id)
        return layer

    def import_layer_text(self, text: str, name: str | None = None) -> Layer:
        return self.add_layer(name, import_layer_text(text, self.width, self.height))

    def export_layer_text(self, layer_id: int | None = None) -> str:
        layer = self._stack.active_layer if layer_id is None else self._stack.get(layer_id)
        return export_layer_text(layer.grid)

    # ── palette ─────────────────────────────────────────────────────

    def _palette_off(self) -> None:
        self._palette_mode = False
        self._palette = None

    def toggle_palette_mode(self) -> bool:
        if self._palette_mode:
            self._palette_off()
        else:
            self._palette_mode = True
            self._refresh_palette()
        return self._palette_mode

    def _require_palette(self) -> PaletteIndex:
        if not self._palette_mode or self._palette is None:
            raise PaletteError("Palette mode is off")
        return self._palette

    def update_palette_color(self, entry_id: int, color: Color) -> bool:
        palette = self._require_palette()
        grid = update_entry(palette, self._stack.active_layer.grid, entry_id, color)
        return self._commit_active(grid, "palette color", refresh_palette=False)

    def apply_palette(self, colors: Sequence[Color]) -> bool:
        palette = self._require_palette()
        grid = apply_colors(palette, self._stack.active_layer.grid, colors)
        return self._commit_active(grid, "load palette", refresh_palette=False)
