"""Ordered stack of named, independently visible layers."""
from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Iterator, List, Tuple

from .errors import LastLayerError
from .grid import Grid, resize_grid, scale_grid


logger = logging.getLogger(__name__)

DEFAULT_LAYER_PREFIX = "Layer"


@dataclass(slots=True)
class Layer:
    id: int
    name: str
    visible: bool
    grid: Grid

    def copy(self) -> "Layer":
        return Layer(id=self.id, name=self.name, visible=self.visible, grid=self.grid.copy())


class LayerStack:
    """Layers in rendering order, index 0 being the topmost one.

    Copies share the id counter with the stack they were made from, so an id
    handed out once is never handed out again, even after an undo brings back
    an older stack.
    """

    def __init__(self, width: int, height: int, *, name_prefix: str = DEFAULT_LAYER_PREFIX) -> None:
        self._width = width
        self._height = height
        self._name_prefix = name_prefix
        self._ids = itertools.count(1)
        self._layers: List[Layer] = []
        first = self._new_layer(None, Grid.empty(width, height))
        self._layers.append(first)
        self._active_id = first.id

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> Tuple[int, int]:
        return self._width, self._height

    @property
    def layers(self) -> Tuple[Layer, ...]:
        return tuple(self._layers)

    @property
    def active_id(self) -> int:
        return self._active_id

    @property
    def active_layer(self) -> Layer:
        return self.get(self._active_id)

    def __len__(self) -> int:
        return len(self._layers)

    def __iter__(self) -> Iterator[Layer]:
        return iter(self._layers)

    def index_of(self, layer_id: int) -> int:
        for index, layer in enumerate(self._layers):
            if layer.id == layer_id:
                return index
        raise KeyError(f"No layer with id {layer_id}")

    def get(self, layer_id: int) -> Layer:
        return self._layers[self.index_of(layer_id)]

    def _new_layer(self, name: str | None, grid: Grid) -> Layer:
        layer_id = next(self._ids)
        return Layer(
            id=layer_id,
            name=str(name) if name else f"{self._name_prefix} {layer_id}",
            visible=True,
            grid=grid,
        )

    def _check_grid(self, grid: Grid) -> None:
        if grid.size != self.size:
            raise ValueError(
                f"Layer grid is {grid.width}x{grid.height}, canvas is {self._width}x{self._height}"
            )

    def add(self, name: str | None = None, grid: Grid | None = None) -> Layer:
        """Insert a layer on top of the stack and make it active."""

        if grid is None:
            grid = Grid.empty(self._width, self._height)
        self._check_grid(grid)
        layer = self._new_layer(name, grid)
        self._layers.insert(0, layer)
        self._active_id = layer.id
        logger.debug("Layer add id=%s name=%s count=%s", layer.id, layer.name, len(self._layers))
        return layer

    def remove(self, layer_id: int) -> Layer:
        index = self.index_of(layer_id)
        if len(self._layers) <= 1:
            raise LastLayerError("Cannot delete the last remaining layer")
        removed = self._layers.pop(index)
        if self._active_id == layer_id:
            self._active_id = self._layers[0].id
        logger.debug("Layer remove id=%s active=%s count=%s", layer_id, self._active_id, len(self._layers))
        return removed

    def move(self, index: int, direction: int) -> bool:
        """Move the layer at ``index`` by ``direction`` slots; False when it would leave the stack."""

        new_index = index + direction
        if not (0 <= index < len(self._layers)) or not (0 <= new_index < len(self._layers)):
            logger.debug("Layer move skipped index=%s direction=%s", index, direction)
            return False
        layer = self._layers.pop(index)
        self._layers.insert(new_index, layer)
        logger.debug("Layer move id=%s from=%s to=%s", layer.id, index, new_index)
        return True

    def toggle_visibility(self, layer_id: int) -> bool:
        layer = self.get(layer_id)
        layer.visible = not layer.visible
        return layer.visible

    def rename(self, layer_id: int, name: str) -> None:
        name = str(name).strip()
        if not name:
            raise ValueError("Layer name must not be blank")
        self.get(layer_id).name = name

    def set_active(self, layer_id: int) -> None:
        self.index_of(layer_id)
        self._active_id = layer_id

    def replace_grid(self, layer_id: int, grid: Grid) -> None:
        self._check_grid(grid)
        self.get(layer_id).grid = grid

    def resize(self, width: int, height: int) -> None:
        for layer in self._layers:
            layer.grid = resize_grid(layer.grid, width, height)
        self._width, self._height = width, height

    def scale(self, width: int, height: int) -> None:
        for layer in self._layers:
            layer.grid = scale_grid(layer.grid, width, height)
        self._width, self._height = width, height

    def copy(self) -> "LayerStack":
        clone = LayerStack.__new__(LayerStack)
        clone._width = self._width
        clone._height = self._height
        clone._name_prefix = self._name_prefix
        clone._ids = self._ids
        clone._layers = [layer.copy() for layer in self._layers]
        clone._active_id = self._active_id
        return clone

    def __repr__(self) -> str:
        return f"LayerStack({self._width}x{self._height}, layers={[layer.id for layer in self._layers]}, active={self._active_id})"
