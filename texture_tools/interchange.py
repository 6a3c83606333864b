"""Sparse ``x,y;#color`` text form of a single layer."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

from .colors import EMPTY, Color, ColorError, from_hex, to_hex
from .grid import Grid


logger = logging.getLogger(__name__)

DELIMITER = ";"


@dataclass(frozen=True, slots=True)
class PixelEntry:
    x: int
    y: int
    color: Color


def export_layer_text(grid: Grid) -> str:
    """Row-major ``x,y;#HEX`` pairs for every non-empty pixel, joined by ``;``."""

    parts: List[str] = []
    for y, row in enumerate(grid.pixels.tolist()):
        for x, color in enumerate(row):
            if color == EMPTY:
                continue
            parts.append(f"{x},{y}")
            parts.append(to_hex(color))
    return DELIMITER.join(parts)


def _parse_coordinate(token: str) -> Tuple[int, int] | None:
    pieces = token.split(",")
    if len(pieces) != 2:
        return None
    try:
        x = int(pieces[0].strip())
        y = int(pieces[1].strip())
    except ValueError:
        return None
    if x < 0 or y < 0:
        return None
    return x, y


def parse_layer_text(text: str) -> tuple[List[PixelEntry], List[str]]:
    """Return the well-formed pairs of ``text`` and a warning per skipped token.

    A token that is not a coordinate is skipped on its own so the parser can
    pick up again at the next coordinate.
    """

    entries: List[PixelEntry] = []
    warnings: List[str] = []
    tokens = [token.strip() for token in text.split(DELIMITER)]
    tokens = [token for token in tokens if token]
    index = 0
    while index < len(tokens):
        token = tokens[index]
        coordinate = _parse_coordinate(token)
        if coordinate is None:
            warnings.append(f"token {index}: invalid coordinate {token!r}")
            index += 1
            continue
        if index + 1 >= len(tokens):
            warnings.append(f"token {index}: coordinate {token!r} has no color")
            break
        color_token = tokens[index + 1]
        if not color_token.startswith("#"):
            warnings.append(f"token {index + 1}: expected #color after {token!r}, got {color_token!r}")
            index += 1
            continue
        try:
            color = from_hex(color_token)
        except ColorError as exc:
            warnings.append(f"token {index + 1}: {exc}")
            index += 2
            continue
        entries.append(PixelEntry(x=coordinate[0], y=coordinate[1], color=color))
        index += 2
    for warning in warnings:
        logger.warning("Layer text import skipped %s", warning)
    return entries, warnings


def import_layer_text(text: str, width: int, height: int) -> Grid:
    """Build a ``width x height`` grid from layer text; bad or off-canvas pairs are skipped."""

    grid = Grid.empty(width, height)
    entries, warnings = parse_layer_text(text)
    for entry in entries:
        grid.set(entry.y, entry.x, entry.color)
    logger.debug(
        "import_layer_text size=%sx%s entries=%s skipped=%s",
        width,
        height,
        len(entries),
        len(warnings),
    )
    return grid
