"""Packed RGBA colors and their hex text form."""
from __future__ import annotations

import math
from typing import Tuple

Color = int
ColorTuple = Tuple[int, int, int]
RGBATuple = Tuple[int, int, int, int]

EMPTY: Color = 0
EMPTY_HEX = "transparent"
SHADE_DELTA = 25


class ColorError(ValueError):
    """Raised when hex text cannot be parsed into a color."""


def _clamp_channel(value: int) -> int:
    return max(0, min(255, int(value)))


def rgba(r: int, g: int, b: int, a: int = 255) -> Color:
    """Pack channels into ``0xRRGGBBAA``; alpha 0 collapses to ``EMPTY``."""

    r, g, b, a = (_clamp_channel(v) for v in (r, g, b, a))
    if a == 0:
        return EMPTY
    return (r << 24) | (g << 16) | (b << 8) | a


def channels(color: Color) -> RGBATuple:
    color = int(color)
    return ((color >> 24) & 0xFF, (color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF)


def alpha(color: Color) -> int:
    return int(color) & 0xFF


def is_empty(color: Color) -> bool:
    return alpha(color) == 0


def to_hex(color: Color) -> str:
    """Return ``#RRGGBB``, ``#RRGGBBAA`` when translucent, or ``transparent``."""

    r, g, b, a = channels(color)
    if a == 0:
        return EMPTY_HEX
    if a == 255:
        return f"#{r:02X}{g:02X}{b:02X}"
    return f"#{r:02X}{g:02X}{b:02X}{a:02X}"


def from_hex(value: str) -> Color:
    """Parse ``#RGB``, ``#RGBA``, ``#RRGGBB``, ``#RRGGBBAA`` or ``transparent``."""

    text = value.strip()
    if text.lower() == EMPTY_HEX:
        return EMPTY
    if text.startswith("#"):
        text = text[1:]
    if len(text) in (3, 4):
        text = "".join(ch * 2 for ch in text)
    if len(text) not in (6, 8):
        raise ColorError(f"Expected hex color in the form RRGGBB or RRGGBBAA, got {value!r}")
    try:
        parts = [int(text[i : i + 2], 16) for i in range(0, len(text), 2)]
    except ValueError as exc:
        raise ColorError(f"Invalid hex digits in {value!r}") from exc
    if len(parts) == 3:
        parts.append(255)
    return rgba(*parts)


def with_opacity(color: Color, percent: float) -> Color:
    """Replace the alpha of ``color`` with ``percent`` of full opacity."""

    percent = max(0.0, min(100.0, float(percent)))
    r, g, b, _a = channels(color)
    # half-up rounding so 30% gives 77, not 76
    new_alpha = int(math.floor(percent / 100.0 * 255 + 0.5))
    return rgba(r, g, b, new_alpha)


def adjust_brightness(color: Color, delta: int) -> Color:
    if is_empty(color):
        return EMPTY
    r, g, b, a = channels(color)
    return rgba(r + delta, g + delta, b + delta, a)


def darken(color: Color, delta: int = SHADE_DELTA) -> Color:
    return adjust_brightness(color, -delta)


def lighten(color: Color, delta: int = SHADE_DELTA) -> Color:
    return adjust_brightness(color, delta)


BLACK: Color = rgba(0, 0, 0)
