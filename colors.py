# colors.py - heatmap colour scale + readable foreground for swatches
from __future__ import annotations

import math
import re

__all__ = ["parse_color", "color_for", "luminance", "text_color_for", "DARK_TEXT", "LIGHT_TEXT"]

DARK_TEXT = "#1F2937"
LIGHT_TEXT = "#FFFFFF"

_RGB_RE = re.compile(r"^rgba?\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})")


def parse_color(color: str | None) -> tuple[int, int, int]:
    """`#RRGGBB`, `#RGB` or `rgb(r, g, b)` to a channel tuple; anything else is black."""
    text = (color or "").strip()
    match = _RGB_RE.match(text)
    if match:
        return tuple(min(255, int(c)) for c in match.groups())  # type: ignore[return-value]
    hex_part = text.lstrip("#")
    if len(hex_part) == 3:
        hex_part = "".join(ch * 2 for ch in hex_part)
    if len(hex_part) != 6:
        return (0, 0, 0)
    try:
        return (int(hex_part[0:2], 16), int(hex_part[2:4], 16), int(hex_part[4:6], 16))
    except ValueError:
        return (0, 0, 0)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def color_for(count: int, max_count: int, base_color: str, accent_color: str) -> str:
    """
    Heatmap cell colour: `base_color` for empty cells (or an empty matrix),
    otherwise each RGB channel interpolated from base to accent by count/max.
    """
    if max_count == 0 or count == 0:
        return base_color
    intensity = count / max_count
    base = parse_color(base_color)
    accent = parse_color(accent_color)
    r, g, b = (
        _round_half_up(lo + (hi - lo) * intensity) for lo, hi in zip(base, accent)
    )
    return f"rgb({r}, {g}, {b})"


def luminance(color: str) -> float:
    r, g, b = parse_color(color)
    return (0.299 * r + 0.587 * g + 0.114 * b) / 255


def text_color_for(color: str) -> str:
    return DARK_TEXT if luminance(color) > 0.5 else LIGHT_TEXT
