"""Colour constructors for the drawing surface."""

from __future__ import annotations

import colorsys
import re
from typing import NamedTuple, Optional, Tuple

from matplotlib import colors as mcolors


class Color(NamedTuple):
    """RGBA colour, every channel in [0, 1]."""

    r: float
    g: float
    b: float
    a: float = 1.0

    @property
    def rgba(self) -> Tuple[float, float, float, float]:
        return (self.r, self.g, self.b, self.a)

    def css(self) -> str:
        return "rgba({},{},{},{})".format(
            round(self.r * 255), round(self.g * 255), round(self.b * 255), self.a
        )


TRANSPARENT = Color(0.0, 0.0, 0.0, 0.0)

_CSS_FUNC = re.compile(r"^(rgba?|hsla?)\((.*)\)$", re.IGNORECASE)


def _unit(value: float, top: float) -> float:
    return min(1.0, max(0.0, value / top))


def rgb_color(r: float = 255, g: float = 255, b: float = 255, a: float = 1.0) -> Color:
    """Colour from 0-255 channels and 0-1 alpha."""
    return Color(_unit(r, 255.0), _unit(g, 255.0), _unit(b, 255.0), _unit(a, 1.0))


def gray_color(c: float = 255, a: float = 1.0) -> Color:
    """Grey level 0-255 with 0-1 alpha."""
    return rgb_color(c, c, c, a)


def hsl_color(h: float = 0, s: float = 100, l: float = 50, a: float = 1.0) -> Color:
    """Colour from hue (degrees), saturation and lightness (percent)."""
    r, g, b = colorsys.hls_to_rgb((h % 360.0) / 360.0, _unit(l, 100.0), _unit(s, 100.0))
    return Color(r, g, b, _unit(a, 1.0))


def parse_css(text: str) -> Optional[Color]:
    """Parse ``rgb()/rgba()/hsl()/hsla()`` notation; None for anything else."""
    match = _CSS_FUNC.match(text.strip())
    if match is None:
        return None
    name, body = match.group(1).lower(), match.group(2)
    parts = [p.strip().rstrip("%") for p in body.split(",")]
    try:
        values = [float(p) for p in parts]
    except ValueError as exc:
        raise ValueError(f"Unsupported colour {text!r}") from exc
    if len(values) not in (3, 4):
        raise ValueError(f"Unsupported colour {text!r}")
    if name.startswith("rgb"):
        return rgb_color(*values)
    return hsl_color(*values)


def to_rgba(value) -> Tuple[float, float, float, float]:
    """
    Normalise a colour-like value to an RGBA tuple.

    ``None`` and ``"transparent"`` map to a fully transparent colour, CSS
    functional notation is parsed here, other values go through
    matplotlib's colour parser.
    """
    if value is None:
        return TRANSPARENT.rgba
    if isinstance(value, Color):
        return value.rgba
    if isinstance(value, str):
        if value.lower() == "transparent":
            return TRANSPARENT.rgba
        css = parse_css(value)
        if css is not None:
            return css.rgba
    try:
        return tuple(float(c) for c in mcolors.to_rgba(value))
    except ValueError as exc:
        raise ValueError(f"Unsupported colour {value!r}") from exc
