"""Small numeric helpers used by sketches."""

from __future__ import annotations

import math


def snap_value(v: float, s: float) -> float:
    """Snap ``v`` to the nearest multiple of ``s`` (halves go up)."""
    return math.floor(v / s + 0.5) * s


def map_value(v: float, f1: float, f2: float, t1: float, t2: float) -> float:
    """Linearly remap ``v`` from [f1, f2] to [t1, t2]."""
    return t1 + ((t2 - t1) * (v - f1)) / (f2 - f1)


def distance(x1: float, y1: float, x2: float, y2: float) -> float:
    dx = x2 - x1
    dy = y2 - y1
    return math.sqrt(dx * dx + dy * dy)
