"""Linear and radial colour gradients rasterised with numpy."""

from __future__ import annotations

from typing import Dict, Optional

import numpy as np
from matplotlib.transforms import Affine2D

from .color import to_rgba

_DEFAULT_STEPS = {0.0: "#000", 1.0: "#fff"}


class Gradient:
    """Base class: colour stops and rasterisation over a pixel grid."""

    def __init__(self, steps: Optional[Dict[float, object]] = None):
        merged = dict(_DEFAULT_STEPS)
        merged.update(steps or {})
        offsets = sorted(merged)
        for offset in offsets:
            if not 0.0 <= offset <= 1.0:
                raise ValueError(f"Gradient stop offset must be in [0, 1], got {offset}")
        self.offsets = np.array(offsets, dtype=np.float64)
        self.colors = np.array([to_rgba(merged[o]) for o in offsets], dtype=np.float64)

    def _parameter(self, px: np.ndarray, py: np.ndarray):
        """Gradient parameter at each point plus a mask of points it covers."""
        raise NotImplementedError

    def colors_at(self, t: np.ndarray) -> np.ndarray:
        """Interpolate stop colours at parameter values ``t`` (clamped to [0, 1])."""
        t = np.clip(t, 0.0, 1.0)
        out = np.empty(t.shape + (4,), dtype=np.float64)
        for channel in range(4):
            out[..., channel] = np.interp(t, self.offsets, self.colors[:, channel])
        return out

    def render(self, width: int, height: int,
               transform: Optional[Affine2D] = None) -> np.ndarray:
        """
        Rasterise to a (height, width, 4) float RGBA array.

        ``transform`` maps gradient coordinates to pixel coordinates; pixel
        centres are mapped back through its inverse before evaluation.
        """
        xs = np.arange(width, dtype=np.float64) + 0.5
        ys = np.arange(height, dtype=np.float64) + 0.5
        px, py = np.meshgrid(xs, ys)
        if transform is not None:
            pts = np.column_stack([px.ravel(), py.ravel()])
            pts = transform.inverted().transform(pts)
            px = pts[:, 0].reshape(height, width)
            py = pts[:, 1].reshape(height, width)
        t, covered = self._parameter(px, py)
        image = self.colors_at(t)
        image[~covered] = 0.0
        return image


class LinearGradient(Gradient):
    def __init__(self, x1: float = 0, y1: float = 0, x2: float = 999, y2: float = 999,
                 steps: Optional[Dict[float, object]] = None):
        super().__init__(steps)
        self.start = (float(x1), float(y1))
        self.end = (float(x2), float(y2))

    def _parameter(self, px, py):
        dx = self.end[0] - self.start[0]
        dy = self.end[1] - self.start[1]
        length_sq = dx * dx + dy * dy
        if length_sq == 0.0:
            # degenerate line paints nothing
            return np.zeros_like(px), np.zeros(px.shape, dtype=bool)
        t = ((px - self.start[0]) * dx + (py - self.start[1]) * dy) / length_sq
        return t, np.ones(px.shape, dtype=bool)


class RadialGradient(Gradient):
    """
    Two-circle radial gradient.

    For each point the parameter is the largest w for which the point lies
    on the circle interpolated between the start and end circles with a
    non-negative radius.
    """

    def __init__(self, x1: float = 0, y1: float = 0, r1: float = 0,
                 x2: float = 200, y2: float = 200, r2: float = 200,
                 steps: Optional[Dict[float, object]] = None):
        super().__init__(steps)
        if r1 < 0 or r2 < 0:
            raise ValueError("Gradient radii must be non-negative")
        self.start = (float(x1), float(y1), float(r1))
        self.end = (float(x2), float(y2), float(r2))

    def _parameter(self, px, py):
        x1, y1, r1 = self.start
        x2, y2, r2 = self.end
        cdx, cdy, dr = x2 - x1, y2 - y1, r2 - r1
        qx = px - x1
        qy = py - y1

        a = cdx * cdx + cdy * cdy - dr * dr
        b = qx * cdx + qy * cdy + r1 * dr
        c = qx * qx + qy * qy - r1 * r1

        t = np.zeros_like(px)
        covered = np.zeros(px.shape, dtype=bool)

        if a == 0.0:
            with np.errstate(divide="ignore", invalid="ignore"):
                w = np.where(b != 0.0, c / (2.0 * b), np.nan)
            ok = np.isfinite(w) & (r1 + w * dr >= 0.0)
            t[ok] = w[ok]
            covered |= ok
            return t, covered

        disc = b * b - a * c
        real = disc >= 0.0
        root = np.sqrt(np.where(real, disc, 0.0))
        w_hi = np.maximum((b + root) / a, (b - root) / a)
        w_lo = np.minimum((b + root) / a, (b - root) / a)

        ok_hi = real & (r1 + w_hi * dr >= 0.0)
        ok_lo = real & ~ok_hi & (r1 + w_lo * dr >= 0.0)
        t[ok_hi] = w_hi[ok_hi]
        t[ok_lo] = w_lo[ok_lo]
        covered |= ok_hi | ok_lo
        return t, covered
