"""Immediate-mode 2D drawing surface on top of a matplotlib figure."""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List, Optional, Tuple, Union

import numpy as np
from matplotlib import patches
from matplotlib import patheffects
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
from matplotlib.lines import Line2D
from matplotlib.transforms import Affine2D

from .color import to_rgba
from .gradient import Gradient, LinearGradient, RadialGradient

logger = logging.getLogger(__name__)

# Figure dpi at resolution 1.0: one user unit is one output pixel.
BASE_DPI = 100.0
# Points per user pixel (line widths and shadow offsets are given in points).
_PT_PER_PX = 72.0 / BASE_DPI
# Live artists kept before the drawing is flattened into one raster.
MAX_LIVE_ARTISTS = 256

Style = Union[Tuple[float, float, float, float], Gradient]


def get_screen_size(default: Tuple[int, int] = (1920, 1080)) -> Tuple[int, int]:
    try:
        import tkinter as tk
        root = tk.Tk()
        root.withdraw()
        screen_width = root.winfo_screenwidth()
        screen_height = root.winfo_screenheight()
        root.destroy()
        return int(screen_width), int(screen_height)
    except Exception:
        return default


@dataclass
class Shadow:
    x: float = 0.0
    y: float = 0.0
    blur: float = 10.0
    color: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.5)


@dataclass
class DrawState:
    fill: Style = (0.0, 0.0, 0.0, 1.0)
    stroke: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)
    line_width: float = 1.0
    shadow: Optional[Shadow] = None
    matrix: Affine2D = field(default_factory=Affine2D)


def _style(value) -> Style:
    if isinstance(value, Gradient):
        return value
    return to_rgba(value)


class Canvas:
    """
    Drawing surface with canvas-style state.

    Coordinates are in user pixels, origin top-left, y pointing down.
    ``resolution`` is the number of output pixels per user pixel. Without a
    ``figure`` the surface renders off screen through the Agg backend; a
    pyplot figure can be passed in to draw into a window.
    Shapes pick up the current fill, stroke, line width, shadow and
    transform at the time they are drawn.
    """

    def __init__(self, width: int = 400, height: int = 400,
                 resolution: float = 1.0, main: bool = True,
                 figure: Optional[Figure] = None):
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas size must be positive, got {width}x{height}")
        if resolution <= 0:
            raise ValueError(f"Resolution must be positive, got {resolution}")
        self.main = main
        self._width = float(width)
        self._height = float(height)
        self._resolution = float(resolution)

        if figure is None:
            figure = Figure()
            FigureCanvasAgg(figure)
        figure.set_size_inches(width / BASE_DPI, height / BASE_DPI)
        figure.set_dpi(BASE_DPI * resolution)
        figure.patch.set_alpha(0.0)
        self.figure = figure
        self.ax = self.figure.add_axes([0.0, 0.0, 1.0, 1.0])
        self.ax.set_autoscale_on(False)
        self.ax.axis("off")
        self._apply_limits()

        self._state = DrawState()
        self._stack: List[DrawState] = []
        self._artists: list = []

    # ------------------------------------------------------------------
    # Size and resolution
    # ------------------------------------------------------------------

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    @property
    def resolution(self) -> float:
        return self._resolution

    @property
    def pixel_size(self) -> Tuple[int, int]:
        """Output raster size (width, height) in pixels."""
        w, h = self.figure.canvas.get_width_height()
        return int(w), int(h)

    def _apply_limits(self) -> None:
        self.ax.set_xlim(0.0, self._width)
        self.ax.set_ylim(self._height, 0.0)

    def size(self, w: float, h: float) -> None:
        if w <= 0 or h <= 0:
            raise ValueError(f"Canvas size must be positive, got {w}x{h}")
        self._width = float(w)
        self._height = float(h)
        self.figure.set_size_inches(w / BASE_DPI, h / BASE_DPI)
        self._apply_limits()
        logger.debug("Canvas resized to %sx%s", w, h)

    def full_size(self) -> None:
        """Resize to the screen size."""
        w, h = get_screen_size()
        self.size(w, h)

    def set_resolution(self, pixel_density: float) -> None:
        if not self.main:
            warnings.warn("Can not set resolution on an off-screen canvas")
            return
        if pixel_density <= 0:
            raise ValueError(f"Resolution must be positive, got {pixel_density}")
        self._resolution = float(pixel_density)
        self.figure.set_dpi(BASE_DPI * pixel_density)
        logger.debug("Canvas resolution set to %s", pixel_density)

    def create_off_canvas(self, w: int, h: int) -> "Canvas":
        return Canvas(w, h, resolution=self._resolution, main=False)

    # ------------------------------------------------------------------
    # Style state
    # ------------------------------------------------------------------

    def fill(self, c="#fff") -> None:
        self._state.fill = _style(c)

    def no_fill(self) -> None:
        self._state.fill = to_rgba(None)

    def stroke(self, c="#000") -> None:
        if isinstance(c, Gradient):
            raise ValueError("Gradients are only supported as fill styles")
        self._state.stroke = to_rgba(c)

    def no_stroke(self) -> None:
        self._state.stroke = to_rgba(None)

    def stroke_width(self, sw: float) -> None:
        self._state.line_width = float(sw)

    def shadow(self, x: float = 0, y: float = 0, blur: float = 10,
               color="rgba(0,0,0,0.5)") -> None:
        """
        Drop shadow for following shapes.

        The blur radius is kept in the state but not rendered: matplotlib
        shadows are hard-edged.
        """
        self._state.shadow = Shadow(float(x), float(y), float(blur), to_rgba(color))

    def no_shadow(self) -> None:
        self._state.shadow = None

    def linear_gradient(self, x1: float = 0, y1: float = 0, x2: float = 999,
                        y2: float = 999, steps=None) -> LinearGradient:
        return LinearGradient(x1, y1, x2, y2, steps)

    def radial_gradient(self, x1: float = 0, y1: float = 0, r1: float = 0,
                        x2: float = 200, y2: float = 200, r2: float = 200,
                        steps=None) -> RadialGradient:
        return RadialGradient(x1, y1, r1, x2, y2, r2, steps)

    # ------------------------------------------------------------------
    # Transform stack
    # ------------------------------------------------------------------

    def _concat(self, op: Affine2D) -> None:
        # op applies first, then the current matrix
        self._state.matrix = Affine2D(self._state.matrix.get_matrix() @ op.get_matrix())

    def translate(self, x: float, y: float) -> None:
        self._concat(Affine2D().translate(x, y))

    def rotate(self, a: float) -> None:
        self._concat(Affine2D().rotate(a))

    def scale(self, x: float, y: float) -> None:
        self._concat(Affine2D().scale(x, y))

    def push(self) -> None:
        self._stack.append(replace(self._state))

    def pop(self) -> None:
        if not self._stack:
            raise IndexError("pop() without a matching push()")
        self._state = self._stack.pop()

    @property
    def state(self) -> DrawState:
        return self._state

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def _transform(self):
        return self._state.matrix + self.ax.transData

    def _line_width_pt(self) -> float:
        a, b, c, d = self._state.matrix.get_matrix()[:2, :2].ravel()
        return self._state.line_width * _PT_PER_PX * float(np.sqrt(abs(a * d - b * c)))

    def _effects(self, line: bool = False):
        sh = self._state.shadow
        if sh is None or sh.color[3] == 0.0 or (sh.x == 0.0 and sh.y == 0.0):
            return []
        offset = (sh.x * _PT_PER_PX, -sh.y * _PT_PER_PX)
        if line:
            shadow = patheffects.SimpleLineShadow(
                offset=offset, shadow_color=sh.color[:3], alpha=sh.color[3])
        else:
            shadow = patheffects.SimplePatchShadow(
                offset=offset, shadow_rgbFace=sh.color[:3], alpha=sh.color[3])
        return [shadow, patheffects.Normal()]

    def _track(self, artist):
        self._artists.append(artist)
        if len(self._artists) > MAX_LIVE_ARTISTS:
            self._flatten()
        return artist

    def _flatten(self) -> None:
        """Replace every drawn artist with a single raster of the current pixels."""
        raster = self.render()
        self.clear()
        base = self.ax.imshow(raster, extent=(0.0, self._width, self._height, 0.0),
                              interpolation="nearest", aspect="auto", zorder=0)
        self._apply_limits()
        self._artists.append(base)

    def _gradient_image(self, gradient: Gradient, clip):
        out_w, out_h = self.pixel_size
        to_pixels = self._state.matrix + Affine2D().scale(
            out_w / self._width, out_h / self._height)
        raster = gradient.render(out_w, out_h, to_pixels)
        image = self.ax.imshow(raster, extent=(0.0, self._width, self._height, 0.0),
                               interpolation="nearest", aspect="auto",
                               zorder=len(self._artists))
        if clip is not None:
            image.set_clip_path(clip)
        self._apply_limits()
        return self._track(image)

    def _draw_patch(self, patch: patches.Patch) -> patches.Patch:
        patch.set_transform(self._transform())
        fill = self._state.fill
        gradient = fill if isinstance(fill, Gradient) else None
        patch.set_facecolor((0, 0, 0, 0) if gradient is not None else fill)
        patch.set_edgecolor(self._state.stroke)
        patch.set_linewidth(self._line_width_pt())
        patch.set_path_effects(self._effects())
        patch.set_zorder(len(self._artists))
        if gradient is not None:
            self._gradient_image(gradient, patch)
            patch.set_zorder(len(self._artists))
        self.ax.add_patch(patch)
        return self._track(patch)

    def bg(self, c) -> None:
        """Paint the whole surface, ignoring the transform and shadow."""
        style = _style(c)
        if not isinstance(style, Gradient) and style[3] >= 1.0:
            # an opaque background hides everything drawn so far
            self.clear()
        if isinstance(style, Gradient):
            saved = self._state.matrix
            self._state.matrix = Affine2D()
            try:
                self._gradient_image(style, None)
            finally:
                self._state.matrix = saved
            return
        rect = patches.Rectangle((0.0, 0.0), 1.0, 1.0, transform=self.ax.transAxes,
                                 facecolor=style, edgecolor="none",
                                 zorder=len(self._artists))
        self.ax.add_patch(rect)
        self._track(rect)
        if 0.0 < style[3] < 1.0:
            # translucent washes fade what is underneath, keep it as pixels
            self._flatten()

    def circle(self, x: float, y: float, r: float) -> patches.Patch:
        return self._draw_patch(patches.Circle((x, y), r))

    def rect(self, x: float, y: float, w: float, h: float) -> patches.Patch:
        return self._draw_patch(patches.Rectangle((x, y), w, h))

    def line(self, x1: float, y1: float, x2: float, y2: float) -> Line2D:
        artist = Line2D([x1, x2], [y1, y2], transform=self._transform(),
                        color=self._state.stroke, linewidth=self._line_width_pt(),
                        solid_capstyle="butt", zorder=len(self._artists))
        artist.set_path_effects(self._effects(line=True))
        self.ax.add_line(artist)
        return self._track(artist)

    def point(self, x: float, y: float) -> patches.Patch:
        """Round dot with the stroke colour and a diameter of the line width."""
        dot = patches.Circle((x, y), self._state.line_width / 2.0,
                             transform=self._transform(),
                             facecolor=self._state.stroke, edgecolor="none",
                             zorder=len(self._artists))
        dot.set_path_effects(self._effects())
        self.ax.add_patch(dot)
        return self._track(dot)

    # ------------------------------------------------------------------
    # Raster access
    # ------------------------------------------------------------------

    def render(self) -> np.ndarray:
        """Draw the figure and return the whole raster as uint8 RGBA."""
        self.figure.canvas.draw()
        return np.asarray(self.figure.canvas.buffer_rgba()).copy()

    def get_image(self, x: float, y: float, w: float, h: float) -> np.ndarray:
        """Pixels of a region (user units) as a uint8 (h, w, 4) array."""
        res = self._resolution
        buf = self.render()
        x0, y0 = int(round(x * res)), int(round(y * res))
        x1, y1 = int(round((x + w) * res)), int(round((y + h) * res))
        return buf[max(y0, 0):max(y1, 0), max(x0, 0):max(x1, 0)].copy()

    def image(self, img, x: float, y: float):
        """
        Place a raster with its top-left corner at (x, y).

        The raster is in output pixels, so it covers ``shape / resolution``
        user units. The current transform is not applied.
        """
        data = np.asarray(img)
        if data.ndim not in (2, 3):
            raise ValueError(f"Unsupported image shape {data.shape}")
        h, w = data.shape[:2]
        res = self._resolution
        artist = self.ax.imshow(data, extent=(x, x + w / res, y + h / res, y),
                                interpolation="nearest", aspect="auto",
                                zorder=len(self._artists))
        self._apply_limits()
        return self._track(artist)

    def clear(self) -> None:
        """Remove everything drawn so far."""
        for artist in self._artists:
            artist.remove()
        self._artists = []

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save_png(self, path: Union[str, Path] = "file.png") -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.figure.savefig(path, format="png", dpi=self.figure.dpi)
        logger.info("Saved %s", path)
        return path

    def save_jpg(self, path: Union[str, Path] = "file.jpeg", quality: float = 0.75) -> Path:
        if not 0.0 <= quality <= 1.0:
            raise ValueError(f"JPEG quality must be in [0, 1], got {quality}")
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.figure.savefig(path, format="jpg", dpi=self.figure.dpi,
                            facecolor="white",
                            pil_kwargs={"quality": int(round(quality * 100))})
        logger.info("Saved %s", path)
        return path
