"""Setup/draw animation loop driving a :class:`~sketchkit.canvas.Canvas`."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Callable, Optional
import itertools
import logging
import time

from .canvas import Canvas

logger = logging.getLogger(__name__)

# Frame time the delta ratio is normalised against (60 fps).
REFERENCE_FRAME_MS = 1000.0 / 60.0


def add_sketch_args(parser) -> None:
    parser.add_argument("--width", type=int, default=None, help="Canvas width")
    parser.add_argument("--height", type=int, default=None, help="Canvas height")
    parser.add_argument("--fps", type=float, default=None, help="Target frame rate")
    parser.add_argument("--resolution", type=float, default=None, help="Pixel density")
    parser.add_argument("--seed", type=str, default=None, help="Random seed ('' = random)")
    parser.add_argument("--frames", type=int, default=None,
                        help="Number of frames to render off screen")
    parser.add_argument("--off-screen", action="store_true",
                        help="Render without opening a window")
    parser.add_argument("--output", type=str, default=None,
                        help="Save the last frame to this PNG/JPG path")


@dataclass
class Mouse:
    x: float = 0.0
    y: float = 0.0


@dataclass
class SketchContext:
    """Handed to ``setup`` once before the first frame."""

    canvas: Canvas
    mouse: Mouse
    config: "SketchConfig"


@dataclass
class Frame:
    """Handed to ``draw`` on every frame. ``time`` is in milliseconds."""

    time: float
    delta_ratio: float
    canvas: Canvas
    mouse: Mouse
    frame_count: int
    frame_rate: float


@dataclass
class SketchConfig:
    title: str = "sketchkit"
    width: int = 400
    height: int = 400
    frame_rate: float = 60.0
    resolution: float = 1.0
    off_screen: bool = False
    frames: Optional[int] = None
    seed: str = ""
    output: Optional[str] = None

    def __post_init__(self):
        if self.frame_rate <= 0:
            raise ValueError(f"frame_rate must be positive, got {self.frame_rate}")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Canvas size must be positive, got {self.width}x{self.height}")
        if self.frames is not None and self.frames < 0:
            raise ValueError(f"frames must be non-negative, got {self.frames}")

    @property
    def frame_ms(self) -> float:
        return 1000.0 / self.frame_rate

    @classmethod
    def from_args(cls, args, title: Optional[str] = None, **defaults) -> "SketchConfig":
        base = cls(title=title or "sketchkit", **defaults)
        values = {
            "width": getattr(args, "width", None),
            "height": getattr(args, "height", None),
            "frame_rate": getattr(args, "fps", None),
            "resolution": getattr(args, "resolution", None),
            "seed": getattr(args, "seed", None),
            "frames": getattr(args, "frames", None),
            "output": getattr(args, "output", None),
        }
        if getattr(args, "off_screen", False):
            values["off_screen"] = True
        return replace(base, **{k: v for k, v in values.items() if v is not None})


def _merge_config(config: Optional[SketchConfig], overrides) -> SketchConfig:
    config = config or SketchConfig()
    known = {f.name for f in fields(SketchConfig)}
    unknown = set(overrides) - known
    if unknown:
        raise TypeError(f"Unknown sketch option(s): {', '.join(sorted(unknown))}")
    return replace(config, **overrides) if overrides else config


def _save_output(canvas: Canvas, output: Optional[str]) -> None:
    if not output:
        return
    if output.lower().endswith((".jpg", ".jpeg")):
        canvas.save_jpg(output)
    else:
        canvas.save_png(output)


def run_sketch(
    setup: Callable[[SketchContext], None],
    draw: Callable[[Frame], None],
    config: Optional[SketchConfig] = None,
    **overrides,
) -> Canvas:
    """
    Run a sketch: call ``setup`` once, then ``draw`` once per frame.

    Off screen, ``config.frames`` frames (one by default) are drawn on a
    fixed clock of ``1000 / frame_rate`` ms and the function returns when
    they are done. On screen, frames are driven by a matplotlib animation
    and drawing is skipped until a full frame interval has passed.

    Returns the canvas, so the last frame can be inspected or saved.
    """
    if setup is None or draw is None:
        raise ValueError("setup and draw are required")
    if not callable(setup) or not callable(draw):
        raise ValueError("setup and draw must be callable")
    config = _merge_config(config, overrides)

    if config.off_screen:
        canvas = Canvas(config.width, config.height, resolution=config.resolution, main=False)
    else:
        import matplotlib.pyplot as plt
        canvas = Canvas(config.width, config.height, resolution=config.resolution,
                        figure=plt.figure(num=config.title))
    mouse = Mouse()
    setup(SketchContext(canvas=canvas, mouse=mouse, config=config))
    logger.debug("Sketch '%s' set up (%sx%s @ %s fps)", config.title,
                 config.width, config.height, config.frame_rate)

    if config.off_screen:
        _run_off_screen(canvas, mouse, draw, config)
    else:
        _run_on_screen(canvas, mouse, draw, config)
    _save_output(canvas, config.output)
    return canvas


def _run_off_screen(canvas: Canvas, mouse: Mouse, draw, config: SketchConfig) -> None:
    total = 1 if config.frames is None else config.frames
    step = config.frame_ms
    for frame_count in range(total):
        draw(Frame(
            time=frame_count * step,
            delta_ratio=REFERENCE_FRAME_MS / step,
            canvas=canvas,
            mouse=mouse,
            frame_count=frame_count,
            frame_rate=config.frame_rate,
        ))
    logger.info("Rendered %d off-screen frame(s)", total)


def _run_on_screen(canvas: Canvas, mouse: Mouse, draw, config: SketchConfig) -> None:
    import matplotlib.pyplot as plt
    from matplotlib.animation import FuncAnimation

    fig = canvas.figure

    def on_move(event):
        if event.inaxes is canvas.ax and event.xdata is not None:
            mouse.x = float(event.xdata)
            mouse.y = float(event.ydata)

    fig.canvas.mpl_connect("motion_notify_event", on_move)

    start = time.perf_counter()
    last_draw = None
    frame_count = 0
    limit = config.frames

    def update(_):
        nonlocal last_draw, frame_count
        now = (time.perf_counter() - start) * 1000.0
        if last_draw is not None and now - last_draw < config.frame_ms:
            return []
        delta = config.frame_ms if last_draw is None else now - last_draw
        last_draw = now
        draw(Frame(
            time=now,
            delta_ratio=REFERENCE_FRAME_MS / delta,
            canvas=canvas,
            mouse=mouse,
            frame_count=frame_count,
            frame_rate=config.frame_rate,
        ))
        frame_count += 1
        if limit is not None and frame_count >= limit:
            anim.event_source.stop()
        return []

    anim = FuncAnimation(
        fig,
        update,
        frames=itertools.count(),
        interval=max(1, int(config.frame_ms / 2)),
        blit=False,
        repeat=True,
        cache_frame_data=False,
    )
    plt.show(block=True)
    logger.info("Sketch window closed after %d frame(s)", frame_count)
