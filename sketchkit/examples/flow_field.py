"""Particles drifting through a curl-noise flow field."""
import argparse
import math

import numpy as np

from sketchkit.curl_noise import CurlNoise3D
from sketchkit.color import hsl_color, rgb_color
from sketchkit.seeded_random import SeededRandom
from sketchkit.simplex_noise import SimplexNoise3D
from sketchkit.sketch import SketchConfig, add_sketch_args, run_sketch


class FlowField:
    def __init__(self, seed: str = "", count: int = 400,
                 field_scale: float = 0.004, time_scale: float = 0.00015,
                 speed: float = 1.6):
        self.random = SeededRandom(seed)
        self.curl = CurlNoise3D(SimplexNoise3D(self.random), normalize=True)
        self.count = count
        self.field_scale = field_scale
        self.time_scale = time_scale
        self.speed = speed
        self.positions = np.zeros((0, 2))
        self.hues = np.zeros(0)

    def setup(self, ctx):
        canvas = ctx.canvas
        w, h = canvas.width, canvas.height
        self.positions = np.array([
            (self.random.next_range(0, w), self.random.next_range(0, h))
            for _ in range(self.count)
        ], dtype=np.float64).reshape(-1, 2)
        self.hues = np.array([self.random.next_range(180, 260) for _ in range(self.count)])
        canvas.bg(rgb_color(12, 14, 24))

    def step(self, time_ms: float, delta_ratio: float, width: float, height: float) -> np.ndarray:
        """Advance every particle one frame and return the new positions."""
        pts = np.column_stack([
            self.positions * self.field_scale,
            np.full(len(self.positions), time_ms * self.time_scale),
        ])
        velocity = self.curl.sample_many(pts)[:, :2] * self.speed / max(delta_ratio, 1e-6)
        self.positions = self.positions + velocity
        # wrap around the edges
        self.positions[:, 0] %= width
        self.positions[:, 1] %= height
        return self.positions

    def draw(self, frame):
        canvas = frame.canvas
        canvas.bg(rgb_color(12, 14, 24, 1.0))
        positions = self.step(frame.time, frame.delta_ratio, canvas.width, canvas.height)
        canvas.no_stroke()
        for (x, y), hue in zip(positions, self.hues):
            canvas.fill(hsl_color(hue + 40 * math.sin(frame.time * 0.001), 70, 60, 0.8))
            canvas.circle(x, y, 1.5)


def main():
    parser = argparse.ArgumentParser(description="Curl-noise flow field")
    add_sketch_args(parser)
    parser.add_argument("--count", type=int, default=400, help="Number of particles")
    args = parser.parse_args()
    config = SketchConfig.from_args(args, title="Flow field")

    sketch = FlowField(seed=config.seed, count=args.count)
    run_sketch(sketch.setup, sketch.draw, config)


if __name__ == "__main__":
    main()
