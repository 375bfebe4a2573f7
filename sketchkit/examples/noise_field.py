"""Animated slice through 3D simplex noise."""
import argparse

import numpy as np

from sketchkit.simplex_noise import SimplexNoise3D
from sketchkit.sketch import SketchConfig, add_sketch_args, run_sketch


def noise_slice(noise: SimplexNoise3D, width: int, height: int,
                scale: float = 0.01, z: float = 0.0) -> np.ndarray:
    """Noise over a (height, width) grid at depth ``z``, mapped to [0, 1]."""
    x = np.arange(width, dtype=np.float64) * scale
    y = np.arange(height, dtype=np.float64) * scale
    xx, yy = np.meshgrid(x, y)
    zz = np.full_like(xx, z)
    values = noise.noise(xx, yy, zz)
    return np.clip((values + 1.0) * 0.5, 0.0, 1.0)


def shade(values: np.ndarray) -> np.ndarray:
    """Two-tone palette for a [0, 1] field, as uint8 RGB."""
    low = np.array([0.05, 0.08, 0.20])
    high = np.array([0.95, 0.80, 0.55])
    rgb = low * (1.0 - values[..., None]) + high * values[..., None]
    return (rgb * 255.0 + 0.5).astype(np.uint8)


def main():
    parser = argparse.ArgumentParser(description="3D noise slice")
    add_sketch_args(parser)
    parser.add_argument("--scale", type=float, default=0.01, help="Noise frequency")
    args = parser.parse_args()
    config = SketchConfig.from_args(args, title="Noise field", width=256, height=256)

    noise = SimplexNoise3D.from_seed(config.seed) if config.seed else SimplexNoise3D()

    def setup(ctx):
        ctx.canvas.bg("#000")

    def draw(frame):
        canvas = frame.canvas
        w, h = canvas.pixel_size
        field = noise_slice(noise, w, h, scale=args.scale / canvas.resolution,
                            z=frame.time * 0.0005)
        canvas.clear()
        canvas.image(shade(field), 0, 0)

    run_sketch(setup, draw, config)


if __name__ == "__main__":
    main()
