"""sketchkit public API."""

from .seeded_random import SeededRandom, cyrb128, mulberry32
from .simplex_noise import (
    SimplexNoise3D,
    build_gradient_tables,
    build_permutation_table,
    simplex_noise_3d,
)
from .curl_noise import CurlNoise3D, curl_noise_3, curl_noise_3_array, offset_noise_vec3
from .color import Color, gray_color, hsl_color, rgb_color
from .mathutils import distance, map_value, snap_value
from .gradient import LinearGradient, RadialGradient
from .canvas import Canvas
from .sketch import Frame, Mouse, SketchConfig, SketchContext, add_sketch_args, run_sketch
from .examples import list_examples, run_example

__all__ = [
    "SeededRandom",
    "cyrb128",
    "mulberry32",
    "SimplexNoise3D",
    "build_gradient_tables",
    "build_permutation_table",
    "simplex_noise_3d",
    "CurlNoise3D",
    "curl_noise_3",
    "curl_noise_3_array",
    "offset_noise_vec3",
    "Color",
    "gray_color",
    "hsl_color",
    "rgb_color",
    "distance",
    "map_value",
    "snap_value",
    "LinearGradient",
    "RadialGradient",
    "Canvas",
    "Frame",
    "Mouse",
    "SketchConfig",
    "SketchContext",
    "add_sketch_args",
    "run_sketch",
    "list_examples",
    "run_example",
]

__version__ = "0.1.0"
