"""Curl of 3D vector fields by central finite differences."""

from __future__ import annotations

import math
from typing import Callable, Sequence, Tuple

import numpy as np

Vec3 = Tuple[float, float, float]
VectorField = Callable[[Sequence[float]], Sequence[float]]

DEFAULT_EPS = 0.0005

# Input offsets per channel of the noise vector field.
CHANNEL_OFFSETS = (
    (0.0, 0.0, 0.0),
    (17.0, 23.0, 31.0),
    (53.0, 79.0, 97.0),
)


def _check_eps(eps: float) -> None:
    if eps == 0:
        raise ValueError("eps must be non-zero")


def curl_noise_3(
    point: Sequence[float],
    noise_vec3: VectorField,
    eps: float = DEFAULT_EPS,
    out_scale: float = 1.0,
    normalize: bool = False,
) -> Vec3:
    """
    Curl of ``noise_vec3`` at ``point``.

    The field is sampled at ``point +/- eps`` along each axis; partial
    derivatives are central differences. With ``normalize`` the result is
    divided by its length (a zero vector stays zero) before scaling.
    """
    _check_eps(eps)
    x, y, z = point

    f_y_plus = noise_vec3((x, y + eps, z))
    f_y_minus = noise_vec3((x, y - eps, z))
    f_z_plus = noise_vec3((x, y, z + eps))
    f_z_minus = noise_vec3((x, y, z - eps))
    f_x_plus = noise_vec3((x + eps, y, z))
    f_x_minus = noise_vec3((x - eps, y, z))

    inv_2e = 1.0 / (2.0 * eps)

    dfz_dy = (f_y_plus[2] - f_y_minus[2]) * inv_2e
    dfy_dz = (f_z_plus[1] - f_z_minus[1]) * inv_2e

    dfx_dz = (f_z_plus[0] - f_z_minus[0]) * inv_2e
    dfz_dx = (f_x_plus[2] - f_x_minus[2]) * inv_2e

    dfy_dx = (f_x_plus[1] - f_x_minus[1]) * inv_2e
    dfx_dy = (f_y_plus[0] - f_y_minus[0]) * inv_2e

    cx = dfz_dy - dfy_dz
    cy = dfx_dz - dfz_dx
    cz = dfy_dx - dfx_dy

    if normalize:
        length = math.hypot(cx, cy, cz) or 1.0
        cx /= length
        cy /= length
        cz /= length

    return (float(cx * out_scale), float(cy * out_scale), float(cz * out_scale))


def curl_noise_3_array(
    points: np.ndarray,
    noise_vec3: Callable[[np.ndarray], np.ndarray],
    eps: float = DEFAULT_EPS,
    out_scale: float = 1.0,
    normalize: bool = False,
) -> np.ndarray:
    """
    Batched :func:`curl_noise_3`.

    ``points`` has shape (N, 3); ``noise_vec3`` must map an (N, 3) array of
    points to an (N, 3) array of vectors. Returns an (N, 3) array.
    """
    _check_eps(eps)
    pts = np.asarray(points, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[1] != 3:
        raise ValueError(f"points must have shape (N, 3), got {pts.shape}")

    inv_2e = 1.0 / (2.0 * eps)
    partials = np.empty((3, pts.shape[0], 3), dtype=np.float64)
    for axis in range(3):
        step = np.zeros(3)
        step[axis] = eps
        plus = np.asarray(noise_vec3(pts + step), dtype=np.float64)
        minus = np.asarray(noise_vec3(pts - step), dtype=np.float64)
        # partials[axis][:, c] == dF_c / d(axis)
        partials[axis] = (plus - minus) * inv_2e

    curl = np.empty_like(pts)
    curl[:, 0] = partials[1][:, 2] - partials[2][:, 1]
    curl[:, 1] = partials[2][:, 0] - partials[0][:, 2]
    curl[:, 2] = partials[0][:, 1] - partials[1][:, 0]

    if normalize:
        length = np.sqrt(np.sum(curl * curl, axis=1))
        length[length == 0.0] = 1.0
        curl /= length[:, None]

    return curl * out_scale


def offset_noise_vec3(noise: Callable) -> VectorField:
    """
    Vector field made of three offset samples of one scalar noise.

    Accepts a single point or an (N, 3) array of points.
    """
    (ax, ay, az), (bx, by, bz), (cx, cy, cz) = CHANNEL_OFFSETS

    def noise_vec3(p):
        if isinstance(p, np.ndarray) and p.ndim == 2:
            x, y, z = p[:, 0], p[:, 1], p[:, 2]
            return np.stack([
                noise(x + ax, y + ay, z + az),
                noise(x + bx, y + by, z + bz),
                noise(x + cx, y + cy, z + cz),
            ], axis=1)
        x, y, z = p
        return (
            noise(x + ax, y + ay, z + az),
            noise(x + bx, y + by, z + bz),
            noise(x + cx, y + cy, z + cz),
        )

    return noise_vec3


class CurlNoise3D:
    """Curl noise over a scalar 3D noise, using offset channels."""

    def __init__(self, noise: Callable, eps: float = DEFAULT_EPS,
                 out_scale: float = 1.0, normalize: bool = True):
        _check_eps(eps)
        self.noise = noise
        self.eps = eps
        self.out_scale = out_scale
        self.normalize = normalize
        self._field = offset_noise_vec3(noise)

    def __call__(self, point: Sequence[float]) -> Vec3:
        return curl_noise_3(point, self._field, self.eps, self.out_scale, self.normalize)

    def sample_many(self, points) -> np.ndarray:
        """Curl at each row of an (N, 3) array of points."""
        return curl_noise_3_array(points, self._field, self.eps, self.out_scale, self.normalize)
