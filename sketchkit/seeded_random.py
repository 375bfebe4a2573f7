"""Seeded pseudo-random numbers (cyrb128 hash + mulberry32 generator)."""

from __future__ import annotations

from typing import Callable, Optional, Tuple

import numpy as np

_MASK32 = 0xFFFFFFFF
_TWO_POW_32 = 4294967296.0

_CYRB_INIT = (1779033703, 3144134277, 1013904242, 2773480762)
_CYRB_MUL = (597399067, 2869860233, 951274213, 2716044179)
_MULBERRY_STEP = 0x6D2B79F5

DrawFunction = Callable[[], float]


def _imul(a: int, b: int) -> int:
    """32-bit multiplication with wrap-around (unsigned result)."""
    return (a * b) & _MASK32


def _code_units(text: str):
    data = text.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def cyrb128(text: str) -> Tuple[int, int, int, int]:
    """
    Hash a string into four 32-bit words.

    Characters are consumed as UTF-16 code units. The first word is the
    value used to seed the generator.
    """
    h1, h2, h3, h4 = _CYRB_INIT
    m1, m2, m3, m4 = _CYRB_MUL
    for k in _code_units(text):
        h1 = h2 ^ _imul(h1 ^ k, m1)
        h2 = h3 ^ _imul(h2 ^ k, m2)
        h3 = h4 ^ _imul(h3 ^ k, m3)
        h4 = h1 ^ _imul(h4 ^ k, m4)
    h1 = _imul(h3 ^ (h1 >> 18), m1)
    h2 = _imul(h4 ^ (h2 >> 22), m2)
    h3 = _imul(h1 ^ (h3 >> 17), m3)
    h4 = _imul(h2 ^ (h4 >> 19), m4)
    return (
        h1 ^ h2 ^ h3 ^ h4,
        h2 ^ h1,
        h3 ^ h1,
        h4 ^ h1,
    )


def mulberry32(state: int) -> Tuple[int, float]:
    """
    One mulberry32 step.

    Returns the advanced state and a float in [0, 1).
    """
    state = (state + _MULBERRY_STEP) & _MASK32
    t = state
    t = _imul(t ^ (t >> 15), t | 1)
    t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK32
    return state, ((t ^ (t >> 14)) & _MASK32) / _TWO_POW_32


class SeededRandom:
    """
    Uniform random generator driven by an optional string seed.

    An empty seed gives a non-deterministic generator; any other seed
    gives a reproducible sequence. Instances are callable and can be
    passed wherever a ``random()``-style draw function is expected.
    Not safe to share between threads without a lock.
    """

    def __init__(self, seed: str = ""):
        self._seed = seed
        self._state: Optional[int] = None
        self._rng: Optional[np.random.Generator] = None
        if seed:
            self._state = cyrb128(seed)[0]
        else:
            self._rng = np.random.default_rng()

    @property
    def seed(self) -> str:
        return self._seed

    @property
    def deterministic(self) -> bool:
        return self._state is not None

    def next_uniform(self) -> float:
        """Next float in [0, 1)."""
        if self._state is None:
            return float(self._rng.random())
        self._state, value = mulberry32(self._state)
        return value

    def next_range(self, a: float, b: float) -> float:
        """Next float in [a, b)."""
        return self.next_uniform() * (b - a) + a

    def __call__(self) -> float:
        return self.next_uniform()

    def __repr__(self) -> str:
        return f"SeededRandom(seed={self._seed!r})"

