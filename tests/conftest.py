"""
Pytest configuration and fixtures for the sketchkit test suite.

Forces the non-interactive Agg backend so that canvas and sketch tests
run headless.
"""
import matplotlib
import pytest

matplotlib.use("Agg")

from sketchkit.seeded_random import SeededRandom  # noqa: E402
from sketchkit.simplex_noise import SimplexNoise3D  # noqa: E402
from sketchkit.canvas import Canvas  # noqa: E402


def pytest_collection_modifyitems(config, items):
    """Mark tests by directory so they can be selected with -m."""
    for item in items:
        if "integration" in str(item.path):
            item.add_marker("integration")
        else:
            item.add_marker("unit")


@pytest.fixture
def seeded_random():
    """Deterministic generator seeded with 'abc'."""
    return SeededRandom("abc")


@pytest.fixture(scope="session")
def seeded_noise():
    """Noise field built from seed 'n' (tables are read-only, safe to share)."""
    return SimplexNoise3D.from_seed("n")


@pytest.fixture
def small_canvas():
    """100x100 off-screen canvas."""
    return Canvas(100, 100, main=False)


@pytest.fixture
def sample_points():
    """Spread of 3D points, including negative and large coordinates."""
    rnd = SeededRandom("points")
    return [
        (rnd.next_range(-50, 50), rnd.next_range(-50, 50), rnd.next_range(-50, 50))
        for _ in range(200)
    ] + [(0.0, 0.0, 0.0), (1.0, 1.0, 1.0), (-1.0, 2.0, -3.0), (1e4, -1e4, 0.5)]
