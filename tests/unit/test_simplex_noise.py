"""Unit tests for the permutation table, gradient tables and 3D simplex noise."""

import math

import numpy as np
import pytest

from sketchkit.seeded_random import SeededRandom
from sketchkit.simplex_noise import (
    GRAD3,
    SimplexNoise3D,
    build_gradient_tables,
    build_permutation_table,
    simplex_noise_3d,
)


class TestPermutationTable:
    def test_first_half_is_a_permutation(self):
        perm = build_permutation_table(SeededRandom("test"))
        assert perm.shape == (512,)
        assert perm.dtype == np.uint8
        assert sorted(perm[:256].tolist()) == list(range(256))

    def test_second_half_mirrors_first(self):
        perm = build_permutation_table(SeededRandom("test"))
        np.testing.assert_array_equal(perm[256:], perm[:256])

    def test_known_table_for_seed_test(self):
        perm = build_permutation_table(SeededRandom("test"))
        assert perm[:16].tolist() == [
            57, 219, 7, 189, 184, 128, 125, 82, 95, 229, 140, 240, 249, 143, 77, 44,
        ]
        assert perm[255] == 239
        assert int(perm.astype(np.int64).sum()) == 65280

    def test_same_seed_same_table(self):
        a = build_permutation_table(SeededRandom("test"))
        b = build_permutation_table(SeededRandom("test"))
        np.testing.assert_array_equal(a, b)

    def test_zero_draws_leave_identity(self):
        perm = build_permutation_table(lambda: 0.0)
        np.testing.assert_array_equal(perm[:256], np.arange(256))

    def test_uses_255_draws(self):
        calls = []

        def draw():
            calls.append(1)
            return 0.5

        build_permutation_table(draw)
        assert len(calls) == 255

    def test_last_slot_only_reached_as_swap_target(self):
        # a draw just below 1 always picks slot 255 as the swap partner
        perm = build_permutation_table(lambda: 0.999999)
        assert sorted(perm[:256].tolist()) == list(range(256))
        assert perm[0] == 255
        assert perm[255] == 254


class TestGradientTables:
    def test_tables_follow_perm_mod_12(self):
        perm = build_permutation_table(SeededRandom("grad"))
        gx, gy, gz = build_gradient_tables(perm)
        for table in (gx, gy, gz):
            assert table.shape == (512,)
        for n in range(512):
            expected = GRAD3[perm[n] % 12]
            assert (gx[n], gy[n], gz[n]) == tuple(expected)

    def test_gradient_directions(self):
        assert GRAD3.shape == (12, 3)
        for g in GRAD3:
            assert np.count_nonzero(g) == 2
            assert np.all(np.abs(g) <= 1)
        assert len({tuple(g) for g in GRAD3}) == 12


class TestSimplexNoise3D:
    def test_known_values_for_seed_n(self, seeded_noise):
        assert seeded_noise.noise(0.3, 0.7, 1.1) == pytest.approx(0.5636181333333333, rel=1e-12)
        assert seeded_noise.noise(-2.5, 3.25, 10.0) == pytest.approx(
            -0.17185261220421438, rel=1e-12)

    def test_independent_constructions_agree(self):
        a = SimplexNoise3D.from_seed("n")
        b = SimplexNoise3D(SeededRandom("n"))
        assert a.noise(0.3, 0.7, 1.1) == b.noise(0.3, 0.7, 1.1)
        np.testing.assert_array_equal(a.perm, b.perm)

    def test_noise_is_pure(self, seeded_noise):
        first = seeded_noise.noise(4.2, -1.3, 0.77)
        seeded_noise.noise(100.0, 100.0, 100.0)
        assert seeded_noise.noise(4.2, -1.3, 0.77) == first

    def test_values_are_bounded(self, seeded_noise, sample_points):
        for x, y, z in sample_points:
            value = seeded_noise.noise(x, y, z)
            assert math.isfinite(value)
            assert -1.2 <= value <= 1.2

    def test_call_alias(self, seeded_noise):
        assert seeded_noise(1.5, 2.5, 3.5) == seeded_noise.noise(1.5, 2.5, 3.5)

    def test_returns_python_float_for_scalars(self, seeded_noise):
        assert isinstance(seeded_noise.noise(1, 2, 3), float)

    def test_array_matches_scalar(self, seeded_noise):
        rnd = np.random.default_rng(3)
        x = rnd.uniform(-10, 10, size=(4, 5))
        y = rnd.uniform(-10, 10, size=(4, 5))
        z = rnd.uniform(-10, 10, size=(4, 5))
        values = seeded_noise.noise(x, y, z)
        assert values.shape == (4, 5)
        for idx in np.ndindex(x.shape):
            assert values[idx] == seeded_noise.noise(float(x[idx]), float(y[idx]), float(z[idx]))

    def test_array_broadcasts_scalar_coordinate(self, seeded_noise):
        x = np.linspace(0, 2, 7)
        values = seeded_noise.noise(x, 0.5, 1.25)
        assert values.shape == (7,)
        assert values[3] == seeded_noise.noise(float(x[3]), 0.5, 1.25)

    def test_three_dimensional_arrays(self, seeded_noise):
        grid = np.mgrid[0:2:3j, 0:2:3j, 0:2:3j]
        values = seeded_noise.noise(grid[0], grid[1], grid[2])
        assert values.shape == (3, 3, 3)

    def test_tables_are_read_only(self, seeded_noise):
        with pytest.raises(ValueError):
            seeded_noise.perm[0] = 1
        with pytest.raises(ValueError):
            seeded_noise.grad_x[0] = 0.0

    def test_kernel_is_callable_directly(self, seeded_noise):
        value = simplex_noise_3d(0.3, 0.7, 1.1, seeded_noise.perm,
                                 seeded_noise.grad_x, seeded_noise.grad_y, seeded_noise.grad_z)
        assert value == seeded_noise.noise(0.3, 0.7, 1.1)

    def test_integer_lattice_values_vanish(self, seeded_noise):
        # the only corner in range coincides with the point: zero offset, zero dot product
        points = [(0.0, 0.0, 0.0), (1.0, 2.0, 3.0), (-4.0, 0.0, 7.0), (10.0, 10.0, 10.0)]
        for p in points:
            assert abs(seeded_noise.noise(*p)) < 1e-9

    def test_default_construction_is_random_but_valid(self):
        noise = SimplexNoise3D()
        assert sorted(noise.perm[:256].tolist()) == list(range(256))
        assert math.isfinite(noise.noise(0.1, 0.2, 0.3))

    def test_noise_varies(self, seeded_noise):
        values = {round(seeded_noise.noise(x * 0.37, 0.5, 0.25), 9) for x in range(20)}
        assert len(values) > 10
