"""
Tests for signal dilution.
"""

import numpy as np
import pytest

from contrastpower.core.dilution import DilutedGenerator, dilute
from contrastpower.errors import DimensionMismatch
from contrastpower.stats.generators import INDEPENDENT, get_generator
from tests.config import SEED


class _Fixed:
    """Generator returning a preset matrix."""

    def __init__(self, data, dimension=None):
        self.data = np.asarray(data, dtype=float)
        self.dimension = self.data.shape[1] if dimension is None else dimension

    def generate(self, observation_count, rng=None):
        return self.data


class _Vector:
    dimension = 1

    def generate(self, observation_count, rng=None):
        return np.zeros(observation_count)


class TestDilute:
    def test_row_concatenation(self):
        s = _Fixed([[1, 2], [3, 4], [5, 6]])
        i = _Fixed([[7, 8], [9, 10], [11, 12]])
        out = dilute(s, i, 3, np.random.default_rng(0))
        np.testing.assert_array_equal(out, [[1, 2, 7, 8], [3, 4, 9, 10], [5, 6, 11, 12]])

    def test_shape(self):
        linear = get_generator("Linear").build(3)
        independent = INDEPENDENT.build(3)
        out = dilute(linear, independent, 40, np.random.default_rng(SEED))
        assert out.shape == (40, 6)

    def test_structured_half_kept(self):
        linear = get_generator("Linear").build(2)
        out = dilute(linear, INDEPENDENT.build(2), 50, np.random.default_rng(SEED))
        np.testing.assert_allclose(out[:, 0], out[:, 1])
        assert not np.allclose(out[:, 2], out[:, 3])

    def test_row_count_mismatch(self):
        with pytest.raises(DimensionMismatch, match="row counts"):
            dilute(_Fixed(np.zeros((3, 2))), _Fixed(np.zeros((4, 2))), 3)

    def test_width_mismatch(self):
        with pytest.raises(DimensionMismatch, match="expected dimension"):
            dilute(_Fixed(np.zeros((3, 2))), _Fixed(np.zeros((3, 2))), 3, expected_dimension=5)

    def test_declared_dimension_mismatch(self):
        # Generator advertises 3 columns but returns 2.
        with pytest.raises(DimensionMismatch):
            dilute(_Fixed(np.zeros((3, 2)), dimension=3), _Fixed(np.zeros((3, 2))), 3)

    def test_non_matrix_rejected(self):
        with pytest.raises(DimensionMismatch, match="2-D"):
            dilute(_Fixed(np.zeros((3, 1))), _Vector(), 3, expected_dimension=2)

    def test_unseeded_halves_differ(self):
        gen = INDEPENDENT.build(2)
        out = dilute(gen, gen, 30)
        assert not np.allclose(out[:, :2], out[:, 2:])


class TestDilutedGenerator:
    def test_from_factory_halves(self):
        diluted = DilutedGenerator.from_factory(get_generator("Sine_1"), 8, 0.2)
        assert diluted.structured.dimension == 4
        assert diluted.independent.dimension == 4
        assert diluted.dimension == 8
        assert diluted.independent.name == "Independent"

    def test_id_is_structured_id(self):
        diluted = DilutedGenerator.from_factory(get_generator("Linear"), 4, 0.5)
        assert diluted.id == "Linear-2-0.5-gaussian"
        assert diluted.name == "Linear"

    def test_odd_dimension_rejected(self):
        with pytest.raises(DimensionMismatch, match="even"):
            DilutedGenerator.from_factory(get_generator("Linear"), 5, 0.0)

    def test_generate_shape(self):
        diluted = DilutedGenerator.from_factory(get_generator("Cross"), 6, 0.1, distribution="uniform")
        assert diluted.generate(25, np.random.default_rng(SEED)).shape == (25, 6)

    def test_generate_reproducible(self):
        diluted = DilutedGenerator.from_factory(get_generator("Linear"), 4, 0.3)
        a = diluted.generate(20, np.random.default_rng(SEED))
        b = diluted.generate(20, np.random.default_rng(SEED))
        np.testing.assert_array_equal(a, b)
