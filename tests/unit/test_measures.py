"""
Tests for the reference contrast measure and measure resolution.
"""

import numpy as np
import pytest

from contrastpower.stats.generators import get_generator
from contrastpower.stats.measures import rank_correlation_contrast, resolve_measure
from tests.config import SEED


class TestRankCorrelationContrast:
    def test_perfect_dependency(self):
        data = get_generator("Linear").build(4).generate(100, np.random.default_rng(SEED))
        assert rank_correlation_contrast(data, range(4)) == pytest.approx(1.0)

    def test_independent_near_zero(self, null_matrix):
        assert rank_correlation_contrast(null_matrix, range(4)) < 0.2

    def test_unit_interval(self, null_matrix):
        assert 0.0 <= rank_correlation_contrast(null_matrix, {0, 2}) <= 1.0

    def test_single_column(self, null_matrix):
        assert rank_correlation_contrast(null_matrix, [1]) == 0.0

    def test_constant_column(self):
        data = np.column_stack([np.arange(10.0), np.ones(10)])
        assert rank_correlation_contrast(data, [0, 1]) == 0.0

    def test_subset_only(self):
        rng = np.random.default_rng(SEED)
        x = rng.uniform(size=200)
        data = np.column_stack([x, x, rng.uniform(size=200)])
        assert rank_correlation_contrast(data, [0, 1]) == pytest.approx(1.0)

    def test_tags_ignored(self, null_matrix):
        assert rank_correlation_contrast(null_matrix, range(4), "R", "c") == rank_correlation_contrast(null_matrix, range(4), "MWP", "u")


class TestResolveMeasure:
    def test_resolves(self):
        assert resolve_measure("contrastpower.stats.measures:rank_correlation_contrast") is rank_correlation_contrast

    @pytest.mark.parametrize("path", ["no_colon", ":attr", "module:"])
    def test_malformed(self, path):
        with pytest.raises(ValueError, match="module:attribute"):
            resolve_measure(path)

    def test_missing_attribute(self):
        with pytest.raises(ValueError, match="no attribute"):
            resolve_measure("contrastpower.stats.measures:nope")

    def test_not_callable(self):
        with pytest.raises(ValueError, match="not callable"):
            resolve_measure("contrastpower.stats.generators:DISTRIBUTIONS")

    def test_missing_module(self):
        with pytest.raises(ImportError):
            resolve_measure("contrastpower_missing_module:f")
