"""
Tests for validation utilities.
"""

from unittest.mock import patch

import pytest

from contrastpower.stats.generators import INDEPENDENT, get_generator
from contrastpower.utils.validators import (
    _validate_dimensions,
    _validate_generators,
    _validate_int_list,
    _validate_noise_levels,
    _validate_numeric_parameter,
    _validate_parallel_settings,
    _validate_simulations,
    _validate_tags,
)


class TestValidateNumericParameter:
    def test_valid(self):
        assert _validate_numeric_parameter(5, "x", min_val=1).is_valid

    def test_bool_rejected(self):
        assert not _validate_numeric_parameter(True, "x").is_valid

    def test_range(self):
        result = _validate_numeric_parameter(0, "x", min_val=1)
        assert not result.is_valid
        assert "must be >= 1" in result.errors[0]

    def test_raise_if_invalid(self):
        with pytest.raises(ValueError, match="Validation failed"):
            _validate_numeric_parameter("5", "x").raise_if_invalid()


class TestValidateIntList:
    def test_valid(self):
        assert _validate_int_list([2, 4], "dims", 1).is_valid

    def test_empty(self):
        assert not _validate_int_list([], "dims", 1).is_valid
        assert _validate_int_list([], "dims", 1, allow_empty=True).is_valid

    def test_string_rejected(self):
        assert not _validate_int_list("2,4", "dims", 1).is_valid

    def test_duplicates(self):
        result = _validate_int_list([2, 2], "dims", 1)
        assert "duplicates" in result.errors[0]

    def test_floats_rejected(self):
        assert not _validate_int_list([2.0], "dims", 1).is_valid


class TestValidateDimensions:
    def test_defaults_valid(self):
        assert _validate_dimensions([2, 4, 8, 12, 16], [4, 8, 12, 16]).is_valid

    def test_odd_diluted_dimension(self):
        result = _validate_dimensions([2, 3, 5], [3])
        assert not result.is_valid
        assert "must be even" in result.errors[0]

    def test_odd_below_gate_allowed(self):
        assert _validate_dimensions([3, 4], [4]).is_valid

    def test_no_dilution(self):
        assert _validate_dimensions([3, 5], []).is_valid

    def test_diluted_minimum(self):
        assert not _validate_dimensions([2, 4], [1]).is_valid


class TestValidateNoiseLevels:
    def test_default(self):
        result = _validate_noise_levels(30, 2)
        assert result.is_valid
        assert result.warnings == []

    def test_duplicates_warned(self):
        result = _validate_noise_levels(200, 2)
        assert result.is_valid
        assert "duplicate" in result.warnings[0]

    def test_invalid(self):
        assert not _validate_noise_levels(0, 2).is_valid
        assert not _validate_noise_levels(10, -1).is_valid
        assert not _validate_noise_levels(10.0, 2).is_valid


class TestValidateTags:
    def test_valid(self):
        assert _validate_tags(["c", "su", "u"], "slice_techniques").is_valid

    def test_single_string(self):
        assert _validate_tags("c", "slice_techniques").is_valid

    def test_comma_rejected(self):
        assert not _validate_tags(["a,b"], "slice_techniques").is_valid

    def test_empty_rejected(self):
        assert not _validate_tags([], "slice_techniques").is_valid
        assert not _validate_tags([" "], "slice_techniques").is_valid


class TestValidateSimulations:
    def test_valid(self):
        n, result = _validate_simulations(1000, "power simulations", 500)
        assert n == 1000
        assert result.is_valid
        assert result.warnings == []

    def test_low_warns(self):
        n, result = _validate_simulations(10, "power simulations", 500)
        assert result.is_valid
        assert "Low power simulations" in result.warnings[0]

    @pytest.mark.parametrize("bad", [0, -5, 10.5, "100"])
    def test_invalid(self, bad):
        n, result = _validate_simulations(bad, "power simulations", 500)
        assert not result.is_valid
        assert n == 0


class TestValidateParallelSettings:
    def test_disabled(self):
        (enable, n_cores), result = _validate_parallel_settings(False, 8)
        assert result.is_valid
        assert (enable, n_cores) == (False, 1)

    def test_default_all_cores(self):
        with patch("os.cpu_count", return_value=6):
            (_, n_cores), result = _validate_parallel_settings(True, None)
        assert n_cores == 6

    def test_capped(self):
        with patch("os.cpu_count", return_value=4):
            (_, n_cores), _ = _validate_parallel_settings(True, 16)
        assert n_cores == 4

    def test_invalid_cores(self):
        _, result = _validate_parallel_settings(True, 0)
        assert not result.is_valid

    def test_invalid_backend(self):
        _, result = _validate_parallel_settings(True, 2, "dask")
        assert not result.is_valid

    def test_invalid_enable(self):
        _, result = _validate_parallel_settings("yes", 2)
        assert not result.is_valid


class TestValidateGenerators:
    def test_valid(self):
        assert _validate_generators([get_generator("Linear"), INDEPENDENT]).is_valid

    def test_duplicates(self):
        assert not _validate_generators([INDEPENDENT, INDEPENDENT]).is_valid

    def test_not_a_factory(self):
        assert not _validate_generators(["Linear"]).is_valid

    def test_empty(self):
        assert not _validate_generators([]).is_valid
