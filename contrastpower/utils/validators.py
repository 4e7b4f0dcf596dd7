"""
Validation utilities for ContrastPower study configuration.

Each validator returns a ``_ValidationResult``; callers print or warn the
warnings and call ``raise_if_invalid()``.
"""

import os
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple, Union

import numpy as np

__all__ = []

_JOBLIB_BACKENDS = ("loky", "multiprocessing", "threading")


@dataclass
class _ValidationResult:
    """Outcome of a validation check, carrying errors and warnings.

    Attributes:
        is_valid: ``True`` if no errors were found.
        errors: List of error messages (empty when valid).
        warnings: List of non-fatal warning messages.
    """

    is_valid: bool
    errors: List[str]
    warnings: List[str]

    def raise_if_invalid(self):
        """Raise ``ValueError`` if the validation failed."""
        if not self.is_valid:
            error_msg = "Validation failed:\n" + "\n".join(f"• {err}" for err in self.errors)
            raise ValueError(error_msg)


class _Validator:
    """Static helpers for type and range checks used by all validators."""

    @staticmethod
    def _check_type(value: Any, expected_types: tuple, name: str) -> Optional[str]:
        """Check if value has expected type (``bool`` never counts as a number)."""
        if isinstance(value, bool) or not isinstance(value, expected_types):
            actual_type = type(value).__name__
            expected = expected_types[0].__name__ if len(expected_types) == 1 else f"one of {[t.__name__ for t in expected_types]}"
            return f"{name} must be {expected}, got {actual_type}"
        return None

    @staticmethod
    def _check_range(
        value: Union[int, float],
        min_val: Optional[float],
        max_val: Optional[float],
        name: str,
    ) -> Optional[str]:
        """Check if value is within range."""
        if min_val is not None and value < min_val:
            return f"{name} must be >= {min_val}, got {value}"
        if max_val is not None and value > max_val:
            return f"{name} must be <= {max_val}, got {value}"
        return None


_validator = _Validator()


def _validate_numeric_parameter(
    value: Any,
    name: str,
    expected_types: tuple = (int, float),
    min_val: Optional[float] = None,
    max_val: Optional[float] = None,
) -> _ValidationResult:
    """Generic validation for numeric parameters."""
    errors: List[str] = []

    type_error = _validator._check_type(value, expected_types, name)
    if type_error:
        return _ValidationResult(False, [type_error], [])

    range_error = _validator._check_range(value, min_val, max_val, name)
    if range_error:
        errors.append(range_error)

    return _ValidationResult(len(errors) == 0, errors, [])


def _validate_int_list(values: Any, name: str, min_val: int, allow_empty: bool = False) -> _ValidationResult:
    """Validate a list of integers, each at least *min_val*, without duplicates."""
    if isinstance(values, (str, bytes)) or not isinstance(values, (list, tuple)):
        return _ValidationResult(False, [f"{name} must be a list of integers, got {type(values).__name__}"], [])
    if not values and not allow_empty:
        return _ValidationResult(False, [f"{name} cannot be empty"], [])

    errors: List[str] = []
    for value in values:
        error = _validator._check_type(value, (int, np.integer), f"each of {name}")
        if error is None:
            error = _validator._check_range(value, min_val, None, f"each of {name}")
        if error:
            errors.append(error)
    if len(set(values)) != len(values):
        errors.append(f"{name} contains duplicates: {list(values)}")
    return _ValidationResult(len(errors) == 0, errors, [])


def _validate_dimensions(dimensions: Any, diluted_dimensions: Any) -> _ValidationResult:
    """Validate undiluted and diluted dimension lists.

    Every undiluted dimension at or above the smallest diluted dimension
    also runs in diluted mode and is split in half, so it must be even.
    """
    result = _validate_int_list(dimensions, "dimensions", min_val=1)
    diluted = _validate_int_list(diluted_dimensions, "diluted_dimensions", min_val=2, allow_empty=True)
    errors = result.errors + diluted.errors
    warnings: List[str] = []

    if not errors and diluted_dimensions:
        gate = min(diluted_dimensions)
        odd = [d for d in dimensions if d >= gate and d % 2]
        if odd:
            errors.append(f"dimensions that run in diluted mode (>= {gate}) must be even, got {odd}")

    return _ValidationResult(len(errors) == 0, errors, warnings)


def _validate_noise_levels(noise_levels: Any, decimals: Any) -> _ValidationResult:
    """Validate the number of noise steps and their rounding resolution."""
    errors: List[str] = []
    for value, name in ((noise_levels, "noise_levels"), (decimals, "decimals")):
        error = _validator._check_type(value, (int,), name)
        if error is None:
            error = _validator._check_range(value, 0 if name == "decimals" else 1, None, name)
        if error:
            errors.append(error)

    warnings: List[str] = []
    if not errors and len({round(k / noise_levels, decimals) for k in range(noise_levels + 1)}) < noise_levels + 1:
        warnings.append(f"{noise_levels} noise levels rounded to {decimals} decimals produce duplicate noise values")
    return _ValidationResult(len(errors) == 0, errors, warnings)


def _validate_tags(tags: Any, name: str) -> _ValidationResult:
    """Validate a list of non-empty string tags usable in CSV output."""
    if isinstance(tags, str):
        tags = [tags]
    if not isinstance(tags, (list, tuple)) or not tags:
        return _ValidationResult(False, [f"{name} must be a non-empty list of strings"], [])

    errors = []
    for tag in tags:
        if not isinstance(tag, str) or not tag.strip():
            errors.append(f"{name} entries must be non-empty strings, got {tag!r}")
        elif "," in tag or "\n" in tag:
            errors.append(f"{name} entries must not contain commas or newlines, got {tag!r}")
    if len(set(tags)) != len(tags):
        errors.append(f"{name} contains duplicates: {list(tags)}")
    return _ValidationResult(len(errors) == 0, errors, [])


def _validate_simulations(n_simulations: Any, name: str, recommended: int) -> Tuple[int, _ValidationResult]:
    """Validate a repetition count; warn below the *recommended* count."""
    result = _validate_numeric_parameter(n_simulations, name, expected_types=(int,), min_val=1)

    if result.is_valid:
        if n_simulations < recommended:
            result.warnings.append(f"Low {name} ({n_simulations}). Consider using at least {recommended} for reliable results.")
        return n_simulations, result

    return 0, result


def _validate_parallel_settings(enable: Any, n_cores: Optional[int], backend: str = "loky") -> Tuple[Tuple[bool, int], _ValidationResult]:
    """Validate parallel processing settings.

    Args:
        enable: True or False.
        n_cores: Worker count (positive int, or None for all available
            cores).
        backend: joblib backend name.

    Returns:
        ((enable, n_cores), ValidationResult). ``n_cores`` is 1 when
        parallel processing is disabled.
    """
    errors = []

    if enable not in (True, False):
        errors.append(f"enable must be True or False, got {enable!r}")
        return (False, 1), _ValidationResult(False, errors, [])
    if backend not in _JOBLIB_BACKENDS:
        errors.append(f"backend must be one of {_JOBLIB_BACKENDS}, got {backend!r}")

    max_cores = os.cpu_count() or 1
    validated_n_cores = max_cores

    if n_cores is not None:
        if isinstance(n_cores, bool) or not isinstance(n_cores, int) or n_cores <= 0:
            errors.append(f"n_cores must be a positive integer, got {n_cores}")
        else:
            validated_n_cores = min(n_cores, max_cores)

    if not enable:
        validated_n_cores = 1

    return (enable, validated_n_cores), _ValidationResult(len(errors) == 0, errors, [])


def _validate_generators(generators: Sequence[Any]) -> _ValidationResult:
    """Validate a generator catalog (objects with ``name`` and ``build``)."""
    if not isinstance(generators, (list, tuple)) or not generators:
        return _ValidationResult(False, ["generators must be a non-empty list"], [])

    errors = []
    for gen in generators:
        if not callable(getattr(gen, "build", None)) or not isinstance(getattr(gen, "name", None), str):
            errors.append(f"{gen!r} is not a generator factory (needs a 'name' and a 'build' method)")
        elif "," in gen.name:
            errors.append(f"generator names must not contain commas, got {gen.name!r}")
    names = [getattr(gen, "name", None) for gen in generators]
    if not errors and len(set(names)) != len(names):
        errors.append(f"generator names must be unique, got {names}")
    return _ValidationResult(len(errors) == 0, errors, [])
