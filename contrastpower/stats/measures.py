"""Reference contrast measure.

The power study treats the dependency measure as a black box with the
signature ``contrast(data, dimension_subset, estimator, slice_technique)``.
This module ships one simple measure so a study can run without an external
one, and the helper that resolves a measure from an import path.
"""

import importlib
from typing import Callable, Iterable

import numpy as np
from scipy.stats import rankdata

ContrastFunc = Callable[[np.ndarray, Iterable[int], str, str], float]


def rank_correlation_contrast(data: np.ndarray, dimension_subset: Iterable[int], estimator: str = "R", slice_technique: str = "c") -> float:
    """Mean absolute Spearman correlation over all column pairs of the subset.

    ``estimator`` and ``slice_technique`` are accepted for interface
    compatibility and do not change the score. Returns a value in
    ``[0, 1]``; subsets with fewer than two columns score 0.
    """
    columns = sorted(dimension_subset)
    if len(columns) < 2:
        return 0.0

    ranks = rankdata(np.asarray(data)[:, columns], axis=0)
    corr = np.corrcoef(ranks, rowvar=False)
    upper = np.triu_indices(len(columns), k=1)
    values = np.abs(corr[upper])
    # Constant columns give NaN correlations: no detectable dependency.
    return float(np.nan_to_num(values, nan=0.0).mean())


def resolve_measure(path: str) -> ContrastFunc:
    """Import a measure given as ``"package.module:attribute"``.

    Raises:
        ValueError: If the path is malformed or the attribute is not
            callable.
        ImportError: If the module cannot be imported.
    """
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Measure must be given as 'module:attribute', got {path!r}")

    module = importlib.import_module(module_name)
    try:
        func = getattr(module, attr)
    except AttributeError:
        raise ValueError(f"Module {module_name!r} has no attribute {attr!r}") from None
    if not callable(func):
        raise ValueError(f"{path!r} is not callable")
    return func  # type: ignore[no-any-return]


__all__ = ["rank_correlation_contrast", "resolve_measure"]
