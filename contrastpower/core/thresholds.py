"""
Null-distribution threshold calibration.

Thresholds are empirical percentiles of contrast scores computed on the
independence baseline: zero noise, same dimension, observation count and
slice technique as the cells that will be compared against them.
"""

from dataclasses import dataclass
from functools import partial
from typing import Iterable, Sequence

import numpy as np

from ..errors import GenerationFailure, MeasureFailure
from ..stats.generators import INDEPENDENT, GeneratorFactory
from .sampler import MonteCarloSampler, SeedLike

THRESHOLD_LEVELS = (0.90, 0.95, 0.99)


@dataclass(frozen=True)
class ThresholdSet:
    """Null thresholds at the 90th, 95th and 99th percentiles."""

    p90: float
    p95: float
    p99: float

    def as_tuple(self):
        return (self.p90, self.p95, self.p99)


def empirical_percentile(scores: Sequence[float], p: float) -> float:
    """Linear-interpolation percentile.

    Sorts ascending and reads the value at rank ``p * (n - 1)``,
    interpolating between the two neighbouring ranks.

    Args:
        scores: Non-empty sample.
        p: Percentile as a fraction in ``[0, 1]``.

    Raises:
        ValueError: If *scores* is empty or *p* is outside ``[0, 1]``.
    """
    if not 0.0 <= p <= 1.0:
        raise ValueError(f"p must be within [0, 1], got {p}")
    values = np.asarray(scores, dtype=float)
    if values.size == 0:
        raise ValueError("Cannot compute a percentile of an empty sample")
    return float(np.percentile(values, p * 100.0, method="linear"))


def thresholds_from_scores(scores: Sequence[float]) -> ThresholdSet:
    """Build a ``ThresholdSet`` from a null sample."""
    return ThresholdSet(*(empirical_percentile(scores, p) for p in THRESHOLD_LEVELS))


def score_matrix(data, measure, dimension_subset, estimator, slice_technique) -> float:
    """Score one matrix, normalising measure errors to ``MeasureFailure``."""
    try:
        score = measure(data, dimension_subset, estimator, slice_technique)
    except MeasureFailure:
        raise
    except Exception as exc:
        raise MeasureFailure(f"contrast measure raised {type(exc).__name__}: {exc}") from exc

    try:
        value = float(score)
    except (TypeError, ValueError):
        raise MeasureFailure(f"contrast measure returned a non-numeric score: {score!r}") from None
    if not np.isfinite(value):
        raise MeasureFailure(f"contrast measure returned a non-finite score: {value}")
    return value


def contrast_trial(rng, generator, measure, dimension_subset, estimator, slice_technique, observation_count) -> float:
    """One Monte Carlo trial: draw a matrix and score it."""
    try:
        data = generator.generate(observation_count, rng)
    except GenerationFailure:
        raise
    except Exception as exc:
        raise GenerationFailure(f"{getattr(generator, 'id', generator)}: {exc}") from exc
    return score_matrix(data, measure, dimension_subset, estimator, slice_technique)


class ThresholdCalibrator:
    """Derives null thresholds from the independence baseline.

    Args:
        measure: Contrast function
            ``measure(data, dimension_subset, estimator, slice_technique)``.
        sampler: ``MonteCarloSampler`` used for the trials.
        baseline: Factory of the independence process.
        distribution: Distribution family passed to the baseline.
    """

    def __init__(
        self,
        measure,
        sampler: MonteCarloSampler = None,
        baseline: GeneratorFactory = INDEPENDENT,
        distribution: str = "gaussian",
    ):
        self.measure = measure
        self.sampler = sampler if sampler is not None else MonteCarloSampler()
        self.baseline = baseline
        self.distribution = distribution

    def null_scores(
        self,
        dimension: int,
        observation_count: int,
        slice_technique: str,
        estimator: str,
        repetitions: int,
        seed: SeedLike = None,
    ) -> list:
        """Sample the null distribution of contrast scores."""
        generator = self.baseline.build(dimension, 0.0, self.distribution, 0)
        dims: Iterable[int] = frozenset(range(dimension))
        trial = partial(
            contrast_trial,
            generator=generator,
            measure=self.measure,
            dimension_subset=dims,
            estimator=estimator,
            slice_technique=slice_technique,
            observation_count=observation_count,
        )
        return self.sampler.sample(trial, repetitions, seed)

    def calibrate(
        self,
        dimension: int,
        observation_count: int,
        slice_technique: str,
        estimator: str,
        repetitions: int,
        seed: SeedLike = None,
    ) -> ThresholdSet:
        """Compute the 90/95/99% null thresholds for one grid coordinate."""
        scores = self.null_scores(dimension, observation_count, slice_technique, estimator, repetitions, seed)
        return thresholds_from_scores(scores)
