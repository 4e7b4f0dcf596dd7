"""
Power estimation for ContrastPower.

This module turns a Monte Carlo sample of contrast scores into summary
statistics and empirical power at the calibrated null thresholds.
"""

from dataclasses import dataclass
from functools import partial
from typing import Iterable, Sequence

import numpy as np

from .sampler import MonteCarloSampler, SeedLike
from .thresholds import ThresholdSet, contrast_trial


@dataclass(frozen=True)
class PowerEstimate:
    """Summary of one power estimation.

    Attributes:
        mean: Arithmetic mean of the contrast scores.
        std: Sample standard deviation (``ddof=1``); NaN for a single score.
        power90: Fraction of scores strictly above the 90% threshold.
        power95: Fraction of scores strictly above the 95% threshold.
        power99: Fraction of scores strictly above the 99% threshold.
        n_simulations: Number of scores summarised.
    """

    mean: float
    std: float
    power90: float
    power95: float
    power99: float
    n_simulations: int

    def as_tuple(self):
        return (self.mean, self.std, self.power90, self.power95, self.power99)


def summarize_scores(scores: Sequence[float], thresholds: ThresholdSet) -> PowerEstimate:
    """Compute mean, sample std and exceedance fractions.

    Ties with a threshold do not count as exceedances.

    Raises:
        ValueError: If *scores* is empty.
    """
    values = np.asarray(scores, dtype=float)
    n = values.size
    if n == 0:
        raise ValueError("Cannot summarise an empty score sample")

    std = float(np.std(values, ddof=1)) if n > 1 else float("nan")
    powers = [np.count_nonzero(values > threshold) / n for threshold in thresholds.as_tuple()]

    return PowerEstimate(
        mean=float(np.mean(values)),
        std=std,
        power90=float(powers[0]),
        power95=float(powers[1]),
        power99=float(powers[2]),
        n_simulations=n,
    )


class PowerEstimator:
    """Estimates the power of a contrast measure against one generator.

    Args:
        measure: Contrast function
            ``measure(data, dimension_subset, estimator, slice_technique)``.
        sampler: ``MonteCarloSampler`` used for the trials.
    """

    def __init__(self, measure, sampler: MonteCarloSampler = None):
        self.measure = measure
        self.sampler = sampler if sampler is not None else MonteCarloSampler()

    def sample_scores(
        self,
        generator,
        dimension_subset: Iterable[int],
        estimator: str,
        slice_technique: str,
        observation_count: int,
        repetitions: int,
        seed: SeedLike = None,
    ) -> list:
        """Draw ``repetitions`` contrast scores from *generator*."""
        trial = partial(
            contrast_trial,
            generator=generator,
            measure=self.measure,
            dimension_subset=frozenset(dimension_subset),
            estimator=estimator,
            slice_technique=slice_technique,
            observation_count=observation_count,
        )
        return self.sampler.sample(trial, repetitions, seed)

    def estimate_power(
        self,
        generator,
        dimension_subset: Iterable[int],
        estimator: str,
        slice_technique: str,
        observation_count: int,
        repetitions: int,
        thresholds: ThresholdSet,
        seed: SeedLike = None,
    ) -> PowerEstimate:
        """Estimate mean/std contrast and power at the 90/95/99% thresholds.

        Args:
            generator: Anything with ``generate(observation_count, rng)``;
                pass a ``DilutedGenerator`` for diluted mode.
            dimension_subset: Column indices scored by the measure.
            estimator: Estimator tag passed to the measure.
            slice_technique: Slice technique tag passed to the measure.
            observation_count: Rows per generated matrix.
            repetitions: Number of Monte Carlo trials.
            thresholds: Null thresholds for this grid coordinate.
            seed: Seed for the per-trial streams.

        Returns:
            ``PowerEstimate`` where each power is
            ``count(score > threshold) / repetitions``.
        """
        scores = self.sample_scores(generator, dimension_subset, estimator, slice_technique, observation_count, repetitions, seed)
        return summarize_scores(scores, thresholds)
