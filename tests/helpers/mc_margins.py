"""
Monte Carlo margin-of-error calculations.

Single source of truth for all MC tolerance computations. Every margin is
on the 0-1 proportion scale used by summary records.
"""

import numpy as np

from tests.config import ALLOWED_BIAS, MC_Z


def mc_proportion_margin(p, n, z=MC_Z):
    """Half-width of an approximate binomial CI for a proportion *p* over *n* trials."""
    return z * np.sqrt(p * (1 - p) / n) + ALLOWED_BIAS


def null_rejection_margin(level, n_calibration, n_power, z=MC_Z):
    """Margin for the rejection rate of null data at a calibrated threshold.

    Both the threshold (from *n_calibration* null scores) and the rate
    (from *n_power* fresh null scores) carry sampling error, so the two
    binomial variances add.
    """
    alpha = 1.0 - level
    return z * np.sqrt(alpha * (1 - alpha) * (1.0 / n_calibration + 1.0 / n_power)) + ALLOWED_BIAS
