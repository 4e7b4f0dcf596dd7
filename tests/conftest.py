"""
Shared pytest fixtures for ContrastPower tests.
"""

import warnings

import numpy as np
import pytest

from contrastpower import MemorySink, PowerStudy
from tests.config import N_SIMS_CHECK, SEED


@pytest.fixture
def memory_sink():
    """Fresh in-memory result sink."""
    return MemorySink()


@pytest.fixture
def small_study():
    """Two generators, dimensions 2 and 4 (4 also diluted), three noise levels."""
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        study = (
            PowerStudy()
            .set_generators(["Linear", "Independent"])
            .set_dimensions([2, 4], diluted=[4])
            .set_noise_levels(2)
            .set_observation_counts([50])
            .set_slice_techniques(["c"])
            .set_simulations(power=N_SIMS_CHECK, calibration=2 * N_SIMS_CHECK)
            .set_parallel(False)
            .set_seed(SEED)
        )
    return study


@pytest.fixture
def null_matrix():
    """Independent 100 x 4 sample."""
    return np.random.default_rng(SEED).uniform(size=(100, 4))

