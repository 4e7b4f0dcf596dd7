"""
Monotonicity: power must not grow with noise, and dilution must not
increase power at a fixed noise level.
"""

import warnings

import pytest

from contrastpower import PowerStudy
from contrastpower.core.results import DILUTED, UNDILUTED
from tests.config import N_SIMS_ORDERING, N_SIMS_STANDARD, SEED
from tests.helpers.mc_margins import mc_proportion_margin


@pytest.fixture(scope="module")
def records():
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        study = (
            PowerStudy()
            .set_generators(["Linear", "Sine_1"])
            .set_dimensions([4], diluted=[4])
            .set_noise_levels(4)
            .set_observation_counts([100])
            .set_slice_techniques(["c"])
            .set_simulations(power=N_SIMS_ORDERING, calibration=N_SIMS_STANDARD)
            .set_parallel(False)
            .set_seed(SEED)
        )
    return study.run()


def _curve(records, name, mode):
    rows = [r for r in records if r.gen_id.startswith(name + "-") and r.type == mode]
    return [r.power95 for r in sorted(rows, key=lambda r: r.noise)]


@pytest.mark.parametrize("mode", [UNDILUTED, DILUTED])
@pytest.mark.parametrize("name", ["Linear", "Sine_1"])
def test_power_non_increasing_in_noise(records, name, mode):
    curve = _curve(records, name, mode)
    assert len(curve) == 5
    for lower, higher in zip(curve, curve[1:]):
        margin = mc_proportion_margin(max(min(lower, 0.99), 0.01), N_SIMS_ORDERING)
        assert higher <= lower + margin, f"{name} {mode}: {curve}"


@pytest.mark.parametrize("name", ["Linear", "Sine_1"])
def test_noiseless_signal_detected(records, name):
    assert _curve(records, name, UNDILUTED)[0] == 1.0


@pytest.mark.parametrize("mode", [UNDILUTED, DILUTED])
def test_full_noise_is_null(records, mode):
    rate = _curve(records, "Linear", mode)[-1]
    assert rate < 0.05 + mc_proportion_margin(0.05, N_SIMS_ORDERING) + 0.05


def test_dilution_does_not_increase_power(records):
    undiluted = _curve(records, "Linear", UNDILUTED)
    diluted = _curve(records, "Linear", DILUTED)
    for u, d in zip(undiluted, diluted):
        assert d <= u + mc_proportion_margin(max(min(u, 0.99), 0.01), N_SIMS_ORDERING)
