"""
Tests for summary records.
"""

import math

import pytest

from contrastpower.core.power import PowerEstimate
from contrastpower.core.results import DILUTED, HEADER, UNDILUTED, SummaryRecord, build_summary_record


def _estimate():
    return PowerEstimate(mean=0.25, std=0.05, power90=0.9, power95=0.8, power99=0.5, n_simulations=500)


class TestBuildSummaryRecord:
    def test_fields(self):
        rec = build_summary_record("Linear-4-0.1-gaussian", UNDILUTED, 4, 0.1, 100, "c", _estimate())
        assert rec == SummaryRecord("Linear-4-0.1-gaussian", "undiluted", 4, 0.1, 100, "c", 0.25, 0.05, 0.9, 0.8, 0.5)

    def test_eleven_fields(self):
        rec = build_summary_record("g", DILUTED, 8, 0.0, 100, "u", _estimate())
        assert len(rec) == 11
        assert len(HEADER) == 11

    def test_header_order(self):
        assert HEADER == (
            "genId", "type", "dim", "noise", "obs_num", "slice_technique",
            "avg_c", "std_c", "power90", "power95", "power99",
        )

    def test_invalid_mode(self):
        with pytest.raises(ValueError, match="mode"):
            build_summary_record("g", "calibration", 2, 0.0, 100, "c", _estimate())

    def test_delimiter_in_id(self):
        with pytest.raises(ValueError, match="commas"):
            build_summary_record("a,b", UNDILUTED, 2, 0.0, 100, "c", _estimate())


class TestSummaryRecord:
    def test_as_row(self):
        rec = build_summary_record("Linear-2-0.5-gaussian", UNDILUTED, 2, 0.5, 100, "su", _estimate())
        assert rec.as_row() == "Linear-2-0.5-gaussian,undiluted,2,0.5,100,su,0.25,0.05,0.9,0.8,0.5"

    def test_as_row_nan_std(self):
        est = PowerEstimate(0.25, float("nan"), 1.0, 1.0, 1.0, 1)
        rec = build_summary_record("g", UNDILUTED, 2, 0.0, 100, "c", est)
        assert rec.as_row().split(",")[7] == "nan"
        assert math.isnan(rec.std_c)

    def test_fields_follow_header(self):
        rec = build_summary_record("g", DILUTED, 4, 1.0, 1000, "c", _estimate())
        assert SummaryRecord._fields[1:] == HEADER[1:]
        assert rec.as_row().split(",")[HEADER.index("type")] == "diluted"
