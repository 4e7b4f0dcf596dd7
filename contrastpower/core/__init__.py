"""Core components for the ContrastPower framework.

Re-exports the foundational building blocks:

- ``MonteCarloSampler`` — independent trial execution.
- ``ThresholdCalibrator``, ``ThresholdSet``, ``empirical_percentile`` —
  null-distribution thresholds.
- ``dilute``, ``DilutedGenerator`` — diluted signal composition.
- ``PowerEstimator``, ``PowerEstimate``, ``summarize_scores`` — power
  estimation.
- ``GridRunner``, ``GridCoordinate``, ``GridCell`` — grid traversal.
- ``SummaryRecord``, ``build_summary_record`` — per-cell output records.
"""

from .dilution import DilutedGenerator, dilute
from .grid import GridCell, GridCoordinate, GridRunner
from .power import PowerEstimate, PowerEstimator, summarize_scores
from .results import DILUTED, HEADER, MODES, UNDILUTED, SummaryRecord, build_summary_record
from .sampler import MonteCarloSampler
from .thresholds import ThresholdCalibrator, ThresholdSet, empirical_percentile

__all__ = [
    # Sampling
    "MonteCarloSampler",
    # Thresholds
    "ThresholdCalibrator",
    "ThresholdSet",
    "empirical_percentile",
    # Dilution
    "dilute",
    "DilutedGenerator",
    # Power
    "PowerEstimator",
    "PowerEstimate",
    "summarize_scores",
    # Grid
    "GridRunner",
    "GridCoordinate",
    "GridCell",
    # Records
    "SummaryRecord",
    "build_summary_record",
    "HEADER",
    "MODES",
    "UNDILUTED",
    "DILUTED",
]
