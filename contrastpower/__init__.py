"""ContrastPower - Monte Carlo power of contrast measures.

Estimates how often a dependency/contrast measure exceeds null thresholds
calibrated on independent data, across generators, dimensions, observation
counts, noise levels, slice techniques and diluted signals.

Example:
    >>> from contrastpower import PowerStudy
    >>>
    >>> study = PowerStudy()
    >>> study.set_dimensions([2, 4, 8], diluted=[4])
    >>> study.set_simulations(power=500, calibration=10000)
    >>> study.run("summary.csv", progress_callback=True)
"""

from importlib.metadata import version as _get_version

from .errors import DimensionMismatch, GenerationFailure, GridCellFailure, MeasureFailure, PowerStudyError, SinkWriteFailure
from .io import CsvResultSink, MemorySink, read_summary
from .progress import EventPrinter, PrintReporter, ProgressReporter, RunEvent, TqdmReporter
from .study import PowerStudy

__version__ = _get_version("ContrastPower")

__all__ = [
    "PowerStudy",
    "CsvResultSink",
    "MemorySink",
    "read_summary",
    "RunEvent",
    "ProgressReporter",
    "PrintReporter",
    "TqdmReporter",
    "EventPrinter",
    "PowerStudyError",
    "GenerationFailure",
    "MeasureFailure",
    "DimensionMismatch",
    "SinkWriteFailure",
    "GridCellFailure",
]
