"""
Progress reporting for ContrastPower runs.

The grid runner emits ``RunEvent`` objects to a list of observers at run,
calibration and cell boundaries. Observers are plain callables; their return
values are ignored and they never steer the run.

``ProgressReporter`` turns ``cell_finished`` events into a throttled
``(current, total)`` callback, which ``PrintReporter`` or ``TqdmReporter``
render. ``EventPrinter`` writes a timestamped run log to stderr.
"""

import sys
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional

RUN_STARTED = "run_started"
CALIBRATION_STARTED = "calibration_started"
CALIBRATION_FINISHED = "calibration_finished"
CELL_FINISHED = "cell_finished"
RUN_FINISHED = "run_finished"


@dataclass(frozen=True)
class RunEvent:
    """A boundary in a grid run.

    Attributes:
        kind: One of the event-kind constants of this module.
        coordinate: ``GridCoordinate`` for calibration and cell events.
        thresholds: ``ThresholdSet`` for ``calibration_finished``.
        record: ``SummaryRecord`` for ``cell_finished``.
        total: Expected number of records, for ``run_started``.
    """

    kind: str
    coordinate: Any = None
    thresholds: Any = None
    record: Any = None
    total: Optional[int] = None


class ProgressReporter:
    """Wraps a ``(current, total)`` callback with counting and throttling.

    Counts finished grid cells and fires the callback at most once every
    *update_every* cells (and always on the last one).

    Args:
        total: Total number of grid cells.
        callback: Function called as ``callback(current, total)``.
        update_every: Fire the callback at most once per this many cells.
            Defaults to ``max(1, total // 200)``.
    """

    def __init__(
        self,
        total: int,
        callback: Callable[[int, int], None],
        update_every: Optional[int] = None,
    ):
        self.total = total
        self._callback = callback
        self._current = 0
        self.update_every = update_every if update_every is not None else max(1, total // 200)

    def start(self):
        """Signal the beginning of the run (fires an initial 0/total update)."""
        self._current = 0
        self._callback(0, self.total)

    def advance(self, n: int = 1):
        """Advance the counter by *n* cells, firing the callback when due."""
        self._current += n
        if self._current >= self.total or self._current % self.update_every == 0:
            self._callback(self._current, self.total)

    def finish(self):
        """Signal completion (fires a final total/total update if not already there)."""
        if self._current < self.total:
            self._current = self.total
            self._callback(self.total, self.total)

    def __call__(self, event: RunEvent):
        if event.kind == RUN_STARTED:
            self.start()
        elif event.kind == CELL_FINISHED:
            self.advance(1)


class PrintReporter:
    """Console progress reporter — prints ``\\rProgress: 45.2% (723/1600 cells)``."""

    def __call__(self, current: int, total: int):
        if total <= 0:
            return
        pct = 100.0 * current / total
        sys.stderr.write(f"\rProgress: {pct:5.1f}% ({current}/{total} cells)")
        sys.stderr.flush()
        if current >= total:
            sys.stderr.write("\n")
            sys.stderr.flush()


class TqdmReporter:
    """Optional tqdm-based progress reporter (lazy import).

    Usage::

        from contrastpower.progress import ProgressReporter, TqdmReporter
        study.run(sink, observers=[ProgressReporter(total, TqdmReporter())])
    """

    def __init__(self, **tqdm_kwargs):
        self._tqdm_kwargs = tqdm_kwargs
        self._bar = None

    def __call__(self, current: int, total: int):
        from tqdm import tqdm

        if self._bar is None:
            self._bar = tqdm(total=total, unit="cell", **self._tqdm_kwargs)

        delta = current - self._bar.n
        if delta > 0:
            self._bar.update(delta)

        if current >= total:
            self._bar.close()
            self._bar = None


class EventPrinter:
    """Writes a timestamped line per run event to *stream* (stderr by default).

    Args:
        stream: Text stream to write to.
        cells: Also log every finished cell (verbose).
    """

    def __init__(self, stream=None, cells: bool = False):
        self.stream = stream
        self.cells = cells

    def _write(self, message: str):
        stream = self.stream if self.stream is not None else sys.stderr
        stream.write(f"{datetime.now():%Y-%m-%d %H:%M:%S} - {message}\n")
        stream.flush()

    def __call__(self, event: RunEvent):
        c = event.coordinate
        if event.kind == RUN_STARTED:
            self._write(f"Starting power study ({event.total} cells)")
        elif event.kind == CALIBRATION_STARTED:
            self._write(
                f"now computing thresholds for slice technique {c.slice_technique}, "
                f"observation number: {c.observation_count}, dimension: {c.dimension}"
            )
        elif event.kind == CALIBRATION_FINISHED:
            t = event.thresholds
            self._write(
                f"finished computing thresholds for slice technique {c.slice_technique}, "
                f"observation number: {c.observation_count}, dimension: {c.dimension} "
                f"(p90={t.p90:.4f}, p95={t.p95:.4f}, p99={t.p99:.4f})"
            )
        elif event.kind == CELL_FINISHED and self.cells:
            r = event.record
            self._write(f"{r.type} {r.gen_id}: avg_c={r.avg_c:.4f}, power95={r.power95:.3f}")
        elif event.kind == RUN_FINISHED:
            self._write("Finished power study")


def compute_total_cells(
    n_generators: int,
    n_noise_levels: int,
    n_slice_techniques: int,
    n_observation_counts: int,
    n_dimensions: int,
    n_diluted_dimensions: int = 0,
) -> int:
    """Return the number of summary records a grid produces.

    Used to initialise ``ProgressReporter`` with an accurate total.

    Args:
        n_generators: Catalog size.
        n_noise_levels: Number of noise values (``noise_levels + 1``).
        n_slice_techniques: Number of slice techniques.
        n_observation_counts: Number of observation counts.
        n_dimensions: Number of undiluted dimensions.
        n_diluted_dimensions: How many of those dimensions also run in
            diluted mode.

    Returns:
        ``generators * noises * techniques * counts * (dims + diluted dims)``.
    """
    per_dimension = n_generators * n_noise_levels
    return n_slice_techniques * n_observation_counts * per_dimension * (n_dimensions + n_diluted_dimensions)
