"""
Grid traversal for ContrastPower.

For every (slice technique, observation count, dimension) coordinate the
runner calibrates null thresholds once, then estimates power for every
(noise level, generator) pair in undiluted mode and, when the dimension is
large enough, in diluted mode. Each cell yields one ``SummaryRecord`` that
is written to the sink as soon as it is available.

Parallelism uses a single ``joblib.Parallel`` pool opened once per run.
Calibration trials and power cells are dispatched to it one level at a
time, never nested: inside a cell the trials run sequentially.
"""

import contextlib
import itertools
from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Optional, Sequence

import numpy as np

from ..errors import GridCellFailure, SinkWriteFailure
from ..progress import CALIBRATION_FINISHED, CALIBRATION_STARTED, CELL_FINISHED, RUN_FINISHED, RUN_STARTED, RunEvent, compute_total_cells
from ..stats.generators import INDEPENDENT, GeneratorFactory
from .dilution import DilutedGenerator
from .power import PowerEstimator
from .results import DILUTED, UNDILUTED, SummaryRecord, build_summary_record
from .sampler import MonteCarloSampler
from .thresholds import ThresholdCalibrator, ThresholdSet

CALIBRATION = "calibration"


@dataclass(frozen=True)
class GridCoordinate:
    """Grid point sharing one set of null thresholds."""

    slice_technique: str
    observation_count: int
    dimension: int


@dataclass(frozen=True)
class GridCell:
    """One power estimation: a coordinate plus noise, generator and mode.

    ``stream`` indexes the cell's random stream within the run so results
    do not depend on which worker evaluates the cell.
    """

    coordinate: GridCoordinate
    noise: float
    factory: GeneratorFactory
    mode: str
    stream: int


@dataclass(frozen=True)
class CellSettings:
    """Run-wide parameters shipped to workers alongside each cell."""

    measure: Callable
    estimator: str
    distribution: str
    repetitions: int
    entropy: int


def stream_seed(entropy: int, stream: int) -> np.random.SeedSequence:
    """Seed sequence of the *stream*-th calibration or cell of a run."""
    return np.random.SeedSequence(entropy, spawn_key=(stream,))


def _failure(coordinate: GridCoordinate, noise, generator: str, mode: str, exc: BaseException) -> GridCellFailure:
    return GridCellFailure(
        coordinate.slice_technique,
        coordinate.observation_count,
        coordinate.dimension,
        noise,
        generator,
        mode,
        type(exc).__name__,
        str(exc),
    )


def evaluate_cell(cell: GridCell, thresholds: ThresholdSet, settings: CellSettings) -> SummaryRecord:
    """Estimate power for one cell and build its summary record.

    Runs in a worker process when the pool is parallel.

    Raises:
        GridCellFailure: Wrapping whatever failed inside the cell.
    """
    c = cell.coordinate
    try:
        if cell.mode == DILUTED:
            generator = DilutedGenerator.from_factory(cell.factory, c.dimension, cell.noise, settings.distribution)
        else:
            generator = cell.factory.build(c.dimension, cell.noise, settings.distribution, 0)

        estimate = PowerEstimator(settings.measure).estimate_power(
            generator,
            range(c.dimension),
            settings.estimator,
            c.slice_technique,
            c.observation_count,
            settings.repetitions,
            thresholds,
            seed=stream_seed(settings.entropy, cell.stream),
        )
        return build_summary_record(generator.id, cell.mode, c.dimension, cell.noise, c.observation_count, c.slice_technique, estimate)
    except Exception as exc:
        raise _failure(c, cell.noise, cell.factory.name, cell.mode, exc) from exc


class GridRunner:
    """Runs the full power study grid and streams records to a sink.

    Args:
        measure: Contrast function
            ``measure(data, dimension_subset, estimator, slice_technique)``.
            Must be picklable when ``n_cores != 1``.
        sink: Object with ``write(record)`` and ``flush()``.
        generators: Ordered generator factories.
        dimensions: Undiluted dimensions.
        diluted_dimensions: Diluted dimensions; only the minimum matters,
            it gates diluted mode. Empty disables dilution.
        noises: Noise levels in traversal order.
        observation_counts: Observation counts.
        slice_techniques: Slice technique tags.
        estimator: Estimator tag passed to the measure.
        distribution: Distribution family for every generator.
        power_simulations: Trials per power estimate.
        calibration_simulations: Trials per threshold calibration.
        n_cores: Worker pool size (``1`` runs in-process).
        backend: joblib backend name.
        seed: Base seed; ``None`` draws fresh entropy per run.
        observers: Callables receiving ``RunEvent`` objects.
        baseline: Independence process used for calibration.
    """

    def __init__(
        self,
        measure: Callable,
        sink,
        generators: Sequence[GeneratorFactory],
        dimensions: Sequence[int],
        diluted_dimensions: Sequence[int],
        noises: Sequence[float],
        observation_counts: Sequence[int],
        slice_techniques: Sequence[str],
        estimator: str = "R",
        distribution: str = "gaussian",
        power_simulations: int = 500,
        calibration_simulations: int = 10000,
        n_cores: int = 1,
        backend: str = "loky",
        seed: Optional[int] = None,
        observers: Sequence[Callable[[RunEvent], Any]] = (),
        baseline: GeneratorFactory = INDEPENDENT,
    ):
        self.measure = measure
        self.sink = sink
        self.generators = list(generators)
        self.dimensions = list(dimensions)
        self.diluted_dimensions = list(diluted_dimensions)
        self.noises = list(noises)
        self.observation_counts = list(observation_counts)
        self.slice_techniques = list(slice_techniques)
        self.estimator = estimator
        self.distribution = distribution
        self.power_simulations = power_simulations
        self.calibration_simulations = calibration_simulations
        self.n_cores = n_cores
        self.backend = backend
        self.seed = seed
        self.observers = list(observers)
        self.baseline = baseline

    # =========================================================================
    # Grid enumeration
    # =========================================================================

    def qualifies_for_dilution(self, dimension: int) -> bool:
        """True when *dimension* reaches the smallest diluted dimension."""
        return bool(self.diluted_dimensions) and dimension >= min(self.diluted_dimensions)

    def coordinates(self) -> Iterator[GridCoordinate]:
        """Calibration coordinates in traversal order."""
        for slice_technique in self.slice_techniques:
            for observation_count in self.observation_counts:
                for dimension in self.dimensions:
                    yield GridCoordinate(slice_technique, observation_count, dimension)

    def cells(self, coordinate: GridCoordinate, streams: Optional[Iterator[int]] = None) -> List[GridCell]:
        """Cells of one coordinate: per noise level, undiluted then diluted."""
        if streams is None:
            streams = itertools.count()
        modes = [UNDILUTED]
        if self.qualifies_for_dilution(coordinate.dimension):
            modes.append(DILUTED)
        return [
            GridCell(coordinate, noise, factory, mode, next(streams))
            for noise in self.noises
            for mode in modes
            for factory in self.generators
        ]

    def total_cells(self) -> int:
        return compute_total_cells(
            len(self.generators),
            len(self.noises),
            len(self.slice_techniques),
            len(self.observation_counts),
            len(self.dimensions),
            sum(1 for dimension in self.dimensions if self.qualifies_for_dilution(dimension)),
        )

    # =========================================================================
    # Execution
    # =========================================================================

    def _notify(self, event: RunEvent):
        for observer in self.observers:
            observer(event)

    def _calibrate(self, calibrator: ThresholdCalibrator, coordinate: GridCoordinate, seed) -> ThresholdSet:
        self._notify(RunEvent(CALIBRATION_STARTED, coordinate=coordinate))
        try:
            thresholds = calibrator.calibrate(
                coordinate.dimension,
                coordinate.observation_count,
                coordinate.slice_technique,
                self.estimator,
                self.calibration_simulations,
                seed=seed,
            )
        except Exception as exc:
            raise _failure(coordinate, None, self.baseline.name, CALIBRATION, exc) from exc
        self._notify(RunEvent(CALIBRATION_FINISHED, coordinate=coordinate, thresholds=thresholds))
        return thresholds

    def _emit(self, cell: GridCell, record: SummaryRecord):
        try:
            self.sink.write(record)
        except SinkWriteFailure as exc:
            raise _failure(cell.coordinate, cell.noise, cell.factory.name, cell.mode, exc) from exc
        self._notify(RunEvent(CELL_FINISHED, coordinate=cell.coordinate, record=record))

    def _open_pool(self):
        if self.n_cores == 1:
            return contextlib.nullcontext(None)
        from joblib import Parallel

        return Parallel(n_jobs=self.n_cores, backend=self.backend, return_as="generator")

    def run(self) -> List[SummaryRecord]:
        """Traverse the grid, writing one record per cell.

        Returns:
            All records, in emission order.

        Raises:
            GridCellFailure: On the first failing calibration, cell or sink
                write. Records written before the failure stay in the sink,
                which is flushed before the exception propagates. A flush
                that fails on that path never masks the original failure.
                A flush that fails after the last cell is reported against
                that cell.
        """
        entropy = self.seed if self.seed is not None else np.random.SeedSequence().entropy
        streams = itertools.count()
        records: List[SummaryRecord] = []
        last_cell: Optional[GridCell] = None

        self._notify(RunEvent(RUN_STARTED, total=self.total_cells()))
        try:
            with self._open_pool() as pool:
                calibrator = ThresholdCalibrator(self.measure, MonteCarloSampler(pool), self.baseline, self.distribution)
                settings = CellSettings(self.measure, self.estimator, self.distribution, self.power_simulations, entropy)

                for coordinate in self.coordinates():
                    thresholds = self._calibrate(calibrator, coordinate, stream_seed(entropy, next(streams)))
                    cells = self.cells(coordinate, streams)

                    if pool is None:
                        results = (evaluate_cell(cell, thresholds, settings) for cell in cells)
                    else:
                        from joblib import delayed

                        results = pool(delayed(evaluate_cell)(cell, thresholds, settings) for cell in cells)

                    # Ordered results: the i-th result belongs to the i-th cell.
                    for cell, record in zip(cells, results):
                        self._emit(cell, record)
                        records.append(record)
                        last_cell = cell
        except BaseException as exc:
            try:
                self.sink.flush()
            except SinkWriteFailure:
                # The failing cell is the diagnostic; the flush error stays as context.
                raise exc
            raise

        try:
            self.sink.flush()
        except SinkWriteFailure as exc:
            if last_cell is None:
                raise
            raise _failure(last_cell.coordinate, last_cell.noise, last_cell.factory.name, last_cell.mode, exc) from exc

        self._notify(RunEvent(RUN_FINISHED))
        return records
