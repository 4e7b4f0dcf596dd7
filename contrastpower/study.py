"""
Power study configuration and execution.

``PowerStudy`` collects the grid, measure and Monte Carlo settings through
validated ``set_*`` methods (each returns ``self`` for chaining) and runs
the grid with ``run``.
"""

import json
import os
import warnings
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from .core.grid import GridRunner
from .core.results import SummaryRecord
from .errors import GenerationFailure
from .io import CsvResultSink, MemorySink
from .progress import EventPrinter, PrintReporter, ProgressReporter
from .stats.generators import DISTRIBUTIONS, GeneratorFactory, default_catalog, get_generator
from .stats.measures import rank_correlation_contrast, resolve_measure
from .utils.validators import (
    _validate_dimensions,
    _validate_generators,
    _validate_int_list,
    _validate_noise_levels,
    _validate_parallel_settings,
    _validate_simulations,
    _validate_tags,
)

RECOMMENDED_POWER_SIMULATIONS = 500
RECOMMENDED_CALIBRATION_SIMULATIONS = 1000


def noise_grid(noise_levels: int, decimals: int = 2) -> List[float]:
    """Noise values ``round(k / noise_levels, decimals)`` for ``k = 0..noise_levels``."""
    return [round(k / noise_levels, decimals) for k in range(noise_levels + 1)]


class PowerStudy:
    """Statistical power of a contrast measure across a synthetic-data grid.

    For every slice technique, observation count and dimension the study
    calibrates null thresholds on independent data, then estimates how often
    the measure exceeds them on each generator at each noise level, both on
    the full structured signal and on a diluted one (structured half plus
    independent half).

    Attributes:
        generators: Ordered generator factories (default: reference catalog).
        dimensions: Undiluted dimensions (default: 2, 4, 8, 12, 16).
        diluted_dimensions: Diluted dimensions; the minimum gates diluted
            mode (default: 4, 8, 12, 16).
        noise_levels: Number of noise steps (default: 30).
        noise_decimals: Rounding of noise values (default: 2).
        observation_counts: Rows per dataset (default: 100, 1000).
        slice_techniques: Slice technique tags (default: c, su, u).
        estimator: Estimator tag passed to the measure (default: R).
        distribution: Noise distribution family (default: gaussian).
        power_simulations: Trials per power estimate (default: 500).
        calibration_simulations: Trials per calibration (default: 10000).
        parallel: Whether to use a worker pool (default: True).
        n_cores: Worker pool size (default: all CPU cores).
        backend: joblib backend (default: loky).
        seed: Base random seed (default: None, fresh entropy per run).
        measure: Contrast function (default: rank_correlation_contrast).

    Example:
        >>> study = PowerStudy()
        >>> study.set_dimensions([2, 4], diluted=[4]).set_noise_levels(4)
        >>> study.set_simulations(power=200, calibration=1000)
        >>> study.run("summary.csv")
    """

    def __init__(self, measure: Optional[Callable] = None):
        self.generators: List[GeneratorFactory] = default_catalog()
        self.dimensions: List[int] = [2, 4, 8, 12, 16]
        self.diluted_dimensions: List[int] = [4, 8, 12, 16]
        self.noise_levels = 30
        self.noise_decimals = 2
        self.observation_counts: List[int] = [100, 1000]
        self.slice_techniques: List[str] = ["c", "su", "u"]
        self.estimator = "R"
        self.distribution = "gaussian"
        self.power_simulations = 500
        self.calibration_simulations = 10000
        self.seed: Optional[int] = None

        self.parallel = True
        self.n_cores = os.cpu_count() or 1
        self.backend = "loky"

        self.measure: Callable = measure if measure is not None else rank_correlation_contrast

    # =========================================================================
    # Derived properties
    # =========================================================================

    @property
    def noises(self) -> List[float]:
        """Noise values in traversal order."""
        return noise_grid(self.noise_levels, self.noise_decimals)

    @property
    def total_cells(self) -> int:
        """Number of summary records the current configuration produces."""
        return self._build_runner(MemorySink(), ()).total_cells()

    # =========================================================================
    # Configuration methods
    # =========================================================================

    def set_generators(self, generators: Sequence[Union[str, GeneratorFactory]]):
        """Set the generator catalog.

        Args:
            generators: Catalog names (see ``stats.generators.CATALOG``) or
                ``GeneratorFactory`` objects, in traversal order.

        Raises:
            ValueError: If the list is empty, names are unknown or
                duplicated.
        """
        if isinstance(generators, str):
            generators = [g.strip() for g in generators.split(",") if g.strip()]
        try:
            resolved = [get_generator(g) if isinstance(g, str) else g for g in generators]
        except GenerationFailure as exc:
            raise ValueError(str(exc)) from None
        _validate_generators(resolved).raise_if_invalid()
        self.generators = resolved
        return self

    def set_dimensions(self, dimensions: Sequence[int], diluted: Optional[Sequence[int]] = None):
        """Set undiluted and (optionally) diluted dimensions.

        Args:
            dimensions: Undiluted dimensions, traversal order.
            diluted: Diluted dimensions. Every undiluted dimension at or
                above ``min(diluted)`` also runs in diluted mode and must
                be even. ``[]`` disables dilution; ``None`` keeps the
                current list.
        """
        dimensions = list(dimensions) if isinstance(dimensions, (list, tuple)) else dimensions
        diluted = self.diluted_dimensions if diluted is None else (list(diluted) if isinstance(diluted, (list, tuple)) else diluted)
        result = _validate_dimensions(dimensions, diluted)
        for warning in result.warnings:
            warnings.warn(warning, stacklevel=2)
        result.raise_if_invalid()
        self.dimensions = [int(d) for d in dimensions]
        self.diluted_dimensions = [int(d) for d in diluted]
        return self

    def set_noise_levels(self, noise_levels: int, decimals: int = 2):
        """Use ``noise_levels + 1`` noise values from 0 to 1, rounded to *decimals*."""
        result = _validate_noise_levels(noise_levels, decimals)
        for warning in result.warnings:
            warnings.warn(warning, stacklevel=2)
        result.raise_if_invalid()
        self.noise_levels = noise_levels
        self.noise_decimals = decimals
        return self

    def set_observation_counts(self, observation_counts: Sequence[int]):
        """Set the number of rows per generated dataset (each at least 2)."""
        observation_counts = list(observation_counts) if isinstance(observation_counts, (list, tuple)) else observation_counts
        _validate_int_list(observation_counts, "observation_counts", min_val=2).raise_if_invalid()
        self.observation_counts = [int(n) for n in observation_counts]
        return self

    def set_slice_techniques(self, slice_techniques: Sequence[str]):
        """Set the slice technique tags passed to the measure."""
        _validate_tags(slice_techniques, "slice_techniques").raise_if_invalid()
        self.slice_techniques = [slice_techniques] if isinstance(slice_techniques, str) else list(slice_techniques)
        return self

    def set_estimator(self, estimator: str):
        """Set the estimator tag passed to the measure."""
        if not isinstance(estimator, str):
            raise TypeError("estimator must be a string")
        _validate_tags([estimator], "estimator").raise_if_invalid()
        self.estimator = estimator
        return self

    def set_distribution(self, distribution: str):
        """Set the noise distribution family (``gaussian`` or ``uniform``)."""
        if distribution not in DISTRIBUTIONS:
            raise ValueError(f"distribution must be one of {DISTRIBUTIONS}, got {distribution!r}")
        self.distribution = distribution
        return self

    def set_simulations(self, power: Optional[int] = None, calibration: Optional[int] = None):
        """Set Monte Carlo repetition counts.

        Args:
            power: Trials per power estimate.
            calibration: Trials per null-threshold calibration.

        Raises:
            ValueError: If a count is not a positive integer.
        """
        if power is not None:
            power, result = _validate_simulations(power, "power simulations", RECOMMENDED_POWER_SIMULATIONS)
            for warning in result.warnings:
                warnings.warn(warning, stacklevel=2)
            result.raise_if_invalid()
            self.power_simulations = power
        if calibration is not None:
            calibration, result = _validate_simulations(calibration, "calibration simulations", RECOMMENDED_CALIBRATION_SIMULATIONS)
            for warning in result.warnings:
                warnings.warn(warning, stacklevel=2)
            result.raise_if_invalid()
            self.calibration_simulations = calibration
        return self

    def set_parallel(self, enable: bool = True, n_cores: Optional[int] = None, backend: str = "loky"):
        """Enable or disable the worker pool.

        Args:
            enable: Use a joblib worker pool.
            n_cores: Pool size; defaults to all CPU cores. Capped at the
                number of available cores.
            backend: joblib backend (``loky``, ``multiprocessing`` or
                ``threading``).
        """
        settings, result = _validate_parallel_settings(enable, n_cores, backend)
        result.raise_if_invalid()
        self.parallel, self.n_cores = settings
        self.backend = backend
        return self

    def set_seed(self, seed: Optional[int] = None):
        """Set the base random seed.

        Args:
            seed: Non-negative integer, or ``None`` for fresh entropy on
                every run.

        Raises:
            TypeError: If *seed* is not an integer or ``None``.
            ValueError: If *seed* is negative.
        """
        if seed is not None:
            if isinstance(seed, bool) or not isinstance(seed, int):
                raise TypeError("seed must be an integer or None")
            if seed < 0:
                raise ValueError("seed must be non-negative")
        self.seed = seed
        return self

    def set_measure(self, measure: Union[str, Callable]):
        """Set the contrast measure.

        Args:
            measure: Callable ``measure(data, dimension_subset, estimator,
                slice_technique) -> float`` or an import path
                ``"module:attribute"``. Must be picklable for parallel runs.
        """
        if isinstance(measure, str):
            measure = resolve_measure(measure)
        if not callable(measure):
            raise TypeError("measure must be callable or a 'module:attribute' string")
        self.measure = measure
        return self

    def set_config(self, config: Union[Dict[str, Any], str, Path]):
        """Apply several settings at once from a dict or a JSON file.

        Recognised keys: ``generators``, ``dimensions``,
        ``diluted_dimensions``, ``noise_levels``, ``noise_decimals``,
        ``observation_counts``, ``slice_techniques``, ``estimator``,
        ``distribution``, ``power_simulations``,
        ``calibration_simulations``, ``parallel``, ``n_cores``,
        ``backend``, ``seed``, ``measure``.

        Raises:
            TypeError: If *config* is not a dict or path.
            ValueError: On unknown keys or invalid values.
        """
        if isinstance(config, (str, Path)):
            with open(config, encoding="utf-8") as f:
                config = json.load(f)
        if not isinstance(config, dict):
            raise TypeError("config must be a dictionary or a path to a JSON file")

        known = {
            "generators",
            "dimensions",
            "diluted_dimensions",
            "noise_levels",
            "noise_decimals",
            "observation_counts",
            "slice_techniques",
            "estimator",
            "distribution",
            "power_simulations",
            "calibration_simulations",
            "parallel",
            "n_cores",
            "backend",
            "seed",
            "measure",
        }
        unknown = sorted(set(config) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")

        if "generators" in config:
            self.set_generators(config["generators"])
        if "dimensions" in config or "diluted_dimensions" in config:
            self.set_dimensions(config.get("dimensions", self.dimensions), config.get("diluted_dimensions"))
        if "noise_levels" in config or "noise_decimals" in config:
            self.set_noise_levels(config.get("noise_levels", self.noise_levels), config.get("noise_decimals", self.noise_decimals))
        if "observation_counts" in config:
            self.set_observation_counts(config["observation_counts"])
        if "slice_techniques" in config:
            self.set_slice_techniques(config["slice_techniques"])
        if "estimator" in config:
            self.set_estimator(config["estimator"])
        if "distribution" in config:
            self.set_distribution(config["distribution"])
        if "power_simulations" in config or "calibration_simulations" in config:
            self.set_simulations(config.get("power_simulations"), config.get("calibration_simulations"))
        if "parallel" in config or "n_cores" in config or "backend" in config:
            self.set_parallel(config.get("parallel", self.parallel), config.get("n_cores"), config.get("backend", self.backend))
        if "seed" in config:
            self.set_seed(config["seed"])
        if "measure" in config:
            self.set_measure(config["measure"])
        return self

    # =========================================================================
    # Execution
    # =========================================================================

    def _build_runner(self, sink, observers) -> GridRunner:
        return GridRunner(
            measure=self.measure,
            sink=sink,
            generators=self.generators,
            dimensions=self.dimensions,
            diluted_dimensions=self.diluted_dimensions,
            noises=self.noises,
            observation_counts=self.observation_counts,
            slice_techniques=self.slice_techniques,
            estimator=self.estimator,
            distribution=self.distribution,
            power_simulations=self.power_simulations,
            calibration_simulations=self.calibration_simulations,
            n_cores=self.n_cores if self.parallel else 1,
            backend=self.backend,
            seed=self.seed,
            observers=observers,
        )

    def run(
        self,
        output: Union[None, str, Path, Any] = None,
        progress_callback=None,
        verbose: bool = False,
        observers: Sequence[Callable] = (),
    ) -> List[SummaryRecord]:
        """Run the power study.

        Args:
            output: CSV path (appended to), a sink object with
                ``write``/``flush``, or ``None`` to keep records in memory
                only.
            progress_callback: Progress reporting control:
                - ``None`` (default): no progress output.
                - ``True``: use ``PrintReporter``.
                - callable ``(current, total)``: custom callback.
            verbose: Also write a timestamped run log to stderr.
            observers: Extra ``RunEvent`` observers.

        Returns:
            Summary records in emission order.

        Raises:
            GridCellFailure: If any calibration or cell fails. Records
                written before the failure remain in *output*.
        """
        observers = list(observers)
        if verbose:
            observers.append(EventPrinter())

        if output is None:
            sink, owned = MemorySink(), True
        elif isinstance(output, (str, Path)):
            sink, owned = CsvResultSink(output), True
        else:
            sink, owned = output, False

        try:
            runner = self._build_runner(sink, observers)
            if progress_callback is not None and progress_callback is not False:
                callback = PrintReporter() if progress_callback is True else progress_callback
                reporter = ProgressReporter(runner.total_cells(), callback)
                runner.observers.append(reporter)
            records = runner.run()
        finally:
            if owned:
                sink.close()
        return records

    def __repr__(self):
        return (
            f"PowerStudy(generators={len(self.generators)}, dimensions={self.dimensions}, "
            f"noise_levels={self.noise_levels}, observation_counts={self.observation_counts}, "
            f"slice_techniques={self.slice_techniques})"
        )
