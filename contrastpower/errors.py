"""
Exception taxonomy for ContrastPower.

None of these are caught and retried inside the core: a failing trial aborts
its sampling call, which aborts the enclosing calibration or power estimate,
which aborts the grid run.
"""


class PowerStudyError(RuntimeError):
    """Base class for failures raised while running a power study."""


class GenerationFailure(PowerStudyError):
    """Raised when a generator cannot produce a matrix for its parameters."""


class MeasureFailure(PowerStudyError):
    """Raised when the contrast measure fails or returns an unusable score."""


class DimensionMismatch(PowerStudyError):
    """Raised when diluted data does not have the expected shape."""


class SinkWriteFailure(PowerStudyError):
    """Raised when the result sink cannot accept a record."""


class GridCellFailure(PowerStudyError):
    """Raised when a grid cell (or its calibration) fails.

    Carries the failing cell coordinates so the run can terminate with a
    diagnostic. The constructor arguments are kept in ``args`` so the
    exception survives pickling across worker processes.

    Args:
        slice_technique: Slice technique of the failing coordinate.
        observation_count: Observation count of the failing coordinate.
        dimension: Dimension of the failing coordinate.
        noise: Noise level of the cell (``None`` during calibration).
        generator: Generator name of the cell.
        mode: ``"undiluted"``, ``"diluted"`` or ``"calibration"``.
        kind: Class name of the underlying failure.
        detail: Message of the underlying failure.
    """

    def __init__(self, slice_technique, observation_count, dimension, noise, generator, mode, kind, detail):
        super().__init__(slice_technique, observation_count, dimension, noise, generator, mode, kind, detail)
        self.slice_technique = slice_technique
        self.observation_count = observation_count
        self.dimension = dimension
        self.noise = noise
        self.generator = generator
        self.mode = mode
        self.kind = kind
        self.detail = detail

    def __str__(self):
        noise = "-" if self.noise is None else self.noise
        return (
            f"{self.mode} cell failed at slice_technique={self.slice_technique}, "
            f"observation_count={self.observation_count}, dimension={self.dimension}, "
            f"noise={noise}, generator={self.generator}: {self.kind}: {self.detail}"
        )


__all__ = [
    "PowerStudyError",
    "GenerationFailure",
    "MeasureFailure",
    "DimensionMismatch",
    "SinkWriteFailure",
    "GridCellFailure",
]
