"""
Summary records for ContrastPower.

One ``SummaryRecord`` is produced per grid cell and written once to the
result sink. Field order is fixed and mirrors the CSV header.
"""

from typing import NamedTuple

from .power import PowerEstimate

UNDILUTED = "undiluted"
DILUTED = "diluted"
MODES = (UNDILUTED, DILUTED)

HEADER = (
    "genId",
    "type",
    "dim",
    "noise",
    "obs_num",
    "slice_technique",
    "avg_c",
    "std_c",
    "power90",
    "power95",
    "power99",
)


class SummaryRecord(NamedTuple):
    """Per-cell summary, in CSV column order."""

    gen_id: str
    type: str
    dim: int
    noise: float
    obs_num: int
    slice_technique: str
    avg_c: float
    std_c: float
    power90: float
    power95: float
    power99: float

    def as_row(self) -> str:
        """Comma-delimited representation (no trailing newline)."""
        return ",".join(str(value) for value in self)


def build_summary_record(
    gen_id: str,
    mode: str,
    dimension: int,
    noise: float,
    observation_count: int,
    slice_technique: str,
    estimate: PowerEstimate,
) -> SummaryRecord:
    """Assemble a record from cell coordinates and its power estimate.

    Raises:
        ValueError: If *mode* is not ``"undiluted"`` or ``"diluted"``, or
            an identifier contains the field delimiter.
    """
    if mode not in MODES:
        raise ValueError(f"mode must be one of {MODES}, got {mode!r}")
    for name, value in (("gen_id", gen_id), ("slice_technique", slice_technique)):
        if "," in value or "\n" in value:
            raise ValueError(f"{name} must not contain commas or newlines, got {value!r}")

    return SummaryRecord(
        gen_id,
        mode,
        int(dimension),
        float(noise),
        int(observation_count),
        slice_technique,
        *estimate.as_tuple(),
    )
