"""
Visualization utilities for ContrastPower summaries.

Plots power against noise for every generator at one grid coordinate.
"""

from typing import Optional

import numpy as np

__all__ = []

_LEVEL_COLUMNS = {"power90": 0.10, "power95": 0.05, "power99": 0.01}


def _curve_label(gen_id: str) -> str:
    """Generator name plus any custom parameters; drops dimension, noise and distribution."""
    name, _dimension, _noise, _distribution, *params = gen_id.split("-")
    return "-".join([name] + params)


def plot_power_curves(
    summary,
    slice_technique: str,
    observation_count: int,
    dimension: int,
    mode: str = "undiluted",
    level: str = "power95",
    ax=None,
    title: Optional[str] = None,
):
    """Plot noise vs. power with one line per generator.

    A dashed horizontal line marks the nominal false-positive rate of the
    chosen threshold level, which is where every generator should land at
    noise 1.0.

    Args:
        summary: DataFrame as returned by ``read_summary``.
        slice_technique: Slice technique tag to select.
        observation_count: Observation count to select.
        dimension: Dimension to select.
        mode: ``"undiluted"`` or ``"diluted"``.
        level: One of ``power90``, ``power95``, ``power99``.
        ax: Existing matplotlib axes. A new figure is created and shown
            when omitted.
        title: Plot title (a default naming the coordinate is used when
            omitted).

    Returns:
        The matplotlib axes that were drawn on.

    Raises:
        ImportError: If matplotlib is not installed.
        ValueError: For an unknown level or a coordinate without rows.
    """
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        raise ImportError("matplotlib is required for plotting. Install it with: pip install matplotlib") from None

    if level not in _LEVEL_COLUMNS:
        raise ValueError(f"level must be one of {sorted(_LEVEL_COLUMNS)}, got {level!r}")

    rows = summary[
        (summary["slice_technique"] == slice_technique)
        & (summary["obs_num"] == observation_count)
        & (summary["dim"] == dimension)
        & (summary["type"] == mode)
    ]
    if rows.empty:
        raise ValueError(f"no {mode} rows for slice_technique={slice_technique}, obs_num={observation_count}, dim={dimension}")

    show = ax is None
    if show:
        fig, ax = plt.subplots(figsize=(12, 8))

    names = rows["genId"].map(_curve_label)
    generators = list(dict.fromkeys(names))
    colors = plt.get_cmap("tab10")(np.linspace(0, 1, max(len(generators), 1)))

    for i, name in enumerate(generators):
        curve = rows[names == name].sort_values("noise")
        ax.plot(
            curve["noise"].to_numpy(),
            curve[level].to_numpy(),
            "o-",
            linewidth=2,
            markersize=4,
            label=name,
            color=colors[i],
        )

    ax.axhline(
        y=_LEVEL_COLUMNS[level],
        color="red",
        linestyle="--",
        linewidth=2,
        label=f"Nominal rate ({_LEVEL_COLUMNS[level]:g})",
    )

    if title is None:
        title = f"{level} vs. noise ({mode}, {slice_technique}, n={observation_count}, dim={dimension})"
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.set_xlabel("Noise", fontsize=12)
    ax.set_ylabel("Power", fontsize=12)
    ax.grid(True, alpha=0.3)
    ax.legend(bbox_to_anchor=(1.05, 1), loc="upper left")
    ax.set_ylim(0, 1.05)

    if show:
        plt.tight_layout()
        plt.show()
    return ax
