#!/usr/bin/env python
"""
Plot power-vs-noise curves from a ContrastPower summary file.

Usage:
    python scripts/plot_summary.py summary.csv --slice-technique c \
        --observation-count 100 --dimension 4 [--mode diluted] [--level power99]
"""

import argparse
from pathlib import Path

from contrastpower import read_summary
from contrastpower.utils.visualization import plot_power_curves


def main():
    parser = argparse.ArgumentParser(description="Plot power curves from a ContrastPower summary")
    parser.add_argument("summary", type=Path, help="Summary CSV written by a power study")
    parser.add_argument("--slice-technique", default="c", help="Slice technique to plot (default: c)")
    parser.add_argument("--observation-count", type=int, default=100, help="Observation count to plot (default: 100)")
    parser.add_argument("--dimension", type=int, default=4, help="Dimension to plot (default: 4)")
    parser.add_argument("--mode", choices=["undiluted", "diluted"], default="undiluted")
    parser.add_argument("--level", choices=["power90", "power95", "power99"], default="power95")
    args = parser.parse_args()

    summary = read_summary(args.summary)
    plot_power_curves(
        summary,
        args.slice_technique,
        args.observation_count,
        args.dimension,
        mode=args.mode,
        level=args.level,
    )


if __name__ == "__main__":
    main()
