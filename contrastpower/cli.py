"""
Command-line front end for ContrastPower.

Usage:
    contrastpower summary.csv [--config study.json] [--dimensions 2,4,8]
        [--diluted-dimensions 4,8] [--noise-levels 30] [--seed 42] ...

    python -m contrastpower summary.csv --power-simulations 200

Exit status is 0 on success, 1 when the study fails (the diagnostic goes to
stderr) and 2 on invalid command-line usage.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .errors import PowerStudyError
from .study import PowerStudy


def _int_list(text: str) -> List[int]:
    try:
        return [int(part) for part in text.split(",") if part.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected comma-separated integers, got {text!r}") from None


def _str_list(text: str) -> List[str]:
    return [part.strip() for part in text.split(",") if part.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contrastpower",
        description="Monte Carlo power of a contrast measure across generators, dimensions and noise levels",
    )
    parser.add_argument("output", type=Path, help="Summary CSV file (appended to, header written when new)")
    parser.add_argument("--config", type=Path, help="JSON file with study settings (flags override it)")
    parser.add_argument("--generators", type=_str_list, help="Comma-separated generator names (default: full catalog)")
    parser.add_argument("--dimensions", type=_int_list, help="Undiluted dimensions (default: 2,4,8,12,16)")
    parser.add_argument(
        "--diluted-dimensions",
        type=_int_list,
        help="Diluted dimensions; the smallest gates diluted mode (default: 4,8,12,16)",
    )
    parser.add_argument("--noise-levels", type=int, help="Number of noise steps between 0 and 1 (default: 30)")
    parser.add_argument("--noise-decimals", type=int, help="Rounding of noise values (default: 2)")
    parser.add_argument("--observation-counts", type=_int_list, help="Rows per dataset (default: 100,1000)")
    parser.add_argument("--slice-techniques", type=_str_list, help="Slice technique tags (default: c,su,u)")
    parser.add_argument("--estimator", help="Estimator tag passed to the measure (default: R)")
    parser.add_argument("--distribution", choices=["gaussian", "uniform"], help="Noise distribution (default: gaussian)")
    parser.add_argument("--power-simulations", type=int, help="Trials per power estimate (default: 500)")
    parser.add_argument("--calibration-simulations", type=int, help="Trials per threshold calibration (default: 10000)")

    parallel = parser.add_mutually_exclusive_group()
    parallel.add_argument("--n-cores", type=int, help="Worker pool size (default: all cores)")
    parallel.add_argument("--no-parallel", action="store_true", help="Run everything in-process")
    parser.add_argument("--backend", choices=["loky", "multiprocessing", "threading"], help="joblib backend (default: loky)")

    parser.add_argument("--seed", type=int, help="Base random seed (default: fresh entropy)")
    parser.add_argument("--measure", help="Contrast measure as 'module:attribute'")

    output = parser.add_mutually_exclusive_group()
    output.add_argument("--quiet", action="store_true", help="No progress output")
    output.add_argument("--verbose", action="store_true", help="Log calibration and run events with timestamps")
    return parser


def configure_study(args: argparse.Namespace) -> PowerStudy:
    """Build a ``PowerStudy`` from parsed arguments (config file first, then flags)."""
    study = PowerStudy()
    if args.config is not None:
        study.set_config(args.config)

    if args.generators is not None:
        study.set_generators(args.generators)
    if args.dimensions is not None or args.diluted_dimensions is not None:
        study.set_dimensions(
            args.dimensions if args.dimensions is not None else study.dimensions,
            args.diluted_dimensions,
        )
    if args.noise_levels is not None or args.noise_decimals is not None:
        study.set_noise_levels(
            args.noise_levels if args.noise_levels is not None else study.noise_levels,
            args.noise_decimals if args.noise_decimals is not None else study.noise_decimals,
        )
    if args.observation_counts is not None:
        study.set_observation_counts(args.observation_counts)
    if args.slice_techniques is not None:
        study.set_slice_techniques(args.slice_techniques)
    if args.estimator is not None:
        study.set_estimator(args.estimator)
    if args.distribution is not None:
        study.set_distribution(args.distribution)
    if args.power_simulations is not None or args.calibration_simulations is not None:
        study.set_simulations(power=args.power_simulations, calibration=args.calibration_simulations)

    if args.no_parallel:
        study.set_parallel(False)
    elif args.n_cores is not None or args.backend is not None:
        study.set_parallel(True, args.n_cores, args.backend or study.backend)

    if args.seed is not None:
        study.set_seed(args.seed)
    if args.measure is not None:
        study.set_measure(args.measure)
    return study


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        study = configure_study(args)
        study.run(args.output, progress_callback=None if args.quiet else True, verbose=args.verbose)
    except (PowerStudyError, ValueError, TypeError, ImportError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
