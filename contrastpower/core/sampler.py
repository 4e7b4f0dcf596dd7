"""
Monte Carlo trial execution for ContrastPower.

A trial is any callable taking a ``numpy.random.Generator``. The sampler
spawns one independent stream per trial from a ``SeedSequence`` so trials
never share random state, whether they run in-process or on a worker pool.
"""

from typing import Callable, List, Optional, TypeVar, Union

import numpy as np

T = TypeVar("T")

SeedLike = Union[None, int, np.random.SeedSequence]


def spawn_streams(seed: SeedLike, repetitions: int) -> List[np.random.Generator]:
    """Return ``repetitions`` independent random streams derived from *seed*."""
    seed_seq = seed if isinstance(seed, np.random.SeedSequence) else np.random.SeedSequence(seed)
    return [np.random.default_rng(child) for child in seed_seq.spawn(repetitions)]


class MonteCarloSampler:
    """Runs a trial function a fixed number of times and collects results.

    Args:
        parallel: Optional open ``joblib.Parallel`` instance. When given,
            trials are dispatched to its workers; otherwise they run
            sequentially in the calling process. The pool is owned by the
            caller so one pool can serve every sampling call of a run.
    """

    def __init__(self, parallel=None):
        self.parallel = parallel

    def sample(self, trial: Callable[[np.random.Generator], T], repetitions: int, seed: SeedLike = None) -> List[T]:
        """Execute *trial* ``repetitions`` times.

        Args:
            trial: Callable receiving its own random stream. Must not touch
                mutable state shared with other trials.
            repetitions: Number of trials (positive integer).
            seed: Seed or ``SeedSequence`` for the per-trial streams. A
                fixed seed reproduces the same results in the same order.

        Returns:
            List of exactly ``repetitions`` trial results.

        Raises:
            ValueError: If *repetitions* is not a positive integer.
            Exception: Whatever the first failing trial raised; no partial
                results are returned.
        """
        if isinstance(repetitions, bool) or not isinstance(repetitions, (int, np.integer)) or repetitions < 1:
            raise ValueError(f"repetitions must be a positive integer, got {repetitions!r}")

        streams = spawn_streams(seed, int(repetitions))

        if self.parallel is None:
            return [trial(rng) for rng in streams]

        from joblib import delayed

        return list(self.parallel(delayed(trial)(rng) for rng in streams))
