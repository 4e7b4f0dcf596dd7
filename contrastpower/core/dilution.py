"""
Signal dilution: half structured columns, half independent columns.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..errors import DimensionMismatch
from ..stats.generators import INDEPENDENT, GeneratorFactory


def dilute(
    structured_generator,
    independent_generator,
    observation_count: int,
    rng: Optional[np.random.Generator] = None,
    expected_dimension: Optional[int] = None,
) -> np.ndarray:
    """Concatenate a structured and an independent sample column-wise.

    Args:
        structured_generator: Generator for the structured half.
        independent_generator: Generator for the independent half.
        observation_count: Rows drawn from each generator.
        rng: Stream shared by both draws (drawn in order: structured,
            then independent). Defaults to a fresh, unseeded stream so the
            two halves never replay the same numbers.
        expected_dimension: Width of the result. Defaults to the sum of
            both generators' dimensions.

    Returns:
        ``(observation_count, expected_dimension)`` matrix whose row *i* is
        row *i* of the structured sample followed by row *i* of the
        independent sample.

    Raises:
        DimensionMismatch: If the samples differ in row count or their
            combined width is not *expected_dimension*.
    """
    if rng is None:
        rng = np.random.default_rng()
    structured = np.asarray(structured_generator.generate(observation_count, rng))
    independent = np.asarray(independent_generator.generate(observation_count, rng))

    if expected_dimension is None:
        expected_dimension = structured_generator.dimension + independent_generator.dimension

    if structured.ndim != 2 or independent.ndim != 2:
        raise DimensionMismatch(f"expected 2-D samples, got shapes {structured.shape} and {independent.shape}")
    if structured.shape[0] != independent.shape[0]:
        raise DimensionMismatch(f"row counts differ: structured {structured.shape[0]}, independent {independent.shape[0]}")
    width = structured.shape[1] + independent.shape[1]
    if width != expected_dimension:
        raise DimensionMismatch(f"combined width {width} does not match expected dimension {expected_dimension}")

    return np.hstack((structured, independent))


@dataclass(frozen=True)
class DilutedGenerator:
    """Generator interface over a (structured, independent) pair.

    ``id`` and ``name`` are those of the structured half; ``dimension`` is
    the full, concatenated width.
    """

    structured: object
    independent: object

    @classmethod
    def from_factory(
        cls,
        factory: GeneratorFactory,
        dimension: int,
        noise: float,
        distribution: str = "gaussian",
        seed: int = 0,
        baseline: GeneratorFactory = INDEPENDENT,
    ) -> "DilutedGenerator":
        """Build the diluted process for a full *dimension* (even)."""
        half = dimension // 2
        if half * 2 != dimension:
            raise DimensionMismatch(f"diluted dimension must be even, got {dimension}")
        return cls(
            structured=factory.build(half, noise, distribution, seed),
            independent=baseline.build(half, 0.0, distribution, seed),
        )

    @property
    def id(self) -> str:
        return self.structured.id

    @property
    def name(self) -> str:
        return self.structured.name

    @property
    def dimension(self) -> int:
        return self.structured.dimension + self.independent.dimension

    def generate(self, observation_count: int, rng: Optional[np.random.Generator] = None) -> np.ndarray:
        if rng is None:
            rng = np.random.default_rng(self.structured.seed)
        return dilute(self.structured, self.independent, observation_count, rng, self.dimension)
