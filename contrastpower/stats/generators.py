"""
Reference data generators for ContrastPower.

Each catalog entry is a ``GeneratorFactory``: a name, a signal function
and its default parameters. ``factory.build(dimension, noise, distribution,
seed)`` returns an immutable ``GeneratorSpec`` whose ``generate`` method
draws an ``(observation_count, dimension)`` matrix.

Structured signals live in the unit hypercube. Noise is mixed in
proportionally: ``(1 - noise) * signal + noise * independent``, so a noise
level of 1 turns every process into the independence baseline.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np

from ..errors import GenerationFailure

DISTRIBUTIONS = ("gaussian", "uniform")
GAUSSIAN_LOC = 0.5
GAUSSIAN_SCALE = 1.0 / 6.0

SignalFunc = Callable[..., np.ndarray]


def _draw_independent(rng: np.random.Generator, n: int, dimension: int, distribution: str) -> np.ndarray:
    """Draw an independent ``(n, dimension)`` sample from the given family."""
    if distribution == "gaussian":
        return rng.normal(GAUSSIAN_LOC, GAUSSIAN_SCALE, size=(n, dimension))
    return rng.uniform(0.0, 1.0, size=(n, dimension))


def _latent(rng, n):
    return rng.uniform(0.0, 1.0, size=(n, 1))


def _linear(rng, n, dimension):
    """All columns equal to one latent uniform variable."""
    return np.repeat(_latent(rng, n), dimension, axis=1)


def _double_linear(rng, n, dimension, gap=0.25):
    """Two parallel lines: every row falls on one of them at random."""
    t = _latent(rng, n)
    data = np.repeat(t, dimension, axis=1)
    shift = rng.integers(0, 2, size=(n, 1)) * gap
    data[:, 1:] = data[:, 1:] * (1.0 - gap) + shift
    return data


def _linear_periodic(rng, n, dimension, period=2):
    t = _latent(rng, n)
    data = np.repeat(np.mod(t * period, 1.0), dimension, axis=1)
    data[:, 0] = t[:, 0]
    return data


def _sine(rng, n, dimension, period=1):
    t = _latent(rng, n)
    data = np.repeat((np.sin(2.0 * np.pi * period * t) + 1.0) / 2.0, dimension, axis=1)
    data[:, 0] = t[:, 0]
    return data


def _hypercube(rng, n, dimension):
    """Points near the even-parity vertices of the unit hypercube.

    Every proper subset of columns looks independent; only the full set
    carries the parity dependency.
    """
    bits = rng.integers(0, 2, size=(n, dimension))
    if dimension > 1:
        bits[:, -1] = bits[:, :-1].sum(axis=1) % 2
    return bits * 0.8 + rng.uniform(0.0, 0.2, size=(n, dimension))


def _hypersphere(rng, n, dimension):
    g = rng.standard_normal(size=(n, dimension))
    norms = np.linalg.norm(g, axis=1, keepdims=True)
    norms[norms == 0.0] = 1.0
    return (g / norms + 1.0) / 2.0


def _cross(rng, n, dimension):
    """Two crossing diagonals."""
    t = _latent(rng, n)
    flip = rng.integers(0, 2, size=(n, 1)).astype(bool)
    data = np.repeat(np.where(flip, 1.0 - t, t), dimension, axis=1)
    data[:, 0] = t[:, 0]
    return data


def _hypercube_graph(rng, n, dimension):
    """Points on the edges of the unit hypercube.

    A random vertex with one random coordinate released to slide along its
    edge.
    """
    data = rng.integers(0, 2, size=(n, dimension)).astype(float)
    axis = rng.integers(0, dimension, size=n)
    data[np.arange(n), axis] = rng.uniform(0.0, 1.0, size=n)
    return data


def _star(rng, n, dimension):
    """Rays from the cube centre to randomly chosen vertices."""
    vertices = rng.integers(0, 2, size=(n, dimension))
    t = _latent(rng, n)
    return 0.5 + t * (vertices - 0.5)


def _hourglass(rng, n, dimension):
    """The two diagonals of the cross closed by the bottom and top edges."""
    t = _latent(rng, n)
    flip = rng.integers(0, 2, size=(n, 1)).astype(bool)
    diagonal = np.where(flip, 1.0 - t, t)
    edge = rng.integers(0, 2, size=(n, 1)).astype(float)
    on_edge = rng.integers(0, 2, size=(n, 1)).astype(bool)
    data = np.repeat(np.where(on_edge, edge, diagonal), dimension, axis=1)
    data[:, 0] = t[:, 0]
    return data


def _zinv(rng, n, dimension):
    """An inverted Z: bottom edge, top edge and the rising diagonal."""
    t = _latent(rng, n)
    segment = rng.integers(0, 3, size=(n, 1))
    data = np.repeat(np.select([segment == 0, segment == 1], [0.0, 1.0], default=t), dimension, axis=1)
    data[:, 0] = t[:, 0]
    return data


@dataclass(frozen=True)
class GeneratorSpec:
    """An immutable, fully parameterised data-generating process.

    Attributes:
        name: Catalog name of the process (human readable).
        signal: Signal function, or ``None`` for the independence baseline.
        dimension: Number of columns produced.
        noise: Noise level in ``[0, 1]``.
        distribution: Noise distribution family (``"gaussian"`` or
            ``"uniform"``).
        seed: Seed used when ``generate`` is called without a stream.
        params: Signal parameters as ``(name, value)`` pairs.
        defaults: Catalog defaults of those parameters; parameters that
            differ from them are part of ``id``.
    """

    name: str
    signal: Optional[SignalFunc]
    dimension: int
    noise: float
    distribution: str
    seed: int = 0
    params: Tuple[Tuple[str, Any], ...] = ()
    defaults: Tuple[Tuple[str, Any], ...] = ()

    @property
    def id(self) -> str:
        """Stable identity written to summary records.

        ``<name>-<dimension>-<noise>-<distribution>``, followed by
        ``-<param>=<value>`` for every non-default parameter.
        """
        base = f"{self.name}-{self.dimension}-{self.noise}-{self.distribution}"
        defaults = dict(self.defaults)
        custom = [f"{key}={value}" for key, value in self.params if key not in defaults or defaults[key] != value]
        return "-".join([base] + custom)

    def generate(self, observation_count: int, rng: Optional[np.random.Generator] = None) -> np.ndarray:
        """Draw a fresh ``(observation_count, dimension)`` matrix.

        Args:
            observation_count: Number of rows.
            rng: Random stream to draw from. Defaults to a stream seeded
                with ``self.seed`` (so repeated calls without a stream
                return the same matrix).

        Raises:
            GenerationFailure: If the observation count is invalid or the
                signal function fails.
        """
        if not isinstance(observation_count, (int, np.integer)) or observation_count < 1:
            raise GenerationFailure(f"{self.id}: observation_count must be a positive integer, got {observation_count!r}")
        if rng is None:
            rng = np.random.default_rng(self.seed)

        n = int(observation_count)
        if self.signal is None:
            return _draw_independent(rng, n, self.dimension, self.distribution)

        try:
            data = self.signal(rng, n, self.dimension, **dict(self.params))
        except Exception as exc:
            raise GenerationFailure(f"{self.id}: {exc}") from exc

        if data.shape != (n, self.dimension):
            raise GenerationFailure(f"{self.id}: signal produced shape {data.shape}, expected {(n, self.dimension)}")
        if self.noise == 0:
            return data
        return (1.0 - self.noise) * data + self.noise * _draw_independent(rng, n, self.dimension, self.distribution)


@dataclass(frozen=True)
class GeneratorFactory:
    """Catalog entry: builds ``GeneratorSpec`` instances on demand.

    Attributes:
        name: Unique catalog name (also the prefix of generator ids).
        signal: Signal function ``signal(rng, n, dimension, **params)``,
            or ``None`` for the independence baseline.
        defaults: Default signal parameters.
    """

    name: str
    signal: Optional[SignalFunc] = None
    defaults: Dict[str, Any] = field(default_factory=dict)

    def build(self, dimension: int, noise: float = 0.0, distribution: str = "gaussian", seed: int = 0, **overrides) -> GeneratorSpec:
        """Instantiate the process for a grid cell.

        Raises:
            GenerationFailure: If the dimension, noise level or
                distribution family is invalid.
        """
        if not isinstance(dimension, (int, np.integer)) or isinstance(dimension, bool) or dimension < 1:
            raise GenerationFailure(f"{self.name}: dimension must be a positive integer, got {dimension!r}")
        if not 0.0 <= noise <= 1.0:
            raise GenerationFailure(f"{self.name}: noise must be within [0, 1], got {noise!r}")
        if distribution not in DISTRIBUTIONS:
            raise GenerationFailure(f"{self.name}: unknown distribution {distribution!r}. Choose from: {', '.join(DISTRIBUTIONS)}")

        params = dict(self.defaults)
        params.update(overrides)
        return GeneratorSpec(
            name=self.name,
            signal=self.signal,
            dimension=int(dimension),
            noise=float(noise),
            distribution=distribution,
            seed=int(seed),
            params=tuple(sorted(params.items())),
            defaults=tuple(sorted(self.defaults.items())),
        )

    __call__ = build


INDEPENDENT = GeneratorFactory("Independent")

CATALOG: Tuple[GeneratorFactory, ...] = (
    GeneratorFactory("Linear", _linear),
    GeneratorFactory("DoubleLinear_0.25", _double_linear, {"gap": 0.25}),
    GeneratorFactory("LinearPeriodic_2", _linear_periodic, {"period": 2}),
    GeneratorFactory("Sine_1", _sine, {"period": 1}),
    GeneratorFactory("Sine_5", _sine, {"period": 5}),
    GeneratorFactory("Hypercube", _hypercube),
    GeneratorFactory("HypercubeGraph", _hypercube_graph),
    GeneratorFactory("HyperSphere", _hypersphere),
    GeneratorFactory("Cross", _cross),
    GeneratorFactory("Star", _star),
    GeneratorFactory("Hourglass", _hourglass),
    GeneratorFactory("Zinv", _zinv),
    INDEPENDENT,
)


def default_catalog() -> List[GeneratorFactory]:
    """Return the reference catalog in study order."""
    return list(CATALOG)


def get_generator(name: str) -> GeneratorFactory:
    """Look up a catalog entry by name (case-insensitive).

    Raises:
        GenerationFailure: If no entry has this name.
    """
    for factory in CATALOG:
        if factory.name.lower() == name.strip().lower():
            return factory
    raise GenerationFailure(f"Unknown generator {name!r}. Available: {', '.join(f.name for f in CATALOG)}")


__all__ = [
    "DISTRIBUTIONS",
    "GeneratorSpec",
    "GeneratorFactory",
    "INDEPENDENT",
    "CATALOG",
    "default_catalog",
    "get_generator",
]
