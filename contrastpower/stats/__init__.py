"""Reference collaborators: data generators and a contrast measure."""

from .generators import CATALOG, DISTRIBUTIONS, INDEPENDENT, GeneratorFactory, GeneratorSpec, default_catalog, get_generator
from .measures import rank_correlation_contrast, resolve_measure

__all__ = [
    "CATALOG",
    "DISTRIBUTIONS",
    "INDEPENDENT",
    "GeneratorFactory",
    "GeneratorSpec",
    "default_catalog",
    "get_generator",
    "rank_correlation_contrast",
    "resolve_measure",
]
