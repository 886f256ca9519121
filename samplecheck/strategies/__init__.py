"""Sampling strategies compared by the evaluator."""

from .base import DEFAULT_POPULATION_SIZE, SamplingStrategy
from .factory import DEFAULT_STRATEGIES, build_strategies
from .sampling import (
    CorrectionEffect,
    HeuristicCorrectedStrategy,
    ShuffleStrategy,
    UniformStrategy,
)

__all__ = [
    "CorrectionEffect",
    "DEFAULT_POPULATION_SIZE",
    "DEFAULT_STRATEGIES",
    "HeuristicCorrectedStrategy",
    "SamplingStrategy",
    "ShuffleStrategy",
    "UniformStrategy",
    "build_strategies",
]
