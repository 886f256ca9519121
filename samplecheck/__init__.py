"""Sampling strategy checker package."""

from .analysis import AnalysisResult, Evaluator, FrequencyTable
from .app import RunResult, SampleCheckApp
from .comparison import Comparator, ComparisonResult, winning_strategy
from .strategies import (
    HeuristicCorrectedStrategy,
    SamplingStrategy,
    ShuffleStrategy,
    UniformStrategy,
)

__all__ = [
    "AnalysisResult",
    "Comparator",
    "ComparisonResult",
    "Evaluator",
    "FrequencyTable",
    "HeuristicCorrectedStrategy",
    "RunResult",
    "SampleCheckApp",
    "SamplingStrategy",
    "ShuffleStrategy",
    "UniformStrategy",
    "winning_strategy",
]
