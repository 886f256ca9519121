from __future__ import annotations

import pytest

from samplecheck.analysis import Evaluator
from samplecheck.errors import InvalidConfigurationError
from samplecheck.perf import benchmark_evaluation, benchmark_strategy, capture_profile
from samplecheck.strategies import ShuffleStrategy, UniformStrategy


def test_benchmark_strategy_returns_statistics() -> None:
    stats = benchmark_strategy(UniformStrategy(seed=1), samples=200, repeat=2)

    assert set(stats) == {"min", "max", "mean"}
    assert stats["max"] >= stats["min"]


def test_benchmark_strategy_rejects_empty_batches() -> None:
    with pytest.raises(InvalidConfigurationError):
        benchmark_strategy(UniformStrategy(), samples=0)


def test_benchmark_evaluation_returns_statistics() -> None:
    evaluator = Evaluator(population_size=33, samples_per_iteration=50)

    stats = benchmark_evaluation(ShuffleStrategy(seed=2), evaluator, iterations=3, repeat=2)

    assert set(stats) == {"min", "max", "mean"}
    assert stats["mean"] >= 0.0


def test_capture_profile_returns_profile_output() -> None:
    with capture_profile() as (app, exporter):
        benchmark_strategy(UniformStrategy(seed=3), samples=50, repeat=1)

    profile_output = exporter()

    assert app is not None
    assert "function calls" in profile_output
