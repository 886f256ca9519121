"""Performance helpers for benchmarking and profiling strategy evaluations."""

from __future__ import annotations

import cProfile
import io
import pstats
import statistics
import timeit
from contextlib import contextmanager
from typing import Callable, Iterator, Mapping

from .analysis import Evaluator
from .app import SampleCheckApp
from .errors import InvalidConfigurationError
from .strategies.base import SamplingStrategy


def benchmark_strategy(
    strategy: SamplingStrategy, *, samples: int = 1000, repeat: int = 5
) -> Mapping[str, float]:
    """Time ``samples`` consecutive draws from ``strategy``."""

    if samples < 1 or repeat < 1:
        raise InvalidConfigurationError("samples and repeat must be at least 1.")

    def _draw_batch() -> None:
        for _ in range(samples):
            strategy.sample(1)

    runs = timeit.Timer(_draw_batch).repeat(repeat=repeat, number=1)
    return _summarise(runs)


def benchmark_evaluation(
    strategy: SamplingStrategy,
    evaluator: Evaluator | None = None,
    *,
    iterations: int = 3,
    repeat: int = 3,
) -> Mapping[str, float]:
    """Time complete :meth:`Evaluator.evaluate` calls for ``strategy``."""

    target = evaluator or Evaluator(population_size=strategy.population_size)
    runs = timeit.Timer(lambda: target.evaluate(strategy, iterations)).repeat(
        repeat=repeat, number=1
    )
    return _summarise(runs)


@contextmanager
def capture_profile(
    app: SampleCheckApp | None = None,
) -> Iterator[tuple[SampleCheckApp, Callable[[int], str]]]:
    """Context manager capturing profiling data for manual inspection.

    The yielded tuple contains the :class:`SampleCheckApp` instance to use for
    the profiled operations and a callable that returns a formatted profile
    summary when invoked.
    """

    profiler = cProfile.Profile()
    target_app = app or SampleCheckApp()
    profiler.enable()

    def exporter(limit: int = 25) -> str:
        profiler.disable()
        stream = io.StringIO()
        stats = pstats.Stats(profiler, stream=stream)
        stats.strip_dirs().sort_stats("cumulative").print_stats(limit)
        return stream.getvalue()

    try:
        yield target_app, exporter
    finally:
        profiler.disable()


def _summarise(runs: list[float]) -> Mapping[str, float]:
    return {
        "min": min(runs),
        "max": max(runs),
        "mean": statistics.fmean(runs),
    }


__all__ = ["benchmark_evaluation", "benchmark_strategy", "capture_profile"]
