"""Rank sampling strategies by their combined uniformity score."""

from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import List, Mapping, Sequence, Tuple

from .analysis import DEFAULT_ITERATIONS, AnalysisResult, Evaluator
from .errors import InvalidConfigurationError
from .strategies.base import SamplingStrategy


@dataclass(frozen=True)
class ScoreDelta:
    """Difference between a result and a reference (usually the winner)."""

    name: str
    reference: str
    absolute: float
    percentage: float


@dataclass(frozen=True)
class ComparisonResult:
    """All analysis results of one comparison run plus their ranking."""

    started_at: datetime
    iterations: int
    samples_per_iteration: int
    population_size: int
    results: Tuple[AnalysisResult, ...]
    ranked: Tuple[AnalysisResult, ...] = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "results", tuple(self.results))
        object.__setattr__(self, "ranked", tuple(rank_results(self.results)))

    @property
    def winner(self) -> AnalysisResult | None:
        return winning_strategy(self)

    @property
    def by_name(self) -> Mapping[str, AnalysisResult]:
        """Read-only mapping from strategy name to its result."""

        return MappingProxyType({result.name: result for result in self.results})

    def find(self, name: str) -> AnalysisResult | None:
        for result in self.results:
            if result.name == name:
                return result
        return None

    def top(self, count: int) -> Tuple[AnalysisResult, ...]:
        return self.ranked[: max(count, 0)]

    def summary(self) -> str:
        winner = self.winner
        if winner is None:
            return "No analysis results."
        stamp = self.started_at.astimezone(timezone.utc).strftime("%m-%d %H:%M")
        return (
            f"Analysis complete ({stamp}) | winner: {winner.name} | "
            f"{len(self.results)} strategies compared"
        )


def rank_results(results: Sequence[AnalysisResult]) -> List[AnalysisResult]:
    """Return ``results`` sorted by ascending combined score.

    The sort is stable, so equal scores keep their input order.
    """

    return sorted(results, key=lambda result: result.combined_score)


def winning_strategy(result: ComparisonResult) -> AnalysisResult | None:
    """Return the best ranked result, or ``None`` for an empty comparison."""

    return result.ranked[0] if result.ranked else None


def absolute_difference(result: AnalysisResult, reference: AnalysisResult) -> float:
    """Combined score of ``result`` minus that of ``reference``."""

    return result.combined_score - reference.combined_score


def percentage_difference(result: AnalysisResult, reference: AnalysisResult) -> float:
    """Relative score difference of ``result`` against ``reference`` in percent."""

    delta = absolute_difference(result, reference)
    baseline = reference.combined_score
    if baseline == 0:
        return 0.0 if delta == 0 else math.copysign(math.inf, delta)
    return delta / baseline * 100.0


def deltas_from_winner(result: ComparisonResult) -> Mapping[str, ScoreDelta]:
    """Compute score differences of every result against the winner."""

    winner = winning_strategy(result)
    if winner is None:
        return MappingProxyType({})
    return MappingProxyType(
        {
            entry.name: ScoreDelta(
                name=entry.name,
                reference=winner.name,
                absolute=absolute_difference(entry, winner),
                percentage=percentage_difference(entry, winner),
            )
            for entry in result.ranked
        }
    )


class Comparator:
    """Evaluate several strategies with one :class:`Evaluator` and rank them."""

    def __init__(self, evaluator: Evaluator | None = None, *, max_workers: int | None = None) -> None:
        if max_workers is not None and max_workers < 1:
            raise InvalidConfigurationError("max_workers must be at least 1.")
        self.evaluator = evaluator or Evaluator()
        self.max_workers = max_workers

    def compare_all(
        self,
        strategies: Sequence[SamplingStrategy],
        iterations: int = DEFAULT_ITERATIONS,
    ) -> ComparisonResult:
        """Evaluate every strategy independently and rank the outcomes.

        Strategies never share a random source, so running them on separate
        workers does not change any result.
        """

        if len({id(strategy) for strategy in strategies}) != len(strategies):
            raise InvalidConfigurationError(
                "Each strategy instance may only be evaluated once per comparison."
            )
        started_at = datetime.now(timezone.utc)
        if self.max_workers is not None and self.max_workers > 1 and len(strategies) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = [
                    executor.submit(self.evaluator.evaluate, strategy, iterations)
                    for strategy in strategies
                ]
                results = [future.result() for future in futures]
        else:
            results = [self.evaluator.evaluate(strategy, iterations) for strategy in strategies]

        return ComparisonResult(
            started_at=started_at,
            iterations=iterations,
            samples_per_iteration=self.evaluator.samples_per_iteration,
            population_size=self.evaluator.population_size,
            results=tuple(results),
        )


__all__ = [
    "Comparator",
    "ComparisonResult",
    "ScoreDelta",
    "absolute_difference",
    "deltas_from_winner",
    "percentage_difference",
    "rank_results",
    "winning_strategy",
]
