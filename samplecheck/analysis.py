"""Statistics engine measuring how evenly a sampling strategy covers the population.

:class:`Evaluator` drives repeated trials against a
:class:`~samplecheck.strategies.base.SamplingStrategy` and condenses the
observed frequency tables into an :class:`AnalysisResult`.

Three figures describe a strategy:

``average_uniformity``
    Mean of the per-trial dispersion values. Each dispersion is the population
    standard deviation of group counts around the uniform expectation
    ``samples / N``. Lower means groups are selected more evenly.

``result_stability``
    Population standard deviation of the per-trial dispersions themselves. It
    measures how consistent the strategy's bias is across batches, not how
    large the bias is.

``chi_square``
    Goodness-of-fit statistic over an additional, independent batch of
    ``2 * samples_per_iteration`` draws. The batch passes when the statistic does
    not exceed the critical value at ``N - 1`` degrees of freedom.

Progress narration is delegated to an optional :class:`EvaluationObserver`; the
engine itself never writes output.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Iterable, Mapping, Protocol, Tuple

import numpy as np
from scipy.stats import chi2

from .errors import InvalidArgumentError, InvalidConfigurationError
from .strategies.base import DEFAULT_POPULATION_SIZE, SamplingStrategy

DEFAULT_ITERATIONS: int = 5
"""Number of trials per strategy when the caller does not choose one."""

DEFAULT_SAMPLES_PER_ITERATION: int = 1000
"""Number of draws per trial."""

DEFAULT_SIGNIFICANCE_LEVEL: float = 0.05
"""Default :math:`\\alpha` for the chi-square uniformity test."""

CHI_SQUARE_BATCH_FACTOR: int = 2
"""The chi-square batch is this many times larger than a trial."""

REFERENCE_CRITICAL_VALUES: Mapping[Tuple[int, float], float] = {
    (32, 0.05): 50.892,
}
"""Published critical values keyed by ``(degrees_of_freedom, alpha)``.

The reference 33 group comparison was reported against 50.892; keeping it makes
results comparable with those reports. Other combinations use the exact
chi-square quantile.
"""


@dataclass(frozen=True)
class FrequencyTable:
    """Occurrence count per group for one batch of samples."""

    counts: Tuple[int, ...]

    @classmethod
    def from_samples(cls, samples: Iterable[int], population_size: int) -> "FrequencyTable":
        """Count ``samples`` over the groups ``1..population_size``."""

        values = np.fromiter(samples, dtype=np.int64)
        if values.size and (values.min() < 1 or values.max() > population_size):
            offending = int(values.min() if values.min() < 1 else values.max())
            raise InvalidArgumentError(
                f"Sample {offending} is outside the population range 1..{population_size}."
            )
        counts = np.bincount(values - 1, minlength=population_size)
        return cls(counts=tuple(int(count) for count in counts))

    @property
    def population_size(self) -> int:
        return len(self.counts)

    @property
    def total(self) -> int:
        return sum(self.counts)

    @property
    def expected(self) -> float:
        """Uniform expectation per group."""

        return self.total / self.population_size

    def count(self, group: int) -> int:
        if not 1 <= group <= self.population_size:
            raise InvalidArgumentError(
                f"Group must be between 1 and {self.population_size}, got {group}."
            )
        return self.counts[group - 1]


@dataclass(frozen=True)
class AnalysisResult:
    """Aggregate outcome of evaluating one strategy."""

    name: str
    dispersions: Tuple[float, ...]
    average_uniformity: float
    result_stability: float
    chi_square: float
    critical_value: float
    p_value: float
    passes_uniformity_test: bool
    duration: timedelta
    iterations: int
    samples_per_iteration: int
    population_size: int
    cryptographically_secure: bool = False
    time_complexity: str = "O(1)"

    @property
    def combined_score(self) -> float:
        """Ranking key; lower is better."""

        return self.average_uniformity + self.result_stability

    @property
    def uniformity_grade(self) -> str:
        score = self.combined_score
        if score <= 2.0:
            return "excellent"
        if score <= 3.0:
            return "good"
        if score <= 4.0:
            return "fair"
        return "needs improvement"


class EvaluationObserver(Protocol):
    """Callbacks invoked while an evaluation runs."""

    def on_evaluation_started(self, name: str, iterations: int) -> None:
        ...

    def on_trial_completed(
        self, name: str, index: int, iterations: int, dispersion: float
    ) -> None:
        ...

    def on_evaluation_finished(self, result: AnalysisResult) -> None:
        ...


def trial_dispersion(table: FrequencyTable) -> float:
    """Population standard deviation of counts around the uniform expectation."""

    _require_samples(table)
    counts = np.asarray(table.counts, dtype=float)
    deviations = counts - table.expected
    return float(np.sqrt(np.mean(deviations * deviations)))


def chi_square_statistic(table: FrequencyTable) -> float:
    """Return :math:`\\sum (o - e)^2 / e` over all groups."""

    _require_samples(table)
    counts = np.asarray(table.counts, dtype=float)
    expected = table.expected
    return float(np.sum((counts - expected) ** 2) / expected)


def chi_square_critical_value(
    degrees_of_freedom: int, alpha: float = DEFAULT_SIGNIFICANCE_LEVEL
) -> float:
    """Return the upper ``alpha`` critical value of the chi-square distribution."""

    if degrees_of_freedom < 1:
        raise InvalidConfigurationError("Degrees of freedom must be at least 1.")
    if not 0.0 < alpha < 1.0:
        raise InvalidConfigurationError("Significance level must be between 0 and 1.")
    reference = REFERENCE_CRITICAL_VALUES.get((degrees_of_freedom, alpha))
    if reference is not None:
        return reference
    return float(chi2.ppf(1.0 - alpha, degrees_of_freedom))


def chi_square_p_value(statistic: float, degrees_of_freedom: int) -> float:
    """Return the survival function of the chi-square distribution."""

    return float(chi2.sf(statistic, degrees_of_freedom))


def mean_and_spread(values: Iterable[float]) -> Tuple[float, float]:
    """Return the mean and population standard deviation of ``values``."""

    array = np.asarray(tuple(values), dtype=float)
    if array.size == 0:
        raise InvalidConfigurationError("At least one value is required.")
    return float(array.mean()), float(array.std(ddof=0))


def _require_samples(table: FrequencyTable) -> None:
    if table.total < 1:
        raise InvalidConfigurationError("Frequency table contains no samples.")


class Evaluator:
    """Run repeated trials against a strategy and derive uniformity statistics."""

    def __init__(
        self,
        population_size: int = DEFAULT_POPULATION_SIZE,
        samples_per_iteration: int = DEFAULT_SAMPLES_PER_ITERATION,
        *,
        alpha: float = DEFAULT_SIGNIFICANCE_LEVEL,
        critical_value: float | None = None,
        observer: EvaluationObserver | None = None,
    ) -> None:
        if population_size < 2:
            raise InvalidConfigurationError(
                f"Population size must be at least 2, got {population_size}."
            )
        _check_sample_count(samples_per_iteration)
        if critical_value is not None and critical_value <= 0:
            raise InvalidConfigurationError("Critical value must be greater than zero.")
        self.population_size = population_size
        self.samples_per_iteration = samples_per_iteration
        self.alpha = alpha
        self.critical_value = (
            critical_value
            if critical_value is not None
            else chi_square_critical_value(population_size - 1, alpha)
        )
        self.observer = observer

    def evaluate(
        self,
        strategy: SamplingStrategy,
        iterations: int = DEFAULT_ITERATIONS,
        samples_per_iteration: int | None = None,
    ) -> AnalysisResult:
        """Evaluate ``strategy`` over ``iterations`` independent trials.

        Errors raised by ``strategy.sample`` propagate unchanged; a single
        unlikely draw is indistinguishable from noise, so nothing is retried.
        """

        samples = self.samples_per_iteration if samples_per_iteration is None else samples_per_iteration
        if iterations < 1:
            raise InvalidConfigurationError(f"Iterations must be at least 1, got {iterations}.")
        _check_sample_count(samples)
        self._check_population(strategy)

        name = strategy.name
        started = time.perf_counter()
        if self.observer is not None:
            self.observer.on_evaluation_started(name, iterations)

        dispersions: list[float] = []
        for index in range(iterations):
            table = self.run_trial(strategy, samples)
            dispersion = trial_dispersion(table)
            dispersions.append(dispersion)
            if self.observer is not None:
                self.observer.on_trial_completed(name, index + 1, iterations, dispersion)

        average_uniformity, result_stability = mean_and_spread(dispersions)
        chi_table = self.run_trial(strategy, samples * CHI_SQUARE_BATCH_FACTOR)
        statistic = chi_square_statistic(chi_table)
        elapsed = time.perf_counter() - started

        result = AnalysisResult(
            name=name,
            dispersions=tuple(dispersions),
            average_uniformity=average_uniformity,
            result_stability=result_stability,
            chi_square=statistic,
            critical_value=self.critical_value,
            p_value=chi_square_p_value(statistic, self.population_size - 1),
            passes_uniformity_test=statistic <= self.critical_value,
            duration=timedelta(seconds=elapsed),
            iterations=iterations,
            samples_per_iteration=samples,
            population_size=self.population_size,
            cryptographically_secure=bool(getattr(strategy, "cryptographically_secure", False)),
            time_complexity=str(getattr(strategy, "time_complexity", "O(1)")),
        )
        if self.observer is not None:
            self.observer.on_evaluation_finished(result)
        return result

    def run_trial(self, strategy: SamplingStrategy, samples: int) -> FrequencyTable:
        """Draw ``samples`` values from ``strategy`` into a fresh table."""

        draws = (strategy.sample(1) for _ in range(samples))
        return FrequencyTable.from_samples(draws, self.population_size)

    def _check_population(self, strategy: SamplingStrategy) -> None:
        strategy_size = getattr(strategy, "population_size", None)
        if strategy_size is not None and strategy_size != self.population_size:
            raise InvalidConfigurationError(
                f"Strategy '{strategy.name}' samples {strategy_size} groups but the "
                f"evaluator expects {self.population_size}."
            )


def _check_sample_count(samples: int) -> None:
    if samples < 1:
        raise InvalidConfigurationError(f"Samples per iteration must be at least 1, got {samples}.")


__all__ = [
    "AnalysisResult",
    "CHI_SQUARE_BATCH_FACTOR",
    "DEFAULT_ITERATIONS",
    "DEFAULT_SAMPLES_PER_ITERATION",
    "DEFAULT_SIGNIFICANCE_LEVEL",
    "EvaluationObserver",
    "Evaluator",
    "FrequencyTable",
    "REFERENCE_CRITICAL_VALUES",
    "chi_square_critical_value",
    "chi_square_p_value",
    "chi_square_statistic",
    "mean_and_spread",
    "trial_dispersion",
]
