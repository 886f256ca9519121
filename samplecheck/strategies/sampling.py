"""Concrete implementations of sampling strategies."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Callable, Sequence

from ..errors import InvalidConfigurationError
from .base import DEFAULT_POPULATION_SIZE, _BaseStrategy
from .utils import clock_entropy, rotate_left32, to_int32


class UniformStrategy(_BaseStrategy):
    """Single uniform draw from the underlying generator."""

    name = "uniform"
    description = (
        "Draws one integer uniformly from the whole population using the "
        "standard pseudo-random generator. Fast, but inherits any bias of the "
        "generator."
    )

    @property
    def quality_score(self) -> int:
        return 6

    def _draw(self) -> int:
        return self._random.randrange(self.population_size) + 1


class ShuffleStrategy(_BaseStrategy):
    """Fisher-Yates shuffle of the full population, returning the first element."""

    name = "shuffle"
    description = (
        "Shuffles a fresh list of all groups with the Fisher-Yates algorithm and "
        "returns the first element. Every permutation is equally likely."
    )

    @property
    def time_complexity(self) -> str:
        return "O(n)"

    @property
    def quality_score(self) -> int:
        return 10

    def _draw(self) -> int:
        groups = list(range(1, self.population_size + 1))
        for i in range(len(groups) - 1, 0, -1):
            j = self._random.randrange(i + 1)
            groups[i], groups[j] = groups[j], groups[i]
        return groups[0]

    def calculate_bias_score(self, samples: int) -> float:
        """Return the chi-square statistic of ``samples`` consecutive draws.

        Values near the degrees of freedom (``population_size - 1``) indicate an
        unbiased shuffle.
        """

        from ..analysis import FrequencyTable, chi_square_statistic

        if samples < 1:
            raise InvalidConfigurationError("Sample count must be at least 1.")
        draws = [self.sample(1) for _ in range(samples)]
        return chi_square_statistic(FrequencyTable.from_samples(draws, self.population_size))


@dataclass(frozen=True)
class CorrectionEffect:
    """Dispersion of corrected draws next to plain uniform draws."""

    base_variance: float
    corrected_variance: float

    @property
    def improved(self) -> bool:
        return self.corrected_variance < self.base_variance


class HeuristicCorrectedStrategy(_BaseStrategy):
    """Experimental bit-mixing applied on top of a plain random integer.

    The transformation has no mathematical justification; it exists so the
    evaluator can show that ad hoc mixing is not a substitute for an unbiased
    algorithm. The constants below are part of the experiment and must stay as
    they are.

    The final mixing step folds in a clock reading, so two instances seeded
    identically still diverge. Pass ``entropy_source`` to pin that reading.
    """

    name = "heuristic"
    description = (
        "Mixes a raw random integer with an XOR mask, a prime modulus, a linear "
        "congruence, a bit rotation and a clock reading. Bias characteristics "
        "are unverified."
    )

    XOR_MASK = 0x5A5A5A5A
    PRIME_MODULUS = 97
    LCG_MULTIPLIER = 31
    LCG_INCREMENT = 17
    LCG_MODULUS = 101
    ROTATION_BITS = 3

    def __init__(
        self,
        population_size: int = DEFAULT_POPULATION_SIZE,
        seed: int | None = None,
        *,
        entropy_source: Callable[[], int] | None = None,
    ) -> None:
        super().__init__(population_size, seed)
        self._entropy_source = entropy_source or clock_entropy

    @property
    def quality_score(self) -> int:
        return 4

    def _draw(self) -> int:
        raw = to_int32(self._random.getrandbits(32))
        mixed = raw ^ self.XOR_MASK
        reduced = abs(mixed) % self.PRIME_MODULUS
        corrected = self._second_pass(reduced)
        return corrected % self.population_size + 1

    def _second_pass(self, value: int) -> int:
        congruent = (self.LCG_MULTIPLIER * value + self.LCG_INCREMENT) % self.LCG_MODULUS
        rotated = rotate_left32(congruent, self.ROTATION_BITS)
        entropy = to_int32(self._entropy_source())
        return abs(rotated ^ entropy)

    def measure_correction_effect(self, samples: int) -> CorrectionEffect:
        """Compare the spread of corrected draws with plain uniform draws.

        The baseline generator is seeded from this strategy's own source, so no
        other generator is touched.
        """

        if samples < 1:
            raise InvalidConfigurationError("Sample count must be at least 1.")
        size = self.population_size
        corrected = [0] * size
        baseline = [0] * size
        baseline_random = random.Random(self._random.getrandbits(64))
        for _ in range(samples):
            corrected[self.sample(1) - 1] += 1
            baseline[baseline_random.randrange(size)] += 1
        return CorrectionEffect(
            base_variance=_variance_around_expected(baseline, samples),
            corrected_variance=_variance_around_expected(corrected, samples),
        )


def _variance_around_expected(counts: Sequence[int], total: int) -> float:
    expected = total / len(counts)
    return math.fsum((count - expected) ** 2 for count in counts) / len(counts)


__all__ = [
    "CorrectionEffect",
    "HeuristicCorrectedStrategy",
    "ShuffleStrategy",
    "UniformStrategy",
]
