"""Common interfaces and data structures for sampling strategies."""

from __future__ import annotations

import random
from typing import Protocol

from ..errors import InvalidArgumentError, InvalidConfigurationError

DEFAULT_POPULATION_SIZE = 33
"""Number of groups in the reference population."""


class SamplingStrategy(Protocol):
    """Protocol implemented by all sampling strategies."""

    name: str
    population_size: int

    @property
    def cryptographically_secure(self) -> bool:
        """Return whether the strategy draws from a secure bit source."""

    @property
    def time_complexity(self) -> str:
        """Return the per-sample cost in big-O notation."""

    @property
    def quality_score(self) -> int:
        """Return the fixed fairness rating of the algorithm, from 0 to 10."""

    def sample(self, range_start: int = 1) -> int:
        """Return a group identifier in ``[1, population_size]``."""

    def reseed(self, seed: int | None) -> None:
        """Reset the strategy's random source to ``seed``."""


class _BaseStrategy:
    """Shared behaviour for the built-in strategies.

    Each instance owns its own :class:`random.Random`; reseeding affects only
    this instance and never the module level generator.
    """

    name: str = ""
    description: str = ""

    def __init__(
        self,
        population_size: int = DEFAULT_POPULATION_SIZE,
        seed: int | None = None,
    ) -> None:
        if population_size < 2:
            raise InvalidConfigurationError(
                f"Population size must be at least 2, got {population_size}."
            )
        self.population_size = population_size
        self._random = random.Random(seed)

    @property
    def cryptographically_secure(self) -> bool:
        return False

    @property
    def time_complexity(self) -> str:
        return "O(1)"

    @property
    def quality_score(self) -> int:
        return 0

    def reseed(self, seed: int | None) -> None:
        self._random.seed(seed)

    def sample(self, range_start: int = 1) -> int:
        self._check_range_start(range_start)
        return self._draw()

    def _check_range_start(self, range_start: int) -> None:
        if not 1 <= range_start <= self.population_size:
            raise InvalidArgumentError(
                f"Range start must be between 1 and {self.population_size}, got {range_start}."
            )

    def _draw(self) -> int:  # pragma: no cover - abstract
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(population_size={self.population_size})"


__all__ = ["DEFAULT_POPULATION_SIZE", "SamplingStrategy"]
