"""Factory utilities for registering and instantiating sampling strategies."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Mapping

from ..errors import InvalidConfigurationError
from .base import DEFAULT_POPULATION_SIZE, SamplingStrategy
from .sampling import HeuristicCorrectedStrategy, ShuffleStrategy, UniformStrategy

StrategyFactory = Callable[..., SamplingStrategy]


def _default_registry() -> Dict[str, StrategyFactory]:
    return {
        factory.name: factory
        for factory in (
            UniformStrategy,
            ShuffleStrategy,
            HeuristicCorrectedStrategy,
        )
    }


DEFAULT_STRATEGIES: Mapping[str, StrategyFactory] = _default_registry()


def build_strategies(
    names: Iterable[str] | None = None,
    *,
    population_size: int = DEFAULT_POPULATION_SIZE,
    seed: int | None = None,
    registry: Mapping[str, StrategyFactory] | None = None,
) -> List[SamplingStrategy]:
    """Construct fresh strategy instances, each with its own random source.

    When ``seed`` is given the strategy at position ``i`` is seeded with
    ``seed + i`` so results stay reproducible per strategy without two
    strategies sharing a generator state.
    """

    factories = dict(registry or DEFAULT_STRATEGIES)
    selected = list(names) if names is not None else list(factories)
    strategies: List[SamplingStrategy] = []
    for index, name in enumerate(selected):
        factory = factories.get(name)
        if factory is None:
            raise InvalidConfigurationError(f"Unknown strategy '{name}' in configuration.")
        strategy_seed = None if seed is None else seed + index
        strategies.append(factory(population_size=population_size, seed=strategy_seed))
    if not strategies:
        raise InvalidConfigurationError("At least one strategy must be enabled in configuration.")
    return strategies


__all__ = ["DEFAULT_STRATEGIES", "StrategyFactory", "build_strategies"]
