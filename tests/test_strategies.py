"""Unit tests for :mod:`samplecheck.strategies`."""

from __future__ import annotations

import random

import pytest

from samplecheck.analysis import FrequencyTable, chi_square_statistic
from samplecheck.errors import InvalidArgumentError, InvalidConfigurationError
from samplecheck.strategies import (
    DEFAULT_STRATEGIES,
    HeuristicCorrectedStrategy,
    ShuffleStrategy,
    UniformStrategy,
    build_strategies,
)
from samplecheck.strategies.utils import rotate_left32, to_int32

STRATEGY_TYPES = (UniformStrategy, ShuffleStrategy, HeuristicCorrectedStrategy)

_size_picker = random.Random(20240601)
RANDOM_POPULATION_SIZES = sorted({2, *(_size_picker.randint(2, 150) for _ in range(5))})


@pytest.mark.parametrize("strategy_type", STRATEGY_TYPES)
@pytest.mark.parametrize("population_size", RANDOM_POPULATION_SIZES)
def test_samples_stay_within_population(strategy_type, population_size: int) -> None:
    strategy = strategy_type(population_size=population_size, seed=population_size)

    draws = [strategy.sample(1) for _ in range(2000)]

    assert min(draws) >= 1
    assert max(draws) <= population_size


@pytest.mark.parametrize("strategy_type", STRATEGY_TYPES)
@pytest.mark.parametrize("range_start", [0, 34, -5])
def test_sample_rejects_range_start_outside_population(strategy_type, range_start: int) -> None:
    strategy = strategy_type(population_size=33)

    with pytest.raises(InvalidArgumentError):
        strategy.sample(range_start)


@pytest.mark.parametrize("strategy_type", STRATEGY_TYPES)
def test_sample_accepts_every_valid_range_start(strategy_type) -> None:
    strategy = strategy_type(population_size=5, seed=3)

    for range_start in range(1, 6):
        assert 1 <= strategy.sample(range_start) <= 5


def test_invalid_argument_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        UniformStrategy(population_size=4).sample(5)


@pytest.mark.parametrize("strategy_type", STRATEGY_TYPES)
@pytest.mark.parametrize("population_size", [0, 1, -3])
def test_degenerate_population_is_rejected(strategy_type, population_size: int) -> None:
    with pytest.raises(InvalidConfigurationError):
        strategy_type(population_size=population_size)


@pytest.mark.parametrize("strategy_type", STRATEGY_TYPES)
def test_no_strategy_claims_cryptographic_security(strategy_type) -> None:
    assert strategy_type().cryptographically_secure is False


@pytest.mark.parametrize(
    ("strategy_type", "expected"),
    [(UniformStrategy, 6), (ShuffleStrategy, 10), (HeuristicCorrectedStrategy, 4)],
)
def test_quality_score_rates_each_algorithm(strategy_type, expected: int) -> None:
    assert strategy_type().quality_score == expected


def test_time_complexity_reflects_per_sample_cost() -> None:
    assert UniformStrategy().time_complexity == "O(1)"
    assert ShuffleStrategy().time_complexity == "O(n)"
    assert HeuristicCorrectedStrategy().time_complexity == "O(1)"


def test_uniform_strategy_is_reproducible_under_fixed_seed() -> None:
    first = UniformStrategy(population_size=33, seed=12345)
    second = UniformStrategy(population_size=33, seed=12345)

    assert [first.sample(1) for _ in range(100)] == [second.sample(1) for _ in range(100)]


def test_uniform_strategy_draws_one_value_per_call() -> None:
    strategy = UniformStrategy(population_size=33, seed=99)
    reference = random.Random(99)

    expected = [reference.randrange(33) + 1 for _ in range(50)]

    assert [strategy.sample(1) for _ in range(50)] == expected


def _reference_shuffle_first(rng: random.Random, population_size: int) -> int:
    groups = list(range(1, population_size + 1))
    for i in range(population_size - 1, 0, -1):
        j = rng.randrange(i + 1)
        groups[i], groups[j] = groups[j], groups[i]
    return groups[0]


def test_shuffle_strategy_matches_reference_fisher_yates() -> None:
    strategy = ShuffleStrategy(population_size=33, seed=2024)
    reference = random.Random(2024)

    expected = [_reference_shuffle_first(reference, 33) for _ in range(100)]

    assert [strategy.sample(1) for _ in range(100)] == expected


def test_shuffle_strategy_pinned_sequence_for_seed_2024() -> None:
    strategy = ShuffleStrategy(population_size=33, seed=2024)

    assert [strategy.sample(1) for _ in range(10)] == [3, 8, 2, 21, 7, 21, 5, 25, 6, 14]


def test_shuffle_strategy_is_reproducible_under_fixed_seed() -> None:
    first = ShuffleStrategy(seed=7)
    second = ShuffleStrategy(seed=7)

    assert [first.sample(1) for _ in range(100)] == [second.sample(1) for _ in range(100)]


def test_reseed_restarts_the_sequence() -> None:
    strategy = ShuffleStrategy(seed=11)
    first_run = [strategy.sample(1) for _ in range(20)]

    strategy.reseed(11)

    assert [strategy.sample(1) for _ in range(20)] == first_run


def test_strategies_do_not_share_random_state() -> None:
    idle = UniformStrategy(seed=5)
    busy = UniformStrategy(seed=5)

    for _ in range(100):
        busy.sample(1)

    assert idle.sample(1) == UniformStrategy(seed=5).sample(1)


def test_strategies_leave_the_module_generator_untouched() -> None:
    random.seed(0)
    expected = random.random()

    random.seed(0)
    ShuffleStrategy(seed=1).sample(1)

    assert random.random() == expected


def _reference_heuristic(rng: random.Random, population_size: int, entropy: int) -> int:
    raw = to_int32(rng.getrandbits(32))
    reduced = abs(raw ^ 0x5A5A5A5A) % 97
    congruent = (31 * reduced + 17) % 101
    mixed = abs(rotate_left32(congruent, 3) ^ entropy)
    return mixed % population_size + 1


def test_heuristic_strategy_pipeline_with_pinned_entropy() -> None:
    strategy = HeuristicCorrectedStrategy(seed=42, entropy_source=lambda: 1234567)
    reference = random.Random(42)

    expected = [_reference_heuristic(reference, 33, 1234567) for _ in range(100)]

    assert [strategy.sample(1) for _ in range(100)] == expected


def test_heuristic_strategy_is_deterministic_once_entropy_is_pinned() -> None:
    first = HeuristicCorrectedStrategy(seed=9, entropy_source=lambda: 0)
    second = HeuristicCorrectedStrategy(seed=9, entropy_source=lambda: 0)

    assert [first.sample(1) for _ in range(100)] == [second.sample(1) for _ in range(100)]


def test_heuristic_strategy_keeps_reference_constants() -> None:
    assert HeuristicCorrectedStrategy.XOR_MASK == 0x5A5A5A5A
    assert HeuristicCorrectedStrategy.PRIME_MODULUS == 97
    assert (
        HeuristicCorrectedStrategy.LCG_MULTIPLIER,
        HeuristicCorrectedStrategy.LCG_INCREMENT,
        HeuristicCorrectedStrategy.LCG_MODULUS,
    ) == (31, 17, 101)
    assert HeuristicCorrectedStrategy.ROTATION_BITS == 3


def test_measure_correction_effect_reports_both_variances() -> None:
    strategy = HeuristicCorrectedStrategy(seed=1, entropy_source=lambda: 0)

    effect = strategy.measure_correction_effect(3300)

    assert effect.base_variance >= 0.0
    assert effect.corrected_variance >= 0.0
    assert effect.improved is (effect.corrected_variance < effect.base_variance)


def test_measure_correction_effect_rejects_empty_batches() -> None:
    with pytest.raises(InvalidConfigurationError):
        HeuristicCorrectedStrategy().measure_correction_effect(0)


def test_calculate_bias_score_is_chi_square_of_consecutive_draws() -> None:
    strategy = ShuffleStrategy(population_size=33, seed=77)
    reference = ShuffleStrategy(population_size=33, seed=77)

    score = strategy.calculate_bias_score(3300)

    draws = [reference.sample(1) for _ in range(3300)]
    expected = chi_square_statistic(FrequencyTable.from_samples(draws, 33))
    assert score == pytest.approx(expected)
    assert 0.0 <= score < 100.0


@pytest.mark.parametrize("samples", [0, -1])
def test_calculate_bias_score_rejects_empty_batches(samples: int) -> None:
    with pytest.raises(InvalidConfigurationError):
        ShuffleStrategy().calculate_bias_score(samples)


def test_rotate_left32_wraps_high_bits() -> None:
    assert rotate_left32(1, 3) == 8
    assert rotate_left32(0x80000000, 1) == 1
    assert rotate_left32(0x40000000, 1) == to_int32(0x80000000)
    assert to_int32(0x80000000) == -(2**31)


def test_build_strategies_assigns_distinct_seeds() -> None:
    strategies = build_strategies(["uniform", "uniform"], population_size=33, seed=10)

    assert [type(strategy) for strategy in strategies] == [UniformStrategy, UniformStrategy]
    first_reference = UniformStrategy(seed=10)
    second_reference = UniformStrategy(seed=11)
    assert [strategies[0].sample(1) for _ in range(30)] == [
        first_reference.sample(1) for _ in range(30)
    ]
    assert [strategies[1].sample(1) for _ in range(30)] == [
        second_reference.sample(1) for _ in range(30)
    ]


def test_build_strategies_defaults_to_registry_order() -> None:
    strategies = build_strategies(population_size=12)

    assert [strategy.name for strategy in strategies] == list(DEFAULT_STRATEGIES)
    assert all(strategy.population_size == 12 for strategy in strategies)


def test_build_strategies_rejects_unknown_names() -> None:
    with pytest.raises(InvalidConfigurationError):
        build_strategies(["uniform", "quantum"])


def test_build_strategies_requires_at_least_one_strategy() -> None:
    with pytest.raises(InvalidConfigurationError):
        build_strategies([])
