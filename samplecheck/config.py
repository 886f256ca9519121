"""Configuration parsing utilities for the sampling strategy checker."""

from __future__ import annotations

import configparser
from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

from .analysis import (
    DEFAULT_ITERATIONS,
    DEFAULT_SAMPLES_PER_ITERATION,
    DEFAULT_SIGNIFICANCE_LEVEL,
)
from .errors import InvalidConfigurationError, MissingFileError
from .logging import DEFAULT_LOG_PATH, LOG_FORMATS
from .strategies.base import DEFAULT_POPULATION_SIZE
from .strategies.factory import DEFAULT_STRATEGIES

MIN_USER_ITERATIONS = 3
MAX_USER_ITERATIONS = 20


@dataclass(frozen=True)
class EvaluationSection:
    """Parameters of the statistical evaluation."""

    iterations: int = DEFAULT_ITERATIONS
    samples_per_iteration: int = DEFAULT_SAMPLES_PER_ITERATION
    population_size: int = DEFAULT_POPULATION_SIZE
    seed: int | None = None
    alpha: float = DEFAULT_SIGNIFICANCE_LEVEL
    critical_value: float | None = None
    max_workers: int = 1


@dataclass(frozen=True)
class StrategiesSection:
    """Names of the strategies taking part in the comparison, in order."""

    enabled: Tuple[str, ...] = tuple(DEFAULT_STRATEGIES)


@dataclass(frozen=True)
class LoggingSection:
    """Options for the structured run history log."""

    enabled: bool = False
    path: Path = DEFAULT_LOG_PATH
    format: str = "jsonl"
    retention: int | None = 100


@dataclass(frozen=True)
class SampleCheckConfig:
    """Aggregate configuration container returned by :func:`load_config`."""

    evaluation: EvaluationSection = field(default_factory=EvaluationSection)
    strategies: StrategiesSection = field(default_factory=StrategiesSection)
    logging: LoggingSection = field(default_factory=LoggingSection)


def default_config() -> SampleCheckConfig:
    """Return the reference configuration without reading a file."""

    return SampleCheckConfig()


def load_config(path: Path) -> SampleCheckConfig:
    """Load and validate an INI configuration file."""

    parser = configparser.ConfigParser(inline_comment_prefixes=(";", "#"))
    try:
        with path.open("r", encoding="utf-8") as config_file:
            parser.read_file(config_file)
    except FileNotFoundError as exc:
        raise MissingFileError(f"Configuration file not found: {path}") from exc
    except OSError as exc:  # pragma: no cover - filesystem guard
        raise MissingFileError(f"Could not read configuration file: {path}") from exc
    except configparser.Error as exc:
        raise InvalidConfigurationError(f"Configuration is not valid INI: {exc}") from exc

    return SampleCheckConfig(
        evaluation=_parse_evaluation(parser),
        strategies=_parse_strategies(parser),
        logging=_parse_logging(parser, path),
    )


def validate_iterations(value: int) -> int:
    """Check a user supplied iteration count against the accepted range."""

    if not MIN_USER_ITERATIONS <= value <= MAX_USER_ITERATIONS:
        raise InvalidConfigurationError(
            f"Iterations must be between {MIN_USER_ITERATIONS} and "
            f"{MAX_USER_ITERATIONS}, got {value}."
        )
    return value


def validate_evaluation(section: EvaluationSection) -> EvaluationSection:
    """Reject degenerate evaluation settings before any trial begins."""

    validate_iterations(section.iterations)
    if section.samples_per_iteration < 1:
        raise InvalidConfigurationError("Option 'samples_per_iteration' must be at least 1.")
    if section.population_size < 2:
        raise InvalidConfigurationError("Option 'population_size' must be at least 2.")
    if not 0.0 < section.alpha < 1.0:
        raise InvalidConfigurationError("Option 'alpha' must be between 0 and 1.")
    if section.critical_value is not None and section.critical_value <= 0:
        raise InvalidConfigurationError("Option 'critical_value' must be greater than zero.")
    if section.max_workers < 1:
        raise InvalidConfigurationError("Option 'max_workers' must be at least 1.")
    return section


def _parse_evaluation(parser: configparser.ConfigParser) -> EvaluationSection:
    defaults = EvaluationSection()
    if not parser.has_section("evaluation"):
        return defaults
    section = parser["evaluation"]
    return validate_evaluation(
        EvaluationSection(
            iterations=_get_int(section, "iterations", defaults.iterations),
            samples_per_iteration=_get_int(
                section, "samples_per_iteration", defaults.samples_per_iteration
            ),
            population_size=_get_int(section, "population_size", defaults.population_size),
            seed=_get_optional_int(section, "seed"),
            alpha=_get_float(section, "alpha", defaults.alpha),
            critical_value=_get_optional_float(section, "critical_value"),
            max_workers=_get_int(section, "max_workers", defaults.max_workers),
        )
    )


def _parse_strategies(parser: configparser.ConfigParser) -> StrategiesSection:
    if not parser.has_section("strategies"):
        return StrategiesSection()

    enabled: list[str] = []
    for name, _ in parser.items("strategies"):
        if name not in DEFAULT_STRATEGIES:
            raise InvalidConfigurationError(f"Unknown strategy '{name}' in [strategies].")
        try:
            is_enabled = parser.getboolean("strategies", name)
        except ValueError as exc:
            raise InvalidConfigurationError(
                f"Strategy '{name}' in [strategies] must be a boolean value."
            ) from exc
        if is_enabled:
            enabled.append(name)

    if not enabled:
        raise InvalidConfigurationError(
            "At least one strategy must be enabled in [strategies] section."
        )
    return StrategiesSection(enabled=tuple(enabled))


def _parse_logging(parser: configparser.ConfigParser, config_path: Path) -> LoggingSection:
    base_dir = config_path.resolve().parent
    defaults = LoggingSection()
    if not parser.has_section("logging"):
        return LoggingSection(path=(base_dir / defaults.path).resolve())
    section = parser["logging"]

    try:
        enabled = section.getboolean("enabled", fallback=defaults.enabled)
    except ValueError as exc:
        raise InvalidConfigurationError(
            "Option 'enabled' in [logging] must be a boolean value."
        ) from exc

    raw_path = section.get("path", "").strip()
    candidate = Path(raw_path).expanduser() if raw_path else defaults.path
    if not candidate.is_absolute():
        candidate = base_dir / candidate
    log_path = candidate.resolve()

    log_format = section.get("format", defaults.format).strip().lower()
    if log_format not in LOG_FORMATS:
        raise InvalidConfigurationError(
            "Option 'format' in [logging] must be either 'jsonl' or 'csv'."
        )

    retention: int | None = defaults.retention
    raw_retention = section.get("retention", "").strip()
    if raw_retention:
        try:
            parsed = int(raw_retention)
        except ValueError as exc:
            raise InvalidConfigurationError(
                "Option 'retention' in [logging] must be an integer value."
            ) from exc
        retention = parsed if parsed > 0 else None

    return LoggingSection(enabled=enabled, path=log_path, format=log_format, retention=retention)


def _get_int(section: configparser.SectionProxy, key: str, default: int) -> int:
    value = _get_optional_int(section, key)
    return default if value is None else value


def _get_optional_int(section: configparser.SectionProxy, key: str) -> int | None:
    raw = section.get(key, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise InvalidConfigurationError(
            f"Option '{key}' in [{section.name}] must be an integer value."
        ) from exc


def _get_float(section: configparser.SectionProxy, key: str, default: float) -> float:
    value = _get_optional_float(section, key)
    return default if value is None else value


def _get_optional_float(section: configparser.SectionProxy, key: str) -> float | None:
    raw = section.get(key, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise InvalidConfigurationError(
            f"Option '{key}' in [{section.name}] must be numeric."
        ) from exc


__all__ = [
    "EvaluationSection",
    "LoggingSection",
    "MAX_USER_ITERATIONS",
    "MIN_USER_ITERATIONS",
    "SampleCheckConfig",
    "StrategiesSection",
    "default_config",
    "load_config",
    "validate_evaluation",
    "validate_iterations",
]
