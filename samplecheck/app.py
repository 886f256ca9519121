"""Application orchestration for the sampling strategy checker."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import List, Mapping, TextIO

from .analysis import Evaluator
from .comparison import Comparator, ComparisonResult
from .config import (
    EvaluationSection,
    SampleCheckConfig,
    default_config,
    load_config,
    validate_evaluation,
)
from .errors import EvaluationError, SampleCheckError
from .logging import log_comparison_result
from .reporting import ConsoleProgress, print_console_summary
from .strategies.base import SamplingStrategy
from .strategies.factory import StrategyFactory, build_strategies


@dataclass(frozen=True)
class RunResult:
    """Summary of a full application run."""

    config_path: Path | None
    config: SampleCheckConfig
    comparison: ComparisonResult
    log_path: Path | None = None


class SampleCheckApp:
    """High level service wiring configuration, evaluation, and rendering."""

    def __init__(self, registry: Mapping[str, StrategyFactory] | None = None) -> None:
        self._registry = registry

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def run(
        self,
        config_path: Path | None = None,
        *,
        overrides: Mapping[str, object] | None = None,
        verbose: bool = False,
        stream: TextIO | None = None,
    ) -> RunResult:
        """Execute the comparison workflow."""

        config = self._load_config(config_path, overrides)
        strategies = self._build_strategies(config)
        comparison = self._execute(config, strategies, verbose=verbose, stream=stream)
        print_console_summary(comparison, verbose=verbose, stream=stream)
        log_path = self._log(config, comparison)
        return RunResult(
            config_path=config_path,
            config=config,
            comparison=comparison,
            log_path=log_path,
        )

    # ------------------------------------------------------------------
    # Pipeline stages
    # ------------------------------------------------------------------
    def _load_config(
        self, path: Path | None, overrides: Mapping[str, object] | None
    ) -> SampleCheckConfig:
        config = load_config(path) if path is not None else default_config()
        if not overrides:
            return config
        evaluation = replace(config.evaluation, **dict(overrides))
        return replace(config, evaluation=validate_evaluation(evaluation))

    def _build_strategies(self, config: SampleCheckConfig) -> List[SamplingStrategy]:
        evaluation = config.evaluation
        return build_strategies(
            config.strategies.enabled,
            population_size=evaluation.population_size,
            seed=evaluation.seed,
            registry=self._registry,
        )

    def _execute(
        self,
        config: SampleCheckConfig,
        strategies: List[SamplingStrategy],
        *,
        verbose: bool,
        stream: TextIO | None,
    ) -> ComparisonResult:
        evaluation: EvaluationSection = config.evaluation
        evaluator = Evaluator(
            population_size=evaluation.population_size,
            samples_per_iteration=evaluation.samples_per_iteration,
            alpha=evaluation.alpha,
            critical_value=evaluation.critical_value,
            observer=ConsoleProgress(stream) if verbose else None,
        )
        comparator = Comparator(evaluator, max_workers=evaluation.max_workers)
        try:
            return comparator.compare_all(strategies, evaluation.iterations)
        except SampleCheckError:
            raise
        except Exception as exc:
            raise EvaluationError(f"Strategy evaluation failed: {exc}") from exc

    def _log(self, config: SampleCheckConfig, comparison: ComparisonResult) -> Path | None:
        settings = config.logging
        if not settings.enabled:
            return None
        return log_comparison_result(
            comparison,
            log_path=settings.path,
            fmt=settings.format,
            retention=settings.retention,
        )


__all__ = ["RunResult", "SampleCheckApp"]
