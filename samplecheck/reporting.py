"""Console output for evaluation progress and comparison summaries."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

from .comparison import deltas_from_winner

if TYPE_CHECKING:
    from datetime import timedelta
    from .analysis import AnalysisResult
    from .comparison import ComparisonResult


class ConsoleProgress:
    """Evaluation observer narrating progress to ``stream``."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def on_evaluation_started(self, name: str, iterations: int) -> None:
        print(f"[{name}] evaluation started ({iterations} trials)", file=self.stream)

    def on_trial_completed(
        self, name: str, index: int, iterations: int, dispersion: float
    ) -> None:
        print(
            f"   [{name}] trial {index}/{iterations}: dispersion {dispersion:.4f}",
            file=self.stream,
        )

    def on_evaluation_finished(self, result: "AnalysisResult") -> None:
        print(
            f"[{result.name}] evaluation finished ({_format_duration(result.duration)})",
            file=self.stream,
        )


def print_console_summary(
    result: "ComparisonResult", *, verbose: bool = False, stream: TextIO | None = None
) -> None:
    """Print the ranking of ``result`` to ``stream``."""

    output = stream if stream is not None else sys.stdout
    winner = result.winner
    if winner is None:
        print("No strategies were evaluated.", file=output)
        return

    print(
        f"Winner: {winner.name} | Combined score: {winner.combined_score:.4f}",
        file=output,
    )
    deltas = deltas_from_winner(result)
    for rank, entry in enumerate(result.ranked, start=1):
        verdict = "PASS" if entry.passes_uniformity_test else "FAIL"
        print(
            f" {rank}. {entry.name}: uniformity {entry.average_uniformity:.4f}, "
            f"stability {entry.result_stability:.4f}, score {entry.combined_score:.4f} "
            f"({entry.uniformity_grade}, chi-square {verdict})",
            file=output,
        )
        if not verbose:
            continue
        delta = deltas[entry.name]
        if entry is not winner:
            print(
                f"    +{delta.absolute:.4f} ({delta.percentage:+.1f}%) vs {delta.reference}",
                file=output,
            )
        print(
            f"    chi-square {entry.chi_square:.3f} (critical {entry.critical_value:.3f}, "
            f"p={entry.p_value:.4f}) in {_format_duration(entry.duration)}",
            file=output,
        )
        dispersions = ", ".join(f"{value:.4f}" for value in entry.dispersions)
        print(f"    trial dispersions: {dispersions}", file=output)

    if verbose:
        print(
            f"Population: {result.population_size} groups | Trials: {result.iterations} x "
            f"{result.samples_per_iteration} samples",
            file=output,
        )


def _format_duration(duration: "timedelta") -> str:
    total_seconds = duration.total_seconds()
    if total_seconds < 1:
        return f"{total_seconds * 1000:.0f} ms"
    return f"{total_seconds:.2f} s"


__all__ = ["ConsoleProgress", "print_console_summary"]
