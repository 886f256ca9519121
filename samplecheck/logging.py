"""Structured run history for comparison results.

Every comparison can be appended to a JSON Lines or CSV file. The history is
capped at a retention limit so long running setups do not grow it unbounded.
"""

from __future__ import annotations

import csv
import json
from dataclasses import asdict, dataclass, fields
from datetime import timezone
from pathlib import Path
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from .comparison import ComparisonResult


DEFAULT_LOG_PATH = Path("logs") / "run_log.jsonl"
"""Default location for the run history log."""

LOG_FORMATS = ("jsonl", "csv")


@dataclass(frozen=True)
class RunLogRecord:
    """One line of the run history."""

    timestamp: str
    population_size: int
    iterations: int
    samples_per_iteration: int
    winner: str
    winner_score: float
    strategies: str

    @classmethod
    def from_comparison(cls, result: "ComparisonResult") -> "RunLogRecord":
        winner = result.winner
        return cls(
            timestamp=result.started_at.astimezone(timezone.utc).isoformat(),
            population_size=result.population_size,
            iterations=result.iterations,
            samples_per_iteration=result.samples_per_iteration,
            winner="" if winner is None else winner.name,
            winner_score=0.0 if winner is None else float(winner.combined_score),
            strategies=";".join(entry.name for entry in result.ranked),
        )


LOG_FIELDNAMES = tuple(field.name for field in fields(RunLogRecord))
"""Column order of the CSV history."""


class RunLog:
    """Append-only history file with a retention limit."""

    def __init__(
        self,
        path: Path | None = None,
        *,
        fmt: str = "jsonl",
        retention: int | None = 100,
    ) -> None:
        fmt = fmt.lower()
        if fmt not in LOG_FORMATS:
            raise ValueError(f"Unsupported log format: {fmt}")
        self.path = Path(path if path is not None else DEFAULT_LOG_PATH).expanduser().resolve()
        self.fmt = fmt
        self.retention = retention if retention is not None and retention > 0 else None

    def append(self, record: RunLogRecord) -> Path:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if self.fmt == "jsonl":
            with self.path.open("a", encoding="utf-8") as handle:
                handle.write(json.dumps(asdict(record), ensure_ascii=False) + "\n")
        else:
            needs_header = not self.path.exists() or self.path.stat().st_size == 0
            with self.path.open("a", encoding="utf-8", newline="") as handle:
                writer = csv.DictWriter(handle, fieldnames=LOG_FIELDNAMES)
                if needs_header:
                    writer.writeheader()
                writer.writerow(asdict(record))
        if self.retention is not None:
            self.trim(self.retention)
        return self.path

    def trim(self, max_entries: int) -> None:
        """Keep only the newest ``max_entries`` records."""

        if max_entries <= 0 or not self.path.exists():
            return
        with self.path.open("r", encoding="utf-8", newline="") as handle:
            lines = handle.readlines()
        header, records = (lines[:1], lines[1:]) if self.fmt == "csv" else ([], lines)
        if len(records) <= max_entries:
            return
        with self.path.open("w", encoding="utf-8", newline="") as handle:
            handle.writelines(header + records[-max_entries:])

    def read(self) -> List[dict]:
        """Return the stored records as dictionaries, oldest first."""

        if not self.path.exists():
            return []
        with self.path.open("r", encoding="utf-8", newline="") as handle:
            if self.fmt == "csv":
                return [dict(row) for row in csv.DictReader(handle)]
            return [json.loads(line) for line in handle if line.strip()]


def log_comparison_result(
    result: "ComparisonResult",
    *,
    log_path: Path | None = None,
    fmt: str = "jsonl",
    retention: int | None = 100,
) -> Path:
    """Append ``result`` to the history at ``log_path`` and return the file path."""

    run_log = RunLog(log_path, fmt=fmt, retention=retention)
    return run_log.append(RunLogRecord.from_comparison(result))


__all__ = ["LOG_FIELDNAMES", "RunLog", "RunLogRecord", "log_comparison_result"]
