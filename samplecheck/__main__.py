"""Command line entry point for the sampling strategy checker."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .app import SampleCheckApp
from .errors import (
    EvaluationError,
    InvalidArgumentError,
    InvalidConfigurationError,
    MissingFileError,
)

EXIT_SUCCESS = 0
EXIT_MISSING_FILE = 2
EXIT_INVALID_CONFIG = 3
EXIT_EVALUATION_FAILURE = 4
EXIT_UNEXPECTED_ERROR = 1

_OVERRIDES = {
    "iterations": "iterations",
    "samples": "samples_per_iteration",
    "population": "population_size",
    "seed": "seed",
    "workers": "max_workers",
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="samplecheck",
        description="Compare sampling strategies by the uniformity and stability of their draws.",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        help="Optional path to an INI configuration file.",
    )
    parser.add_argument(
        "--iterations",
        "-n",
        type=int,
        help="Number of trials per strategy (3-20).",
    )
    parser.add_argument(
        "--samples",
        "-s",
        type=int,
        help="Number of draws per trial.",
    )
    parser.add_argument(
        "--population",
        "-p",
        type=int,
        help="Number of groups in the population.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Base seed; strategy i is seeded with seed + i.",
    )
    parser.add_argument(
        "--workers",
        "-w",
        type=int,
        help="Evaluate strategies on this many worker threads.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Print trial progress and detailed per-strategy statistics.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    overrides = {
        field: getattr(args, option)
        for option, field in _OVERRIDES.items()
        if getattr(args, option) is not None
    }
    app = SampleCheckApp()
    try:
        app.run(config_path=args.config, overrides=overrides, verbose=args.verbose)
    except MissingFileError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_MISSING_FILE
    except (InvalidConfigurationError, InvalidArgumentError) as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_INVALID_CONFIG
    except EvaluationError as exc:
        print(f"Evaluation failed: {exc}", file=sys.stderr)
        return EXIT_EVALUATION_FAILURE
    except Exception as exc:  # pragma: no cover
        print(f"Unexpected error: {exc}", file=sys.stderr)
        return EXIT_UNEXPECTED_ERROR
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
