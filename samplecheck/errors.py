"""Custom exceptions for the sampling strategy checker."""

from __future__ import annotations


class SampleCheckError(Exception):
    """Base error type for application specific failures."""


class MissingFileError(SampleCheckError):
    """Raised when a required input file could not be located."""


class InvalidConfigurationError(SampleCheckError):
    """Raised when the configuration is malformed or describes a degenerate run."""


class InvalidArgumentError(SampleCheckError, ValueError):
    """Raised when a strategy receives a range start outside ``[1, N]``."""


class EvaluationError(SampleCheckError):
    """Raised when a sampling strategy fails unexpectedly during evaluation."""


__all__ = [
    "EvaluationError",
    "InvalidArgumentError",
    "InvalidConfigurationError",
    "MissingFileError",
    "SampleCheckError",
]
