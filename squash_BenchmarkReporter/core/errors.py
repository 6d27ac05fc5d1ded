# squash_BenchmarkReporter/core/errors.py
"""Error hierarchy for the benchmark reporter."""
from __future__ import annotations
from typing import Any, Mapping


class BenchmarkReportError(Exception):
    """Base exception for reporter failures."""

    def __init__(
        self,
        message: str,
        *,
        user_message: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.user_message = message if user_message is None else user_message
        self.context = dict(context) if context else {}

    def log_message(self) -> str:
        if not self.context:
            return str(self)
        return f"{self}: {self.context}"


class ConfigError(BenchmarkReportError):
    """Configuration loading or validation error."""


class LoadError(BenchmarkReportError):
    """Benchmark document could not be fetched or parsed."""


class RenderError(BenchmarkReportError):
    """A single visualization failed to draw."""


class ProjectionWarning(UserWarning):
    """Non-finite numeric cell produced while projecting a record."""

    def __init__(self, dataset: str, row: int, column: str, value: float) -> None:
        super().__init__(f"{dataset}: row {row} column '{column}' is {value}")
        self.dataset = dataset
        self.row = row
        self.column = column
        self.value = value


__all__ = [
    "BenchmarkReportError",
    "ConfigError",
    "LoadError",
    "RenderError",
    "ProjectionWarning",
]
