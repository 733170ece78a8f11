"""Error taxonomy for the harness: fatal configuration errors vs per-pair failures."""

from typing import Optional


class HarnessError(Exception):
    """Base for all harness errors."""


class ConfigurationError(HarnessError):
    """Invalid setup detected before any measurement. Aborts the run."""


class WorkloadGenerationError(HarnessError, ValueError):
    """Input buffer could not be built (e.g. non-positive size)."""


class BenchmarkExecutionError(HarnessError):
    """Function under test raised or returned an invalid result."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class IsolationError(HarnessError):
    """Isolated child process failed to start, crashed or timed out."""


class BenchmarkNotFoundError(HarnessError, KeyError):
    """Lookup of an unregistered benchmark name."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "benchmark not found"


class NoDataError(HarnessError, LookupError):
    """No measurements recorded for the requested (benchmark, size) pair."""
