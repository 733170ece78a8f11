"""Benchmark engine: config, schemas, errors and aggregation.

Runners live in bench.runner (one pair) and bench.suite_runner (whole matrix).
"""

from bench.errors import (
    BenchmarkExecutionError,
    BenchmarkNotFoundError,
    ConfigurationError,
    IsolationError,
    NoDataError,
    WorkloadGenerationError,
)
from bench.experiment_config import HarnessConfig, load_config
from bench.schemas import Failure, HarnessResult, Measurement, Summary
from bench.metrics import ResultAggregator

__all__ = [
    "BenchmarkExecutionError",
    "BenchmarkNotFoundError",
    "ConfigurationError",
    "IsolationError",
    "NoDataError",
    "WorkloadGenerationError",
    "HarnessConfig",
    "load_config",
    "Failure",
    "HarnessResult",
    "Measurement",
    "Summary",
    "ResultAggregator",
]
