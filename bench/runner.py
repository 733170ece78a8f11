"""Pair runner: purity check, warmup and measurement for one (benchmark, size) pair."""

import gc
import logging
import time
from typing import Any, Optional

from bench.errors import BenchmarkExecutionError, WorkloadGenerationError
from bench.experiment_config import HarnessConfig
from bench.schemas import (
    STAGE_EXECUTION,
    STAGE_WORKLOAD,
    Failure,
    Measurement,
    PairOutcome,
)
from hashes.registry import HashFn
from workload.base import IterationState
from workload.generators import WorkloadGenerator

logger = logging.getLogger(__name__)


def _check_result(benchmark: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise BenchmarkExecutionError(
            f"{benchmark} returned {type(value).__name__}, expected a fixed-width integer"
        )
    return value


def _call(benchmark: str, fn: HashFn, buffer: bytes) -> int:
    try:
        value = fn(buffer)
    except Exception as e:
        raise BenchmarkExecutionError(f"{benchmark} raised {type(e).__name__}: {e}", cause=e) from e
    return _check_result(benchmark, value)


def verify_pure(benchmark: str, fn: HashFn, buffer: bytes) -> int:
    """Call fn twice on the same buffer; both results must be the same integer."""
    first = _call(benchmark, fn, buffer)
    second = _call(benchmark, fn, buffer)
    if first != second:
        raise BenchmarkExecutionError(f"{benchmark} is not deterministic: {first} != {second}")
    return first


def timed_calls(fn: HashFn, buffer: bytes, min_calls: int, min_time_ns: int) -> tuple[int, int, Any]:
    """Call fn(buffer) in growing batches until min_calls and min_time_ns are both reached.

    Only the batch loop is inside the timer. Returns (elapsed_ns, calls, last result).
    """
    elapsed = 0
    calls = 0
    batch = min_calls
    result = None
    while True:
        start = time.perf_counter_ns()
        for _ in range(batch):
            result = fn(buffer)
        elapsed += time.perf_counter_ns() - start
        calls += batch
        if elapsed >= min_time_ns:
            break
        per_call = max(elapsed / calls, 1.0)
        remaining = int((min_time_ns - elapsed) / per_call) + 1
        batch = max(1, min(batch * 2, remaining))
    return max(elapsed, 1), calls, result


def _run_iteration(
    benchmark: str,
    fn: HashFn,
    state: IterationState,
    config: HarnessConfig,
) -> tuple[int, int]:
    if config.gc_between_iterations:
        gc.collect()
    try:
        elapsed, calls, result = timed_calls(
            fn, state.buffer, config.min_calls, int(config.min_iteration_time_s * 1e9)
        )
    except Exception as e:
        raise BenchmarkExecutionError(f"{benchmark} raised {type(e).__name__}: {e}", cause=e) from e
    _check_result(benchmark, result)
    return elapsed, calls


def run_pair(benchmark: str, fn: HashFn, size: int, config: HarnessConfig) -> PairOutcome:
    """Run setup, warmup and measurement for one pair.

    Per-pair errors come back as `outcome.failure`; measurements of a failed
    pair are dropped. KeyboardInterrupt propagates.
    """
    outcome = PairOutcome(benchmark=benchmark, size=size)
    measurements: list[Measurement] = []
    pinned: Optional[IterationState] = None
    try:
        generator = WorkloadGenerator(config.seed)
        outcome.reference_value = verify_pure(benchmark, fn, generator.reference(size))
        if config.buffer_policy == "per_pair":
            pinned = generator.refresh(size)

        phases = [("warmup", config.warmup_iterations), ("measurement", config.measurement_iterations)]
        for phase, iterations in phases:
            for i in range(iterations):
                state = pinned if pinned is not None else generator.refresh(size)
                try:
                    elapsed, calls = _run_iteration(benchmark, fn, state, config)
                finally:
                    if state is not pinned:
                        state.teardown()
                logger.debug("%s @ %d %s %d/%d: %d calls in %d ns",
                             benchmark, size, phase, i + 1, iterations, calls, elapsed)
                if phase == "warmup":
                    outcome.warmup_calls += calls
                else:
                    measurements.append(Measurement(benchmark=benchmark, size=size, elapsed_ns=elapsed, calls=calls))
    except WorkloadGenerationError as e:
        outcome.failure = Failure.from_exception(benchmark, size, STAGE_WORKLOAD, e)
    except BenchmarkExecutionError as e:
        outcome.failure = Failure.from_exception(benchmark, size, STAGE_EXECUTION, e)
    else:
        outcome.measurements = measurements
    finally:
        if pinned is not None:
            pinned.teardown()
    return outcome
