"""Suite runner: every benchmark x every size, sequentially, with optional fork isolation."""

import logging
import os
import threading
import uuid
from datetime import datetime, timezone
from typing import Iterator, Optional, Sequence

from bench.artifacts import ReportSink, write_run_artifacts
from bench.errors import ConfigurationError, IsolationError
from bench.experiment_config import HarnessConfig, check_sizes, stable_config_hash
from bench.isolation import run_isolated
from bench.logging_utils import run_log, run_log_to
from bench.metrics import ResultAggregator
from bench.runner import run_pair
from bench.schemas import STAGE_ISOLATION, Failure, HarnessResult, PairOutcome
from hashes.registry import BenchmarkRegistry, HashFn

logger = logging.getLogger(__name__)


def validate_run(config: HarnessConfig, registry: BenchmarkRegistry) -> None:
    """Fail fast before any measurement."""
    if not isinstance(config, HarnessConfig):
        raise ConfigurationError(f"expected HarnessConfig, got {type(config).__name__}")
    # model_construct() and model_copy(update=...) skip field validation
    try:
        check_sizes(config.sizes)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e
    if len(registry) == 0:
        raise ConfigurationError("no benchmarks registered")


def iter_pairs(registry: BenchmarkRegistry, config: HarnessConfig) -> Iterator[tuple[str, int]]:
    """Registration order, then parameter order."""
    for name in registry.list_all():
        for size in config.sizes:
            yield name, size


def execute_pair(benchmark: str, fn: HashFn, size: int, config: HarnessConfig) -> PairOutcome:
    if not config.isolate:
        return run_pair(benchmark, fn, size, config)
    try:
        return run_isolated(run_pair, (benchmark, fn, size, config), timeout_s=config.pair_timeout_s())
    except IsolationError as e:
        return PairOutcome(
            benchmark=benchmark,
            size=size,
            failure=Failure.from_exception(benchmark, size, STAGE_ISOLATION, e),
        )


def _commit(outcome: PairOutcome, aggregator: ResultAggregator, result: HarnessResult) -> None:
    if not outcome.ok:
        result.failures.append(outcome.failure)
        run_log("pair_failed", level="warning", run_id=result.run_id, benchmark=outcome.benchmark,
                size=outcome.size, stage=outcome.failure.stage, error=outcome.failure.message)
        return
    for m in outcome.measurements:
        aggregator.record(m)
    aggregator.set_reference(outcome.benchmark, outcome.size, outcome.reference_value)
    summary = aggregator.summarize(outcome.benchmark, outcome.size)
    result.summaries.append(summary)
    run_log("pair_end", run_id=result.run_id, benchmark=outcome.benchmark, size=outcome.size,
            count=summary.count, throughput_mbps=round(summary.throughput_mean / 1e6, 3))


def run_suite(
    config: HarnessConfig,
    registry: BenchmarkRegistry,
    sinks: Sequence[ReportSink] = (),
    out_dir: Optional[str] = None,
    cancel_event: Optional[threading.Event] = None,
    run_id: Optional[str] = None,
) -> HarnessResult:
    """Run all pairs and hand the summaries to the sinks.

    ConfigurationError is raised before anything runs. Per-pair failures are
    recorded in the result and never stop the run. `cancel_event` is checked
    between pairs only; a KeyboardInterrupt during a pair drops that pair and
    ends the run with what was already recorded.
    """
    validate_run(config, registry)
    registry.freeze()
    run_id = run_id or str(uuid.uuid4())[:8]
    aggregator = ResultAggregator(confidence=config.confidence)
    result = HarnessResult(
        run_id=run_id,
        config=config,
        benchmarks=registry.list_all(),
        started_at=datetime.now(tz=timezone.utc),
    )
    run_dir = os.path.join(out_dir, "runs", run_id) if out_dir else None
    log_path = os.path.join(run_dir, "run.log") if run_dir else None

    with run_log_to(log_path):
        run_log("run_start", run_id=run_id, benchmarks=len(registry), sizes=list(config.sizes),
                isolate=config.isolate, config_hash=stable_config_hash(config))
        for name, size in iter_pairs(registry, config):
            if cancel_event is not None and cancel_event.is_set():
                result.cancelled = True
                run_log("run_cancelled", level="warning", run_id=run_id, next_benchmark=name, next_size=size)
                break
            run_log("pair_start", run_id=run_id, benchmark=name, size=size)
            try:
                outcome = execute_pair(name, registry.lookup(name), size, config)
            except KeyboardInterrupt:
                result.cancelled = True
                run_log("run_cancelled", level="warning", run_id=run_id, benchmark=name, size=size,
                        reason="interrupted")
                break
            _commit(outcome, aggregator, result)

        result.measurements = list(aggregator.measurements)
        result.finished_at = datetime.now(tz=timezone.utc)
        for sink in sinks:
            sink.emit(result.summaries)
        if run_dir:
            write_run_artifacts(result, run_dir)
        if not result.succeeded:
            logger.error("run %s produced no summaries (%d failures)", run_id, len(result.failures))
        run_log("run_end", run_id=run_id, summaries=len(result.summaries), failures=len(result.failures),
                cancelled=result.cancelled, succeeded=result.succeeded)
    return result
