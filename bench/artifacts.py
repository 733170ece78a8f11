"""Report sinks and per-run artifacts: manifest.json, measurements.jsonl, summary.csv/parquet, failures.json."""

import json
import logging
import os
from dataclasses import asdict
from pathlib import Path
from typing import Optional, Protocol, Sequence

from bench.experiment_config import RunManifest, stable_config_hash
from bench.logging_utils import run_log_path
from bench.schemas import HarnessResult, Summary

SUMMARY_COLUMNS = [
    "benchmark", "size", "count", "mean", "stddev", "min", "max", "total_calls", "ns_per_call",
    "throughput_mean", "throughput_stddev", "throughput_error", "throughput_p50", "throughput_p90",
    "confidence", "reference_value",
]


class ReportSink(Protocol):
    def emit(self, summaries: Sequence[Summary]) -> None:
        ...


def summaries_to_dataframe(summaries: Sequence[Summary]):
    import pandas as pd
    return pd.DataFrame([asdict(s) for s in summaries], columns=SUMMARY_COLUMNS)


class CsvReportSink:
    """Writes summaries as CSV, plus parquet when a parquet engine is installed."""

    def __init__(self, path: str, parquet: bool = False):
        self.path = path
        self.parquet = parquet
        self.written: list[str] = []

    def emit(self, summaries: Sequence[Summary]) -> None:
        Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        df = summaries_to_dataframe(summaries)
        df.to_csv(self.path, index=False)
        self.written = [self.path]
        if self.parquet:
            parquet_path = os.path.splitext(self.path)[0] + ".parquet"
            try:
                df.to_parquet(parquet_path, index=False)
            except ImportError:
                logging.getLogger(__name__).info("no parquet engine installed, skipped %s", parquet_path)
            else:
                self.written.append(parquet_path)


class JsonReportSink:
    def __init__(self, path: str):
        self.path = path

    def emit(self, summaries: Sequence[Summary]) -> None:
        Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump([asdict(s) for s in summaries], f, indent=2)


class LoggingReportSink:
    """One log line per summary; throughput in MB/s."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("bench.report")

    def emit(self, summaries: Sequence[Summary]) -> None:
        for s in summaries:
            self.logger.info(
                "%-22s %8d B  %10.2f ± %.2f MB/s  (n=%d, %.1f ns/call)",
                s.benchmark, s.size, s.throughput_mean / 1e6, s.throughput_error / 1e6, s.count, s.ns_per_call,
            )


def write_run_artifacts(result: HarnessResult, run_dir: str) -> dict:
    """Write manifest.json, measurements.jsonl, summary.csv/parquet, failures.json under run_dir. Returns artifact paths."""
    Path(run_dir).mkdir(parents=True, exist_ok=True)
    config_dict = result.config.model_dump()

    manifest = RunManifest(
        run_id=result.run_id,
        config_hash=stable_config_hash(config_dict),
        config=config_dict,
        benchmarks=result.benchmarks,
        sizes=list(result.config.sizes),
        n_summaries=len(result.summaries),
        n_failures=len(result.failures),
        n_measurements=len(result.measurements),
        succeeded=result.succeeded,
        cancelled=result.cancelled,
        started_at=result.started_at.isoformat() if result.started_at else "",
        finished_at=result.finished_at.isoformat() if result.finished_at else "",
    )

    # measurements.jsonl (one line per measured iteration)
    measurements_path = os.path.join(run_dir, "measurements.jsonl")
    with open(measurements_path, "w") as f:
        for m in result.measurements:
            f.write(json.dumps({**asdict(m), "throughput_bps": m.throughput}) + "\n")
    manifest.artifacts["measurements"] = measurements_path

    sink = CsvReportSink(os.path.join(run_dir, "summary.csv"), parquet=True)
    sink.emit(result.summaries)
    manifest.artifacts["summary_csv"] = sink.written[0]
    if len(sink.written) > 1:
        manifest.artifacts["summary_parquet"] = sink.written[1]

    failures_path = os.path.join(run_dir, "failures.json")
    with open(failures_path, "w") as f:
        json.dump([asdict(x) for x in result.failures], f, indent=2)
    manifest.artifacts["failures"] = failures_path

    current_log = run_log_path()
    if current_log and os.path.exists(current_log):
        manifest.artifacts["run_log"] = current_log

    manifest_path = os.path.join(run_dir, "manifest.json")
    manifest.artifacts["manifest"] = manifest_path
    with open(manifest_path, "w") as f:
        f.write(manifest.model_dump_json(indent=2))

    return dict(manifest.artifacts)


def load_manifest(run_dir: str) -> RunManifest:
    with open(os.path.join(run_dir, "manifest.json")) as f:
        return RunManifest.model_validate_json(f.read())
