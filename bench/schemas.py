"""Schemas for measurements, summaries, failures and run results."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from bench.experiment_config import HarnessConfig

STAGE_WORKLOAD = "workload"
STAGE_EXECUTION = "execution"
STAGE_ISOLATION = "isolation"


@dataclass(frozen=True)
class Measurement:
    benchmark: str
    size: int
    elapsed_ns: int  # time spent inside the timed calls only
    calls: int = 1

    @property
    def throughput(self) -> float:
        """Bytes per second for this iteration."""
        if self.elapsed_ns <= 0:
            return float("inf")
        return self.size * self.calls * 1e9 / self.elapsed_ns


@dataclass(frozen=True)
class Summary:
    benchmark: str
    size: int
    count: int
    mean: float  # elapsed_ns per iteration
    stddev: float
    min: int
    max: int
    total_calls: int
    ns_per_call: float
    throughput_mean: float  # bytes/s
    throughput_stddev: float
    throughput_error: float  # confidence interval half width
    throughput_p50: float
    throughput_p90: float
    confidence: float
    reference_value: Optional[int] = None


@dataclass(frozen=True)
class Failure:
    benchmark: str
    size: int
    stage: str  # workload | execution | isolation
    error_type: str
    message: str

    @classmethod
    def from_exception(cls, benchmark: str, size: int, stage: str, exc: BaseException) -> "Failure":
        cause = getattr(exc, "cause", None) or exc
        return cls(
            benchmark=benchmark,
            size=size,
            stage=stage,
            error_type=type(cause).__name__,
            message=str(exc),
        )


@dataclass
class PairOutcome:
    benchmark: str
    size: int
    measurements: list[Measurement] = field(default_factory=list)
    reference_value: Optional[int] = None
    failure: Optional[Failure] = None
    warmup_calls: int = 0

    @property
    def ok(self) -> bool:
        return self.failure is None


@dataclass
class HarnessResult:
    run_id: str
    config: HarnessConfig
    benchmarks: list[str]
    summaries: list[Summary] = field(default_factory=list)
    failures: list[Failure] = field(default_factory=list)
    measurements: list[Measurement] = field(default_factory=list)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    cancelled: bool = False

    @property
    def succeeded(self) -> bool:
        return len(self.summaries) > 0

    def summary_for(self, benchmark: str, size: int) -> Optional[Summary]:
        for s in self.summaries:
            if s.benchmark == benchmark and s.size == size:
                return s
        return None

    def failure_for(self, benchmark: str, size: int) -> Optional[Failure]:
        for f in self.failures:
            if f.benchmark == benchmark and f.size == size:
                return f
        return None
