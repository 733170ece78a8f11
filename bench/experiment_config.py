"""HarnessConfig (pydantic) and RunManifest with stable hashing."""

import hashlib
import json
from typing import Any, Iterable, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from bench.errors import ConfigurationError
from workload.base import DEFAULT_SEED

DEFAULT_SIZES = (16, 128, 1024, 8196, 65536, 524288)


def check_sizes(sizes: Iterable[int]) -> None:
    """Parameter set must be non-empty, positive and distinct. Raises ValueError."""
    sizes = list(sizes)
    if not sizes:
        raise ValueError("parameter set must not be empty")
    bad = [s for s in sizes if isinstance(s, bool) or not isinstance(s, int) or s <= 0]
    if bad:
        raise ValueError(f"sizes must be positive integers, got {bad}")
    if len(set(sizes)) != len(sizes):
        raise ValueError(f"sizes must be distinct, got {sizes}")


class HarnessConfig(BaseModel):
    """Benchmark run configuration. Same config + seed => same input buffers.

    Construction errors surface as ConfigurationError, never as pydantic's
    ValidationError.
    """

    model_config = ConfigDict(frozen=True)

    sizes: tuple[int, ...] = Field(default=DEFAULT_SIZES, description="Ordered buffer sizes in bytes")
    warmup_iterations: int = Field(default=5, ge=1, description="Timed iterations discarded before measuring")
    measurement_iterations: int = Field(default=5, ge=1, description="Recorded iterations per pair")
    min_iteration_time_s: float = Field(default=1.0, ge=0.0, description="Minimum measured time per iteration")
    min_calls: int = Field(default=1, ge=1, description="Minimum calls per iteration")
    isolate: bool = Field(default=True, description="Run each pair in a forked child process")
    seed: int = Field(default=DEFAULT_SEED, ge=0, description="Base seed for workload buffers")
    buffer_policy: Literal["per_iteration", "per_pair"] = "per_iteration"
    gc_between_iterations: bool = True
    confidence: float = Field(default=0.999, gt=0.0, lt=1.0)
    isolation_timeout_s: Optional[float] = Field(default=None, gt=0.0)
    timeout_multiplier: float = Field(default=5.0, ge=1.0)

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e

    @field_validator("sizes")
    @classmethod
    def _check_sizes(cls, v: tuple[int, ...]) -> tuple[int, ...]:
        check_sizes(v)
        return v

    def pair_timeout_s(self) -> float:
        """Upper bound for one isolated pair before the child is killed."""
        if self.isolation_timeout_s is not None:
            return self.isolation_timeout_s
        iterations = self.warmup_iterations + self.measurement_iterations
        return self.timeout_multiplier * iterations * max(self.min_iteration_time_s, 1.0) + 30.0


def load_config(path: str) -> HarnessConfig:
    """Load a HarnessConfig from a JSON file."""
    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"cannot read config {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"config {path} must be a JSON object")
    return HarnessConfig(**data)


class RunManifest(BaseModel):
    """Manifest for a single harness run: config hash, run_id, paths, outcome counts."""

    run_id: str
    config_hash: str
    config: dict = Field(default_factory=dict)
    benchmarks: list[str] = Field(default_factory=list)
    sizes: list[int] = Field(default_factory=list)
    n_summaries: int = 0
    n_failures: int = 0
    n_measurements: int = 0
    succeeded: bool = False
    cancelled: bool = False
    started_at: str = ""
    finished_at: str = ""
    artifacts: dict = Field(default_factory=dict, description="Paths: manifest, measurements, summary_csv, summary_parquet, failures, run_log")


def stable_config_hash(config: Any) -> str:
    """Short sha256 of the config with sorted keys; accepts a HarnessConfig or its dump."""
    data = config.model_dump(mode="json") if isinstance(config, BaseModel) else dict(config)
    payload = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(payload.encode()).hexdigest()[:16]
