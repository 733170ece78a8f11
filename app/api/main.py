"""FastAPI: /health, /benchmarks, /run."""

import math
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Literal, Optional

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel

from bench.errors import BenchmarkNotFoundError, ConfigurationError
from bench.experiment_config import HarnessConfig
from bench.logging_utils import configure_root_logging
from bench.suite_runner import run_suite
from hashes import EQUIVALENT_HASHES, create_default_registry
from hashes.registry import BenchmarkRegistry

configure_root_logging()

app = FastAPI(title="Checksum Bench API", version="0.1.0")


class RunParams(BaseModel):
    benchmarks: Optional[list[str]] = None  # None = whole registry
    sizes: list[int] = [16, 1024]
    warmup_iterations: int = 1
    measurement_iterations: int = 3
    min_iteration_time_s: float = 0.05
    isolate: bool = False
    seed: Optional[int] = None
    buffer_policy: Literal["per_iteration", "per_pair"] = "per_iteration"


def get_registry() -> BenchmarkRegistry:
    return create_default_registry()


def _json_safe(d: dict) -> dict:
    return {k: (None if isinstance(v, float) and not math.isfinite(v) else v) for k, v in d.items()}


@app.get("/health")
def health():
    return {"status": "ok", "message": "Checksum Bench API"}


@app.get("/benchmarks")
def list_benchmarks(registry: BenchmarkRegistry = Depends(get_registry)):
    return {
        "benchmarks": registry.list_all(),
        "equivalent": [list(p) for p in EQUIVALENT_HASHES if p[0] in registry and p[1] in registry],
    }


@app.post("/run")
def api_run(params: RunParams, registry: BenchmarkRegistry = Depends(get_registry)):
    try:
        if params.benchmarks is not None:
            registry = registry.subset(params.benchmarks)
        config = HarnessConfig(**params.model_dump(exclude={"benchmarks"}, exclude_none=True))
        result = run_suite(config, registry)
    except BenchmarkNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConfigurationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {
        "run_id": result.run_id,
        "succeeded": result.succeeded,
        "cancelled": result.cancelled,
        "summaries": [_json_safe(asdict(s)) for s in result.summaries],
        "failures": [asdict(f) for f in result.failures],
    }
