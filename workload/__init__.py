"""Workload generation for hash benchmarks."""

from workload.base import DEFAULT_SEED, IterationState
from workload.generators import SeedStream, WorkloadGenerator, generate

__all__ = [
    "IterationState",
    "DEFAULT_SEED",
    "SeedStream",
    "WorkloadGenerator",
    "generate",
]
