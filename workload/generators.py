"""Deterministic random byte buffers for benchmark inputs."""

import random
from typing import Optional

from bench.errors import WorkloadGenerationError
from workload.base import DEFAULT_SEED, IterationState

_SEED_BITS = 64


def generate(size: int, seed: int) -> bytes:
    """Return exactly `size` pseudo-random bytes. Same (size, seed) => same bytes."""
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise WorkloadGenerationError(f"buffer size must be a positive integer, got {size!r}")
    rng = random.Random(seed)
    return rng.randbytes(size)


class SeedStream:
    """Endless stream of 64-bit seeds derived from one base seed."""

    def __init__(self, base_seed: int = DEFAULT_SEED):
        self.base_seed = base_seed
        self._rng = random.Random(base_seed)

    def next_seed(self) -> int:
        return self._rng.getrandbits(_SEED_BITS)


class WorkloadGenerator:
    """Builds IterationState objects; each refresh advances the seed stream.

    A new generator is created per (benchmark, size) pair so every pair sees the
    same sequence of buffers regardless of run order.
    """

    def __init__(self, seed: Optional[int] = DEFAULT_SEED):
        self.seed = DEFAULT_SEED if seed is None else seed
        self._stream = SeedStream(self.seed)
        self.refreshes = 0

    def reference(self, size: int) -> bytes:
        """Fixed buffer for correctness cross-checks; independent of the stream."""
        return generate(size, self.seed)

    def refresh(self, size: int) -> IterationState:
        seed = self._stream.next_seed()
        state = IterationState(size=size).setup(generate(size, seed), seed=seed)
        self.refreshes += 1
        return state
