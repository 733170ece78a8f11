"""Base types for benchmark workloads."""

from dataclasses import dataclass
from typing import Optional

DEFAULT_SEED = 0xCAFEBABE


@dataclass
class IterationState:
    """Per-iteration input: one buffer of `size` bytes, owned by a single iteration."""
    size: int
    buffer: Optional[bytes] = None
    seed: Optional[int] = None

    def setup(self, buffer: bytes, seed: Optional[int] = None) -> "IterationState":
        self.buffer = buffer
        self.seed = seed
        return self

    def teardown(self) -> None:
        self.buffer = None

    @property
    def ready(self) -> bool:
        return self.buffer is not None
