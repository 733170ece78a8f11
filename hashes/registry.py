"""Benchmark function registry: name -> (bytes) -> int, in registration order."""

from typing import Callable, Iterable

from bench.errors import BenchmarkNotFoundError, ConfigurationError

HashFn = Callable[[bytes], int]


class BenchmarkRegistry:
    """Ordered mapping of benchmark names to hash functions.

    Built once at startup, then frozen. Registering after `freeze()` or
    registering a name twice is a configuration error.
    """

    def __init__(self):
        self._entries: dict[str, HashFn] = {}
        self._frozen = False

    def register(self, name: str, fn: HashFn) -> None:
        if self._frozen:
            raise ConfigurationError(f"registry is frozen, cannot register {name!r}")
        if not name or not isinstance(name, str):
            raise ConfigurationError(f"benchmark name must be a non-empty string, got {name!r}")
        if not callable(fn):
            raise ConfigurationError(f"benchmark {name!r} is not callable")
        if name in self._entries:
            raise ConfigurationError(f"duplicate benchmark name: {name!r}")
        self._entries[name] = fn

    def lookup(self, name: str) -> HashFn:
        try:
            return self._entries[name]
        except KeyError:
            raise BenchmarkNotFoundError(f"unknown benchmark: {name!r}") from None

    def list_all(self) -> list[str]:
        return list(self._entries.keys())

    def freeze(self) -> "BenchmarkRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def subset(self, names: Iterable[str]) -> "BenchmarkRegistry":
        """New frozen registry with only `names`, kept in this registry's order."""
        wanted = list(names)
        for n in wanted:
            self.lookup(n)
        sub = BenchmarkRegistry()
        for name, fn in self._entries.items():
            if name in wanted:
                sub.register(name, fn)
        return sub.freeze()

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)
