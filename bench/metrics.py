"""Result aggregation: Welford running statistics, percentiles and confidence error."""

import math
from typing import Iterable, Optional

import numpy as np
from scipy import stats

from bench.errors import NoDataError
from bench.schemas import Measurement, Summary

DEFAULT_CONFIDENCE = 0.999


class RunningStats:
    """Welford's online mean/variance. Stable for large values and small counts."""

    def __init__(self):
        self.count = 0
        self.mean = 0.0
        self._m2 = 0.0
        self.min: Optional[float] = None
        self.max: Optional[float] = None

    def push(self, x: float) -> None:
        self.count += 1
        delta = x - self.mean
        self.mean += delta / self.count
        self._m2 += delta * (x - self.mean)
        self.min = x if self.min is None else min(self.min, x)
        self.max = x if self.max is None else max(self.max, x)

    @classmethod
    def of(cls, values: Iterable[float]) -> "RunningStats":
        s = cls()
        for v in values:
            s.push(v)
        return s

    @property
    def variance(self) -> float:
        """Sample variance (n - 1). nan below two samples."""
        if self.count < 2:
            return float("nan")
        return self._m2 / (self.count - 1)

    @property
    def stddev(self) -> float:
        return math.sqrt(self.variance)


def percentile(values: list[float], p: float) -> float:
    if not values:
        return float("nan")
    return float(np.percentile(np.asarray(values, dtype=float), p))


def error_margin(stddev: float, count: int, confidence: float = DEFAULT_CONFIDENCE) -> float:
    """Half width of the Student-t confidence interval of the mean."""
    if count < 2 or math.isnan(stddev):
        return float("nan")
    t = stats.t.ppf(1.0 - (1.0 - confidence) / 2.0, count - 1)
    return float(t * stddev / math.sqrt(count))


class ResultAggregator:
    """Append-only store of measurements, reduced to Summaries on demand."""

    def __init__(self, confidence: float = DEFAULT_CONFIDENCE):
        self.confidence = confidence
        self._measurements: list[Measurement] = []
        self._by_pair: dict[tuple[str, int], list[Measurement]] = {}
        self._reference: dict[tuple[str, int], int] = {}

    def record(self, measurement: Measurement) -> None:
        self._measurements.append(measurement)
        self._by_pair.setdefault((measurement.benchmark, measurement.size), []).append(measurement)

    def set_reference(self, benchmark: str, size: int, value: Optional[int]) -> None:
        if value is not None:
            self._reference[(benchmark, size)] = value

    @property
    def measurements(self) -> tuple[Measurement, ...]:
        return tuple(self._measurements)

    def pairs(self) -> list[tuple[str, int]]:
        return list(self._by_pair.keys())

    def count(self, benchmark: str, size: int) -> int:
        return len(self._by_pair.get((benchmark, size), []))

    def summarize(self, benchmark: str, size: int) -> Summary:
        ms = self._by_pair.get((benchmark, size))
        if not ms:
            raise NoDataError(f"no measurements for {benchmark} @ {size} bytes")
        elapsed = RunningStats.of(m.elapsed_ns for m in ms)
        throughputs = [m.throughput for m in ms]
        tput = RunningStats.of(throughputs)
        total_calls = sum(m.calls for m in ms)
        total_ns = sum(m.elapsed_ns for m in ms)
        return Summary(
            benchmark=benchmark,
            size=size,
            count=elapsed.count,
            mean=elapsed.mean,
            stddev=elapsed.stddev,
            min=int(elapsed.min),
            max=int(elapsed.max),
            total_calls=total_calls,
            ns_per_call=total_ns / total_calls if total_calls else float("nan"),
            throughput_mean=tput.mean,
            throughput_stddev=tput.stddev,
            throughput_error=error_margin(tput.stddev, tput.count, self.confidence),
            throughput_p50=percentile(throughputs, 50),
            throughput_p90=percentile(throughputs, 90),
            confidence=self.confidence,
            reference_value=self._reference.get((benchmark, size)),
        )

    def summarize_all(self) -> list[Summary]:
        return [self.summarize(b, s) for b, s in self.pairs()]

    def to_dataframe(self):
        import pandas as pd
        rows = [
            {
                "benchmark": m.benchmark,
                "size": m.size,
                "elapsed_ns": m.elapsed_ns,
                "calls": m.calls,
                "throughput_bps": m.throughput,
            }
            for m in self._measurements
        ]
        return pd.DataFrame(rows, columns=["benchmark", "size", "elapsed_ns", "calls", "throughput_bps"])
