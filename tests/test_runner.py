"""Tests for the pair runner and the suite runner (inline execution)."""

import threading

import pytest
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from bench.errors import BenchmarkExecutionError, ConfigurationError
from bench.experiment_config import HarnessConfig
from bench.runner import run_pair, timed_calls, verify_pure
from bench.schemas import STAGE_EXECUTION, STAGE_WORKLOAD
from bench.suite_runner import iter_pairs, run_suite
from hashes import create_default_registry
from hashes.checksums import crc32
from hashes.registry import BenchmarkRegistry
from workload.generators import generate


def identity_hash(buf: bytes) -> int:
    return len(buf)


def always_one(buf: bytes) -> int:
    return 1


def fails_above_512(buf: bytes) -> int:
    if len(buf) > 512:
        raise ValueError(f"buffer too large: {len(buf)}")
    return len(buf)


def _config(**kw):
    base = dict(sizes=[16, 1024], warmup_iterations=1, measurement_iterations=3,
                min_iteration_time_s=0.0, isolate=False)
    base.update(kw)
    return HarnessConfig(**base)


def _registry(*entries):
    reg = BenchmarkRegistry()
    for name, fn in entries:
        reg.register(name, fn)
    return reg


def test_timed_calls_honours_min_calls():
    seen = []
    elapsed, calls, result = timed_calls(lambda b: seen.append(1) or 7, b"x", min_calls=5, min_time_ns=0)
    assert calls == 5 == len(seen)
    assert result == 7
    assert elapsed >= 1


def test_timed_calls_runs_until_time_budget():
    elapsed, calls, _ = timed_calls(crc32, b"\x00" * 64, min_calls=1, min_time_ns=2_000_000)
    assert elapsed >= 2_000_000
    assert calls > 1


def test_verify_pure_rejects_non_deterministic_fn():
    counter = iter(range(100))
    with pytest.raises(BenchmarkExecutionError):
        verify_pure("counter", lambda b: next(counter), b"abc")


def test_verify_pure_rejects_non_integer_result():
    with pytest.raises(BenchmarkExecutionError):
        verify_pure("floaty", lambda b: 1.5, b"abc")
    with pytest.raises(BenchmarkExecutionError):
        verify_pure("booly", lambda b: True, b"abc")


def test_run_pair_records_measurement_iterations():
    config = _config(warmup_iterations=2, measurement_iterations=4, min_calls=3)
    outcome = run_pair("crc32", crc32, 128, config)
    assert outcome.ok
    assert len(outcome.measurements) == 4
    assert all(m.calls == 3 and m.elapsed_ns > 0 and m.size == 128 for m in outcome.measurements)
    assert outcome.warmup_calls == 6
    assert outcome.reference_value == crc32(generate(128, config.seed))


def test_run_pair_refreshes_buffer_per_iteration():
    seen = []

    def recorder(buf):
        seen.append(buf)
        return 0

    run_pair("rec", recorder, 32, _config(warmup_iterations=1, measurement_iterations=3))
    # two purity calls on the reference buffer, then one buffer per iteration
    iteration_buffers = seen[2:]
    assert len(iteration_buffers) == 4
    assert len(set(iteration_buffers)) == 4


def test_run_pair_per_pair_policy_reuses_one_buffer():
    seen = []

    def recorder(buf):
        seen.append(buf)
        return 0

    run_pair("rec", recorder, 32, _config(warmup_iterations=1, measurement_iterations=3, buffer_policy="per_pair"))
    assert len(set(seen[2:])) == 1


def test_run_pair_failure_drops_partial_measurements():
    calls = {"n": 0}

    def flaky(buf):
        calls["n"] += 1
        if calls["n"] > 4:
            raise RuntimeError("boom")
        return 0

    outcome = run_pair("flaky", flaky, 16, _config(warmup_iterations=1, measurement_iterations=5))
    assert not outcome.ok
    assert outcome.measurements == []
    assert outcome.failure.stage == STAGE_EXECUTION
    assert outcome.failure.error_type == "RuntimeError"
    assert "boom" in outcome.failure.message


def test_run_pair_invalid_result_is_execution_failure():
    outcome = run_pair("none", lambda b: None, 16, _config())
    assert outcome.failure.stage == STAGE_EXECUTION
    assert outcome.failure.error_type == "BenchmarkExecutionError"


def test_run_pair_invalid_size_is_workload_failure():
    outcome = run_pair("identity", identity_hash, 0, _config())
    assert outcome.failure.stage == STAGE_WORKLOAD


def test_end_to_end_two_benchmarks_two_sizes():
    reg = _registry(("identityHash", identity_hash), ("alwaysOne", always_one))
    config = _config()
    result = run_suite(config, reg)
    assert result.succeeded
    assert result.failures == []
    assert len(result.summaries) == 4
    assert all(s.count == 3 for s in result.summaries)
    assert [(s.benchmark, s.size) for s in result.summaries] == [
        ("identityHash", 16), ("identityHash", 1024), ("alwaysOne", 16), ("alwaysOne", 1024),
    ]
    for size in (16, 1024):
        s = result.summary_for("identityHash", size)
        assert s.reference_value == identity_hash(generate(size, config.seed)) == size
        assert result.summary_for("alwaysOne", size).reference_value == 1
    assert len(result.measurements) == 12


def test_failure_scenario_is_partial():
    reg = _registry(("failsAbove512", fails_above_512))
    result = run_suite(_config(), reg)
    assert result.succeeded
    assert [s.size for s in result.summaries] == [16]
    assert len(result.failures) == 1
    failure = result.failures[0]
    assert (failure.benchmark, failure.size, failure.stage) == ("failsAbove512", 1024, STAGE_EXECUTION)
    assert failure.error_type == "ValueError"
    assert result.failure_for("failsAbove512", 1024) is failure


def test_total_failure_reports_not_succeeded():
    def broken(buf):
        raise RuntimeError("always")

    result = run_suite(_config(), _registry(("broken", broken)))
    assert not result.succeeded
    assert len(result.failures) == 2


def test_empty_registry_is_configuration_error():
    with pytest.raises(ConfigurationError):
        run_suite(_config(), BenchmarkRegistry())


def test_run_suite_freezes_registry():
    reg = _registry(("one", always_one))
    run_suite(_config(sizes=[8]), reg)
    with pytest.raises(ConfigurationError):
        reg.register("two", always_one)


def test_pair_order_is_registration_then_size():
    reg = create_default_registry().subset(["crc32", "adler32"])
    pairs = list(iter_pairs(reg, _config(sizes=[64, 16])))
    assert pairs == [("adler32", 64), ("adler32", 16), ("crc32", 64), ("crc32", 16)]


def test_cancel_event_checked_between_pairs():
    cancel = threading.Event()

    def cancelling(buf):
        cancel.set()
        return 0

    reg = _registry(("cancelling", cancelling), ("never", always_one))
    result = run_suite(_config(), reg, cancel_event=cancel)
    assert result.cancelled
    # the running pair completes, nothing after it starts
    assert [(s.benchmark, s.size) for s in result.summaries] == [("cancelling", 16)]


def test_keyboard_interrupt_keeps_recorded_pairs():
    def interrupt_large(buf):
        if len(buf) > 512:
            raise KeyboardInterrupt
        return 0

    reg = _registry(("interrupting", interrupt_large), ("never", always_one))
    result = run_suite(_config(), reg)
    assert result.cancelled
    assert [(s.benchmark, s.size) for s in result.summaries] == [("interrupting", 16)]
    assert result.failures == []
    assert len(result.measurements) == 3


def test_default_catalogue_runs_inline():
    reg = create_default_registry().subset(["crc32", "crc32_binascii", "adler32", "adler32_pure"])
    result = run_suite(_config(sizes=[64]), reg)
    assert len(result.summaries) == 4
    refs = {s.benchmark: s.reference_value for s in result.summaries}
    assert refs["crc32"] == refs["crc32_binascii"]
    assert refs["adler32"] == refs["adler32_pure"]


@pytest.mark.parametrize("sizes", [[16, -5], [], [16, 16]])
def test_unvalidated_sizes_rejected_before_any_pair(sizes):
    calls = []
    reg = _registry(("len", lambda b: calls.append(1) or len(b)))
    config = _config().model_copy(update={"sizes": sizes})
    with pytest.raises(ConfigurationError):
        run_suite(config, reg)
    assert calls == []
