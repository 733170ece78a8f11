"""Tests for the benchmark registry and the hash catalogue."""

import pytest
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from bench.errors import BenchmarkNotFoundError, ConfigurationError
from hashes import DEFAULT_HASHES, EQUIVALENT_HASHES, create_default_registry
from hashes.checksums import adler32, adler32_pure, crc32, crc32_binascii, java_array_hash_code, python_hash
from hashes.murmur import GOOD_FAST_HASH_SEED, good_fast_hash_32, good_fast_hash_64, murmur2_32, murmur3_32, murmur3_x64_128
from hashes.registry import BenchmarkRegistry
from workload.generators import WorkloadGenerator, generate

INT32 = (-(2 ** 31), 2 ** 31 - 1)
INT64 = (-(2 ** 63), 2 ** 63 - 1)


def test_register_and_lookup():
    reg = BenchmarkRegistry()
    reg.register("a", len)
    reg.register("b", crc32)
    assert reg.lookup("b") is crc32
    assert "a" in reg
    assert len(reg) == 2


def test_duplicate_registration_is_configuration_error():
    reg = BenchmarkRegistry()
    reg.register("crc32", crc32)
    with pytest.raises(ConfigurationError):
        reg.register("crc32", crc32_binascii)


def test_register_rejects_bad_entries():
    reg = BenchmarkRegistry()
    with pytest.raises(ConfigurationError):
        reg.register("", crc32)
    with pytest.raises(ConfigurationError):
        reg.register("x", 42)


def test_lookup_missing_raises_not_found():
    reg = BenchmarkRegistry()
    with pytest.raises(BenchmarkNotFoundError):
        reg.lookup("nope")
    with pytest.raises(KeyError):
        reg.lookup("nope")


def test_list_all_preserves_registration_order():
    reg = BenchmarkRegistry()
    for name in ["zeta", "alpha", "mid"]:
        reg.register(name, len)
    assert reg.list_all() == ["zeta", "alpha", "mid"]


def test_frozen_registry_rejects_register():
    reg = BenchmarkRegistry()
    reg.register("a", len)
    reg.freeze()
    assert reg.frozen
    with pytest.raises(ConfigurationError):
        reg.register("b", len)


def test_subset_keeps_registry_order():
    reg = create_default_registry()
    sub = reg.subset(["crc32", "adler32"])
    assert sub.list_all() == ["adler32", "crc32"]
    assert sub.frozen
    with pytest.raises(BenchmarkNotFoundError):
        reg.subset(["crc32", "missing"])


def test_default_registry_is_fresh_each_time():
    r1 = create_default_registry()
    r2 = create_default_registry()
    assert r1 is not r2
    assert r1.list_all() == [name for name, _ in DEFAULT_HASHES]


def test_known_vectors():
    assert crc32(b"hello") == 907060870
    assert adler32(b"Wikipedia") == 0x11E60398
    assert adler32_pure(b"Wikipedia") == 0x11E60398
    assert murmur3_32(b"") == 0
    assert murmur3_32(b"", seed=1) == 0x514E28B7
    assert murmur3_32(b"\x00\x00\x00\x00") == 0x2362F9DE
    assert murmur3_32(b"aaaa", seed=0x9747B28C) == 0x5A97808A
    assert murmur3_32(b"Hello, world!", seed=0x9747B28C) == 0x24884CBA
    assert murmur3_32(b"The quick brown fox jumps over the lazy dog", seed=0x9747B28C) == 0x2FA826CD
    assert murmur3_32(b"foo") == -156908512
    assert murmur2_32(b"") == 275646681
    assert murmur2_32(b"hello") == 2132663229
    assert murmur3_x64_128(b"") == 0
    assert murmur3_x64_128(b"foo") == -2129773440516405919
    assert java_array_hash_code(b"") == 1
    assert java_array_hash_code(bytes([1, 2, 3])) == 30817
    assert java_array_hash_code(bytes([0xFF])) == 30


@pytest.mark.parametrize("left,right", EQUIVALENT_HASHES)
@pytest.mark.parametrize("size", [1, 3, 16, 1024, 8196])
def test_equivalent_implementations_agree(left, right, size):
    reg = create_default_registry()
    f, g = reg.lookup(left), reg.lookup(right)
    gen = WorkloadGenerator(1234)
    fixed = generate(size, 1234)
    assert f(fixed) == g(fixed)
    for _ in range(3):
        buf = gen.refresh(size).buffer
        assert f(buf) == g(buf)


@pytest.mark.parametrize("name,fn", DEFAULT_HASHES)
def test_catalogue_is_pure_and_integer(name, fn):
    buf = generate(257, 11)
    first = fn(buf)
    assert isinstance(first, int) and not isinstance(first, bool)
    assert fn(buf) == first
    assert INT64[0] <= first <= INT64[1] or name == "python_hash"


@pytest.mark.parametrize("fn", [murmur2_32, murmur3_32, good_fast_hash_32, java_array_hash_code])
def test_32bit_hashes_stay_in_signed_range(fn):
    for size in (1, 2, 3, 4, 5, 63, 64):
        v = fn(generate(size, size))
        assert INT32[0] <= v <= INT32[1]


def test_murmur_seed_changes_output():
    buf = generate(100, 3)
    assert murmur2_32(buf, seed=1) != murmur2_32(buf, seed=2)
    assert murmur3_32(buf, seed=1) != murmur3_32(buf, seed=2)
    assert murmur3_x64_128(buf, seed=1) != murmur3_x64_128(buf, seed=2)


@pytest.mark.parametrize("size", [1, 7, 8, 9, 15, 16, 17, 33])
def test_murmur3_128_tail_lengths_are_distinct(size):
    buf = generate(size, size)
    value = murmur3_x64_128(buf)
    assert INT64[0] <= value <= INT64[1]
    assert value != murmur3_x64_128(buf[:-1])


def test_good_fast_hashes_use_pinned_seed():
    buf = generate(64, 9)
    assert good_fast_hash_32(buf) == murmur3_32(buf, seed=GOOD_FAST_HASH_SEED)
    assert good_fast_hash_64(buf) == murmur3_x64_128(buf, seed=GOOD_FAST_HASH_SEED)
    assert good_fast_hash_64(buf) != murmur3_x64_128(buf)
    reg = create_default_registry()
    assert reg.lookup("good_fast_hash_32") is good_fast_hash_32
    assert reg.lookup("good_fast_hash_64") is good_fast_hash_64


def test_python_hash_matches_builtin():
    buf = generate(32, 1)
    assert python_hash(buf) == hash(buf)
