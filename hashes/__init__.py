"""Hash and checksum functions under test, and the registry that names them."""

from hashes.registry import BenchmarkRegistry, HashFn
from hashes.checksums import (
    adler32,
    adler32_pure,
    crc32,
    crc32_binascii,
    java_array_hash_code,
    python_hash,
)
from hashes.murmur import good_fast_hash_32, good_fast_hash_64, murmur2_32, murmur3_32, murmur3_x64_128
from hashes.digests import blake2b_64, blake2s_32, md5, sha1, sha256, sha512

# registration order drives run and report order
DEFAULT_HASHES: list[tuple[str, HashFn]] = [
    ("java_array_hash_code", java_array_hash_code),
    ("python_hash", python_hash),
    ("adler32", adler32),
    ("adler32_pure", adler32_pure),
    ("crc32", crc32),
    ("crc32_binascii", crc32_binascii),
    ("murmur2", murmur2_32),
    ("murmur3", murmur3_32),
    ("murmur3_128", murmur3_x64_128),
    ("good_fast_hash_32", good_fast_hash_32),
    ("good_fast_hash_64", good_fast_hash_64),
    ("sha1", sha1),
    ("sha256", sha256),
    ("sha512", sha512),
    ("md5", md5),
    ("blake2s_32", blake2s_32),
    ("blake2b_64", blake2b_64),
]

# pairs computing the same algorithm, used for cross-checks
EQUIVALENT_HASHES: list[tuple[str, str]] = [
    ("crc32", "crc32_binascii"),
    ("adler32", "adler32_pure"),
]


def create_default_registry() -> BenchmarkRegistry:
    """Fresh, frozen registry with the full catalogue."""
    registry = BenchmarkRegistry()
    for name, fn in DEFAULT_HASHES:
        registry.register(name, fn)
    return registry.freeze()


__all__ = [
    "BenchmarkRegistry",
    "HashFn",
    "DEFAULT_HASHES",
    "EQUIVALENT_HASHES",
    "create_default_registry",
]
