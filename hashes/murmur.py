"""MurmurHash2, MurmurHash3 (x86 32-bit and x64 128-bit) in pure Python."""

import struct

_MASK32 = 0xFFFFFFFF
MURMUR2_SEED = 0x9747B28C


def _rotl32(x: int, r: int) -> int:
    return ((x << r) | (x >> (32 - r))) & _MASK32


def _to_int32(h: int) -> int:
    return h - (1 << 32) if h & 0x80000000 else h


def _blocks(data: bytes) -> tuple[int, ...]:
    n4 = len(data) & ~3
    return tuple(k for (k,) in struct.iter_unpack("<I", data[:n4]))


def murmur2_32(data: bytes, seed: int = MURMUR2_SEED) -> int:
    m = 0x5BD1E995
    length = len(data)
    h = (seed ^ length) & _MASK32
    for k in _blocks(data):
        k = (k * m) & _MASK32
        k ^= k >> 24
        k = (k * m) & _MASK32
        h = (h * m) & _MASK32
        h ^= k
    tail = length & ~3
    rem = length & 3
    if rem == 3:
        h ^= data[tail + 2] << 16
    if rem >= 2:
        h ^= data[tail + 1] << 8
    if rem >= 1:
        h ^= data[tail]
        h = (h * m) & _MASK32
    h ^= h >> 13
    h = (h * m) & _MASK32
    h ^= h >> 15
    return _to_int32(h)


def murmur3_32(data: bytes, seed: int = 0) -> int:
    c1 = 0xCC9E2D51
    c2 = 0x1B873593
    length = len(data)
    h = seed & _MASK32
    for k in _blocks(data):
        k = (k * c1) & _MASK32
        k = _rotl32(k, 15)
        k = (k * c2) & _MASK32
        h ^= k
        h = _rotl32(h, 13)
        h = (h * 5 + 0xE6546B64) & _MASK32
    tail = length & ~3
    rem = length & 3
    if rem:
        k = 0
        if rem == 3:
            k ^= data[tail + 2] << 16
        if rem >= 2:
            k ^= data[tail + 1] << 8
        k ^= data[tail]
        k = (k * c1) & _MASK32
        k = _rotl32(k, 15)
        k = (k * c2) & _MASK32
        h ^= k
    h ^= length
    h ^= h >> 16
    h = (h * 0x85EBCA6B) & _MASK32
    h ^= h >> 13
    h = (h * 0xC2B2AE35) & _MASK32
    h ^= h >> 16
    return _to_int32(h)


_MASK64 = 0xFFFFFFFFFFFFFFFF
GOOD_FAST_HASH_SEED = 0x5F3759DF


def _rotl64(x: int, r: int) -> int:
    return ((x << r) | (x >> (64 - r))) & _MASK64


def _fmix64(k: int) -> int:
    k ^= k >> 33
    k = (k * 0xFF51AFD7ED558CCD) & _MASK64
    k ^= k >> 33
    k = (k * 0xC4CEB9FE1A85EC53) & _MASK64
    k ^= k >> 33
    return k


def murmur3_x64_128(data: bytes, seed: int = 0) -> int:
    """MurmurHash3 x64 128-bit, truncated to the first 8 little-endian bytes as a signed long."""
    c1 = 0x87C37B91114253D5
    c2 = 0x4CF5AD432745937F
    length = len(data)
    h1 = h2 = seed & _MASK64
    n16 = length & ~15
    for k1, k2 in struct.iter_unpack("<QQ", data[:n16]):
        k1 = (k1 * c1) & _MASK64
        k1 = _rotl64(k1, 31)
        k1 = (k1 * c2) & _MASK64
        h1 ^= k1
        h1 = _rotl64(h1, 27)
        h1 = (h1 + h2) & _MASK64
        h1 = (h1 * 5 + 0x52DCE729) & _MASK64
        k2 = (k2 * c2) & _MASK64
        k2 = _rotl64(k2, 33)
        k2 = (k2 * c1) & _MASK64
        h2 ^= k2
        h2 = _rotl64(h2, 31)
        h2 = (h2 + h1) & _MASK64
        h2 = (h2 * 5 + 0x38495AB5) & _MASK64
    tail = data[n16:]
    if len(tail) > 8:
        k2 = int.from_bytes(tail[8:], "little")
        k2 = (k2 * c2) & _MASK64
        k2 = _rotl64(k2, 33)
        k2 = (k2 * c1) & _MASK64
        h2 ^= k2
    if tail:
        k1 = int.from_bytes(tail[:8], "little")
        k1 = (k1 * c1) & _MASK64
        k1 = _rotl64(k1, 31)
        k1 = (k1 * c2) & _MASK64
        h1 ^= k1
    h1 ^= length
    h2 ^= length
    h1 = (h1 + h2) & _MASK64
    h2 = (h2 + h1) & _MASK64
    h1 = _fmix64(h1)
    h2 = _fmix64(h2)
    h1 = (h1 + h2) & _MASK64
    return h1 - (1 << 64) if h1 & (1 << 63) else h1


# seeded murmur3 pair, like Guava's goodFastHash(32) / goodFastHash(64) with a pinned seed
def good_fast_hash_32(data: bytes) -> int:
    return murmur3_32(data, GOOD_FAST_HASH_SEED)


def good_fast_hash_64(data: bytes) -> int:
    return murmur3_x64_128(data, GOOD_FAST_HASH_SEED)
