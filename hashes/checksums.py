"""Checksums: CRC32 and Adler-32 (two implementations each) and array hash codes."""

import binascii
import zlib
from operator import mul

ADLER_MOD = 65521
_MASK32 = 0xFFFFFFFF


def crc32(data: bytes) -> int:
    return zlib.crc32(data) & _MASK32


def crc32_binascii(data: bytes) -> int:
    return binascii.crc32(data) & _MASK32


def adler32(data: bytes) -> int:
    return zlib.adler32(data) & _MASK32


def adler32_pure(data: bytes) -> int:
    """Adler-32 in pure Python.

    a = 1 + sum(data); b is the sum of every intermediate a, i.e. each byte
    weighted by the number of positions from it to the end.
    """
    n = len(data)
    a = (1 + sum(data)) % ADLER_MOD
    b = (n + sum(map(mul, range(n, 0, -1), data))) % ADLER_MOD
    return (b << 16) | a


def _to_int32(h: int) -> int:
    h &= _MASK32
    return h - (1 << 32) if h & 0x80000000 else h


def java_array_hash_code(data: bytes) -> int:
    """Polynomial hash 31*h + b over signed bytes, as java.util.Arrays.hashCode(byte[])."""
    h = 1
    for b in data:
        h = (31 * h + (b - 256 if b > 127 else b)) & _MASK32
    return _to_int32(h)


def python_hash(data: bytes) -> int:
    # salted per interpreter (PYTHONHASHSEED); stable within one process tree under fork
    return hash(data)
