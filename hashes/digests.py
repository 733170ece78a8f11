"""Cryptographic and BLAKE2 digests truncated to a fixed-width integer."""

import hashlib


def _as_long(digest: bytes) -> int:
    # first 8 bytes, little-endian, signed
    return int.from_bytes(digest[:8], "little", signed=True)


def _as_int(digest: bytes) -> int:
    return int.from_bytes(digest[:4], "little", signed=True)


def md5(data: bytes) -> int:
    return _as_long(hashlib.md5(data).digest())


def sha1(data: bytes) -> int:
    return _as_long(hashlib.sha1(data).digest())


def sha256(data: bytes) -> int:
    return _as_long(hashlib.sha256(data).digest())


def sha512(data: bytes) -> int:
    return _as_long(hashlib.sha512(data).digest())


def blake2s_32(data: bytes) -> int:
    return _as_int(hashlib.blake2s(data, digest_size=4).digest())


def blake2b_64(data: bytes) -> int:
    return _as_long(hashlib.blake2b(data, digest_size=8).digest())
