"""Versioned keys: a user key followed by an inverted 8-byte timestamp."""

from __future__ import annotations

import struct
import time

from .errors import cond_panic

_MAX_UINT64 = 0xFFFFFFFFFFFFFFFF


def parse_key(key: bytes) -> bytes:
    """The user key without its timestamp suffix."""
    if len(key) < 8:
        return key
    return key[:-8]


def parse_ts(key: bytes) -> int:
    """The timestamp stored in the key's suffix, or 0 if there is none."""
    if len(key) <= 8:
        return 0
    return _MAX_UINT64 - struct.unpack(">Q", key[-8:])[0]


def same_key(src: bytes, dst: bytes) -> bool:
    """Whether two versioned keys have the same user key."""
    if len(src) != len(dst):
        return False
    return parse_key(src) == parse_key(dst)


def key_with_ts(key: bytes, ts: int) -> bytes:
    """Append ``ts`` so that newer versions of a key sort first."""
    return bytes(key) + struct.pack(">Q", _MAX_UINT64 - ts)


def _cmp(a: bytes, b: bytes) -> int:
    return (a > b) - (a < b)


def compare_keys(key1: bytes, key2: bytes) -> int:
    """Compare user keys first, then timestamp suffixes; both keys need a suffix."""
    cond_panic(
        len(key1) <= 8 or len(key2) <= 8,
        ValueError(f"{key1!r},{key2!r} < 8"),
    )
    result = _cmp(key1[:-8], key2[:-8])
    if result:
        return result
    return _cmp(key1[-8:], key2[-8:])


def mem_hash(data: bytes) -> int:
    """Fast 64-bit hash of ``data``; its seed changes with every process."""
    return hash(bytes(data)) & _MAX_UINT64


def mem_hash_string(text: str) -> int:
    """Fast 64-bit hash of ``text``, equal to ``mem_hash`` of its UTF-8 bytes."""
    return mem_hash(text.encode("utf-8"))


def new_cur_version() -> int:
    """The current time in whole seconds, used as a version."""
    return time.time_ns() // 1_000_000_000