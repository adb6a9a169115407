"""Thread-safe random numbers and random test entries."""

from __future__ import annotations

import random
import threading
import time

from .entry import Entry

_rng = random.Random(time.time_ns())
_lock = threading.Lock()

# Includes multi-byte characters so that keys and values hold arbitrary bytes.
_POOL = (
    "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "~=+%^*/()[]{}/!@#$?|©®😁😭🉑️🐂㎡硬核课堂"
).encode("utf-8")

_TWELVE_HOURS_NS = 12 * 3600 * 1_000_000_000


def int63n(n: int) -> int:
    """A random integer in ``[0, n)``."""
    if n <= 0:
        raise ValueError("invalid argument to int63n")
    with _lock:
        return _rng.randrange(n)


def rand_n(n: int) -> int:
    """A random integer in ``[0, n)``."""
    if n <= 0:
        raise ValueError("invalid argument to rand_n")
    with _lock:
        return _rng.randrange(n)


def float64() -> float:
    """A random float in ``[0.0, 1.0)``."""
    with _lock:
        return _rng.random()


def rand_str(length: int) -> bytes:
    """``length`` random bytes drawn from the UTF-8 bytes of a mixed character pool."""
    with _lock:
        return bytes(_rng.choice(_POOL) for _ in range(length))


def build_entry() -> Entry:
    """A random entry expiring in twelve hours, with the expiry in milliseconds."""
    key = rand_str(16) + b"12345678"
    value = rand_str(128)
    expires_at = (time.time_ns() + _TWELVE_HOURS_NS) // 1_000_000
    return Entry(key=key, value=value, expires_at=expires_at)