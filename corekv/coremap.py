"""Thread-safe map keyed by a 64-bit hash of the caller's key."""

from __future__ import annotations

import threading
from typing import Any, Callable

from .keys import mem_hash, mem_hash_string

_MASK64 = 0xFFFFFFFFFFFFFFFF


def _key_to_hash(key: Any) -> int:
    if key is None:
        return 0
    if isinstance(key, (bytes, bytearray, memoryview)):
        return mem_hash(bytes(key))
    if isinstance(key, str):
        return mem_hash_string(key)
    if isinstance(key, int) and not isinstance(key, bool):
        return key & _MASK64
    raise TypeError(f"Key:[{type(key).__name__}] type not supported")


class CoreMap:
    """Map whose entries are stored under hashes of their keys."""

    def __init__(self) -> None:
        self._data: dict[int, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: Any) -> tuple[Any, bool]:
        """Return the stored value and whether one was found."""
        hashed = _key_to_hash(key)
        with self._lock:
            if hashed in self._data:
                return self._data[hashed], True
            return None, False

    def set(self, key: Any, value: Any) -> None:
        hashed = _key_to_hash(key)
        with self._lock:
            self._data[hashed] = value

    def delete(self, key: Any) -> None:
        hashed = _key_to_hash(key)
        with self._lock:
            self._data.pop(hashed, None)

    def range(self, fn: Callable[[int, Any], bool]) -> None:
        """Call ``fn(hash, value)`` for each entry until it returns false."""
        with self._lock:
            items = list(self._data.items())
        for hashed, value in items:
            if not fn(hashed, value):
                break

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)