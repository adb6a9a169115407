"""Window TinyLFU cache: a small LRU window in front of a segmented LRU."""

from __future__ import annotations

import hashlib
import threading
from typing import Any

from ..keys import mem_hash, mem_hash_string
from .bloom import new_filter
from .lru import WINDOW, SegmentedLRU, StoreItem, WindowLRU
from .sketch import CmSketch

_MASK64 = 0xFFFFFFFFFFFFFFFF


def _conflict_hash(data: bytes) -> int:
    return int.from_bytes(hashlib.blake2b(data, digest_size=8).digest(), "little")


def _key_to_hash(key: Any) -> tuple[int, int]:
    """Primary hash and conflict hash of a key."""
    if key is None:
        return 0, 0
    if isinstance(key, str):
        return mem_hash_string(key), _conflict_hash(key.encode("utf-8"))
    if isinstance(key, (bytes, bytearray, memoryview)):
        data = bytes(key)
        return mem_hash(data), _conflict_hash(data)
    if isinstance(key, int) and not isinstance(key, bool):
        return key & _MASK64, 0
    raise TypeError("Key type not supported")


class Cache:
    """Bounded cache admitting items by estimated access frequency."""

    def __init__(self, size: int) -> None:
        if size <= 0:
            raise ValueError("cache size must be positive")
        lru_pct = 1
        lru_size = max(lru_pct * size // 100, 1)
        slru_size = max(int(size * ((100 - lru_pct) / 100.0)), 1)
        stage_one = max(int(0.2 * slru_size), 1)
        self._data: dict[int, StoreItem] = {}
        self._lru = WindowLRU(lru_size, self._data)
        self._slru = SegmentedLRU(self._data, stage_one, slru_size - stage_one)
        self._door = new_filter(size, 0.01)
        self._sketch = CmSketch(size)
        self._lock = threading.Lock()
        self._t = 0
        self.threshold = 0

    def set(self, key: Any, value: Any) -> bool:
        """Store ``value`` under ``key``; always reports success."""
        with self._lock:
            return self._set(key, value)

    def _set(self, key: Any, value: Any) -> bool:
        key_hash, conflict = _key_to_hash(key)
        item = StoreItem(stage=WINDOW, key=key_hash, conflict=conflict, value=value)
        evicted = self._lru.add(item)
        if evicted is None:
            return True
        victim = self._slru.victim()
        if victim is None:
            self._slru.add(evicted)
            return True
        if not self._door.allow(key_hash & 0xFFFFFFFF):
            return True
        if self._sketch.estimate(evicted.key) < self._sketch.estimate(victim.key):
            return True
        self._slru.add(evicted)
        return True

    def get(self, key: Any) -> tuple[Any, bool]:
        """Return the cached value and whether it was found."""
        with self._lock:
            return self._get(key)

    def _get(self, key: Any) -> tuple[Any, bool]:
        self._t += 1
        if self._t == self.threshold:
            self._sketch.reset()
            self._door.reset()
            self._t = 0

        key_hash, conflict = _key_to_hash(key)
        item = self._data.get(key_hash)
        if item is None or item.conflict != conflict:
            self._sketch.increment(key_hash)
            return None, False

        self._sketch.increment(item.key)
        if item.stage == WINDOW:
            self._lru.get(item)
        else:
            self._slru.get(item)
        return item.value, True

    def delete(self, key: Any) -> tuple[int, bool]:
        """Forget ``key``; return the removed item's conflict hash and whether it was present."""
        with self._lock:
            key_hash, conflict = _key_to_hash(key)
            item = self._data.get(key_hash)
            if item is None:
                return 0, False
            if conflict != 0 and conflict != item.conflict:
                return 0, False
            del self._data[key_hash]
            return item.conflict, True