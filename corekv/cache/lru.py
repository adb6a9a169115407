"""Window LRU and segmented LRU used by the cache."""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from typing import Any

WINDOW = 0
STAGE_ONE = 1
STAGE_TWO = 2


@dataclass(eq=False)
class StoreItem:
    """A cached value with its key hash, conflict hash and segment."""

    stage: int
    key: int
    conflict: int
    value: Any


def _forget(data: dict[int, StoreItem], item: StoreItem) -> None:
    if data.get(item.key) is item:
        del data[item.key]


class WindowLRU:
    """Small LRU that every new item enters first.

    ``data`` is the map of key hashes to items shared with the rest of the cache.
    """

    def __init__(self, size: int, data: dict[int, StoreItem]) -> None:
        self.data = data
        self.capacity = size
        # Insertion order: first is least recently used, last is most recent.
        self._items: OrderedDict[int, StoreItem] = OrderedDict()

    def __len__(self) -> int:
        return len(self._items)

    def add(self, item: StoreItem) -> StoreItem | None:
        """Add ``item``; return the item it pushed out, if the window was full."""
        evicted = None
        if len(self._items) >= self.capacity:
            _, evicted = self._items.popitem(last=False)
            _forget(self.data, evicted)
        self.data[item.key] = item
        self._items[id(item)] = item
        return evicted

    def get(self, item: StoreItem) -> None:
        """Mark ``item`` as most recently used."""
        self._items.move_to_end(id(item))


class SegmentedLRU:
    """LRU with a probation segment and a protected segment."""

    def __init__(self, data: dict[int, StoreItem], stage_one_cap: int, stage_two_cap: int) -> None:
        self.data = data
        self.stage_one_cap = stage_one_cap
        self.stage_two_cap = stage_two_cap
        self._one: OrderedDict[int, StoreItem] = OrderedDict()
        self._two: OrderedDict[int, StoreItem] = OrderedDict()

    def __len__(self) -> int:
        return len(self._one) + len(self._two)

    def _full(self) -> bool:
        return len(self) >= self.stage_one_cap + self.stage_two_cap

    def add(self, item: StoreItem) -> None:
        """Put ``item`` on probation, pushing out the oldest probation item if full."""
        item.stage = STAGE_ONE
        if len(self._one) >= self.stage_one_cap and self._full():
            _, evicted = self._one.popitem(last=False)
            _forget(self.data, evicted)
        self.data[item.key] = item
        self._one[id(item)] = item

    def get(self, item: StoreItem) -> None:
        """Record a hit, promoting a probation item to the protected segment."""
        if item.stage == STAGE_TWO:
            self._two.move_to_end(id(item))
            return
        del self._one[id(item)]
        if len(self._two) >= self.stage_two_cap:
            _, demoted = self._two.popitem(last=False)
            demoted.stage = STAGE_ONE
            self._one[id(demoted)] = demoted
        item.stage = STAGE_TWO
        self._two[id(item)] = item
        self.data[item.key] = item

    def victim(self) -> StoreItem | None:
        """The item to evict next, or None while there is still room."""
        if not self._full() or not self._one:
            return None
        return next(iter(self._one.values()))