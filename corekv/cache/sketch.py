"""Count-min sketch of 4-bit counters estimating key access frequency."""

from __future__ import annotations

import random
import time

CM_DEPTH = 4


def next_2_power(x: int) -> int:
    """The smallest power of two not below ``x``."""
    x -= 1
    for shift in (1, 2, 4, 8, 16, 32):
        x |= x >> shift
    return x + 1


class CmRow:
    """Row of 4-bit saturating counters, two per byte."""

    def __init__(self, num_counters: int) -> None:
        self.counters = bytearray(max(num_counters // 2, 1))

    def __len__(self) -> int:
        return len(self.counters) * 2

    def get(self, n: int) -> int:
        return (self.counters[n // 2] >> ((n & 1) * 4)) & 0x0F

    def increment(self, n: int) -> None:
        """Add one to counter ``n`` unless it is already at 15."""
        index = n // 2
        shift = (n & 1) * 4
        if (self.counters[index] >> shift) & 0x0F < 15:
            self.counters[index] += 1 << shift

    def reset(self) -> None:
        """Halve every counter."""
        self.counters[:] = bytes((b >> 1) & 0x77 for b in self.counters)

    def clear(self) -> None:
        self.counters[:] = bytes(len(self.counters))

    def __str__(self) -> str:
        return " ".join(f"{self.get(i):02d}" for i in range(len(self)))


class CmSketch:
    """Count-min sketch with ``CM_DEPTH`` rows."""

    def __init__(self, num_counters: int, rng: random.Random | None = None) -> None:
        if num_counters <= 0:
            raise ValueError("cmSketch: invalid numCounters")
        num_counters = next_2_power(num_counters)
        self.mask = num_counters - 1
        source = rng if rng is not None else random.Random(time.time_ns())
        self.seeds = [source.getrandbits(64) for _ in range(CM_DEPTH)]
        self.rows = [CmRow(num_counters) for _ in range(CM_DEPTH)]

    def _slots(self, hashed: int):
        return zip(self.rows, ((hashed ^ seed) & self.mask for seed in self.seeds))

    def increment(self, hashed: int) -> None:
        for row, slot in self._slots(hashed):
            row.increment(slot)

    def estimate(self, hashed: int) -> int:
        """The smallest counter for ``hashed``; never below its true count up to 15."""
        return min([255, *(row.get(slot) for row, slot in self._slots(hashed))])

    def reset(self) -> None:
        """Halve all counters."""
        for row in self.rows:
            row.reset()

    def clear(self) -> None:
        """Zero all counters."""
        for row in self.rows:
            row.clear()