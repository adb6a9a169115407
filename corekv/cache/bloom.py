"""Bloom filter used by the cache as its admission doorkeeper."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator

from ..bloom import hash_bytes

_MASK = 0xFFFFFFFF


def _delta(h: int) -> int:
    return ((h >> 17) | (h << 15)) & _MASK


@dataclass(eq=False)
class BloomFilter:
    """Mutable Bloom filter; the last byte of ``bitmap`` records the probe count."""

    bitmap: bytearray
    k: int

    def __len__(self) -> int:
        return len(self.bitmap)

    def _positions(self, h: int) -> Iterator[int]:
        n_bits = 8 * (len(self.bitmap) - 1)
        h &= _MASK
        delta = _delta(h)
        for _ in range(self.k):
            yield h % n_bits
            h = (h + delta) & _MASK

    def may_contain_key(self, key: bytes) -> bool:
        return self.may_contain(hash_bytes(key))

    def may_contain(self, h: int) -> bool:
        """Whether ``h`` may have been inserted; false positives are possible."""
        if len(self.bitmap) < 2:
            return False
        if self.k > 30:
            # Reserved for other encodings; treat as a match.
            return True
        return all(self.bitmap[pos // 8] & (1 << (pos % 8)) for pos in self._positions(h))

    def insert_key(self, key: bytes) -> bool:
        return self.insert(hash_bytes(key))

    def insert(self, h: int) -> bool:
        """Set the bits for ``h``."""
        if self.k > 30:
            return True
        for pos in self._positions(h):
            self.bitmap[pos // 8] |= 1 << (pos % 8)
        return True

    def allow_key(self, key: bytes) -> bool:
        return self.allow(hash_bytes(key))

    def allow(self, h: int) -> bool:
        """Report whether ``h`` was already seen, recording it if it was not."""
        already = self.may_contain(h)
        if not already:
            self.insert(h)
        return already

    def reset(self) -> None:
        """Clear every byte of the bitmap."""
        self.bitmap[:] = bytes(len(self.bitmap))


def bloom_bits_per_key(num_entries: int, fp: float) -> int:
    """Bits per key needed to reach the false positive rate ``fp``."""
    size = -1 * num_entries * math.log(fp) / math.pow(0.69314718056, 2)
    return int(math.ceil(size / num_entries))


def init_filter(num_entries: int, bits_per_key: int) -> BloomFilter:
    """An empty filter sized for ``num_entries`` keys at ``bits_per_key`` bits each."""
    bits_per_key = max(bits_per_key, 0)
    k = min(max(int(bits_per_key * 0.69), 1), 30)
    n_bits = max(num_entries * bits_per_key, 64)
    n_bytes = (n_bits + 7) // 8
    bitmap = bytearray(n_bytes + 1)
    bitmap[n_bytes] = k
    return BloomFilter(bitmap=bitmap, k=k)


def new_filter(num_entries: int, false_positive: float) -> BloomFilter:
    """An empty filter for ``num_entries`` keys at the false positive rate given."""
    return init_filter(num_entries, bloom_bits_per_key(num_entries, false_positive))


__all__ = [
    "BloomFilter",
    "bloom_bits_per_key",
    "init_filter",
    "new_filter",
]