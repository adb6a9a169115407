"""Bloom filters over 32-bit key hashes, in the LevelDB layout."""

from __future__ import annotations

import math
import struct
from typing import Iterable

_MASK = 0xFFFFFFFF
_SEED = 0xBC9F1D34
_MULT = 0xC6A4A793


def hash_bytes(data: bytes) -> int:
    """Murmur-like 32-bit hash used to place keys in the filter."""
    data = bytes(data)
    h = _SEED ^ ((len(data) * _MULT) & _MASK)
    whole = len(data) - len(data) % 4
    for (word,) in struct.iter_unpack("<I", data[:whole]):
        h = ((h + word) * _MULT) & _MASK
        h ^= h >> 16
    tail = data[whole:]
    if tail:
        h = ((h + int.from_bytes(tail, "little")) * _MULT) & _MASK
        h ^= h >> 24
    return h


def _delta(h: int) -> int:
    return ((h >> 17) | (h << 15)) & _MASK


class Filter(bytes):
    """An encoded set of key hashes; the last byte holds the probe count."""

    def may_contain_key(self, key: bytes) -> bool:
        return self.may_contain(hash_bytes(key))

    def may_contain(self, h: int) -> bool:
        """Whether the filter may hold ``h``; false positives are possible."""
        if len(self) < 2:
            return False
        k = self[-1]
        if k > 30:
            # Reserved for other encodings; treat as a match.
            return True
        n_bits = 8 * (len(self) - 1)
        h &= _MASK
        delta = _delta(h)
        for _ in range(k):
            bit_pos = h % n_bits
            if not self[bit_pos // 8] & (1 << (bit_pos % 8)):
                return False
            h = (h + delta) & _MASK
        return True

    def bit_string(self) -> str:
        """Every bit, lowest first in each byte, as ``1`` or ``.``."""
        return "".join("1" if byte >> bit & 1 else "." for byte in self for bit in range(8))


def bloom_bits_per_key(num_entries: int, fp: float) -> int:
    """Bits per key needed to reach the false positive rate ``fp``."""
    size = -1 * num_entries * math.log(fp) / math.pow(0.69314718056, 2)
    return int(math.ceil(size / num_entries))


def new_filter(keys: Iterable[int], bits_per_key: int) -> Filter:
    """Build a filter holding the given key hashes with about ``bits_per_key`` bits each."""
    hashes = [h & _MASK for h in keys]
    bits_per_key = max(bits_per_key, 0)
    k = min(max(int(bits_per_key * 0.69), 1), 30)
    n_bits = max(len(hashes) * bits_per_key, 64)
    n_bytes = (n_bits + 7) // 8
    n_bits = n_bytes * 8
    filter_bytes = bytearray(n_bytes + 1)
    for h in hashes:
        delta = _delta(h)
        for _ in range(k):
            bit_pos = h % n_bits
            filter_bytes[bit_pos // 8] |= 1 << (bit_pos % 8)
            h = (h + delta) & _MASK
    filter_bytes[n_bytes] = k
    return Filter(filter_bytes)