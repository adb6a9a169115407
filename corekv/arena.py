"""Bump allocator holding skiplist nodes, keys and values in one byte buffer."""

from __future__ import annotations

import threading

from .entry import ValueStruct

MAX_HEIGHT = 20
OFFSET_SIZE = 4
NODE_ALIGN = 7
# Node layout: value u64 | key offset u32 | key size u16 | height u16 | tower u32 * MAX_HEIGHT
NODE_TOWER_OFFSET = 16
MAX_NODE_SIZE = NODE_TOWER_OFFSET + MAX_HEIGHT * OFFSET_SIZE


def assert_true(condition: bool) -> None:
    """Raise ``AssertionError`` unless ``condition`` holds."""
    if not condition:
        raise AssertionError("Assert failed")


class Arena:
    """Fixed-size (or optionally growing) buffer handing out offsets.

    Offset 0 is never handed out, so it can stand for "no node".
    """

    def __init__(self, capacity: int) -> None:
        self.buf = bytearray(capacity)
        self.should_grow = False
        self._n = 1
        self._lock = threading.Lock()

    def allocate(self, size: int) -> int:
        """Reserve ``size`` bytes and return the offset where they start."""
        with self._lock:
            offset = self._n + size
            if not self.should_grow:
                assert_true(offset <= len(self.buf))
                self._n = offset
                return offset - size
            self._n = offset
            # Keep a full node's worth of slack at the end of the buffer.
            if offset > len(self.buf) - MAX_NODE_SIZE:
                grow_by = max(min(len(self.buf), 1 << 30), size)
                self.buf.extend(bytes(grow_by))
            return offset - size

    def size(self) -> int:
        """Number of bytes handed out so far, including the reserved first byte."""
        return self._n

    def put_node(self, height: int) -> int:
        """Reserve an 8-byte aligned node whose tower has ``height`` levels."""
        unused = (MAX_HEIGHT - height) * OFFSET_SIZE
        start = self.allocate(MAX_NODE_SIZE - unused + NODE_ALIGN)
        return (start + NODE_ALIGN) & ~NODE_ALIGN

    def put_val(self, value: ValueStruct) -> int:
        """Copy an encoded value into the arena and return its offset."""
        data = value.encode_value()
        offset = self.allocate(len(data))
        self.buf[offset:offset + len(data)] = data
        return offset

    def put_key(self, key: bytes) -> int:
        """Copy a key into the arena and return its offset."""
        key = bytes(key)
        offset = self.allocate(len(key))
        self.buf[offset:offset + len(key)] = key
        assert_true(bytes(self.buf[offset:offset + len(key)]) == key)
        return offset

    def get_key(self, offset: int, size: int) -> bytes:
        return bytes(self.buf[offset:offset + size])

    def get_val(self, offset: int, size: int) -> ValueStruct:
        """Decode the value stored at ``offset`` spanning ``size`` bytes."""
        return ValueStruct.decode_value(bytes(self.buf[offset:offset + size]))