"""Constants, value pointers, checksums and integer byte conversions."""

from __future__ import annotations

import os
import struct
import time
from dataclasses import dataclass
from typing import Any, Iterable

MAX_LEVEL_NUM = 7
DEFAULT_VALUE_THRESHOLD = 1024

MANIFEST_FILENAME = "MANIFEST"
MANIFEST_REWRITE_FILENAME = "REWRITEMANIFEST"
MANIFEST_DELETIONS_REWRITE_THRESHOLD = 10000
MANIFEST_DELETIONS_RATIO = 10
DEFAULT_FILE_FLAG = os.O_RDWR | os.O_CREAT | os.O_APPEND
DEFAULT_FILE_MODE = 0o666
MAX_VALUE_LOG_SIZE = 10 << 20
MAX_HEADER_SIZE = 21
VLOG_HEADER_SIZE = 0
MAX_VLOG_FILE_SIZE = 0xFFFFFFFF
MI = 1 << 20
KV_WRITE_CH_CAPACITY = 1000

BIT_DELETE = 1 << 0
BIT_VALUE_POINTER = 1 << 1

MAGIC_TEXT = b"HARD"
MAGIC_VERSION = 1

VALUE_LOG_HEADER_SIZE = 20
VALUE_PTR_SIZE = 12
CRC_SIZE = 4

_CASTAGNOLI = 0x82F63B78
_VALUE_PTR_LAYOUT = struct.Struct("<III")


def _make_table(poly: int) -> tuple[int, ...]:
    table = []
    for byte in range(256):
        crc = byte
        for _ in range(8):
            crc = (crc >> 1) ^ poly if crc & 1 else crc >> 1
        table.append(crc)
    return tuple(table)


_CRC_TABLE = _make_table(_CASTAGNOLI)


def crc32c(data: bytes, value: int = 0) -> int:
    """Castagnoli CRC-32 of ``data``, continuing from the checksum ``value``."""
    crc = value ^ 0xFFFFFFFF
    table = _CRC_TABLE
    for byte in data:
        crc = table[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc ^ 0xFFFFFFFF


@dataclass
class ValuePtr:
    """Location of a value inside a value log file."""

    length: int = 0
    offset: int = 0
    fid: int = 0

    def less(self, other: ValuePtr | None) -> bool:
        """Order by file id, then offset, then length."""
        if other is None:
            return False
        return (self.fid, self.offset, self.length) < (other.fid, other.offset, other.length)

    def is_zero(self) -> bool:
        return self.fid == 0 and self.offset == 0 and self.length == 0

    def encode(self) -> bytes:
        return _VALUE_PTR_LAYOUT.pack(self.length, self.offset, self.fid)

    @classmethod
    def decode(cls, data: bytes) -> ValuePtr:
        if len(data) < VALUE_PTR_SIZE:
            raise ValueError(f"value pointer needs {VALUE_PTR_SIZE} bytes, got {len(data)}")
        length, offset, fid = _VALUE_PTR_LAYOUT.unpack_from(data)
        return cls(length=length, offset=offset, fid=fid)


def bytes_to_u32(data: bytes) -> int:
    """Read a big-endian 32-bit unsigned integer."""
    return struct.unpack_from(">I", data)[0]


def bytes_to_u64(data: bytes) -> int:
    """Read a big-endian 64-bit unsigned integer."""
    return struct.unpack_from(">Q", data)[0]


def u32_to_bytes(value: int) -> bytes:
    return struct.pack(">I", value)


def u64_to_bytes(value: int) -> bytes:
    return struct.pack(">Q", value)


def u32_slice_to_bytes(values: Iterable[int]) -> bytes:
    """Pack 32-bit unsigned integers in machine (little-endian) layout."""
    items = list(values)
    return struct.pack(f"<{len(items)}I", *items)


def bytes_to_u32_slice(data: bytes) -> list[int]:
    """Unpack whole 32-bit unsigned integers from machine (little-endian) layout."""
    count = len(data) // 4
    return list(struct.unpack_from(f"<{count}I", data))


def is_value_ptr(entry: Any) -> bool:
    """Whether the entry's value is a pointer into the value log."""
    return entry.meta & BIT_VALUE_POINTER > 0


def is_deleted_or_expired(meta: int, expires_at: int) -> bool:
    if meta & BIT_DELETE > 0:
        return True
    if expires_at == 0:
        return False
    return expires_at <= int(time.time())


def discard_entry(entry: Any, stored: Any) -> bool:
    """Whether a value log entry can be dropped, given what the tree stores for its key."""
    if is_deleted_or_expired(stored.meta, stored.expires_at):
        return True
    return stored.meta & BIT_VALUE_POINTER == 0