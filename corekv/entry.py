"""Entries, stored values, value log headers and unsigned varints."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

_MAX_VARINT_LEN = 10
_U32_MASK = 0xFFFFFFFF


def size_varint(value: int) -> int:
    """Number of bytes ``value`` takes as an unsigned varint."""
    n = 1
    value >>= 7
    while value:
        n += 1
        value >>= 7
    return n


def put_uvarint(value: int) -> bytes:
    """Encode a non-negative integer as an unsigned varint."""
    if value < 0:
        raise ValueError("uvarint cannot encode a negative number")
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def _overflow() -> ValueError:
    return ValueError("varint overflows a 64-bit integer")


def decode_uvarint(data: bytes, offset: int = 0) -> tuple[int, int]:
    """Decode an unsigned varint at ``offset``; return the value and the offset after it."""
    value = 0
    shift = 0
    for i, byte in enumerate(data[offset:offset + _MAX_VARINT_LEN]):
        if byte < 0x80:
            if i == _MAX_VARINT_LEN - 1 and byte > 1:
                raise _overflow()
            return value | byte << shift, offset + i + 1
        value |= (byte & 0x7F) << shift
        shift += 7
    if len(data) - offset >= _MAX_VARINT_LEN:
        raise _overflow()
    raise ValueError("truncated varint")


def read_uvarint(reader: Any) -> int:
    """Read an unsigned varint from an object with a ``read_byte`` method."""
    value = 0
    shift = 0
    for i in range(_MAX_VARINT_LEN):
        try:
            byte = reader.read_byte()
        except EOFError:
            if i > 0:
                raise EOFError("unexpected EOF") from None
            raise
        if byte < 0x80:
            if i == _MAX_VARINT_LEN - 1 and byte > 1:
                raise _overflow()
            return value | byte << shift
        value |= (byte & 0x7F) << shift
        shift += 7
    raise _overflow()


@dataclass
class ValueStruct:
    """A value as kept in memory: meta byte, expiry and payload."""

    meta: int = 0
    value: bytes = b""
    expires_at: int = 0
    version: int = 0

    def encoded_size(self) -> int:
        return len(self.value) + 1 + size_varint(self.expires_at)

    def encode_value(self) -> bytes:
        """Encode meta, expiry and value; the version is not stored."""
        return bytes([self.meta]) + put_uvarint(self.expires_at) + bytes(self.value)

    @classmethod
    def decode_value(cls, data: bytes) -> ValueStruct:
        expires_at, end = decode_uvarint(data, 1)
        return cls(meta=data[0], value=bytes(data[end:]), expires_at=expires_at)


@dataclass
class Entry:
    """A key-value pair as written by clients."""

    key: bytes = b""
    value: bytes | None = None
    expires_at: int = 0
    meta: int = 0
    version: int = 0
    offset: int = 0
    hlen: int = 0
    val_threshold: int = 0

    def is_deleted_or_expired(self) -> bool:
        if self.value is None:
            return True
        if self.expires_at == 0:
            return False
        return self.expires_at <= int(time.time())

    def with_ttl(self, seconds: float) -> Entry:
        """Set the expiry ``seconds`` from now and return the entry."""
        self.expires_at = int(time.time() + seconds)
        return self

    def encoded_size(self) -> int:
        return len(self.value or b"") + size_varint(self.meta) + size_varint(self.expires_at)

    def estimate_size(self, threshold: int) -> int:
        value_len = len(self.value or b"")
        if value_len < threshold:
            return len(self.key) + value_len + 1
        return len(self.key) + 12 + 1

    def is_zero(self) -> bool:
        return len(self.key) == 0


@dataclass
class Header:
    """Header written before each entry in the value log."""

    klen: int = 0
    vlen: int = 0
    expires_at: int = 0
    meta: int = 0

    def encode(self) -> bytes:
        return (
            bytes([self.meta])
            + put_uvarint(self.klen)
            + put_uvarint(self.vlen)
            + put_uvarint(self.expires_at)
        )

    @classmethod
    def decode(cls, data: bytes) -> tuple[Header, int]:
        """Decode a header from ``data``; return it and the number of bytes used."""
        klen, index = decode_uvarint(data, 1)
        vlen, index = decode_uvarint(data, index)
        expires_at, index = decode_uvarint(data, index)
        header = cls(klen=klen & _U32_MASK, vlen=vlen & _U32_MASK, expires_at=expires_at, meta=data[0])
        return header, index

    @classmethod
    def decode_from(cls, reader: Any) -> tuple[Header, int]:
        """Read a header from a hashing reader; return it and the reader's byte count."""
        meta = reader.read_byte()
        klen = read_uvarint(reader)
        vlen = read_uvarint(reader)
        expires_at = read_uvarint(reader)
        header = cls(klen=klen & _U32_MASK, vlen=vlen & _U32_MASK, expires_at=expires_at, meta=meta)
        return header, reader.bytes_read