"""Write-ahead log record encoding and a checksumming reader."""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO

from .codec import CRC_SIZE, MAX_HEADER_SIZE, crc32c, u32_to_bytes
from .entry import Entry, put_uvarint, read_uvarint


class HashReader:
    """Reader that counts the bytes it reads and keeps their CRC-32C."""

    def __init__(self, reader: BinaryIO) -> None:
        self.reader = reader
        self.bytes_read = 0
        self._crc = 0

    def read(self, size: int) -> bytes:
        data = self.reader.read(size)
        self.bytes_read += len(data)
        self._crc = crc32c(data, self._crc)
        return data

    def read_byte(self) -> int:
        data = self.read(1)
        if not data:
            raise EOFError("EOF")
        return data[0]

    def sum32(self) -> int:
        return self._crc


@dataclass
class WalHeader:
    """Header written before each record in the write-ahead log."""

    key_len: int = 0
    value_len: int = 0
    meta: int = 0
    expires_at: int = 0

    def encode(self) -> bytes:
        return (
            put_uvarint(self.key_len)
            + put_uvarint(self.value_len)
            + put_uvarint(self.meta)
            + put_uvarint(self.expires_at)
        )

    @classmethod
    def decode(cls, reader: HashReader) -> tuple[WalHeader, int]:
        """Read a header; return it and the reader's byte count."""
        key_len = read_uvarint(reader)
        value_len = read_uvarint(reader)
        meta = read_uvarint(reader)
        expires_at = read_uvarint(reader)
        header = cls(
            key_len=key_len & 0xFFFFFFFF,
            value_len=value_len & 0xFFFFFFFF,
            meta=meta & 0xFF,
            expires_at=expires_at,
        )
        return header, reader.bytes_read


def wal_codec(entry: Entry) -> bytes:
    """Encode an entry as ``header | key | value | crc32``."""
    value = entry.value or b""
    header = WalHeader(key_len=len(entry.key), value_len=len(value), expires_at=entry.expires_at)
    body = header.encode() + bytes(entry.key) + bytes(value)
    return body + u32_to_bytes(crc32c(body))


def estimate_wal_codec_size(entry: Entry) -> int:
    """Upper estimate of the bytes an entry takes in the write-ahead log."""
    return len(entry.key) + len(entry.value or b"") + 8 + CRC_SIZE + MAX_HEADER_SIZE