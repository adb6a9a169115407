import io

import pytest

from corekv.codec import BIT_DELETE, CRC_SIZE, bytes_to_u32, crc32c
from corekv.entry import Entry
from corekv.wal import HashReader, WalHeader, estimate_wal_codec_size, wal_codec


def _decode_record(data):
    reader = HashReader(io.BytesIO(data))
    header, header_len = WalHeader.decode(reader)
    key = reader.read(header.key_len)
    value = reader.read(header.value_len)
    checksum = bytes_to_u32(reader.reader.read(CRC_SIZE))
    return header, header_len, key, value, checksum, reader.sum32()


def test_wal_codec_round_trip():
    entry = Entry(b"samplekey", b"sampleval012345678901234567890123", expires_at=1234)
    data = wal_codec(entry)
    header, header_len, key, value, checksum, computed = _decode_record(data)
    assert key == entry.key
    assert value == entry.value
    assert header.expires_at == entry.expires_at
    assert checksum == computed
    assert header_len + len(key) + len(value) + CRC_SIZE == len(data)


def test_wal_codec_does_not_store_meta():
    data = wal_codec(Entry(b"k", b"v", meta=BIT_DELETE))
    header = _decode_record(data)[0]
    assert header.meta == 0


def test_wal_codec_detects_corruption():
    data = bytearray(wal_codec(Entry(b"key", b"value")))
    data[-CRC_SIZE - 1] ^= 0xFF
    _, _, _, _, checksum, computed = _decode_record(bytes(data))
    assert checksum != computed


def test_estimate_covers_encoding():
    for entry in (Entry(b"k", b""), Entry(b"key" * 50, b"v" * 1000, expires_at=2**63)):
        assert estimate_wal_codec_size(entry) >= len(wal_codec(entry))


def test_wal_header_round_trip():
    header = WalHeader(key_len=5, value_len=70000, meta=2, expires_at=99)
    data = header.encode()
    decoded, n = WalHeader.decode(HashReader(io.BytesIO(data)))
    assert decoded == header
    assert n == len(data)


def test_hash_reader_counts_and_hashes():
    payload = b"some bytes to hash"
    reader = HashReader(io.BytesIO(payload))
    assert reader.read(4) == payload[:4]
    assert reader.read_byte() == payload[4]
    rest = reader.read(100)
    assert rest == payload[5:]
    assert reader.bytes_read == len(payload)
    assert reader.sum32() == crc32c(payload)


def test_hash_reader_read_byte_eof():
    with pytest.raises(EOFError):
        HashReader(io.BytesIO(b"")).read_byte()