import struct

import pytest

from corekv.bloom import Filter, bloom_bits_per_key, hash_bytes, new_filter


def test_small_bloom_filter_bits():
    hashes = [hash_bytes(b"hello"), hash_bytes(b"world")]
    f = new_filter(hashes, 10)
    want = "1...1.........1.........1.....1...1...1.....1.........1.....1....11....."
    assert f.bit_string() == want


@pytest.mark.parametrize(
    "key, expected",
    [(b"hello", True), (b"world", True), (b"x", False), (b"foo", False)],
)
def test_small_bloom_filter_membership(key, expected):
    f = new_filter([hash_bytes(b"hello"), hash_bytes(b"world")], 10)
    assert f.may_contain_key(key) is expected


def _next_length(x):
    if x < 10:
        return x + 1
    if x < 100:
        return x + 10
    if x < 1000:
        return x + 100
    return x + 1000


def _le32(i):
    return struct.pack("<I", i & 0xFFFFFFFF)


def test_bloom_filter_false_positive_rate():
    probes = [hash_bytes(_le32(1_000_000_000 + i)) for i in range(10000)]
    mediocre = good = 0
    length = 1
    while length <= 10000:
        keys = [_le32(i) for i in range(length)]
        f = new_filter([hash_bytes(k) for k in keys], 10)
        assert len(f) <= length * 10 // 8 + 40
        assert all(f.may_contain_key(k) for k in keys)
        false_positives = sum(1 for h in probes if f.may_contain(h))
        assert false_positives <= 0.02 * 10000
        if false_positives > 0.0125 * 10000:
            mediocre += 1
        else:
            good += 1
        length = _next_length(length)
    assert mediocre <= good // 5


@pytest.mark.parametrize(
    "text, want",
    [
        ("", 0xBC9F1D34),
        ("g", 0xD04A8BDA),
        ("go", 0x3E0B0745),
        ("gop", 0x0C326610),
        ("goph", 0x8C9D6390),
        ("gophe", 0x9BFD4B0A),
        ("gopher", 0xA78EDC7C),
        ("I had a dream it would end this way.", 0xE14A9DB9),
    ],
)
def test_hash(text, want):
    assert hash_bytes(text.encode()) == want


def test_short_filter_never_matches():
    assert Filter(b"\x06").may_contain_key(b"hello") is False


def test_reserved_probe_count_always_matches():
    assert Filter(bytes([0, 31])).may_contain(12345) is True


def test_bits_per_key_for_one_percent():
    assert bloom_bits_per_key(100, 0.01) == 10