import pytest

from corekv.bloom import hash_bytes, new_filter as table_filter
from corekv.cache.bloom import BloomFilter, bloom_bits_per_key, init_filter, new_filter


def test_inserted_keys_are_found():
    bf = new_filter(100, 0.01)
    keys = [b"key%d" % i for i in range(100)]
    for key in keys:
        bf.insert_key(key)
    assert all(bf.may_contain_key(key) for key in keys)


def test_allow_key_reports_first_sight():
    bf = new_filter(10, 0.01)
    assert bf.allow_key(b"x") is False
    assert bf.allow_key(b"x") is True


def test_allow_hash_records_it():
    bf = new_filter(10, 0.01)
    assert bf.allow(12345) is False
    assert bf.may_contain(12345) is True
    assert bf.allow(12345) is True


def test_reset_clears_everything():
    bf = new_filter(10, 0.01)
    bf.insert_key(b"hello")
    bf.reset()
    assert not any(bf.bitmap)
    assert bf.may_contain_key(b"hello") is False


def test_matches_table_filter_layout():
    hashes = [hash_bytes(b"key%d" % i) for i in range(50)]
    bf = init_filter(50, 10)
    for h in hashes:
        bf.insert(h)
    assert bytes(bf.bitmap) == bytes(table_filter(hashes, 10))


def test_minimum_size_and_probe_byte():
    bf = init_filter(1, 10)
    assert len(bf) == 9
    assert bf.bitmap[-1] == bf.k


@pytest.mark.parametrize("bits, expected_k", [(0, 1), (-5, 1), (100, 30)])
def test_probe_count_is_clamped(bits, expected_k):
    assert init_filter(10, bits).k == expected_k


def test_new_filter_uses_bits_per_key():
    bf = new_filter(100, 0.01)
    other = init_filter(100, bloom_bits_per_key(100, 0.01))
    assert bf.k == other.k
    assert len(bf) == len(other)


def test_short_bitmap_never_matches():
    assert BloomFilter(bytearray(1), 1).may_contain(7) is False


def test_reserved_probe_count_always_matches():
    assert BloomFilter(bytearray(9), 31).may_contain(7) is True