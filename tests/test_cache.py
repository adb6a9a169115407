import pytest

from corekv.cache.cache import Cache


def test_cache_basic_crud():
    cache = Cache(5)
    for i in range(10):
        cache.set(f"key{i}", f"val{i}")
    for i in range(1000):
        res, ok = cache.get(f"key{i}")
        if ok:
            assert res == f"val{i}"
        else:
            assert res is None


def test_set_reports_success_and_last_set_is_kept():
    cache = Cache(5)
    for i in range(10):
        assert cache.set(f"key{i}", f"val{i}") is True
    assert cache.get("key9") == ("val9", True)


def test_single_round_trip():
    cache = Cache(5)
    cache.set("a", "1")
    assert cache.get("a") == ("1", True)
    assert cache.get("b") == (None, False)


def test_delete():
    cache = Cache(5)
    cache.set("a", "1")
    _, removed = cache.delete("a")
    assert removed is True
    assert cache.get("a") == (None, False)
    assert cache.delete("a") == (0, False)


def test_bytes_and_int_keys():
    cache = Cache(100)
    cache.set(b"raw", 1)
    cache.set(7, "seven")
    assert cache.get(b"raw") == (1, True)
    assert cache.get(7) == ("seven", True)


def test_many_values_never_mismatch():
    cache = Cache(50)
    for i in range(500):
        cache.set(i, i * 2)
        cache.get(i // 2)
    hits = [(i, cache.get(i)) for i in range(500)]
    assert all(value == i * 2 for i, (value, ok) in hits if ok)
    assert any(ok for _, (_, ok) in hits)


def test_unsupported_key_type():
    cache = Cache(5)
    with pytest.raises(TypeError):
        cache.set(1.5, "x")


def test_size_must_be_positive():
    with pytest.raises(ValueError):
        Cache(0)