import time

import pytest

from corekv.randutil import build_entry, float64, int63n, rand_n, rand_str

_POOL_BYTES = set(
    (
        "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
        "~=+%^*/()[]{}/!@#$?|©®😁😭🉑️🐂㎡硬核课堂"
    ).encode("utf-8")
)


def test_int63n_in_range():
    values = [int63n(10) for _ in range(200)]
    assert all(0 <= v < 10 for v in values)


def test_rand_n_in_range():
    values = [rand_n(3) for _ in range(200)]
    assert set(values) <= {0, 1, 2}


@pytest.mark.parametrize("func", [int63n, rand_n])
@pytest.mark.parametrize("bad", [0, -4])
def test_non_positive_bound_rejected(func, bad):
    with pytest.raises(ValueError):
        func(bad)


def test_float64_in_unit_interval():
    assert all(0.0 <= float64() < 1.0 for _ in range(200))


def test_rand_str_length_and_alphabet():
    data = rand_str(64)
    assert len(data) == 64
    assert set(data) <= _POOL_BYTES
    assert rand_str(0) == b""


def test_build_entry_shape():
    before_ms = time.time_ns() // 1_000_000
    entry = build_entry()
    assert len(entry.key) == 16 + len(b"12345678")
    assert entry.key.endswith(b"12345678")
    assert len(entry.value) == 128
    assert entry.expires_at > before_ms