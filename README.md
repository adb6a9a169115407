# corekv

Pieces of a log-structured key-value store, in plain Python with no runtime
dependencies:

- `corekv.entry` – `Entry`, `ValueStruct` and the value-log `Header`, with
  unsigned varint helpers (`put_uvarint`, `decode_uvarint`, `read_uvarint`,
  `size_varint`).
- `corekv.codec` – constants, `ValuePtr` (a 12-byte pointer into a value log
  file), CRC-32C (`crc32c`) and big-endian integer conversions.
- `corekv.keys` – versioned keys: `key_with_ts`, `parse_key`, `parse_ts`,
  `same_key`, `compare_keys`, plus `mem_hash` / `mem_hash_string` (fast,
  per-process hashes).
- `corekv.wal` – write-ahead-log records (`wal_codec`, `WalHeader`) and a
  checksumming `HashReader`.
- `corekv.bloom` – LevelDB-layout bloom filters (`Filter`, `new_filter`,
  `hash_bytes`, `bloom_bits_per_key`).
- `corekv.cache` – a W-TinyLFU cache (`corekv.cache.cache.Cache`) built from a
  window LRU and segmented LRU (`corekv.cache.lru`), a count-min sketch
  (`corekv.cache.sketch`) and a bloom-filter doorkeeper (`corekv.cache.bloom`).
- `corekv.arena` – a bump allocator (`Arena`) laying out nodes, keys and
  encoded values in one byte buffer.
- `corekv.closer`, `corekv.throttle`, `corekv.coremap` – a stop signal that
  waits for workers (`Closer`), a worker limit that collects errors
  (`Throttle`) and a thread-safe hash-keyed map (`CoreMap`).
- `corekv.fileutil`, `corekv.mmapfile` – table and value-log file names,
  directory syncing, checksum checks, and memory mapping.
- `corekv.options` – `Options`, `new_default_options()` and `Stats`.
- `corekv.randutil` – thread-safe random numbers and random test entries.
- `corekv.errors` – the exception types, all subclasses of `CoreKVError`
  (for example `KeyNotFoundError`, `ChecksumMismatchError`, `TruncateError`).

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

Versioned keys sort newer versions first and carry their timestamp:

```python
from corekv.keys import compare_keys, key_with_ts, parse_key, parse_ts

k = key_with_ts(b"apple", 5)
parse_key(k)                                    # b"apple"
parse_ts(k)                                     # 5
compare_keys(key_with_ts(b"a", 2), key_with_ts(b"a", 1))   # -1
```

Values encode and decode round trip:

```python
from corekv.entry import ValueStruct

v = ValueStruct(meta=2, value="硬核课堂".encode(), expires_at=213123123123)
assert ValueStruct.decode_value(v.encode_value()) == v
```

Bloom filters:

```python
from corekv.bloom import hash_bytes, new_filter

f = new_filter([hash_bytes(b"hello"), hash_bytes(b"world")], 10)
f.may_contain_key(b"hello")   # True
f.may_contain_key(b"foo")     # False
```

The cache returns the value and whether it was found; a key may be dropped
when the cache is full and the key's access count does not earn it a place:

```python
from corekv.cache.cache import Cache

cache = Cache(100)
cache.set("key1", "val1")
value, found = cache.get("key1")    # ("val1", True)
cache.delete("key1")
```

Write-ahead-log records are `header | key | value | crc32`:

```python
import io
from corekv.entry import Entry
from corekv.wal import HashReader, WalHeader, wal_codec

record = wal_codec(Entry(key=b"k", value=b"v"))
header, header_len = WalHeader.decode(HashReader(io.BytesIO(record)))
```

## What it does not do

This package holds the parts, not a store. There is no database to open, no
ordered in-memory table, no sorted table files, no value log, no compaction
and no command-line tool: `Options` and `Stats` describe settings and
counters but nothing here reads or writes keys on disk.