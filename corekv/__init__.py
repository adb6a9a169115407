"""Building blocks of an LSM key-value store: codecs, bloom filters, a cache and helpers."""

__version__ = "0.1.0"