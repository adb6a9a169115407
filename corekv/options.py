"""Store settings and runtime statistics."""

from __future__ import annotations

from dataclasses import dataclass

from .closer import Closer
from .codec import DEFAULT_VALUE_THRESHOLD


@dataclass
class Options:
    """Settings of a store; unset fields are zero."""

    value_threshold: int = 0
    work_dir: str = ""
    mem_table_size: int = 0
    sstable_max_sz: int = 0
    max_batch_count: int = 0
    max_batch_size: int = 0
    value_log_file_size: int = 0
    verify_value_checksum: bool = False
    value_log_max_entries: int = 0
    log_rotates_to_flush: int = 0
    max_table_size: int = 0


def new_default_options() -> Options:
    return Options(
        work_dir="./work_test",
        mem_table_size=1024,
        sstable_max_sz=1 << 30,
        value_threshold=DEFAULT_VALUE_THRESHOLD,
    )


class Stats:
    """Runtime statistics collected by a background worker."""

    def __init__(self, options: Options | None = None) -> None:
        self.options = options
        self.closer = Closer()
        self.entry_num = 1

    def start_stats(self) -> None:
        """Run until the closer is signalled; the caller must ``closer.add(1)`` first."""
        try:
            self.closer.close_signal.wait()
        finally:
            self.closer.done()

    def close(self) -> None:
        """Stop the worker and wait for it; closing twice is harmless."""
        if not self.closer.closed:
            self.closer.close()