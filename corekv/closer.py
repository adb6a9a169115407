"""Signal that tells background workers to stop, and waits until they have."""

from __future__ import annotations

import threading


class Closer:
    """Close signal plus a count of workers that still have to finish."""

    def __init__(self) -> None:
        self.close_signal = threading.Event()
        self._cond = threading.Condition()
        self._count = 0

    @property
    def closed(self) -> bool:
        return self.close_signal.is_set()

    def add(self, n: int = 1) -> None:
        """Add ``n`` to the number of workers to wait for."""
        with self._cond:
            if self._count + n < 0:
                raise ValueError("negative wait count")
            self._count += n
            if self._count == 0:
                self._cond.notify_all()

    def done(self) -> None:
        """Mark one worker as finished."""
        self.add(-1)

    def close(self) -> None:
        """Signal the workers to stop and wait until all have called ``done``."""
        with self._cond:
            if self.close_signal.is_set():
                raise RuntimeError("closer already closed")
            self.close_signal.set()
            while self._count:
                self._cond.wait()