"""Limit on the number of workers running at once, collecting their errors."""

from __future__ import annotations

import threading
from collections import deque


class Throttle:
    """Lets at most ``max_workers`` workers run at a time."""

    def __init__(self, max_workers: int) -> None:
        if max_workers < 1:
            raise ValueError("a throttle needs at least one worker slot")
        self._max = max_workers
        self._active = 0
        self._errors: deque[BaseException] = deque()
        self._cond = threading.Condition()
        self._finished = False
        self._finish_err: BaseException | None = None

    def do(self) -> None:
        """Wait for a free slot; raise an error reported by an earlier worker if there is one."""
        with self._cond:
            if self._finished:
                raise RuntimeError("throttle already finished")
            while True:
                if self._errors:
                    raise self._errors.popleft()
                if self._active < self._max:
                    self._active += 1
                    return
                self._cond.wait()

    def done(self, err: BaseException | None = None) -> None:
        """Release a slot, reporting the worker's error if it had one."""
        with self._cond:
            if err is not None:
                self._errors.append(err)
            if self._active == 0:
                raise RuntimeError("Throttle Do Done mismatch")
            self._active -= 1
            self._cond.notify_all()

    def finish(self) -> None:
        """Wait for all workers; raise the first error they reported, on every call."""
        with self._cond:
            if not self._finished:
                while self._active:
                    self._cond.wait()
                self._finished = True
                if self._errors:
                    self._finish_err = self._errors.popleft()
                self._errors.clear()
            if self._finish_err is not None:
                raise self._finish_err