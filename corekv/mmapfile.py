"""Memory mapping of files."""

from __future__ import annotations

import mmap
from typing import IO, Union

FileLike = Union[int, IO[bytes]]


def _fileno(fd: FileLike) -> int:
    return fd if isinstance(fd, int) else fd.fileno()


def mmap_file(fd: FileLike, writable: bool, size: int) -> mmap.mmap:
    """Map the first ``size`` bytes of a file, shared, read-only unless ``writable``."""
    access = mmap.ACCESS_WRITE if writable else mmap.ACCESS_READ
    return mmap.mmap(_fileno(fd), size, access=access)


def munmap(data: mmap.mmap) -> None:
    """Unmap a mapping."""
    data.close()


def madvise(data: mmap.mmap, readahead: bool) -> None:
    """Advise normal access with readahead, or random access without it.

    Does nothing where the platform offers no such advice.
    """
    advise = getattr(data, "madvise", None)
    option = getattr(mmap, "MADV_NORMAL" if readahead else "MADV_RANDOM", None)
    if advise is None or option is None:
        return
    advise(option)


def msync(data: mmap.mmap) -> None:
    """Write modified pages back to the file."""
    data.flush()


def mremap(data: mmap.mmap, size: int) -> mmap.mmap:
    """Resize a mapping, and the file under it, to ``size`` bytes."""
    data.resize(size)
    return data