"""File naming, directory syncing and checksum helpers."""

from __future__ import annotations

import os
import re
import shutil
from typing import BinaryIO

from .codec import bytes_to_u64, crc32c
from .errors import ChecksumMismatchError, log_err

_MASK64 = 0xFFFFFFFFFFFFFFFF
_DATASYNC_FILE_FLAG = 0x0
_NUMBER = re.compile(r"[+-]?[0-9]+")


def fid_from_name(name: str) -> int:
    """The id of an ``.sst`` file from its name, or 0 if it has none."""
    base = os.path.basename(name)
    if not base.endswith(".sst"):
        return 0
    stem = base[: -len(".sst")]
    if not _NUMBER.fullmatch(stem):
        log_err(ValueError(f"invalid table id: {stem!r}"))
        return 0
    return int(stem) & _MASK64


def vlog_file_path(dir_path: str, fid: int) -> str:
    return f"{dir_path}{os.sep}{fid:05d}.vlog"


def create_synced_file(filename: str, sync: bool) -> BinaryIO:
    """Create a new file for reading and writing; fail if it already exists."""
    flags = os.O_RDWR | os.O_CREAT | os.O_EXCL
    if sync:
        flags |= _DATASYNC_FILE_FLAG
    fd = os.open(filename, flags, 0o600)
    return open(fd, "r+b")


def file_name_sstable(directory: str, fid: int) -> str:
    return os.path.join(directory, f"{fid:05d}.sst")


def sync_dir(directory: str) -> None:
    """Flush a directory's entries so new or removed files survive a crash."""
    try:
        fd = os.open(directory, os.O_RDONLY)
    except OSError as err:
        raise OSError(f"While opening directory: {directory}.") from err
    try:
        os.fsync(fd)
    except OSError as err:
        raise OSError(f"While syncing directory: {directory}.") from err
    finally:
        os.close(fd)


def load_id_map(directory: str) -> set[int]:
    """Ids of all ``.sst`` files directly inside ``directory``."""
    ids: set[int] = set()
    try:
        entries = list(os.scandir(directory))
    except OSError as err:
        log_err(err)
        return ids
    for entry in entries:
        if entry.is_dir():
            continue
        fid = fid_from_name(entry.name)
        if fid:
            ids.add(fid)
    return ids


def calculate_checksum(data: bytes) -> int:
    return crc32c(data)


def verify_checksum(data: bytes, expected: bytes) -> None:
    """Raise ``ChecksumMismatchError`` unless ``expected`` holds the CRC-32C of ``data``."""
    actual = crc32c(data)
    expected_value = bytes_to_u64(expected)
    if actual != expected_value:
        raise ChecksumMismatchError(
            f"actual: {actual}, expected: {expected_value}: checksum mismatch"
        )


def remove_dir(directory: str) -> None:
    """Remove a directory tree; a missing directory is not an error."""
    try:
        shutil.rmtree(directory)
    except FileNotFoundError:
        pass