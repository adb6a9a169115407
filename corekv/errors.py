"""Error types raised by the store and small error-reporting helpers."""

from __future__ import annotations

import inspect
import os


class CoreKVError(Exception):
    """Base class for every error raised by the store."""

    default_message = "corekv error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)


class KeyNotFoundError(CoreKVError):
    """A key was looked up that is not stored."""

    default_message = "Key not found"


class EmptyKeyError(CoreKVError):
    """An empty key was passed where a key is required."""

    default_message = "Key cannot be empty"


class ChecksumMismatchError(CoreKVError):
    """Stored data failed its checksum."""

    default_message = "checksum mismatch"


class TruncateError(CoreKVError):
    """A log record is damaged and the log should be truncated there."""

    default_message = "Do truncate"


class StopIteration_(CoreKVError):
    """Raised by an iteration callback to stop the iteration early."""

    default_message = "Stop"


class NoRewriteError(CoreKVError):
    """A value log GC attempt did not rewrite any file."""

    default_message = "Value log GC attempt didn't result in any cleanup"


class RejectedError(CoreKVError):
    """A value log GC request arrived while another one was running."""

    default_message = "Value log GC request rejected"


class TxnTooBigError(CoreKVError):
    """A batch of writes is too big to fit into one request."""

    default_message = "Txn is too big to fit into one request"


def _location(depth: int) -> str:
    stack = inspect.stack()
    try:
        frame = stack[depth]
    except IndexError:
        return "???:0"
    finally:
        del stack
    return f"{os.path.basename(frame.filename)}:{frame.lineno}"


def cond_panic(condition: bool, err: BaseException | str) -> None:
    """Raise ``err`` when ``condition`` holds; a plain message becomes a ``CoreKVError``."""
    if not condition:
        return
    if isinstance(err, BaseException):
        raise err
    raise CoreKVError(str(err))


def log_err(err: BaseException | None) -> BaseException | None:
    """Print ``err`` with the caller's location, if there is one, and return it."""
    if err is not None:
        print(f"{_location(2)} {err}")
    return err


def wrap_err(message: str, err: BaseException | None) -> BaseException | None:
    """Print ``message`` and ``err`` with the caller's location, if there is an error, and return it."""
    if err is not None:
        print(f"{message} {_location(2)} {err}")
    return err