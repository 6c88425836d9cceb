"""Whole-file replacement for documents and settings, plus log tail trimming."""

import errno
import os
import sys
import tempfile
import time
from typing import Any, Callable

from node_editor.core import constants
import logging
_LOG = logging.getLogger(__name__)

# Sharing violations surface as winerror on Windows and as errno elsewhere.
_TRANSIENT_WINERRORS = frozenset({5, 32, 33})
_TRANSIENT_ERRNOS = frozenset({errno.EACCES, errno.EBUSY})


def is_transient_write_error(exc: BaseException, platform_name: str | None = None) -> bool:
    """True when replacing a file failed because something briefly held it."""
    if isinstance(exc, PermissionError):
        return True
    if not isinstance(exc, OSError):
        return False
    if str(platform_name or sys.platform) == "win32":
        return getattr(exc, "winerror", None) in _TRANSIENT_WINERRORS
    return exc.errno in _TRANSIENT_ERRNOS


def _stage_temp_file(directory: str, text: str, encoding: str) -> str:
    fd, temp_path = tempfile.mkstemp(prefix=constants.REPLACE_TEMP_PREFIX, suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as fh:
            fh.write(text)
            fh.flush()
            os.fsync(fh.fileno())
    except OSError:
        _discard_temp_file(temp_path)
        raise
    return temp_path


def _discard_temp_file(temp_path: str) -> None:
    try:
        os.remove(temp_path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        _LOG.debug("could not remove staged file %s", temp_path, exc_info=exc)


def replace_file_text(
    path: Any,
    text: str,
    encoding: str = "utf-8",
    attempts: int = constants.REPLACE_WRITE_ATTEMPTS,
    backoff: float = constants.REPLACE_WRITE_BACKOFF,
    sleep_fn: Callable[[float], Any] | None = None,
) -> None:
    """Replace ``path`` with ``text`` so readers see the old or the new file, never half of one."""
    target = os.path.abspath(os.fspath(path))
    directory = os.path.dirname(target) or os.getcwd()
    os.makedirs(directory, exist_ok=True)
    attempts = max(1, int(attempts))
    sleep = sleep_fn if callable(sleep_fn) else time.sleep

    attempt = 1
    while True:
        temp_path = _stage_temp_file(directory, text, encoding)
        try:
            os.replace(temp_path, target)
            return
        except OSError as exc:
            _discard_temp_file(temp_path)
            if attempt >= attempts or not is_transient_write_error(exc):
                raise
            _LOG.debug("%s is busy (%s), attempt %d of %d", target, type(exc).__name__, attempt, attempts)
            sleep(backoff * attempt)
            attempt += 1


def trim_log_tail(path: Any, max_bytes: int, keep_bytes: int) -> None:
    """Cut a log file down to its tail once it grows past ``max_bytes``."""
    if max_bytes <= 0 or keep_bytes <= 0:
        return
    try:
        size = os.path.getsize(path)
    except OSError:
        return
    if size <= max_bytes:
        return
    keep_bytes = min(int(keep_bytes), size)
    try:
        with open(path, "rb") as src:
            src.seek(size - keep_bytes)
            tail = src.read()
        with open(path, "wb") as dst:
            dst.write(b"\n--- log truncated ---\n")
            dst.write(tail)
    except OSError as exc:
        _LOG.debug("could not trim log %s", path, exc_info=exc)
