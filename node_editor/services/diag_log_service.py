"""Diagnostics log append/read helpers for failed save attempts."""

from datetime import datetime
import os
import platform
import traceback
from typing import Any

from node_editor.core import constants
from node_editor.services import file_write_service
import logging
_LOG = logging.getLogger(__name__)

_BLOCK_MARKER = "\n---\n"
_MAX_FIELD_NAME_LEN = 48
_MAX_FIELD_VALUE_LEN = 256
_MAX_EXCEPTION_CHAIN_DEPTH = 3


def _safe_field_name(name: Any) -> str:
    raw = str(name or "").strip().lower()
    kept = [ch for ch in raw if ch.isalnum() or ch in ("_", "-", ".")]
    token = "".join(kept).strip("._-")
    return (token or "unknown")[:_MAX_FIELD_NAME_LEN]


def _safe_field_value(value: Any) -> str:
    # One line, bounded length; edited document text never lands here whole.
    cleaned = str(value if value is not None else "").replace("\r", " ").replace("\n", " ").replace("\t", " ").strip()
    if len(cleaned) > _MAX_FIELD_VALUE_LEN:
        return f"{cleaned[:_MAX_FIELD_VALUE_LEN]}..."
    return cleaned


def exception_chain_summary(exc_value: BaseException | None, max_depth: int = _MAX_EXCEPTION_CHAIN_DEPTH) -> str:
    chain = []
    current = exc_value
    seen_ids = set()
    while current is not None and len(chain) < max(1, int(max_depth)):
        if id(current) in seen_ids:
            break
        seen_ids.add(id(current))
        msg = _safe_field_value(current)
        etype = type(current).__name__
        chain.append(f"{etype}:{msg}" if msg else etype)
        current = current.__cause__ if current.__cause__ is not None else current.__context__
    return " <= ".join(chain)


def append_diag_entry(
    path: Any,
    context: str,
    exc_value: BaseException,
    extra_fields: dict[str, Any] | None = None,
    max_bytes: int = constants.DIAG_LOG_MAX_BYTES,
    keep_bytes: int = constants.DIAG_LOG_KEEP_BYTES,
) -> bool:
    """Append one structured failure block to the diagnostics log."""
    use_path = str(path or "")
    if not use_path:
        return False
    try:
        os.makedirs(os.path.dirname(os.path.abspath(use_path)), exist_ok=True)
        file_write_service.trim_log_tail(use_path, max_bytes, keep_bytes)
        stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        fields = {
            "pid": os.getpid(),
            "python": platform.python_version(),
            "exception_type": type(exc_value).__name__,
            "exception_message": str(exc_value or ""),
            "exception_chain": exception_chain_summary(exc_value),
        }
        for key, value in (extra_fields or {}).items():
            fields[str(key)] = value
        meta = "".join(f"{_safe_field_name(name)}={_safe_field_value(value)}\n" for name, value in fields.items())
        detail = "".join(traceback.format_exception(type(exc_value), exc_value, exc_value.__traceback__))
        with open(use_path, "a", encoding="utf-8") as fh:
            fh.write(f"{_BLOCK_MARKER}time={stamp}\ncontext={context}\nversion={constants.APP_VERSION}\n")
            fh.write(meta)
            fh.write(detail.rstrip())
            fh.write("\n")
    except OSError as exc:
        _LOG.debug('expected_error', exc_info=exc)
        return False
    return True


def split_entries(text: Any) -> list[str]:
    """Split diagnostics log text into its non-empty failure blocks, oldest first."""
    return [block.strip() for block in str(text or "").split(_BLOCK_MARKER) if block.strip()]


def latest_entry(path: Any, max_chars: int = constants.DIAG_LOG_ENTRY_MAX_CHARS) -> str:
    """Return the most recent failure block (its last ``max_chars``), or ``""``."""
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as fh:
            text = fh.read()
    except FileNotFoundError:
        return ""
    except OSError as exc:
        _LOG.debug("cannot read diagnostics log %s", path, exc_info=exc)
        return ""
    entries = split_entries(text)
    if not entries:
        return ""
    entry = entries[-1]
    limit = max(0, int(max_chars))
    return entry[-limit:] if limit and len(entry) > limit else entry
