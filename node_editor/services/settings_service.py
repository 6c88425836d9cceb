"""User settings load/save for the node editor."""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from typing import Any

from node_editor.core import constants
from node_editor.services import file_write_service
import logging
_LOG = logging.getLogger(__name__)

_MIN_INDENT = 0
_MAX_INDENT = 8


@dataclass(slots=True)
class EditorSettings:
    indent: int = constants.DEFAULT_DOCUMENT_INDENT
    log_level: str = constants.DEFAULT_LOG_LEVEL
    diag_log_enabled: bool = True


def _coerce_bool(raw: Any, default: bool) -> bool:
    # Accept bool/int or 0/1-style text.
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, (int, float)):
        return bool(int(raw))
    if isinstance(raw, str):
        token = raw.strip().lower()
        if token in ("1", "true", "yes", "on"):
            return True
        if token in ("0", "false", "no", "off"):
            return False
    return default


def settings_from_mapping(data: Any) -> EditorSettings:
    """Build settings from a parsed mapping, keeping defaults for bad values."""
    settings = EditorSettings()
    if not isinstance(data, dict):
        return settings
    indent = data.get("indent")
    if isinstance(indent, int) and not isinstance(indent, bool) and _MIN_INDENT <= indent <= _MAX_INDENT:
        settings.indent = indent
    level = str(data.get("log_level", "") or "").strip().upper()
    if level in constants.LOG_LEVEL_CHOICES:
        settings.log_level = level
    settings.diag_log_enabled = _coerce_bool(data.get("diag_log_enabled"), settings.diag_log_enabled)
    return settings


def load_settings(path: Any) -> EditorSettings:
    """Load settings from ``path``; a missing or unreadable file yields defaults."""
    use_path = str(path or "")
    if not use_path or not os.path.isfile(use_path):
        return EditorSettings()
    try:
        with open(use_path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, ValueError) as exc:
        _LOG.warning("ignoring unreadable settings file %s: %s", use_path, exc)
        return EditorSettings()
    return settings_from_mapping(data)


def save_settings(path: Any, settings: EditorSettings) -> None:
    payload = json.dumps(asdict(settings), ensure_ascii=False, indent=2) + "\n"
    file_write_service.replace_file_text(path, payload, encoding="utf-8")
