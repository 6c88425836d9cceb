"""Node row projection helpers.

Turns a node's display rows into the read-only view, the editable buffer
and the JSON path label. ``build_node`` is the node source used when rows
come from a parsed document instead of a graph layer.
"""

import json
import re
from typing import Any, Iterable

from node_editor.core import constants
from node_editor.core.domain_impl.json import json_edit_core
from node_editor.core.domain_impl.json.node_types import Node, Row
from node_editor.core.exceptions import NodeBuildError, PathSyntaxError

_PATH_SEGMENT_PATTERN = re.compile(r'\[(?:([0-9]+)|"([^"]*)")\]')


def _as_rows(rows: Any) -> list[Row]:
    return [Row.from_mapping(row) for row in (rows or [])]


def is_editable_row(row: Any) -> bool:
    """Return True for keyed scalar rows other than the details link."""
    use_row = Row.from_mapping(row)
    if use_row.type in constants.CONTAINER_ROW_TYPES:
        return False
    if not use_row.key:
        return False
    return use_row.key != constants.DETAILS_ROW_KEY


def is_scalar_node(rows: Any) -> bool:
    use_rows = _as_rows(rows)
    return len(use_rows) == 1 and not use_rows[0].key


def editable_rows(rows: Any) -> list[tuple[int, Row]]:
    """List ``(index, row)`` pairs for rows that may be text-edited."""
    return [(idx, row) for idx, row in enumerate(_as_rows(rows)) if is_editable_row(row)]


def display_scalar_text(value: Any) -> str:
    """Print a scalar value directly (``null``/``true``/``false`` for JSON literals)."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def project_display(rows: Any) -> str:
    """Return the canonical read-only text for a node."""
    use_rows = _as_rows(rows)
    if not use_rows:
        return constants.EMPTY_NODE_DISPLAY
    if is_scalar_node(use_rows):
        return display_scalar_text(use_rows[0].value)

    obj = {}
    for _, row in editable_rows(use_rows):
        obj[row.key] = row.value
    return json.dumps(obj, indent=constants.DISPLAY_INDENT, ensure_ascii=False, default=str)


def project_edit_buffer(rows: Any) -> dict[int, str]:
    """Seed ``row index -> raw text`` for every editable row."""
    return {idx: json_edit_core.render_scalar_text(row.value) for idx, row in editable_rows(rows)}


def format_path(path: Any) -> str:
    """Render a path as ``$["key"][0]``; the root is ``$``."""
    use_path = list(path or [])
    if not use_path:
        return constants.ROOT_PATH_SYMBOL
    parts = []
    for segment in use_path:
        if isinstance(segment, int) and not isinstance(segment, bool):
            parts.append(f"[{segment}]")
        else:
            parts.append(f'["{segment}"]')
    return constants.ROOT_PATH_SYMBOL + "".join(parts)


def parse_path_text(text: Any) -> list:
    """Parse ``$["a"][1]`` text or a JSON array literal back into segments."""
    raw = str(text or "").strip()
    if not raw or raw == constants.ROOT_PATH_SYMBOL:
        return []
    if raw.startswith("["):
        try:
            parsed = json.loads(raw)
        except ValueError as exc:
            raise PathSyntaxError(f"invalid JSON path array: {raw!r}") from exc
        if not isinstance(parsed, list):
            raise PathSyntaxError(f"path must be a JSON array: {raw!r}")
        return [_validate_segment(segment, raw) for segment in parsed]
    if not raw.startswith(constants.ROOT_PATH_SYMBOL):
        raise PathSyntaxError(f"path must start with {constants.ROOT_PATH_SYMBOL!r}: {raw!r}")

    segments: list = []
    pos = len(constants.ROOT_PATH_SYMBOL)
    while pos < len(raw):
        match = _PATH_SEGMENT_PATTERN.match(raw, pos)
        if match is None:
            raise PathSyntaxError(f"unexpected text at offset {pos}: {raw[pos:]!r}")
        index_text, key_text = match.groups()
        segments.append(int(index_text) if index_text is not None else key_text)
        pos = match.end()
    return segments


def _validate_segment(segment: Any, raw: str) -> Any:
    if isinstance(segment, bool):
        raise PathSyntaxError(f"boolean is not a path segment: {raw!r}")
    if isinstance(segment, int) and segment >= 0:
        return segment
    if isinstance(segment, str):
        return segment
    raise PathSyntaxError(f"segment {segment!r} is neither a key nor an index: {raw!r}")


def row_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "array"
    return "unknown"


def _rows_for_mapping(items: Iterable[tuple[Any, Any]]) -> list[Row]:
    rows = []
    for key, value in items:
        kind = row_type_name(value)
        if kind in constants.CONTAINER_ROW_TYPES:
            # Containers are navigated to, so the row only carries their size.
            rows.append(Row(key=str(key), value=len(value), type=kind))
        else:
            rows.append(Row(key=str(key), value=value, type=kind))
    return rows


def build_node(document: Any, path: Any) -> Node:
    """Build the node for the value found at ``path`` in ``document``."""
    use_path = list(path or [])
    value = json_edit_core.get_at_path(document, use_path)
    if isinstance(value, dict):
        return Node(path=use_path, rows=_rows_for_mapping(value.items()))
    if isinstance(value, list):
        raise NodeBuildError(
            f"{format_path(use_path)} is an array; open one of its elements instead"
        )
    return Node(path=use_path, rows=[Row(key=None, value=value, type=row_type_name(value))])
