"""Consolidated JSON domain pillar: json_edit_core.

Value inference and path-addressed mutation for node edits.
"""

import json
import math
import re
from typing import Any

from node_editor.core.exceptions import PathTypeMismatch

# --- Value inference ---

_NUMBER_PATTERN = re.compile(r"-?[0-9]+(?:\.[0-9]+)?")
_MISSING = object()


def _reject_constant(token: str) -> Any:
    # NaN / Infinity are not JSON literals.
    raise ValueError(f"non-JSON constant: {token}")


def _finite_float(token: str) -> float:
    value = float(token)
    if not math.isfinite(value):
        raise ValueError(f"number out of range: {token}")
    return value


def _strict_json_loads(raw: str) -> Any:
    return json.loads(raw, parse_constant=_reject_constant, parse_float=_finite_float)


def infer_value(raw: Any) -> Any:
    """Convert raw edited text into a typed JSON-like value. Never raises."""
    text = "" if raw is None else str(raw)
    if text == "":
        return None
    try:
        return _strict_json_loads(text)
    except (ValueError, RecursionError):
        pass
    if _NUMBER_PATTERN.fullmatch(text):
        try:
            return _finite_float(text) if "." in text else int(text)
        except ValueError:
            # Too many digits for int() or out of float range.
            return text
    if text == "true":
        return True
    if text == "false":
        return False
    return text


def render_scalar_text(value: Any) -> str:
    """Render a row value the way it reads in an edit field."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)


# --- Path resolution / mutation ---


def _is_index(segment: Any) -> bool:
    return isinstance(segment, int) and not isinstance(segment, bool)


def _check_segment(container: Any, segment: Any, path: Any, position: int) -> None:
    if _is_index(segment):
        if segment < 0:
            raise PathTypeMismatch(f"negative array index {segment} at position {position}", path, position)
        if not isinstance(container, list):
            raise PathTypeMismatch(
                f"index {segment} at position {position} needs an array, found {type(container).__name__}",
                path,
                position,
            )
        return
    if isinstance(segment, str):
        if not isinstance(container, dict):
            raise PathTypeMismatch(
                f"key {segment!r} at position {position} needs an object, found {type(container).__name__}",
                path,
                position,
            )
        return
    raise PathTypeMismatch(f"unsupported path segment {segment!r} at position {position}", path, position)


def _child(container: Any, segment: Any) -> Any:
    if isinstance(container, list):
        if segment < len(container):
            return container[segment]
        return _MISSING
    return container.get(segment, _MISSING)


def _assign(container: Any, segment: Any, value: Any) -> None:
    if isinstance(container, list):
        if segment >= len(container):
            # Gaps become null, matching how sparse arrays serialize.
            container.extend([None] * (segment - len(container) + 1))
        container[segment] = value
        return
    container[segment] = value


def _empty_container_for(next_segment: Any) -> Any:
    return [] if _is_index(next_segment) else {}


def get_at_path(root_value: Any, path: Any) -> Any:
    """Resolve nested value from root by path keys/indexes."""
    value = root_value
    use_path = list(path or [])
    for position, segment in enumerate(use_path):
        _check_segment(value, segment, use_path, position)
        child = _child(value, segment)
        if child is _MISSING:
            raise KeyError(f"no value at position {position} ({segment!r})")
        value = child
    return value


def set_at_path(root_value: Any, path: Any, key: Any, value: Any) -> Any:
    """Set ``value`` at ``path`` (then ``key``), creating missing containers.

    Returns the mutated root. With ``key=None`` the addressed slot itself is
    the datum: ``value`` is returned for the caller to splice at the parent.
    """
    use_path = list(path or [])
    target = root_value
    for position, segment in enumerate(use_path):
        _check_segment(target, segment, use_path, position)
        child = _child(target, segment)
        if child is _MISSING:
            if position + 1 < len(use_path):
                next_segment = use_path[position + 1]
            else:
                next_segment = key
            child = _empty_container_for(next_segment)
            _assign(target, segment, child)
        target = child

    if key is None:
        return value

    _check_segment(target, key, use_path + [key], len(use_path))
    _assign(target, key, value)
    return root_value


def splice_at_path(root_value: Any, path: Any, value: Any) -> Any:
    """Replace the slot addressed by ``path``; an empty path replaces the root."""
    use_path = list(path or [])
    if not use_path:
        return value
    return set_at_path(root_value, use_path[:-1], use_path[-1], value)
