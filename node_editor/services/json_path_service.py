"""JSON path get/set helpers."""
from typing import Any

from node_editor.core.domain_impl.json import json_edit_core


def get_value(root_value: Any, path: Any) -> Any:
    """Resolve nested value from root by path keys/indexes."""
    return json_edit_core.get_at_path(root_value, path)


def set_value(root_value: Any, path: Any, key: Any, new_value: Any) -> Any:
    """Set ``new_value`` under ``key`` at ``path``; ``key=None`` returns the value to splice."""
    return json_edit_core.set_at_path(root_value, path, key, new_value)


def replace_value(root_value: Any, path: Any, new_value: Any) -> Any:
    """Set nested value by path and return updated root value."""
    return json_edit_core.splice_at_path(root_value, path, new_value)
