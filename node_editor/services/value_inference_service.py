"""Raw edit text to typed value helpers."""
from typing import Any

from node_editor.core.domain_impl.json import json_edit_core


def infer_value(raw: Any) -> Any:
    """Infer null/number/bool/structured/string value from edited text."""
    return json_edit_core.infer_value(raw)


def render_scalar_text(value: Any) -> str:
    """Render a stored value as the text seeded into an edit field."""
    return json_edit_core.render_scalar_text(value)
