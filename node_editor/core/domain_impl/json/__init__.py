"""JSON domain package exports."""

from __future__ import annotations

from . import json_edit_core
from . import node_types

__all__ = ["json_edit_core", "node_types"]
