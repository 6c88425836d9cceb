"""Structured runtime state for one node edit session."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from node_editor.core.domain_impl.json.node_types import Node


class EditMode(str, Enum):
    VIEW = "view"
    EDIT = "edit"


@dataclass(slots=True)
class SaveState:
    """In-flight save and last-outcome flags."""

    in_flight: bool = False
    last_error: BaseException | None = None
    last_status: str = ""


@dataclass(slots=True)
class EditorState:
    """Top-level grouped state container for the edit session."""

    node: Node | None = None
    mode: EditMode = EditMode.VIEW
    buffer: dict[int, str] = field(default_factory=dict)
    generation: int = 0
    save: SaveState = field(default_factory=SaveState)

    def reset_for(self, node: Node | None, buffer: dict[int, str]) -> int:
        """Swap in a new node, drop in-flight edits and return the new generation."""
        self.node = node
        self.mode = EditMode.VIEW
        self.buffer = dict(buffer)
        self.generation += 1
        self.save.last_error = None
        self.save.last_status = ""
        return self.generation
