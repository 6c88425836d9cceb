"""Row and node value types shared by the projector and session."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypeAlias, Union

PathSegment: TypeAlias = Union[int, str]
Path: TypeAlias = list[PathSegment]


@dataclass(slots=True, frozen=True)
class Row:
    """One displayable field of a node."""

    key: str | None = None
    value: Any = None
    type: str = "string"

    @classmethod
    def from_mapping(cls, raw: Any) -> "Row":
        """Build a row from a graph-layer mapping (``key``/``value``/``type``)."""
        if isinstance(raw, Row):
            return raw
        data = raw if isinstance(raw, dict) else {}
        key = data.get("key")
        return cls(
            key=None if key is None else str(key),
            value=data.get("value"),
            type=str(data.get("type") or "string"),
        )


@dataclass(slots=True)
class Node:
    """The unit being edited: rows plus the path locating them."""

    path: Path = field(default_factory=list)
    rows: list[Row] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.path = list(self.path or [])
        self.rows = [Row.from_mapping(row) for row in (self.rows or [])]
