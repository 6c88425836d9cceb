"""Document store collaborators: format adapter plus in-memory and file stores."""

from __future__ import annotations

import json
import os
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from node_editor.core import constants
from node_editor.core.exceptions import ParseError, PersistError, SerializeError
from node_editor.services import file_write_service
import logging
_LOG = logging.getLogger(__name__)


class FileFormat(str, Enum):
    JSON = "json"
    YAML = "yaml"
    TOML = "toml"
    XML = "xml"
    CSV = "csv"

    @classmethod
    def from_value(cls, raw: Any) -> "FileFormat":
        if isinstance(raw, FileFormat):
            return raw
        token = str(raw or "").strip().lower().lstrip(".")
        if token == "yml":
            token = "yaml"
        try:
            return cls(token)
        except ValueError as exc:
            raise ParseError(f"unknown document format: {raw!r}") from exc


@runtime_checkable
class DocumentStore(Protocol):
    """Whole-document store consumed by an edit session."""

    def get_format(self) -> Any: ...

    def get_contents(self) -> str: ...

    async def content_to_json(self, content: str, fmt: Any) -> Any: ...

    async def json_to_content(self, json_text: str, fmt: Any) -> str: ...

    async def set_contents(self, *, contents: str) -> None: ...


def _strip_bom(text: str) -> str:
    return text[1:] if text.startswith("\ufeff") else text


def parse_content(content: Any, fmt: Any) -> Any:
    """Parse raw document text of ``fmt`` into a JSON-like value."""
    use_format = FileFormat.from_value(fmt)
    if use_format is not FileFormat.JSON:
        raise ParseError(f"no parser registered for {use_format.value} documents")
    text = _strip_bom(str(content or ""))
    if not text.strip():
        raise ParseError("document is empty")
    try:
        return json.loads(text)
    except ValueError as exc:
        raise ParseError(f"invalid JSON document: {exc}") from exc


def serialize_json_text(json_text: Any, fmt: Any, indent: int | None = constants.DEFAULT_DOCUMENT_INDENT) -> str:
    """Serialize a JSON string back into ``fmt`` document text."""
    try:
        use_format = FileFormat.from_value(fmt)
    except ParseError as exc:
        raise SerializeError(str(exc)) from exc
    if use_format is not FileFormat.JSON:
        raise SerializeError(f"no serializer registered for {use_format.value} documents")
    try:
        value = json.loads(str(json_text))
        return json.dumps(value, indent=indent, ensure_ascii=False, allow_nan=False)
    except (ValueError, TypeError) as exc:
        raise SerializeError(f"cannot serialize document: {exc}") from exc


class InMemoryDocumentStore:
    """Store holding the active document text in memory."""

    def __init__(self, contents: str = "", fmt: Any = FileFormat.JSON, indent: int | None = constants.DEFAULT_DOCUMENT_INDENT) -> None:
        self.contents = str(contents or "")
        self.format = FileFormat.from_value(fmt)
        self.indent = indent
        self.write_count = 0

    def get_format(self) -> FileFormat:
        return self.format

    def get_contents(self) -> str:
        return self.contents

    async def content_to_json(self, content: str, fmt: Any) -> Any:
        return parse_content(content, fmt)

    async def json_to_content(self, json_text: str, fmt: Any) -> str:
        return serialize_json_text(json_text, fmt, indent=self.indent)

    async def set_contents(self, *, contents: str) -> None:
        self.contents = str(contents)
        self.write_count += 1


class FileDocumentStore(InMemoryDocumentStore):
    """Store backed by a file on disk; writes are atomic."""

    def __init__(self, path: Any, fmt: Any = None, indent: int | None = constants.DEFAULT_DOCUMENT_INDENT, encoding: str = "utf-8") -> None:
        self.path = os.path.abspath(str(path))
        self.encoding = encoding
        use_format = fmt if fmt is not None else os.path.splitext(self.path)[1] or FileFormat.JSON
        try:
            with open(self.path, "r", encoding=encoding) as handle:
                contents = handle.read()
        except OSError as exc:
            raise ParseError(f"cannot read {self.path}: {exc}") from exc
        super().__init__(contents, use_format, indent)

    async def set_contents(self, *, contents: str) -> None:
        payload = str(contents)
        if not payload.endswith("\n"):
            payload += "\n"
        try:
            file_write_service.replace_file_text(self.path, payload, encoding=self.encoding)
        except OSError as exc:
            raise PersistError(f"cannot write {self.path}: {exc}") from exc
        _LOG.info("wrote %d bytes to %s", len(payload.encode(self.encoding)), self.path)
        await super().set_contents(contents=payload)
