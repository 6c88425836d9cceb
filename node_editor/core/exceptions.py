"""Shared exception classes and expected-error tuple for services/core."""

from __future__ import annotations

from typing import Any, TypeAlias


class AppError(Exception):
    """Base class for expected application-layer failures."""


class AppRuntimeError(RuntimeError, AppError):
    """Raised for runtime operation failures with user-facing context."""


class PathTypeMismatch(TypeError, AppError):
    """Path segment kind conflicts with the container found at that position."""

    def __init__(self, message: str, path: Any = None, position: int = -1) -> None:
        super().__init__(message)
        self.path = list(path or [])
        self.position = int(position)


class PathSyntaxError(ValueError, AppError):
    """Path text could not be parsed into segments."""


class NodeBuildError(ValueError, AppError):
    """Value at a path cannot be presented as an editable node."""


class ParseError(AppRuntimeError):
    """Document content could not be parsed into a JSON-like value."""


class SerializeError(AppRuntimeError):
    """JSON-like value could not be serialized back to the document format."""


class PersistError(AppRuntimeError):
    """New document contents could not be written to the store."""


EXPECTED_ERRORS: TypeAlias = (
    OSError,
    ValueError,
    TypeError,
    RuntimeError,
    AttributeError,
    KeyError,
    IndexError,
    ImportError,
)

# Save boundary: everything one attempt may raise without being a bug.
SAVE_ERRORS: TypeAlias = (AppError,) + EXPECTED_ERRORS
