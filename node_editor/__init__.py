"""Path-addressed node editing for JSON-like documents."""

from node_editor.core.constants import APP_VERSION as __version__

__all__ = ["__version__"]
