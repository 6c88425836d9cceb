"""Edit session controller for one node of a JSON-like document.

The session owns the view/edit mode and the edit buffer. Saving reads the
whole document from a ``DocumentStore``, applies the buffered edits at the
node's path and writes the result back through the same store.
"""

from __future__ import annotations

import inspect
import json
from typing import Any, Callable

from node_editor.core import constants
from node_editor.core.domain_impl.json.node_types import Node, Row
from node_editor.core.editor_state import EditMode, EditorState
from node_editor.core.exceptions import AppError, EXPECTED_ERRORS, ParseError, PersistError, SAVE_ERRORS, SerializeError
from node_editor.services import diag_log_service
from node_editor.services import json_path_service
from node_editor.services import node_rows_service
from node_editor.services import value_inference_service
import logging
_LOG = logging.getLogger(__name__)


class NodeEditSession:
    def __init__(
        self,
        store: Any,
        on_close: Callable[[], Any] | None = None,
        diag_log_path: Any = None,
    ) -> None:
        self.store = store
        self.on_close = on_close
        self.diag_log_path = diag_log_path
        self.state = EditorState()

    # --- read side ---

    @property
    def node(self) -> Node | None:
        return self.state.node

    @property
    def mode(self) -> EditMode:
        return self.state.mode

    @property
    def buffer(self) -> dict[int, str]:
        return dict(self.state.buffer)

    @property
    def is_open(self) -> bool:
        return self.state.node is not None

    @property
    def saving(self) -> bool:
        return self.state.save.in_flight

    @property
    def last_error(self) -> BaseException | None:
        return self.state.save.last_error

    @property
    def status(self) -> str:
        return self.state.save.last_status

    def _rows(self) -> list[Row]:
        return list(self.state.node.rows) if self.state.node is not None else []

    def is_scalar_node(self) -> bool:
        return node_rows_service.is_scalar_node(self._rows())

    def display_text(self) -> str:
        return node_rows_service.project_display(self._rows())

    def path_text(self) -> str:
        path = self.state.node.path if self.state.node is not None else []
        return node_rows_service.format_path(path)

    def editable_rows(self) -> list[tuple[int, Row]]:
        return node_rows_service.editable_rows(self._rows())

    def display_value(self, idx: int) -> str:
        """Text shown in the edit field for row ``idx``."""
        if idx in self.state.buffer:
            return self.state.buffer[idx]
        rows = self._rows()
        if 0 <= idx < len(rows):
            return value_inference_service.render_scalar_text(rows[idx].value)
        return ""

    # --- transitions ---

    def load_node(self, node: Any) -> None:
        """Select ``node``: back to VIEW with a freshly seeded buffer."""
        use_node = node if isinstance(node, Node) or node is None else Node(**node)
        buffer = node_rows_service.project_edit_buffer(use_node.rows) if use_node is not None else {}
        generation = self.state.reset_for(use_node, buffer)
        _LOG.debug("loaded node %s (generation %d)", self.path_text(), generation)

    open = load_node

    def close(self) -> None:
        """Drop the session; any in-flight edits are discarded."""
        self.state.reset_for(None, {})

    def enter_edit(self) -> bool:
        if self.state.node is None:
            return False
        self.state.mode = EditMode.EDIT
        return True

    def cancel(self) -> None:
        self.state.buffer = node_rows_service.project_edit_buffer(self._rows())
        self.state.mode = EditMode.VIEW

    def set_edited_value(self, idx: int, text: Any) -> bool:
        """Store raw text for row ``idx``; non-editable rows are refused."""
        if not self._is_edit_slot(idx):
            _LOG.debug("ignoring edit for non-editable row %r at %s", idx, self.path_text())
            return False
        self.state.buffer[idx] = "" if text is None else str(text)
        return True

    def _is_edit_slot(self, idx: Any) -> bool:
        rows = self._rows()
        if not isinstance(idx, int) or isinstance(idx, bool) or not 0 <= idx < len(rows):
            return False
        if node_rows_service.is_scalar_node(rows):
            return idx == 0
        return node_rows_service.is_editable_row(rows[idx])

    # --- save ---

    async def save(self) -> bool:
        """Apply buffered edits to the stored document; True when persisted."""
        state = self.state
        if state.save.in_flight:
            _LOG.debug("save ignored: another save is still running")
            state.save.last_status = constants.STATUS_SAVE_BUSY
            return False
        node = state.node
        if node is None:
            _LOG.debug("save ignored: no node is open")
            return False

        generation = state.generation
        buffer = dict(state.buffer)
        state.save.in_flight = True
        try:
            saved_rows = await self._save_node(node, buffer)
        except SAVE_ERRORS as exc:
            _LOG.warning("Failed to save node edits at %s", node_rows_service.format_path(node.path), exc_info=exc)
            self._record_failure(node, exc)
            if generation == state.generation:
                state.save.last_error = exc
                state.save.last_status = constants.STATUS_SAVE_FAILED
            return False
        finally:
            state.save.in_flight = False

        if generation != state.generation:
            _LOG.debug("save finished for a node that is no longer open")
            return True
        state.node = Node(path=node.path, rows=saved_rows)
        state.buffer = node_rows_service.project_edit_buffer(saved_rows)
        state.mode = EditMode.VIEW
        state.save.last_error = None
        state.save.last_status = constants.STATUS_SAVED
        await self._signal_close()
        return True

    async def _save_node(self, node: Node, buffer: dict[int, str]) -> list[Row]:
        fmt, document = await self._load_document()
        rows = list(node.rows)

        if node_rows_service.is_scalar_node(rows):
            if 0 in buffer:
                new_value = value_inference_service.infer_value(buffer[0])
                slot_value = json_path_service.set_value(document, node.path, None, new_value)
                document = json_path_service.replace_value(document, node.path, slot_value)
                rows = [Row(key=None, value=new_value, type=node_rows_service.row_type_name(new_value))]
        else:
            for idx, row in node_rows_service.editable_rows(rows):
                edited = buffer.get(idx)
                if edited is None:
                    continue
                new_value = value_inference_service.infer_value(edited)
                document = json_path_service.set_value(document, node.path, row.key, new_value)
                rows[idx] = Row(key=row.key, value=new_value, type=node_rows_service.row_type_name(new_value))

        await self._persist_document(document, fmt)
        return rows

    async def _load_document(self) -> tuple[Any, Any]:
        try:
            fmt = self.store.get_format()
            contents = self.store.get_contents()
            document = await self.store.content_to_json(contents, fmt)
        except AppError:
            raise
        except EXPECTED_ERRORS as exc:
            raise ParseError(f"cannot parse document: {exc}") from exc
        return fmt, document

    async def _persist_document(self, document: Any, fmt: Any) -> None:
        try:
            json_text = json.dumps(document, ensure_ascii=False, allow_nan=False)
            content = await self.store.json_to_content(json_text, fmt)
        except AppError:
            raise
        except EXPECTED_ERRORS as exc:
            raise SerializeError(f"cannot serialize document: {exc}") from exc
        try:
            await self.store.set_contents(contents=content)
        except AppError:
            raise
        except EXPECTED_ERRORS as exc:
            raise PersistError(f"cannot store document: {exc}") from exc

    def _record_failure(self, node: Node, exc: BaseException) -> None:
        if not self.diag_log_path:
            return
        diag_log_service.append_diag_entry(
            self.diag_log_path,
            "node_save",
            exc,
            extra_fields={"path": node_rows_service.format_path(node.path), "rows": len(node.rows)},
        )

    async def _signal_close(self) -> None:
        if not callable(self.on_close):
            return
        result = self.on_close()
        if inspect.isawaitable(result):
            await result
