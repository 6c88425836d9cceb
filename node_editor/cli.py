import argparse
import asyncio
import logging
import sys
from typing import Any

from node_editor.core import constants
from node_editor.core.exceptions import SAVE_ERRORS
from node_editor.services import document_io_service
from node_editor.services import node_rows_service
from node_editor.services import runtime_paths_service
from node_editor.services import settings_service
from node_editor.services.edit_session_service import NodeEditSession

_LOG = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=constants.APP_NAME,
        description="View or edit one node of a JSON document by path.",
    )
    parser.add_argument("--settings", default=None, help="Settings file (default: runtime data dir).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {constants.APP_VERSION}")
    sub = parser.add_subparsers(dest="command", required=True)

    view = sub.add_parser("view", help="Print a node's JSON path and content.")
    view.add_argument("file")
    view.add_argument("--path", default="$", help='Node path, e.g. \'$["user"][0]\' or \'["user", 0]\'.')

    edit = sub.add_parser("edit", help="Edit a node's scalar fields and save.")
    edit.add_argument("file")
    edit.add_argument("--path", default="$")
    group = edit.add_mutually_exclusive_group(required=True)
    group.add_argument(
        "--set",
        dest="assignments",
        action="append",
        metavar="KEY=VALUE",
        help="Field assignment for an object node (repeatable).",
    )
    group.add_argument("--value", dest="scalar_value", help="New value for a scalar node.")
    edit.add_argument("--dry-run", action="store_true", help="Print the result instead of writing the file.")
    return parser


def _configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


def _split_assignment(raw: str) -> tuple[str, str]:
    key, sep, value = str(raw).partition("=")
    if not sep or not key:
        raise ValueError(f"expected KEY=VALUE, got {raw!r}")
    return key, value


def _apply_cli_edits(session: NodeEditSession, args: Any) -> None:
    if args.scalar_value is not None:
        if not session.is_scalar_node():
            raise ValueError(f"{session.path_text()} is not a scalar node; use --set KEY=VALUE")
        session.set_edited_value(0, args.scalar_value)
        return
    index_by_key = {row.key: idx for idx, row in session.editable_rows()}
    for raw in args.assignments:
        key, value = _split_assignment(raw)
        if key not in index_by_key:
            raise ValueError(f"{key!r} is not an editable field of {session.path_text()}")
        session.set_edited_value(index_by_key[key], value)


def _run_view(args: Any) -> int:
    store = document_io_service.FileDocumentStore(args.file)
    path = node_rows_service.parse_path_text(args.path)
    document = document_io_service.parse_content(store.get_contents(), store.get_format())
    node = node_rows_service.build_node(document, path)
    print(node_rows_service.format_path(node.path))
    print(node_rows_service.project_display(node.rows))
    return 0


def _run_edit(args: Any, settings: settings_service.EditorSettings) -> int:
    store = document_io_service.FileDocumentStore(args.file, indent=settings.indent)
    if args.dry_run:
        store = document_io_service.InMemoryDocumentStore(store.get_contents(), store.get_format(), settings.indent)
    path = node_rows_service.parse_path_text(args.path)
    document = document_io_service.parse_content(store.get_contents(), store.get_format())

    diag_path = runtime_paths_service.diag_log_path(create=True) if settings.diag_log_enabled else None
    session = NodeEditSession(store, diag_log_path=diag_path)
    session.load_node(node_rows_service.build_node(document, path))
    session.enter_edit()
    _apply_cli_edits(session, args)
    if not asyncio.run(session.save()):
        print(f"{constants.STATUS_SAVE_FAILED}: {session.last_error}", file=sys.stderr)
        return 1
    if args.dry_run:
        print(store.get_contents())
    else:
        print(f"{constants.STATUS_SAVED} {session.path_text()} -> {args.file}")
    return 0


def main(argv: Any = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    settings_file = args.settings or runtime_paths_service.settings_path()
    settings = settings_service.load_settings(settings_file)
    _configure_logging("DEBUG" if args.verbose else settings.log_level)

    try:
        if args.command == "view":
            return _run_view(args)
        return _run_edit(args, settings)
    except SAVE_ERRORS as exc:
        _LOG.debug("command failed", exc_info=exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
