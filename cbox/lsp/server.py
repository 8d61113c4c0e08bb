"""
LSP server implementation for `[CB]:` annotations.

Provides:
- Diagnostics for values that are not among the declared values
- Code lenses that toggle an annotated line
- Hover info listing the declared values in cycle order
- Commands to toggle, set a value, list the workspace tree and refresh it
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any
from urllib.parse import unquote, urlparse

from lsprotocol import types as lsp
from pygls.lsp.server import LanguageServer

from .. import __version__
from ..config import ConfigError, IndexSettings, load_settings
from ..syntax.comments import language_for_path
from ..syntax.parser import split_lines
from ..workspace.index import WorkspaceIndex
from ..workspace.tree import build_tree, filter_from_query
from .diagnostics import (
    LIST_COMMAND,
    REFRESH_COMMAND,
    SET_VALUE_COMMAND,
    SOURCE,
    TOGGLE_COMMAND,
    document_code_lenses,
    document_diagnostics,
    line_edit,
)
from .hover import get_hover_info

logger = logging.getLogger(__name__)


class CboxLanguageServer(LanguageServer):
    """Language server owning one workspace index per session."""

    def __init__(self, root: Path | None = None, settings: IndexSettings | None = None):
        super().__init__(name="cbox-lsp", version=__version__)
        self.settings = settings or IndexSettings()
        self.index: WorkspaceIndex | None = None
        if root:
            self.set_root(root)

    def set_root(self, root: Path) -> None:
        """Start a new index session for a workspace root."""
        if self.index is not None:
            self.index.close()
        try:
            self.settings = load_settings(root)
        except ConfigError as e:
            logger.warning(f"Ignoring invalid settings: {e}")
        self.index = WorkspaceIndex(root, self.settings)
        self.index.subscribe(self._on_index_changed)

    def _on_index_changed(self, paths: frozenset[Path]) -> None:
        logger.debug("Workspace index changed (%d files)", len(paths))
        self.workspace_code_lens_refresh(None)


def uri_to_path(uri: str) -> Path:
    """Convert a file URI to a Path."""
    parsed = urlparse(uri)
    # Handle Windows paths
    path = unquote(parsed.path)
    if path.startswith("/") and len(path) > 2 and path[2] == ":":
        path = path[1:]  # Remove leading slash for Windows paths
    return Path(path)


def _language_id(document: Any) -> str:
    return getattr(document, "language_id", None) or language_for_path(uri_to_path(document.uri))


def _unpack(args: tuple) -> list:
    # Clients send `arguments` either spread or as a single list
    if len(args) == 1 and isinstance(args[0], list):
        return list(args[0])
    return list(args)


def create_server(root: Path | None = None, settings: IndexSettings | None = None) -> CboxLanguageServer:
    """Create and configure the LSP server."""
    server = CboxLanguageServer(root, settings)

    def publish(uri: str) -> None:
        document = server.workspace.get_text_document(uri)
        diagnostics: list[lsp.Diagnostic] = []
        if server.settings.validate_values:
            diagnostics = document_diagnostics(document.source, _language_id(document))
        server.text_document_publish_diagnostics(
            lsp.PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
        )

    @server.feature(lsp.INITIALIZE)
    def initialize(params: lsp.InitializeParams) -> None:
        """Handle initialize - open an index on the workspace root."""
        root_uri = params.root_uri
        if not root_uri and params.workspace_folders:
            root_uri = params.workspace_folders[0].uri
        if root_uri:
            server.set_root(uri_to_path(root_uri))

    @server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
    def did_open(params: lsp.DidOpenTextDocumentParams) -> None:
        publish(params.text_document.uri)

    @server.feature(lsp.TEXT_DOCUMENT_DID_CHANGE)
    def did_change(params: lsp.DidChangeTextDocumentParams) -> None:
        """Re-validate and queue a debounced index invalidation."""
        uri = params.text_document.uri
        publish(uri)
        if server.index is not None:
            server.index.schedule_debounced_invalidate(uri_to_path(uri))

    @server.feature(lsp.TEXT_DOCUMENT_DID_SAVE)
    def did_save(params: lsp.DidSaveTextDocumentParams) -> None:
        uri = params.text_document.uri
        publish(uri)
        if server.index is not None:
            server.index.invalidate_file(uri_to_path(uri))

    @server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
    def did_close(params: lsp.DidCloseTextDocumentParams) -> None:
        server.text_document_publish_diagnostics(
            lsp.PublishDiagnosticsParams(uri=params.text_document.uri, diagnostics=[])
        )

    @server.feature(lsp.TEXT_DOCUMENT_CODE_LENS)
    def code_lens(params: lsp.CodeLensParams) -> list[lsp.CodeLens]:
        if not server.settings.show_code_lens:
            return []
        document = server.workspace.get_text_document(params.text_document.uri)
        return document_code_lenses(document.uri, document.source, _language_id(document))

    @server.feature(lsp.TEXT_DOCUMENT_HOVER)
    def hover(params: lsp.HoverParams) -> lsp.Hover | None:
        document = server.workspace.get_text_document(params.text_document.uri)
        lines = split_lines(document.source)
        if params.position.line >= len(lines):
            return None

        line = lines[params.position.line]
        info = get_hover_info(line, _language_id(document), params.position.character)
        if info is None:
            return None
        return lsp.Hover(contents=lsp.MarkupContent(kind=lsp.MarkupKind.Markdown, value=info))

    def apply(uri: str, line_number: int, value: str | None) -> bool:
        document = server.workspace.get_text_document(uri)
        edit = line_edit(uri, split_lines(document.source), line_number, _language_id(document), value)
        if edit is None:
            return False
        server.workspace_apply_edit(lsp.ApplyWorkspaceEditParams(edit=edit, label=SOURCE))
        if server.index is not None:
            server.index.schedule_debounced_invalidate(uri_to_path(uri))
        return True

    @server.command(TOGGLE_COMMAND)
    def toggle_at_line(*args: Any) -> bool:
        """Cycle the value on a line: arguments are `[uri, line]`."""
        uri, line_number = _unpack(args)[:2]
        return apply(uri, int(line_number), None)

    @server.command(SET_VALUE_COMMAND)
    def set_value(*args: Any) -> bool:
        """Assign a declared value: arguments are `[uri, line, value]`."""
        uri, line_number, value = _unpack(args)[:3]
        return apply(uri, int(line_number), str(value))

    @server.command(LIST_COMMAND)
    async def list_annotations(*args: Any) -> list[dict[str, Any]]:
        """Explorer tree as JSON: optional arguments are `[query, caseSensitive]`."""
        if server.index is None:
            return []
        unpacked = _unpack(args)
        query = str(unpacked[0]) if unpacked else ""
        case_sensitive = bool(unpacked[1]) if len(unpacked) > 1 else False
        search = filter_from_query(query, case_sensitive) if query else None
        branches = await build_tree(server.index, search)
        return [b.to_dict() for b in branches]

    @server.command(REFRESH_COMMAND)
    def refresh(*args: Any) -> None:
        if server.index is not None:
            server.index.refresh()

    @server.feature(lsp.SHUTDOWN)
    def shutdown(params: None) -> None:
        if server.index is not None:
            server.index.close()

    return server


def start_server(root: Path | None = None, transport: str = "stdio", port: int = 2087) -> None:
    """Start the LSP server.

    Args:
        root: Workspace root (otherwise taken from the client's initialize request)
        transport: Transport method ("stdio" or "tcp")
        port: TCP port for the "tcp" transport
    """
    server = create_server(root)

    if transport == "stdio":
        server.start_io()
    else:
        # TCP transport for debugging
        server.start_tcp("localhost", port)
