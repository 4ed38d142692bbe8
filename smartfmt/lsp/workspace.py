"""Open-document bookkeeping and formatting entry points for the language server."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from lsprotocol.types import (
    DocumentFormattingParams,
    OptionalVersionedTextDocumentIdentifier,
    TextDocumentContentChangeEvent,
    TextDocumentEdit,
    TextDocumentItem,
    TextEdit,
    WorkspaceEdit,
)
from pygls.uris import to_fs_path

from smartfmt.config import FormatterConfig, load_config
from smartfmt.errors import ConfigError
from smartfmt.formatting.core import FORMAT_MODEL_FIELDS, SORT_IMPORTS, LanguageKind, RangeReplacement
from smartfmt.formatting.guard import FormatContext
from smartfmt.formatting.host import run_format_pass
from smartfmt.formatting.scanner import default_passes, scan_document
from smartfmt.observability.logging import log_format_pass

from .state import DocumentState

ApplyEdit = Callable[[WorkspaceEdit], Awaitable[Any]]


class LspTextHost:
    """Adapts an open document to the formatter's host interface."""

    def __init__(self, document: DocumentState, apply_edit: ApplyEdit) -> None:
        self.document = document
        self._apply_edit = apply_edit
        self.logger = logging.getLogger("smartfmt.lsp.host")

    def get_document_text(self) -> str:
        return self.document.text

    def language_kind(self) -> LanguageKind:
        return self.document.kind

    async def replace_ranges(self, edits: List[RangeReplacement]) -> None:
        text_edits = [to_text_edit(self.document, edit) for edit in edits]
        workspace_edit = WorkspaceEdit(
            document_changes=[
                TextDocumentEdit(
                    text_document=OptionalVersionedTextDocumentIdentifier(
                        uri=self.document.uri,
                        version=self.document.version,
                    ),
                    edits=text_edits,
                )
            ]
        )
        response = await self._apply_edit(workspace_edit)
        if response is not None and getattr(response, "applied", True) is False:
            self.logger.warning(
                "Client rejected edits for %s: %s",
                self.document.uri,
                getattr(response, "failure_reason", None) or "no reason given",
            )


def to_text_edit(document: DocumentState, edit: RangeReplacement) -> TextEdit:
    return TextEdit(range=document.range_at(edit.start_offset, edit.end_offset), new_text=edit.new_text)


class FormatterWorkspace:
    """Tracks open documents and runs the formatters configured for them."""

    _COMMAND_KINDS: Dict[str, Tuple[LanguageKind, ...]] = {
        SORT_IMPORTS: (LanguageKind.SCRIPT_LANG, LanguageKind.SCRIPT_LANG_VARIANT),
        FORMAT_MODEL_FIELDS: (LanguageKind.MODEL_LANG,),
    }

    def __init__(self, root_uri: Optional[str] = None, config: Optional[FormatterConfig] = None) -> None:
        self.logger = logging.getLogger("smartfmt.lsp.workspace")
        self.root_uri = root_uri
        self.root_path = self._resolve_root(root_uri)
        self.config = config or FormatterConfig(root=self.root_path)
        self.context = FormatContext(options=self.config.options())
        self._open_documents: Dict[str, DocumentState] = {}

    def set_root(self, root_uri: Optional[str]) -> None:
        self.root_uri = root_uri
        self.root_path = self._resolve_root(root_uri)
        self.reload_config()

    def reload_config(self) -> None:
        try:
            self.config = load_config(self.root_path)
        except ConfigError as exc:
            self.logger.warning("Ignoring configuration: %s", exc.format())
            self.config = FormatterConfig(root=self.root_path)
        self.context.options = self.config.options()
        if self.config.source is not None:
            self.logger.info("Loaded configuration from %s", self.config.source)

    # ------------------------------------------------------------------
    # Document lifecycle
    # ------------------------------------------------------------------
    def did_open(self, item: TextDocumentItem) -> DocumentState:
        document = DocumentState(uri=item.uri, text=item.text, version=item.version, language_id=item.language_id)
        self._open_documents[item.uri] = document
        return document

    def did_change(
        self,
        uri: str,
        version: int,
        changes: Sequence[TextDocumentContentChangeEvent],
    ) -> Optional[DocumentState]:
        document = self._open_documents.get(uri)
        if document is None:
            document = DocumentState(uri=uri, text=self._read_document_from_fs(uri), version=version)
            self._open_documents[uri] = document
        document.update(self._apply_content_changes(document, changes), version)
        return document

    def did_close(self, uri: str) -> None:
        self._open_documents.pop(uri, None)

    def document(self, uri: str) -> Optional[DocumentState]:
        return self._open_documents.get(uri)

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------
    def passes_for(self, document: DocumentState) -> Tuple[str, ...]:
        configured = self.config.formatters_for(document.language_id)
        if configured:
            return tuple(configured)
        if document.language_id in self.config.formatters:
            # Explicitly configured with no formatters
            return ()
        return default_passes(document.kind)

    async def format_document(self, params: DocumentFormattingParams) -> List[TextEdit]:
        uri = params.text_document.uri
        document = self.document(uri)
        if document is None:
            return []

        async def _body() -> List[TextEdit]:
            passes = self.passes_for(document)
            edits = scan_document(document.text, document.kind, self.context.options, passes)
            log_format_pass(uri=uri, passes=passes, edit_count=len(edits))
            return [to_text_edit(document, edit) for edit in edits]

        return await self.context.guard.run(uri, _body)

    async def execute_command(self, command: str, uri: str, apply_edit: ApplyEdit) -> List[RangeReplacement]:
        """Run one named formatter against *uri* and push its edits through *apply_edit*."""
        kinds = self._COMMAND_KINDS.get(command)
        if kinds is None:
            self.logger.warning("Unknown command %s", command)
            return []
        document = self.document(uri)
        if document is None:
            self.logger.debug("Command %s for unknown document %s", command, uri)
            return []
        if document.kind not in kinds:
            return []
        host = LspTextHost(document, apply_edit)
        return await run_format_pass(host, self.context, uri, passes=(command,))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _apply_content_changes(
        self,
        document: DocumentState,
        changes: Sequence[TextDocumentContentChangeEvent],
    ) -> str:
        text = document.text
        for change in changes:
            change_range = getattr(change, "range", None)
            if change_range is None:
                text = change.text
            else:
                start = document.offset_at(change_range.start)
                end = document.offset_at(change_range.end)
                text = text[:start] + change.text + text[end:]
            # Later ranges are relative to the text produced so far
            document.update(text, document.version)
        return text

    def _read_document_from_fs(self, uri: str) -> str:
        try:
            path = Path(to_fs_path(uri))
        except (TypeError, ValueError):
            return ""
        try:
            return path.read_text(encoding="utf-8")
        except OSError:
            return ""

    def _resolve_root(self, root_uri: Optional[str]) -> Path:
        if root_uri:
            try:
                return Path(to_fs_path(root_uri))
            except (TypeError, ValueError):
                return Path(root_uri)
        return Path.cwd()


__all__ = ["FormatterWorkspace", "LspTextHost", "to_text_edit"]
