from __future__ import annotations

import asyncio
from typing import List

from lsprotocol.types import (
    DocumentFormattingParams,
    FormattingOptions,
    Position,
    Range,
    TextDocumentIdentifier,
    TextDocumentItem,
    TextEdit,
)

from smartfmt.config import FormatterConfig
from smartfmt.lsp.state import DocumentState
from smartfmt.lsp.workspace import FormatterWorkspace


def _format(workspace: FormatterWorkspace, uri: str) -> List[TextEdit]:
    params = DocumentFormattingParams(
        text_document=TextDocumentIdentifier(uri=uri),
        options=FormattingOptions(tab_size=2, insert_spaces=True),
    )
    return asyncio.run(workspace.format_document(params))


def _apply(document: DocumentState, edits: List[TextEdit]) -> str:
    text = document.text
    spans = [(document.offset_at(edit.range.start), document.offset_at(edit.range.end), edit.new_text) for edit in edits]
    for start, end, new_text in sorted(spans, reverse=True):
        text = text[:start] + new_text + text[end:]
    return text


def test_formats_prisma_models(workspace: FormatterWorkspace, open_document) -> None:
    item = open_document("schema.prisma")

    edits = _format(workspace, item.uri)

    assert len(edits) == 1
    assert edits[0].range.start == Position(line=5, character=0)
    formatted = _apply(workspace.document(item.uri), edits)
    assert '  createdAt DateTime @map("created_at") @default(now())\n' in formatted
    assert '  @@map("users")\n' in formatted
    assert formatted.startswith('generator client {\n  provider = "prisma-client-js"\n}\n')


def test_formatting_is_stable(workspace: FormatterWorkspace, open_document) -> None:
    item = open_document("schema.prisma")
    formatted = _apply(workspace.document(item.uri), _format(workspace, item.uri))
    workspace.did_close(item.uri)

    workspace.did_open(TextDocumentItem(uri=item.uri, language_id="prisma", version=2, text=formatted))

    assert _format(workspace, item.uri) == []


def test_sorts_tsx_imports(workspace: FormatterWorkspace, open_document) -> None:
    item = open_document("app.tsx")

    edits = _format(workspace, item.uri)

    last_import = "import type { AppProps } from './types'"
    assert edits == [
        TextEdit(
            range=Range(start=Position(line=0, character=0), end=Position(line=2, character=len(last_import))),
            new_text="import type { AppProps } from './types'\nimport { render } from 'react-dom'\nimport React from 'react'",
        )
    ]


def test_unknown_document_returns_nothing(workspace: FormatterWorkspace) -> None:
    assert _format(workspace, "file:///nowhere/missing.ts") == []


def test_busy_document_returns_nothing(workspace: FormatterWorkspace, open_document) -> None:
    item = open_document("app.tsx")
    workspace.context.guard.acquire(item.uri)

    assert _format(workspace, item.uri) == []

    workspace.context.guard.release(item.uri)
    assert len(_format(workspace, item.uri)) == 1


def test_language_disabled_in_config() -> None:
    workspace = FormatterWorkspace(config=FormatterConfig(formatters={"typescriptreact": []}))
    document = DocumentState(uri="file:///tmp/app.tsx", text="", version=1, language_id="typescriptreact")

    assert workspace.passes_for(document) == ()


def test_extension_fallback_for_unconfigured_language() -> None:
    workspace = FormatterWorkspace(config=FormatterConfig(formatters={}))
    document = DocumentState(uri="file:///tmp/schema.prisma", text="", version=1, language_id="prisma-custom")

    assert workspace.passes_for(document) == ("formatModelFields",)
