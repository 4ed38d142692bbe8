from __future__ import annotations

import asyncio
from typing import List

import pytest
from lsprotocol.types import ApplyWorkspaceEditResult, WorkspaceEdit

from smartfmt.lsp.handlers.commands import command_uri
from smartfmt.lsp.protocol import FORMAT_MODEL_FIELDS_COMMAND, SORT_IMPORTS_COMMAND
from smartfmt.lsp.workspace import FormatterWorkspace


class RecordingClient:
    def __init__(self, applied: bool = True) -> None:
        self.applied = applied
        self.edits: List[WorkspaceEdit] = []

    async def apply_edit(self, edit: WorkspaceEdit) -> ApplyWorkspaceEditResult:
        self.edits.append(edit)
        return ApplyWorkspaceEditResult(applied=self.applied, failure_reason=None if self.applied else "stale")


def test_sort_imports_command(workspace: FormatterWorkspace, open_document) -> None:
    item = open_document("app.tsx", version=4)
    client = RecordingClient()

    edits = asyncio.run(workspace.execute_command("sortImports", item.uri, client.apply_edit))

    assert len(edits) == 1
    assert len(client.edits) == 1
    change = client.edits[0].document_changes[0]
    assert change.text_document.uri == item.uri
    assert change.text_document.version == 4
    assert change.edits[0].new_text.startswith("import type { AppProps } from './types'\n")


def test_format_model_fields_command(workspace: FormatterWorkspace, open_document) -> None:
    item = open_document("schema.prisma")
    client = RecordingClient()

    edits = asyncio.run(workspace.execute_command("formatModelFields", item.uri, client.apply_edit))

    assert len(edits) == 1
    assert client.edits[0].document_changes[0].edits[0].range.start.line == 5


@pytest.mark.parametrize(
    "command, filename",
    [("sortImports", "schema.prisma"), ("formatModelFields", "app.tsx")],
)
def test_command_ignores_other_languages(workspace: FormatterWorkspace, open_document, command, filename) -> None:
    item = open_document(filename)
    client = RecordingClient()

    assert asyncio.run(workspace.execute_command(command, item.uri, client.apply_edit)) == []
    assert client.edits == []


def test_unknown_command_or_document(workspace: FormatterWorkspace, open_document) -> None:
    item = open_document("app.tsx")
    client = RecordingClient()

    assert asyncio.run(workspace.execute_command("reticulate", item.uri, client.apply_edit)) == []
    assert asyncio.run(workspace.execute_command("sortImports", "file:///missing.ts", client.apply_edit)) == []
    assert client.edits == []


def test_rejected_edit_is_logged(workspace: FormatterWorkspace, open_document, caplog) -> None:
    item = open_document("app.tsx")
    client = RecordingClient(applied=False)

    with caplog.at_level("WARNING", logger="smartfmt.lsp.host"):
        asyncio.run(workspace.execute_command("sortImports", item.uri, client.apply_edit))

    assert "stale" in caplog.text


def test_command_names() -> None:
    assert SORT_IMPORTS_COMMAND == "smartfmt.sortImports"
    assert FORMAT_MODEL_FIELDS_COMMAND == "smartfmt.formatModelFields"


@pytest.mark.parametrize(
    "args, expected",
    [
        (["file:///a.ts"], "file:///a.ts"),
        ([{"uri": "file:///b.ts"}], "file:///b.ts"),
        ([{"textDocument": {"uri": "file:///c.ts"}}], "file:///c.ts"),
        ([], None),
        (None, None),
        ([42], None),
    ],
)
def test_command_uri(args, expected) -> None:
    assert command_uri(args) == expected
