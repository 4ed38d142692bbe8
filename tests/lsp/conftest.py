from __future__ import annotations

from pathlib import Path

import pytest
from lsprotocol.types import TextDocumentItem

from smartfmt.lsp.workspace import FormatterWorkspace

DATA_DIR = Path(__file__).parent / "data"

_LANGUAGE_IDS = {".prisma": "prisma", ".ts": "typescript", ".tsx": "typescriptreact"}


def _make_uri(path: Path) -> str:
    return path.resolve().as_uri()


@pytest.fixture()
def workspace() -> FormatterWorkspace:
    ws = FormatterWorkspace()
    ws.set_root(_make_uri(DATA_DIR))
    return ws


@pytest.fixture()
def open_document(workspace: FormatterWorkspace):
    def _open(filename: str, *, version: int = 1, language_id: str | None = None) -> TextDocumentItem:
        path = DATA_DIR / filename
        item = TextDocumentItem(
            uri=_make_uri(path),
            language_id=language_id or _LANGUAGE_IDS.get(path.suffix, "plaintext"),
            version=version,
            text=path.read_text(encoding="utf-8"),
        )
        workspace.did_open(item)
        return item

    return _open
