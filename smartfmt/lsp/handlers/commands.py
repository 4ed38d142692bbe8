"""workspace/executeCommand handlers for the individual formatters."""

from __future__ import annotations

import asyncio
from typing import Any, Optional, Sequence

from lsprotocol.types import WorkspaceEdit

from smartfmt.formatting.core import FORMAT_MODEL_FIELDS, SORT_IMPORTS

from ..protocol import command_name
from ..workspace import FormatterWorkspace


def command_uri(args: Optional[Sequence[Any]]) -> Optional[str]:
    """Pull the document URI out of the command arguments.

    Accepts ``[uri]``, ``[{"uri": uri}]`` and ``[{"textDocument": {"uri": uri}}]``.
    """
    if not args:
        return None
    first = args[0]
    if isinstance(first, str):
        return first
    if isinstance(first, dict):
        if isinstance(first.get("uri"), str):
            return first["uri"]
        document = first.get("textDocument")
        if isinstance(document, dict) and isinstance(document.get("uri"), str):
            return document["uri"]
        return None
    uri = getattr(first, "uri", None)
    return uri if isinstance(uri, str) else None


def register(server) -> None:
    workspace: FormatterWorkspace = server.workspace_index

    async def _apply_edit(edit: WorkspaceEdit):
        return await asyncio.wrap_future(server.apply_edit(edit))

    def _register_formatter(formatter: str) -> None:
        @server.command(command_name(formatter))
        async def _run(ls, args):
            uri = command_uri(args)
            if uri is None:
                workspace.logger.warning("%s called without a document URI", command_name(formatter))
                return None
            edits = await workspace.execute_command(formatter, uri, _apply_edit)
            return {"applied": len(edits)}

    _register_formatter(SORT_IMPORTS)
    _register_formatter(FORMAT_MODEL_FIELDS)
