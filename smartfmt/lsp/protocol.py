"""Shared protocol constants for the smartfmt language server."""

from __future__ import annotations

from smartfmt.formatting.core import FORMAT_MODEL_FIELDS, SORT_IMPORTS

SERVER_NAME = "smartfmt-lsp"
COMMAND_PREFIX = "smartfmt."


def command_name(formatter: str) -> str:
    return f"{COMMAND_PREFIX}{formatter}"


SORT_IMPORTS_COMMAND = command_name(SORT_IMPORTS)
FORMAT_MODEL_FIELDS_COMMAND = command_name(FORMAT_MODEL_FIELDS)

__all__ = [
    "SERVER_NAME",
    "COMMAND_PREFIX",
    "command_name",
    "SORT_IMPORTS_COMMAND",
    "FORMAT_MODEL_FIELDS_COMMAND",
]
