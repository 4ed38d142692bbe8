"""
smartfmt: whitespace-only formatting for Prisma schemas and TypeScript imports.

The package is organised into several modules:

* ``formatting`` – the two text pipelines (model field alignment and
  import sorting), the document scanner that finds their regions, and a
  guarded entry point that hands edits to an editor.
* ``lsp`` – a pygls language server exposing the pipelines through
  ``textDocument/formatting`` and two ``workspace/executeCommand``
  commands.
* ``config`` – ``smartfmt.toml`` / ``.smartfmtrc`` loading.

Both pipelines only ever move whole lines or re-pad whitespace; anything
they do not recognise is passed through untouched.
"""

from __future__ import annotations

__version__ = "0.3.0"

from .formatting import (
    FormatContext,
    FormatGuard,
    FormattingOptions,
    LanguageKind,
    RangeReplacement,
    align_model_fields,
    format_text,
    scan_document,
    sort_import_lines,
)

__all__ = [
    "__version__",
    "FormatContext",
    "FormatGuard",
    "FormattingOptions",
    "LanguageKind",
    "RangeReplacement",
    "align_model_fields",
    "format_text",
    "scan_document",
    "sort_import_lines",
]
