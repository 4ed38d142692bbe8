"""
Whitespace-only formatters for Prisma models and TypeScript imports.

This package provides:
1. A field aligner for the bodies of ``model`` blocks
2. An import sorter for runs of ``import`` statements
3. A scanner that finds both kinds of region in a document
4. A guarded entry point that pushes edits to an editor host
"""

from __future__ import annotations

__all__ = [
    "FormattingOptions",
    "FormattedResult",
    "LanguageKind",
    "RangeReplacement",
    "DefaultFormattingRules",
    "FieldDeclaration",
    "OpaqueLine",
    "AlignedBlock",
    "tokenize_field_line",
    "align_model_fields",
    "ImportClass",
    "ImportUnit",
    "classify_import",
    "sort_import_lines",
    "scan_document",
    "format_text",
    "FormatGuard",
    "FormatContext",
    "TextHost",
    "run_format_pass",
]

from .core import FormattedResult, FormattingOptions, LanguageKind, RangeReplacement
from .fields import AlignedBlock, FieldDeclaration, OpaqueLine, align_model_fields, tokenize_field_line
from .guard import FormatContext, FormatGuard
from .host import TextHost, run_format_pass
from .imports import ImportClass, ImportUnit, classify_import, sort_import_lines
from .rules import DefaultFormattingRules
from .scanner import format_text, scan_document
