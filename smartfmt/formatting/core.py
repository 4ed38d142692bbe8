"""Core formatting infrastructure shared by the field aligner and import sorter."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath
from typing import List, Optional, Tuple


MARKER = "@"

SORT_IMPORTS = "sortImports"
FORMAT_MODEL_FIELDS = "formatModelFields"
KNOWN_FORMATTERS = (SORT_IMPORTS, FORMAT_MODEL_FIELDS)


class LanguageKind(Enum):
    """Document languages the formatter knows how to handle."""

    MODEL_LANG = "prisma"
    SCRIPT_LANG = "typescript"
    SCRIPT_LANG_VARIANT = "typescriptreact"
    OTHER = "other"

    @classmethod
    def from_language_id(cls, language_id: Optional[str], uri: Optional[str] = None) -> "LanguageKind":
        """Resolve a kind from an editor language id, falling back to the file extension."""
        for kind in cls:
            if kind is not cls.OTHER and kind.value == language_id:
                return kind
        if uri:
            suffix = PurePosixPath(uri).suffix.lower()
            return _EXTENSION_KINDS.get(suffix, cls.OTHER)
        return cls.OTHER

    @property
    def formats_models(self) -> bool:
        return self is LanguageKind.MODEL_LANG

    @property
    def formats_imports(self) -> bool:
        return self in (LanguageKind.SCRIPT_LANG, LanguageKind.SCRIPT_LANG_VARIANT)


_EXTENSION_KINDS = {
    ".prisma": LanguageKind.MODEL_LANG,
    ".ts": LanguageKind.SCRIPT_LANG,
    ".mts": LanguageKind.SCRIPT_LANG,
    ".cts": LanguageKind.SCRIPT_LANG,
    ".tsx": LanguageKind.SCRIPT_LANG_VARIANT,
}


@dataclass
class FormattingOptions:
    """Configuration options for the two pipelines."""

    # Model field alignment
    field_indent: int = 2
    location_prefixes: Tuple[str, ...] = ("@map", "@relation")
    # Only these location tags contribute to the location column width
    width_prefixes: Tuple[str, ...] = ("@map",)

    @property
    def indent(self) -> str:
        return " " * self.field_indent


@dataclass(frozen=True)
class RangeReplacement:
    """Replace ``text[start_offset:end_offset]`` with ``new_text``."""

    start_offset: int
    end_offset: int
    new_text: str

    def apply(self, text: str) -> str:
        return text[: self.start_offset] + self.new_text + text[self.end_offset :]


@dataclass
class FormattedResult:
    """Result of formatting a whole document."""

    formatted_text: str
    edits: List[RangeReplacement] = field(default_factory=list)


def apply_replacements(text: str, edits: List[RangeReplacement]) -> str:
    """Apply non-overlapping replacements to *text*."""
    # Back to front so earlier offsets stay valid
    for edit in sorted(edits, key=lambda item: item.start_offset, reverse=True):
        text = edit.apply(text)
    return text


__all__ = [
    "MARKER",
    "SORT_IMPORTS",
    "FORMAT_MODEL_FIELDS",
    "KNOWN_FORMATTERS",
    "LanguageKind",
    "FormattingOptions",
    "RangeReplacement",
    "FormattedResult",
    "apply_replacements",
]
