"""Locate model blocks and import runs in a document and format them in place."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Collection, List, Optional, Sequence, Tuple

from smartfmt.observability.logging import get_logger

from .core import (
    FORMAT_MODEL_FIELDS,
    SORT_IMPORTS,
    FormattedResult,
    FormattingOptions,
    LanguageKind,
    RangeReplacement,
    apply_replacements,
)
from .fields import align_model_fields
from .imports import find_unit_end, is_import_start, sort_import_lines

logger = get_logger("smartfmt.formatting.scanner")

_MODEL_KEYWORD = "model"


@dataclass
class SourceLines:
    """Document text split into lines, with the offset and terminator of each line.

    Lines end at ``\\n`` or ``\\r\\n``; mixed documents keep every line's own
    terminator. ``newline`` is the terminator used when a region grows.
    """

    text: str
    newline: str
    lines: List[str]
    offsets: List[int]
    terminators: List[str]

    @classmethod
    def from_text(cls, text: str) -> "SourceLines":
        lines: List[str] = []
        offsets: List[int] = []
        terminators: List[str] = []
        chunks = text.split("\n")
        position = 0
        for index, chunk in enumerate(chunks):
            if index == len(chunks) - 1:
                terminator = ""
            elif chunk.endswith("\r"):
                chunk = chunk[:-1]
                terminator = "\r\n"
            else:
                terminator = "\n"
            offsets.append(position)
            lines.append(chunk)
            terminators.append(terminator)
            position += len(chunk) + len(terminator)
        newline = "\r\n" if "\r\n" in text else "\n"
        return cls(text=text, newline=newline, lines=lines, offsets=offsets, terminators=terminators)

    def span(self, first: int, last: int) -> Tuple[int, int]:
        """Offsets from the start of line *first* to the end of line *last* (newline excluded)."""
        return self.offsets[first], self.offsets[last] + len(self.lines[last])

    def replacement(self, first: int, last: int, new_lines: Sequence[str]) -> Optional[RangeReplacement]:
        if list(new_lines) == self.lines[first : last + 1]:
            return None
        start, end = self.span(first, last)
        parts: List[str] = []
        for position, line in enumerate(new_lines):
            if position:
                index = first + position - 1
                parts.append(self.terminators[index] if index < last else self.newline)
            parts.append(line)
        return RangeReplacement(start, end, "".join(parts))


def default_passes(kind: LanguageKind) -> Tuple[str, ...]:
    if kind.formats_models:
        return (FORMAT_MODEL_FIELDS,)
    if kind.formats_imports:
        return (SORT_IMPORTS,)
    return ()


def is_model_start(line: str) -> bool:
    if not line.startswith(_MODEL_KEYWORD):
        return False
    rest = line[len(_MODEL_KEYWORD):]
    return not rest or rest[0].isspace()


def find_model_close(lines: Sequence[str], start: int) -> Optional[int]:
    """Index of the ``}`` line closing the model opened at *start*."""
    opening = lines[start]
    brace = opening.find("{")
    if brace != -1 and "}" in opening[brace:]:
        return None
    for index in range(start + 1, len(lines)):
        if lines[index].startswith("}"):
            return index
    return None


def find_import_run_end(lines: Sequence[str], start: int) -> Optional[int]:
    """Index of the last line of the import run starting at *start*."""
    end: Optional[int] = None
    index = start
    while index < len(lines) and is_import_start(lines[index]):
        unit_end = find_unit_end(lines, index)
        if unit_end is None:
            break
        end = unit_end
        index = unit_end + 1
    return end


def scan_document(
    text: str,
    kind: LanguageKind,
    options: Optional[FormattingOptions] = None,
    passes: Optional[Collection[str]] = None,
) -> List[RangeReplacement]:
    """Return the non-overlapping replacements that format *text*.

    *passes* names the pipelines to run (``formatModelFields``,
    ``sortImports``); it defaults to the one matching *kind*.
    """
    options = options or FormattingOptions()
    if passes is None:
        passes = default_passes(kind)
    models = FORMAT_MODEL_FIELDS in passes
    imports = SORT_IMPORTS in passes

    source = SourceLines.from_text(text)
    lines = source.lines
    edits: List[RangeReplacement] = []
    index = 0
    while index < len(lines):
        line = lines[index]
        if models and is_model_start(line):
            close = find_model_close(lines, index)
            if close is None:
                logger.debug("Model at line %d has no closing line; skipped", index + 1)
                index += 1
                continue
            if close > index + 1:
                edit = source.replacement(index + 1, close - 1, align_model_fields(lines[index + 1 : close], options))
                if edit is not None:
                    edits.append(edit)
            index = close + 1
            continue
        if imports and is_import_start(line):
            end = find_import_run_end(lines, index)
            if end is None:
                logger.debug("Unterminated import at line %d; skipped", index + 1)
                index += 1
                continue
            edit = source.replacement(index, end, sort_import_lines(lines[index : end + 1]))
            if edit is not None:
                edits.append(edit)
            index = end + 1
            continue
        index += 1
    return edits


def format_text(
    text: str,
    kind: LanguageKind,
    options: Optional[FormattingOptions] = None,
    passes: Optional[Collection[str]] = None,
) -> FormattedResult:
    """Format a whole document and return the new text along with the edits."""
    edits = scan_document(text, kind, options, passes)
    return FormattedResult(formatted_text=apply_replacements(text, edits), edits=edits)


__all__ = [
    "SourceLines",
    "default_passes",
    "is_model_start",
    "find_model_close",
    "find_import_run_end",
    "scan_document",
    "format_text",
]
