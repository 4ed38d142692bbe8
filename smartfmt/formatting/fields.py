"""Column alignment for field declarations inside schema ``model`` blocks.

A model body line such as::

    id   String @id @default(uuid()) @map("id")

is tokenized into a :class:`FieldDeclaration` (name, type, location tag and
the remaining tags). Every declaration in a block is then re-emitted with the
name, type and location-tag columns padded to a common width. Lines that do
not tokenize are kept as :class:`OpaqueLine` and only lose trailing
whitespace.

Token boundaries used by :func:`tokenize_field_line`:

* the name and the type are the first two whitespace-delimited tokens;
* in the rest of the line every ``@`` outside a quoted string starts a new
  tag, and whitespace runs outside quoted strings collapse to one space;
* quoted strings (``"`` or ``'``, with backslash escapes) are copied verbatim;
* a tag made of the marker alone (as in ``@@index``) is discarded, which
  makes the reconstruction check below fail for such lines;
* the tokens, concatenated without whitespace, must reproduce the original
  line without whitespace, otherwise the line is malformed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Union

from smartfmt.errors import MalformedFieldLine
from smartfmt.observability.logging import get_logger

from .core import MARKER, FormattingOptions

logger = get_logger("smartfmt.formatting.fields")

_QUOTES = "\"'"


@dataclass
class FieldDeclaration:
    """One tokenized field line."""

    name: str
    column_type: str
    location_tag: str = ""
    other_tags: List[str] = field(default_factory=list)

    @property
    def is_annotation(self) -> bool:
        """Block-level annotations (``@@index(...)``, ``@@map(...)``) start with the marker."""
        return self.name.startswith(MARKER)


@dataclass
class OpaqueLine:
    """A line that could not be tokenized; emitted as-is."""

    text: str


Entry = Union[FieldDeclaration, OpaqueLine]


def _squash(text: str) -> str:
    return "".join(text.split())


def _scan_tags(remainder: str) -> List[str]:
    segments: List[List[str]] = []
    current: Optional[List[str]] = None
    quote: Optional[str] = None
    escaped = False
    pending_space = False

    for char in remainder:
        if quote is not None:
            if current is not None:
                current.append(char)
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                quote = None
            continue
        if char == MARKER:
            current = [char]
            segments.append(current)
            pending_space = False
            continue
        if char.isspace():
            pending_space = True
            continue
        if current is not None:
            if pending_space:
                current.append(" ")
            current.append(char)
        pending_space = False
        if char in _QUOTES:
            quote = char

    tags = ["".join(segment).strip() for segment in segments]
    return [tag for tag in tags if tag and tag != MARKER]


def tokenize_field_line(line: str, options: Optional[FormattingOptions] = None) -> FieldDeclaration:
    """Split one model body line into a :class:`FieldDeclaration`.

    Raises :class:`MalformedFieldLine` when the line does not have the
    ``name type @tag...`` shape.
    """
    options = options or FormattingOptions()
    stripped = line.strip()
    head = stripped.split(None, 2)
    if len(head) < 2:
        raise MalformedFieldLine(f"Expected a name and a type: {stripped!r}")

    name, column_type = head[0], head[1]
    tags = _scan_tags(head[2] if len(head) == 3 else "")

    expected = name + column_type + "".join(tags)
    if _squash(expected) != _squash(stripped):
        raise MalformedFieldLine(f"Unexpected format in line: {stripped!r}")

    location_tag = ""
    for index, tag in enumerate(tags):
        if tag.startswith(options.location_prefixes):
            location_tag = tags.pop(index)
            break

    return FieldDeclaration(name=name, column_type=column_type, location_tag=location_tag, other_tags=tags)


def tokenize_block(lines: Iterable[str], options: Optional[FormattingOptions] = None) -> List[Entry]:
    """Tokenize every line, demoting malformed ones to :class:`OpaqueLine`."""
    entries: List[Entry] = []
    for line in lines:
        try:
            entries.append(tokenize_field_line(line, options))
        except MalformedFieldLine as exc:
            if line.strip():
                logger.debug("Keeping line verbatim: %s", exc.message)
            entries.append(OpaqueLine(line))
    return entries


@dataclass
class AlignedBlock:
    """Tokenized model body together with its column widths."""

    entries: List[Entry]
    name_width: int = 0
    type_width: int = 0
    tag_width: int = 0
    indent: str = "  "

    @classmethod
    def from_lines(cls, lines: Sequence[str], options: Optional[FormattingOptions] = None) -> "AlignedBlock":
        options = options or FormattingOptions()
        entries = tokenize_block(lines, options)
        fields = [entry for entry in entries if isinstance(entry, FieldDeclaration)]
        columns = [entry for entry in fields if not entry.is_annotation]
        return cls(
            entries=entries,
            name_width=max((len(entry.name) for entry in columns), default=0),
            type_width=max((len(entry.column_type) for entry in columns), default=0),
            tag_width=max(
                (
                    len(entry.location_tag)
                    for entry in fields
                    if entry.location_tag.startswith(options.width_prefixes)
                ),
                default=0,
            ),
            indent=options.indent,
        )

    def render_entry(self, entry: Entry) -> str:
        if isinstance(entry, OpaqueLine):
            return entry.text.rstrip()
        line = (
            f"{self.indent}"
            f"{entry.name.ljust(self.name_width)} {entry.column_type.ljust(self.type_width)} "
            f"{entry.location_tag.ljust(self.tag_width)} {' '.join(entry.other_tags)}"
        )
        return line.rstrip()

    def render(self) -> List[str]:
        return [self.render_entry(entry) for entry in self.entries]


def align_model_fields(lines: Sequence[str], options: Optional[FormattingOptions] = None) -> List[str]:
    """Align the lines strictly between a model's opening and closing braces."""
    return AlignedBlock.from_lines(lines, options).render()


__all__ = [
    "FieldDeclaration",
    "OpaqueLine",
    "AlignedBlock",
    "tokenize_field_line",
    "tokenize_block",
    "align_model_fields",
]
