"""Grouping and ordering of TypeScript import statements.

Imports in a contiguous run are bucketed by kind and, inside each bucket,
ordered by the length of their specifier list (longest first)::

    import type { Session } from './session'
    import { useEffect, useState } from 'react'
    import {
      createSelector,
      createSlice,
    } from '@reduxjs/toolkit'
    import styles from './app.module.css'

Only whole statements move; for multi-line braced imports the specifier
lines are also reordered. Everything else is left as written, apart from
leading whitespace on the statement lines.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from smartfmt.observability.logging import get_logger

logger = get_logger("smartfmt.formatting.imports")

_KEYWORD = "import"
_TYPE = "type"
_FROM = "from"
_QUOTES = "\"'`"


class ImportClass(Enum):
    """Import kinds, declared in output order."""

    TYPE_ONLY = 1
    SINGLE_LINE_BRACED = 2
    MULTI_LINE_BRACED = 3
    DEFAULT = 4


def is_import_start(line: str) -> bool:
    """True when *line* begins an import statement (``import`` followed by a boundary)."""
    stripped = line.lstrip()
    if not stripped.startswith(_KEYWORD):
        return False
    rest = stripped[len(_KEYWORD):]
    return not rest or rest[0].isspace() or rest[0] in "{*" or rest[0] in _QUOTES


def _import_body(text: str) -> str:
    return text.lstrip()[len(_KEYWORD):].lstrip()


def _strip_type_qualifier(body: str) -> Tuple[bool, str]:
    if body.startswith(_TYPE):
        rest = body[len(_TYPE):]
        if rest and (rest[0].isspace() or rest[0] in "{*"):
            return True, rest.lstrip()
    return False, body


def opens_multiline_unit(line: str) -> bool:
    """An import line with an opening brace that is not closed on the same line."""
    if not is_import_start(line):
        return False
    brace = line.find("{")
    return brace != -1 and "}" not in line[brace:]


def find_unit_end(lines: Sequence[str], start: int) -> Optional[int]:
    """Index of the last physical line of the import starting at *start*.

    Returns ``None`` for a multi-line import whose closing line never comes.
    """
    if not opens_multiline_unit(lines[start]):
        return start
    for index in range(start + 1, len(lines)):
        if "}" in lines[index]:
            return index
    return None


def _find_from(body: str) -> int:
    index = body.find(_FROM)
    while index != -1:
        before = body[index - 1] if index > 0 else ""
        after = body[index + len(_FROM)] if index + len(_FROM) < len(body) else ""
        if (before.isspace() or before == "}") and (after.isspace() or after in _QUOTES):
            return index
        index = body.find(_FROM, index + 1)
    return -1


def _has_comment(line: str) -> bool:
    return "//" in line or "/*" in line


def _has_leading_comma(line: str) -> bool:
    return line.strip().startswith(",")


def _sort_specifier_lines(lines: List[str]) -> List[str]:
    """Order specifier lines longest first, keeping commas where the syntax needs them."""
    if any(_has_comment(line) for line in lines):
        logger.debug("Specifier lines carry comments; keeping their order")
        return [line.rstrip() for line in lines]
    if any(_has_leading_comma(line) for line in lines):
        logger.debug("Specifier lines use leading commas; keeping their order")
        return [line.rstrip() for line in lines]

    bare = []
    for line in lines:
        text = line.rstrip()
        if text.endswith(","):
            text = text[:-1].rstrip()
        bare.append(text)

    filled = [index for index, text in enumerate(bare) if text.strip()]
    trailing_comma = bool(filled) and lines[filled[-1]].rstrip().endswith(",")

    ordered = sorted(bare, key=lambda text: len(text), reverse=True)
    last_filled = max((index for index, text in enumerate(ordered) if text.strip()), default=-1)
    result = []
    for index, text in enumerate(ordered):
        if text.strip() and (index != last_filled or trailing_comma):
            text += ","
        result.append(text)
    return result


@dataclass
class ImportUnit:
    """One logical import statement spanning one or more physical lines."""

    lines: List[str]

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def is_multiline(self) -> bool:
        return len(self.lines) > 1

    @property
    def import_class(self) -> ImportClass:
        return classify_import(self)

    @property
    def specifier_list(self) -> str:
        """Text between ``import`` (and ``type``) and the ``from`` clause."""
        _, body = _strip_type_qualifier(_import_body(self.text))
        index = _find_from(body)
        if index == -1:
            return ""
        return body[:index].strip()

    def normalized(self) -> "ImportUnit":
        """Trim the statement lines and, for multi-line braced imports, reorder specifiers."""
        if not self.is_multiline:
            return ImportUnit([self.lines[0].strip()])
        inner = self.lines[1:-1]
        if self.import_class is ImportClass.MULTI_LINE_BRACED:
            inner = _sort_specifier_lines(inner)
        else:
            inner = [line.rstrip() for line in inner]
        return ImportUnit([self.lines[0].strip(), *inner, self.lines[-1].strip()])


def classify_import(unit: ImportUnit) -> ImportClass:
    """First match wins: type-only, multi-line braced, single-line braced, default."""
    is_type, body = _strip_type_qualifier(_import_body(unit.text))
    if is_type:
        return ImportClass.TYPE_ONLY
    if body.startswith("{"):
        if unit.is_multiline:
            return ImportClass.MULTI_LINE_BRACED
        return ImportClass.SINGLE_LINE_BRACED
    return ImportClass.DEFAULT


def split_import_units(lines: Sequence[str]) -> List[ImportUnit]:
    """Group physical lines into import statements."""
    units: List[ImportUnit] = []
    index = 0
    while index < len(lines):
        end = find_unit_end(lines, index)
        if end is None:
            end = len(lines) - 1
        units.append(ImportUnit(list(lines[index : end + 1])))
        index = end + 1
    return units


@dataclass
class SortedImportGroup:
    """Import units bucketed by :class:`ImportClass`."""

    buckets: Dict[ImportClass, List[ImportUnit]] = field(
        default_factory=lambda: {import_class: [] for import_class in ImportClass}
    )

    @classmethod
    def from_units(cls, units: Iterable[ImportUnit]) -> "SortedImportGroup":
        group = cls()
        for unit in units:
            normalized = unit.normalized()
            group.buckets[normalized.import_class].append(normalized)
        for bucket in group.buckets.values():
            bucket.sort(key=lambda unit: len(unit.specifier_list), reverse=True)
        return group

    def units(self) -> List[ImportUnit]:
        ordered: List[ImportUnit] = []
        for import_class in ImportClass:
            ordered.extend(self.buckets[import_class])
        return ordered


def sort_import_units(units: Iterable[ImportUnit]) -> List[ImportUnit]:
    return SortedImportGroup.from_units(units).units()


def sort_import_lines(lines: Sequence[str]) -> List[str]:
    """Reorder a contiguous run of import lines."""
    result: List[str] = []
    for unit in sort_import_units(split_import_units(lines)):
        result.extend(unit.lines)
    return result


__all__ = [
    "ImportClass",
    "ImportUnit",
    "SortedImportGroup",
    "classify_import",
    "is_import_start",
    "opens_multiline_unit",
    "find_unit_end",
    "split_import_units",
    "sort_import_units",
    "sort_import_lines",
]
