"""Document level state tracking for the smartfmt language server."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import List, Optional

from lsprotocol.types import Position, Range

from smartfmt.formatting.core import LanguageKind


def _utf16_length(text: str) -> int:
    return len(text.encode("utf-16-le")) // 2


@dataclass
class DocumentState:
    """Text of an open document plus the line table used for position maths.

    LSP positions count UTF-16 code units; offsets here are Python string
    indices.
    """

    uri: str
    text: str
    version: int
    language_id: Optional[str] = None
    lines: List[str] = field(init=False)
    _line_offsets: List[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._set_text(self.text)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def kind(self) -> LanguageKind:
        return LanguageKind.from_language_id(self.language_id, self.uri)

    def update(self, text: str, version: int) -> None:
        self._set_text(text)
        self.version = version

    def offset_at(self, position: Position) -> int:
        line_index = min(max(position.line, 0), len(self.lines) - 1)
        start_offset = self._line_offsets[line_index]
        line = self.lines[line_index]
        units = 0
        column = 0
        target = max(position.character, 0)
        while column < len(line) and units < target:
            units += _utf16_length(line[column])
            column += 1
        return start_offset + column

    def position_at(self, offset: int) -> Position:
        offset = min(max(offset, 0), len(self.text))
        line_index = bisect_right(self._line_offsets, offset) - 1
        start_offset = self._line_offsets[line_index]
        prefix = self.text[start_offset:offset]
        # An offset inside a line break clamps to the end of the line
        prefix = prefix[: len(self.lines[line_index])]
        return Position(line=line_index, character=_utf16_length(prefix))

    def range_at(self, start_offset: int, end_offset: int) -> Range:
        return Range(start=self.position_at(start_offset), end=self.position_at(end_offset))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _set_text(self, text: str) -> None:
        self.text = text
        self._recompute_line_offsets()
        lines: List[str] = []
        for index, start in enumerate(self._line_offsets):
            end = self._line_offsets[index + 1] if index + 1 < len(self._line_offsets) else len(text)
            lines.append(text[start:end].rstrip("\r\n"))
        self.lines = lines

    def _recompute_line_offsets(self) -> None:
        offsets: List[int] = [0]
        text = self.text
        idx = 0
        length = len(text)
        while idx < length:
            char = text[idx]
            if char == '\r':
                next_idx = idx + 1
                if next_idx < length and text[next_idx] == '\n':
                    offsets.append(next_idx + 1)
                    idx = next_idx + 1
                else:
                    offsets.append(idx + 1)
                    idx += 1
            elif char == '\n':
                offsets.append(idx + 1)
                idx += 1
            else:
                idx += 1
        self._line_offsets = offsets


__all__ = ["DocumentState"]
