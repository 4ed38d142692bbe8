"""Unified error model for smartfmt."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class ErrorLocation:
    """Position in a file; configuration errors are the only ones that carry one."""

    path: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None

    def describe(self) -> Optional[str]:
        if not self.path:
            return None
        parts = [self.path]
        if self.line is not None:
            parts.append(str(self.line))
            if self.column is not None:
                parts.append(str(self.column))
        return ":".join(parts)


class SmartFmtError(Exception):
    """Base class for all formatter errors."""

    code: Optional[str] = None
    hint: Optional[str] = None

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
        code: Optional[str] = None,
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.location = ErrorLocation(path=path, line=line, column=column)
        if code is not None:
            self.code = code
        if hint is not None:
            self.hint = hint

    def format(self) -> str:
        """``message (path:line:column; code) Hint: ...`` with absent parts left out."""
        meta = [part for part in (self.location.describe(), self.code) if part]
        text = f"{self.message} ({'; '.join(meta)})" if meta else self.message
        if self.hint:
            text = f"{text} Hint: {self.hint}"
        return text


class MalformedFieldLine(SmartFmtError):
    """Raised when a model body line does not have the shape of a field declaration.

    Never escapes the aligner: the offending line is kept as-is.
    """

    code = "SF001"


class ReentrantInvocation(SmartFmtError):
    """Raised when a formatting pass is requested while one is still running."""

    code = "SF002"


class ConfigError(SmartFmtError):
    """Raised when a configuration file cannot be interpreted."""

    code = "SF100"


__all__ = [
    "SmartFmtError",
    "MalformedFieldLine",
    "ReentrantInvocation",
    "ConfigError",
    "ErrorLocation",
]
