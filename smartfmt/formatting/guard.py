"""Reentrancy guard for formatting passes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Set, TypeVar

from smartfmt.errors import ReentrantInvocation
from smartfmt.observability.logging import get_logger

from .core import FormattingOptions

T = TypeVar("T")

logger = get_logger("smartfmt.formatting.guard")


class FormatGuard:
    """Tracks which documents have a formatting pass in flight.

    A request for a document that is already being formatted is dropped,
    not queued.
    """

    def __init__(self) -> None:
        self._busy: Set[str] = set()

    def is_busy(self, key: str) -> bool:
        return key in self._busy

    def acquire(self, key: str) -> None:
        if key in self._busy:
            raise ReentrantInvocation(f"Formatting already in progress for {key}", path=key)
        self._busy.add(key)

    def release(self, key: str) -> None:
        self._busy.discard(key)

    async def run(self, key: str, func: Callable[[], Awaitable[List[T]]]) -> List[T]:
        """Await *func* unless *key* is busy, in which case return an empty list."""
        try:
            self.acquire(key)
        except ReentrantInvocation as exc:
            logger.debug("%s; request dropped", exc.message)
            return []
        try:
            return await func()
        finally:
            self.release(key)


@dataclass
class FormatContext:
    """Everything a formatting pass needs besides the document itself."""

    options: FormattingOptions = field(default_factory=FormattingOptions)
    guard: FormatGuard = field(default_factory=FormatGuard)


__all__ = ["FormatGuard", "FormatContext"]
