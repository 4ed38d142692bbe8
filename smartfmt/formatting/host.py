"""Editor-facing entry point: one guarded formatting pass against a host document."""

from __future__ import annotations

from typing import Collection, List, Optional, Protocol

from smartfmt.observability.logging import log_format_pass

from .core import LanguageKind, RangeReplacement
from .guard import FormatContext
from .scanner import default_passes, scan_document


class TextHost(Protocol):
    """What the formatter needs from the editor holding the document."""

    def get_document_text(self) -> str:
        ...

    def language_kind(self) -> LanguageKind:
        ...

    async def replace_ranges(self, edits: List[RangeReplacement]) -> None:
        ...


async def run_format_pass(
    host: TextHost,
    context: FormatContext,
    key: str,
    passes: Optional[Collection[str]] = None,
) -> List[RangeReplacement]:
    """Format the host document once and push the edits back to the host.

    Returns the applied edits, or an empty list when nothing changed or a
    pass for *key* is already running. Errors raised by the host propagate.
    """

    async def _body() -> List[RangeReplacement]:
        kind = host.language_kind()
        selected = default_passes(kind) if passes is None else tuple(passes)
        edits = scan_document(host.get_document_text(), kind, context.options, selected)
        if edits:
            await host.replace_ranges(edits)
        log_format_pass(uri=key, passes=selected, edit_count=len(edits))
        return edits

    return await context.guard.run(key, _body)


__all__ = ["TextHost", "run_format_pass"]
