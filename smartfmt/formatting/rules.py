"""Default formatting rules for smartfmt."""

from __future__ import annotations

from .core import FormattingOptions


class DefaultFormattingRules:
    """Preset option sets."""

    @classmethod
    def standard(cls) -> FormattingOptions:
        """Two-space field indent; ``@map`` and ``@relation`` are location tags."""
        return FormattingOptions(
            field_indent=2,
            location_prefixes=("@map", "@relation"),
            width_prefixes=("@map",),
        )
