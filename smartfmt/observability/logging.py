"""Centralised logging helpers for smartfmt."""

from __future__ import annotations

import logging
import sys
from typing import Dict, Optional, Union

_LOGGER_CACHE: Dict[str, logging.Logger] = {}

_DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str = "smartfmt") -> logging.Logger:
    """Return a cached :class:`logging.Logger` instance."""

    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = logging.getLogger(name)
    return _LOGGER_CACHE[name]


def configure_logging(level: Union[int, str] = logging.INFO, *, stream: Optional[object] = None) -> None:
    """Send smartfmt logs to *stream* (stderr by default).

    The language server talks JSON-RPC over stdout, so log output must never
    go there.
    """

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=_DEFAULT_FORMAT, stream=stream or sys.stderr)
    get_logger().setLevel(level)


def log_format_pass(
    *,
    uri: str,
    passes: object,
    edit_count: int,
    logger: Optional[logging.Logger] = None,
) -> None:
    """Emit a structured log entry describing a completed formatting pass."""

    target_logger = logger or get_logger("smartfmt.format")
    target_logger.info(
        "Formatting pass on %s produced %d edit(s)",
        uri,
        edit_count,
        extra={"smartfmt_event": "format_pass", "smartfmt_data": {"uri": uri, "passes": passes}},
    )
