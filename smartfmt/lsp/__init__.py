"""Language Server Protocol implementation for smartfmt."""

from .server import SmartFmtLanguageServer, create_server

__all__ = [
    "SmartFmtLanguageServer",
    "create_server",
]
