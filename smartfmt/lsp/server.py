"""pygls based Language Server entrypoint."""

from __future__ import annotations

import argparse
import os
from typing import Optional, Sequence

from lsprotocol.types import InitializedParams
from pygls.server import LanguageServer

from smartfmt import __version__
from smartfmt.config import known_languages
from smartfmt.observability.logging import configure_logging, get_logger

from .handlers import register_all
from .protocol import SERVER_NAME
from .workspace import FormatterWorkspace

logger = get_logger("smartfmt.lsp.server")


class SmartFmtLanguageServer(LanguageServer):
    """Concrete LanguageServer holding the formatter workspace."""

    def __init__(self) -> None:
        super().__init__(name=SERVER_NAME, version=__version__)
        self.workspace_index = FormatterWorkspace()
        register_all(self)
        self._register_lifecycle_handlers()

    def _register_lifecycle_handlers(self) -> None:
        workspace = self.workspace_index

        @self.feature("initialized")
        async def _on_initialized(ls: "SmartFmtLanguageServer", params: InitializedParams) -> None:  # noqa: ARG001
            workspace.set_root(ls.workspace.root_uri)
            logger.info(
                "Formatter workspace at %s (languages: %s)",
                workspace.root_path,
                ", ".join(known_languages(workspace.config)),
            )


def create_server() -> SmartFmtLanguageServer:
    return SmartFmtLanguageServer()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="smartfmt-lsp", description="smartfmt language server")
    parser.add_argument("--tcp", action="store_true", help="Listen on TCP instead of stdio")
    parser.add_argument("--host", default="127.0.0.1", help="TCP host (with --tcp)")
    parser.add_argument("--port", type=int, default=2087, help="TCP port (with --tcp)")
    parser.add_argument("--log-level", default="INFO", help="Logging level written to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    server = create_server()
    logger.info("Starting smartfmt LSP (pid=%s)", os.getpid())
    if args.tcp:
        server.start_tcp(args.host, args.port)
    else:
        server.start_io()


if __name__ == "__main__":  # pragma: no cover
    main()
