"""Allow ``python -m smartfmt`` to start the language server."""

from smartfmt.lsp.server import main

if __name__ == "__main__":  # pragma: no cover
    main()
