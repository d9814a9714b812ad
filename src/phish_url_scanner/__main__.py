"""Module entrypoint for ``python -m phish_url_scanner``."""

from __future__ import annotations

from phish_url_scanner.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
