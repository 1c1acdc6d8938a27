"""Module entrypoint for ``python -m mvn_tui``."""

from __future__ import annotations

from mvn_tui.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())
