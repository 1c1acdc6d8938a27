"""
mvn-tui — interactive terminal front-end for Maven projects.

File: src/mvn_tui/__init__.py

Purpose
- Package root. Exposes build metadata used by ``mvn-tui --version``.

Functional requirements
- Must not have side effects at import time (no config loading, no logging init).
"""

from __future__ import annotations

from typing import Final

__version__: Final[str] = "dev"
__commit__: Final[str] = "none"
__build_date__: Final[str] = "unknown"


def version_banner() -> str:
    """Return the one-line version string printed by ``--version``."""
    return f"mvn-tui version {__version__} (commit: {__commit__}, built: {__build_date__})"


__all__ = ["__build_date__", "__commit__", "__version__", "version_banner"]
