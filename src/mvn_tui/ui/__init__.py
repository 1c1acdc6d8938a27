"""UI package exports for the CLI surface."""

from mvn_tui.ui.cli import build_parser, build_session_state, run_cli

__all__ = ["build_parser", "build_session_state", "run_cli"]
