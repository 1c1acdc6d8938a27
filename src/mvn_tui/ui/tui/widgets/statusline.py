"""Header and footer bars.

File: src/mvn_tui/ui/tui/widgets/statusline.py

Header shows the project coordinates; the footer shows run state, the last
exit code and duration, and the key help for the active screen.
"""

from __future__ import annotations

from typing import Final

from textual.widgets import Static

from mvn_tui.ui.tui.state import Screen, SessionState

MAIN_HELP: Final[str] = (
    "Tab: Switch | Enter: Execute | 1-8: Options | R: Run | M: Module | "
    "D: Dependency | L: Logs | H: History | Q: Quit"
)
MAIN_HELP_NO_PROJECT: Final[str] = (
    "Tab: Switch | Enter: Execute | 1-8: Options | P: New Project | L: Logs | "
    "H: History | Q: Quit"
)
RUNNING_HELP: Final[str] = "⏳ Running... | Ctrl+C or Esc: Cancel"
LOGS_RUNNING_HELP: Final[str] = "⏳ Running... | Esc or Ctrl+C: Cancel | ↑/↓: Scroll"
LOGS_HELP: Final[str] = "Press L to return to main view | ↑/↓: Scroll"
HISTORY_HELP: Final[str] = "Press H to return to main view | ↑/↓: Navigate | Enter: Re-run"
PROJECT_WIZARD_HELP: Final[str] = (
    "Tab/Shift+Tab: Navigate fields | ←/→: Change selection | Enter: Create project | Esc: Cancel"
)
PROJECT_WIZARD_FORCED_HELP: Final[str] = (
    "Tab/Shift+Tab: Navigate fields | ←/→: Change selection | Enter: Create project | "
    "Ctrl+C: Quit"
)
MODULE_WIZARD_HELP: Final[str] = "Tab/Shift+Tab: Navigate fields | Enter: Create module | Esc: Cancel"
DEPENDENCY_LIST_HELP: Final[str] = "↑/↓: Select | Enter: Add dependency | Esc: Cancel"
DEPENDENCY_CUSTOM_HELP: Final[str] = "Tab/Shift+Tab: Navigate fields | Enter: Add | Esc: Back to list"
CANCELLING_TEXT: Final[str] = "⏳ Cancelling..."


def header_text(state: SessionState) -> str:
    if state.project.is_loaded:
        return f"mvn-tui  {state.project.coordinates}"
    return "mvn-tui  (No project detected)"


def footer_text(state: SessionState) -> str:
    """Compose the footer line for the active screen."""
    screen = state.screen
    if screen == Screen.LOGS:
        if state.running:
            return CANCELLING_TEXT if state.cancel_requested else LOGS_RUNNING_HELP
        return _with_last_result(state, LOGS_HELP)
    if screen == Screen.HISTORY:
        return HISTORY_HELP
    if screen == Screen.PROJECT_WIZARD:
        return PROJECT_WIZARD_FORCED_HELP if state.started_without_project else PROJECT_WIZARD_HELP
    if screen == Screen.MODULE_WIZARD:
        return MODULE_WIZARD_HELP
    if screen == Screen.DEPENDENCY_WIZARD:
        custom = getattr(state.wizard, "custom_mode", False)
        return DEPENDENCY_CUSTOM_HELP if custom else DEPENDENCY_LIST_HELP

    if state.running:
        return CANCELLING_TEXT if state.cancel_requested else RUNNING_HELP
    help_text = MAIN_HELP_NO_PROJECT if state.started_without_project else MAIN_HELP
    return _with_last_result(state, help_text)


def _with_last_result(state: SessionState, help_text: str) -> str:
    result = state.last_result
    if result is None:
        return help_text
    mark = "✓" if result.exit_code == 0 else "✗"
    return f"{mark} Exit: {result.exit_code} Duration: {result.duration_text} | {help_text}"


class HeaderLine(Static):
    """Top bar: tool name plus loaded project coordinates."""

    DEFAULT_CSS = """
    HeaderLine {
        dock: top;
        height: 1;
        background: #0b1020;
        color: #3fa9f5;
        text-style: bold;
        padding: 0 1;
    }
    """

    def update_from_state(self, state: SessionState) -> None:
        self.update(header_text(state))


class FooterLine(Static):
    """Bottom bar: run state, last result, key help."""

    DEFAULT_CSS = """
    FooterLine {
        dock: bottom;
        height: 1;
        background: #0b1020;
        color: #7f8aa3;
        padding: 0 1;
    }
    """

    def update_from_state(self, state: SessionState) -> None:
        self.update(footer_text(state))


__all__ = ["FooterLine", "HeaderLine", "footer_text", "header_text"]
