"""Main Textual App — view layer that renders state and forwards keys.

File: src/mvn_tui/ui/tui/app.py

This is the top-level Textual App. It:
- Composes the layout (header, main panes, log, history, wizard, footer)
- Forwards every key press to the controller
- Subscribes to controller state changes and updates widgets
- Lends the terminal to interactive runs via ``App.suspend()``

All session logic lives in the controller; this file only does rendering.
"""

from __future__ import annotations

from collections.abc import Sequence

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.css.query import NoMatches
from textual.widget import Widget

from mvn_tui.maven.java_version import JavaVersion
from mvn_tui.ui.tui.controller import SessionController
from mvn_tui.ui.tui.runner import Runner
from mvn_tui.ui.tui.state import Screen, SessionState
from mvn_tui.ui.tui.widgets.logview import SCROLL_KEYS, LogView
from mvn_tui.ui.tui.widgets.panes import HistoryView, MainPanes
from mvn_tui.ui.tui.widgets.statusline import FooterLine, HeaderLine
from mvn_tui.ui.tui.widgets.wizard import WizardView

_CSS = """
Screen { background: #05070c; color: #c8cdd8; }
#main-view { height: 1fr; }
#log-view { height: 1fr; padding: 0 1; }
#history-view { height: 1fr; }
#wizard-view { height: 1fr; }
"""

_CSS_NO_COLOR = """
Screen { background: black; color: white; }
HeaderLine { background: black; color: white; }
FooterLine { background: black; color: white; }
#log-area { background: black; }
.pane { border: round white; }
#main-view { height: 1fr; }
#log-view { height: 1fr; padding: 0 1; }
#history-view { height: 1fr; }
#wizard-view { height: 1fr; }
"""

# Screen -> id of the widget shown for it; all others are hidden.
_SCREEN_VIEWS: dict[Screen, str] = {
    Screen.MAIN: "main-view",
    Screen.LOGS: "log-view",
    Screen.HISTORY: "history-view",
    Screen.PROJECT_WIZARD: "wizard-view",
    Screen.MODULE_WIZARD: "wizard-view",
    Screen.DEPENDENCY_WIZARD: "wizard-view",
}


class MvnTUI(App[int]):
    """Interactive Maven session."""

    TITLE = "mvn-tui"
    CSS = _CSS
    # Priority so Textual's own focus/quit handling never sees these keys.
    BINDINGS = [
        Binding("ctrl+c", "forward_key('ctrl+c')", "Cancel/Quit", show=False, priority=True),
        Binding("tab", "forward_key('tab')", "Next", show=False, priority=True),
        Binding("shift+tab", "forward_key('shift+tab')", "Previous", show=False, priority=True),
    ]

    def __init__(
        self,
        *,
        state: SessionState,
        runner: Runner | None = None,
        java_versions: Sequence[JavaVersion] | None = None,
        executable: str | None = None,
    ) -> None:
        super().__init__()
        self._state = state
        self._controller = SessionController(
            state=state,
            runner=runner,
            on_state_change=self._on_state_change,
            terminal_handover=self.suspend,
            java_versions=java_versions,
            executable=executable,
        )

    @property
    def controller(self) -> SessionController:
        return self._controller

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def compose(self) -> ComposeResult:
        yield HeaderLine("", id="header")
        yield MainPanes(id="main-view")
        yield LogView(no_color=self._state.no_color, id="log-view")
        yield HistoryView("", id="history-view")
        yield WizardView("", id="wizard-view")
        yield FooterLine("", id="footer")

    async def on_mount(self) -> None:
        await self._controller.start()

    # ------------------------------------------------------------------
    # State change callback: update all widgets
    # ------------------------------------------------------------------

    async def _on_state_change(self) -> None:
        """Called by controller when state changes — update widgets."""
        state = self._state
        if state.quit_requested:
            self.exit(0)
            return

        visible = _SCREEN_VIEWS[state.screen]
        for view_id in set(_SCREEN_VIEWS.values()):
            try:
                self.query_one(f"#{view_id}", Widget).display = view_id == visible
            except NoMatches:
                pass

        try:
            self.query_one(HeaderLine).update_from_state(state)
            self.query_one(FooterLine).update_from_state(state)
            self.query_one(LogView).sync(state)
            if state.screen == Screen.MAIN:
                self.query_one(MainPanes).update_from_state(state)
            elif state.screen == Screen.HISTORY:
                self.query_one(HistoryView).update_from_state(state)
            elif state.screen.is_wizard:
                self.query_one(WizardView).update_from_state(state)
        except NoMatches:
            pass

    # ------------------------------------------------------------------
    # Key handling: translate key events to controller intents
    # ------------------------------------------------------------------

    async def on_key(self, event: events.Key) -> None:
        event.stop()
        if self._state.screen == Screen.LOGS and event.key in SCROLL_KEYS:
            try:
                self.query_one(LogView).scroll_key(event.key)
            except NoMatches:
                pass
            return
        await self._controller.handle_key(event.key, event.character)

    async def action_forward_key(self, key: str) -> None:
        await self._controller.handle_key(key)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def run_tui_app(
    state: SessionState,
    *,
    runner: Runner | None = None,
    java_versions: Sequence[JavaVersion] | None = None,
    executable: str | None = None,
) -> int:
    """Create and run the TUI app, returning exit code."""
    MvnTUI.CSS = _CSS_NO_COLOR if state.no_color else _CSS

    app = MvnTUI(
        state=state,
        runner=runner,
        java_versions=java_versions,
        executable=executable,
    )
    result = app.run()
    return result if isinstance(result, int) else 0


__all__ = ["MvnTUI", "run_tui_app"]
