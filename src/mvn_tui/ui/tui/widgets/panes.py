"""Main-screen panes and the history list.

File: src/mvn_tui/ui/tui/widgets/panes.py
"""

from __future__ import annotations

from rich.style import Style
from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widget import Widget
from textual.widgets import Static

from mvn_tui.ui.tui.controller import OPTION_KEYS
from mvn_tui.ui.tui.state import Pane, SessionState

_S_TITLE = Style(color="#3fa9f5", bold=True)
_S_TITLE_DIM = Style(color="#7f8aa3", bold=True)
_S_CURSOR = Style(color="#05070c", bgcolor="#72c7ff", bold=True)
_S_ITEM = Style(color="#c8cdd8")
_S_DIM = Style(color="#7f8aa3")
_S_OK = Style(color="#4ec990")
_S_FAIL = Style(color="#e05555")

_PLAIN = Style()
_PLAIN_CURSOR = Style(reverse=True)


def _styles(no_color: bool) -> tuple[Style, Style, Style]:
    if no_color:
        return _PLAIN, _PLAIN_CURSOR, _PLAIN
    return _S_ITEM, _S_CURSOR, _S_DIM


def _title(text: str, *, focused: bool, no_color: bool) -> Text:
    marker = "▶ " if focused else "  "
    if no_color:
        return Text(f"{marker}{text}\n")
    return Text(f"{marker}{text}\n", style=_S_TITLE if focused else _S_TITLE_DIM)


def render_modules(state: SessionState) -> Text:
    item, cursor, dim = _styles(state.no_color)
    focused = state.focused_pane == Pane.MODULES
    text = _title("Modules", focused=focused, no_color=state.no_color)
    if not state.project.modules:
        text.append("(single-module project)", style=dim)
        return text
    for index, module in enumerate(state.project.modules):
        mark = "[✓]" if module.selected else "[ ]"
        style = cursor if focused and index == state.module_cursor else item
        text.append(f"{mark} {module.name}\n", style=style)
    return text


def render_tasks(state: SessionState) -> Text:
    item, cursor, dim = _styles(state.no_color)
    focused = state.focused_pane == Pane.TASKS
    text = _title("Tasks", focused=focused, no_color=state.no_color)
    for index, task in enumerate(state.tasks):
        style = cursor if focused and index == state.task_cursor else item
        text.append(f"{task.name}", style=style)
        text.append(f"  {task.description}\n", style=dim)
    return text


def render_options(state: SessionState) -> Text:
    item, cursor, dim = _styles(state.no_color)
    focused = state.focused_pane == Pane.OPTIONS
    text = _title("Profiles & Options", focused=focused, no_color=state.no_color)

    if state.project.profiles:
        text.append("Profiles\n", style=dim)
        for index, profile in enumerate(state.project.profiles):
            mark = "[✓]" if profile.enabled else "[ ]"
            style = cursor if focused and index == state.option_cursor else item
            text.append(f"{mark} {profile.id}\n", style=style)
        text.append("\n")

    text.append("Options\n", style=dim)
    for key, (attribute, label, flag) in OPTION_KEYS.items():
        mark = "[✓]" if getattr(state.options, attribute) else "[ ]"
        text.append(f"{mark} {key}. {label} ({flag})\n", style=item)
    if state.options.threads:
        text.append(f"    Threads: -T {state.options.threads}\n", style=dim)
    return text


def render_history(state: SessionState) -> Text:
    item, cursor, dim = _styles(state.no_color)
    text = Text("Execution History\n\n", style=_PLAIN if state.no_color else _S_TITLE)
    entries = state.history_newest_first()
    if not entries:
        text.append("No commands executed yet", style=dim)
        return text
    for index, result in enumerate(entries):
        ok = result.exit_code == 0
        mark = "✓" if ok else "✗"
        timestamp = result.start_time.astimezone().strftime("%H:%M:%S")
        line = (
            f"{mark} [{timestamp}] {result.command} "
            f"(exit {result.exit_code}, {result.duration_text})\n"
        )
        if index == state.history_cursor:
            text.append(line, style=cursor)
        elif state.no_color:
            text.append(line)
        else:
            text.append(line, style=_S_OK if ok else _S_FAIL)
    return text


class MainPanes(Widget):
    """Modules, tasks and profiles/options side by side."""

    DEFAULT_CSS = """
    MainPanes {
        height: 1fr;
    }
    #panes-row {
        height: 1fr;
    }
    .pane {
        width: 1fr;
        height: 1fr;
        padding: 0 1;
        border: round #1a2550;
        overflow-y: auto;
    }
    """

    def compose(self) -> ComposeResult:
        with Horizontal(id="panes-row"):
            yield Static("", id="pane-modules", classes="pane")
            yield Static("", id="pane-tasks", classes="pane")
            yield Static("", id="pane-options", classes="pane")

    def update_from_state(self, state: SessionState) -> None:
        self.query_one("#pane-modules", Static).update(render_modules(state))
        self.query_one("#pane-tasks", Static).update(render_tasks(state))
        self.query_one("#pane-options", Static).update(render_options(state))


class HistoryView(Static):
    """Newest-first list of executed commands."""

    DEFAULT_CSS = """
    HistoryView {
        height: 1fr;
        padding: 0 1;
        overflow-y: auto;
    }
    """

    def update_from_state(self, state: SessionState) -> None:
        self.update(render_history(state))


__all__ = [
    "HistoryView",
    "MainPanes",
    "render_history",
    "render_modules",
    "render_options",
    "render_tasks",
]
