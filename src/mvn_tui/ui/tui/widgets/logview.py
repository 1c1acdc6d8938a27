"""Log view widget — RichLog with Maven-aware line coloring.

File: src/mvn_tui/ui/tui/widgets/logview.py

Mirrors ``SessionState.log_lines``. Appends are incremental, including
when the buffer cap trims old lines (RichLog drops its own oldest lines
at the same cap). Only a new log generation, i.e. a replaced buffer,
clears and rebuilds the widget.
"""

from __future__ import annotations

import re
from typing import Final

from rich.style import Style
from rich.text import Text
from textual.app import ComposeResult
from textual.widget import Widget
from textual.widgets import RichLog

from mvn_tui.ui.tui.state import MAX_LOG_LINES, SessionState

_S_DEFAULT = Style(color="#c8cdd8")
_S_HEADER = Style(color="#3fa9f5", bold=True)
_S_INFO = Style(color="#7f8aa3")
_S_WARNING = Style(color="#e0b455")
_S_ERROR = Style(color="#e05555")
_S_SUCCESS = Style(color="#4ec990", bold=True)
_S_FAILURE = Style(color="#e05555", bold=True)
_S_SNIPPET = Style(color="#72c7ff")

_HEADER_PREFIXES: Final[tuple[str, ...]] = (
    "Executing:",
    "Quick Run:",
    "Re-executing:",
    "Creating project:",
    "Creating module:",
    "Completed with exit code",
)
_MAVEN_LEVEL = re.compile(r"^\[(INFO|WARNING|WARN|ERROR|DEBUG)\]")

SCROLL_KEYS: Final[frozenset[str]] = frozenset(
    {"up", "down", "pageup", "pagedown", "home", "end"}
)


class LogView(Widget):
    """Scrollable execution log backed by a RichLog widget."""

    DEFAULT_CSS = """
    LogView {
        height: 1fr;
        width: 1fr;
    }
    #log-area {
        height: 1fr;
        width: 1fr;
        background: #0b1020;
        scrollbar-color: #3fa9f5 40%;
        scrollbar-background: #05070c;
    }
    """

    def __init__(self, *, no_color: bool = False, **kwargs: object) -> None:
        super().__init__(**kwargs)
        self._no_color = no_color
        # Lines written in the current generation, counting ones since trimmed.
        self._rendered_lines = 0
        self._rendered_generation = -1

    def compose(self) -> ComposeResult:
        log = RichLog(
            max_lines=MAX_LOG_LINES,
            wrap=True,
            markup=False,
            auto_scroll=True,
            id="log-area",
        )
        log.can_focus = False
        yield log

    @property
    def rich_log(self) -> RichLog:
        return self.query_one("#log-area", RichLog)

    def sync(self, state: SessionState) -> None:
        """Bring the widget up to date with *state*'s log buffer."""
        log = self.rich_log
        lines = state.log_lines
        total = state.log_trimmed + len(lines)
        if state.log_generation != self._rendered_generation or total < self._rendered_lines:
            log.clear()
            self._rendered_lines = 0
            self._rendered_generation = state.log_generation

        start = max(self._rendered_lines - state.log_trimmed, 0)
        for line in lines[start:]:
            log.write(format_log_line(line, no_color=self._no_color))
        self._rendered_lines = total

    def scroll_key(self, key: str) -> None:
        log = self.rich_log
        if key == "up":
            log.scroll_up(animate=False)
        elif key == "down":
            log.scroll_down(animate=False)
        elif key == "pageup":
            log.scroll_page_up(animate=False)
        elif key == "pagedown":
            log.scroll_page_down(animate=False)
        elif key == "home":
            log.scroll_home(animate=False)
        elif key == "end":
            log.scroll_end(animate=False)

    @property
    def text(self) -> str:
        """Plain text of the rendered log (used by tests)."""
        return "\n".join(line.text for line in self.rich_log.lines)


def format_log_line(line: str, *, no_color: bool = False) -> Text:
    """Style one log line; Maven level tags and build verdicts get colors."""
    if no_color:
        return Text(line)

    stripped = line.lstrip()
    if stripped.startswith(_HEADER_PREFIXES):
        return Text(line, style=_S_HEADER)
    if "BUILD SUCCESS" in line or stripped.startswith("✓"):
        return Text(line, style=_S_SUCCESS)
    if "BUILD FAILURE" in line:
        return Text(line, style=_S_FAILURE)
    if stripped.startswith(("Error:", "Warning:")):
        return Text(line, style=_S_ERROR if stripped.startswith("Error:") else _S_WARNING)
    if stripped.startswith("<") and stripped.endswith(">"):
        return Text(line, style=_S_SNIPPET)

    match = _MAVEN_LEVEL.match(line)
    if match is None:
        return Text(line, style=_S_DEFAULT)

    level = match.group(1)
    text = Text()
    if level == "ERROR":
        text.append(match.group(0), style=_S_FAILURE)
        text.append(line[match.end() :], style=_S_ERROR)
    elif level in ("WARNING", "WARN"):
        text.append(match.group(0), style=_S_WARNING)
        text.append(line[match.end() :], style=_S_WARNING)
    else:
        text.append(match.group(0), style=_S_INFO)
        text.append(line[match.end() :], style=_S_DEFAULT)
    return text


__all__ = ["SCROLL_KEYS", "LogView", "format_log_line"]
