"""Session state — pure data, NO Textual imports.

File: src/mvn_tui/ui/tui/state.py

Owns the canonical state for the session controller.
All state mutations go through the controller; widgets read snapshots.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from mvn_tui.maven.command import BuildOptions

if TYPE_CHECKING:
    from mvn_tui.maven.project import Project
    from mvn_tui.ui.tui.runner import CancellationToken, ExecutionResult
    from mvn_tui.ui.tui.tasks import Task
    from mvn_tui.ui.tui.wizards import DependencyWizard, ModuleWizard, ProjectWizard

MAX_LOG_LINES: Final[int] = 10_000

# ---------------------------------------------------------------------------
# Screens and panes
# ---------------------------------------------------------------------------


class Screen(enum.Enum):
    """The single active screen of the session."""

    MAIN = "main"
    LOGS = "logs"
    HISTORY = "history"
    PROJECT_WIZARD = "project_wizard"
    MODULE_WIZARD = "module_wizard"
    DEPENDENCY_WIZARD = "dependency_wizard"

    @property
    def is_wizard(self) -> bool:
        return self in _WIZARD_SCREENS


_WIZARD_SCREENS: Final[frozenset[Screen]] = frozenset(
    {Screen.PROJECT_WIZARD, Screen.MODULE_WIZARD, Screen.DEPENDENCY_WIZARD}
)


class Pane(enum.IntEnum):
    """Focusable panes of the main screen, in Tab order."""

    MODULES = 0
    TASKS = 1
    OPTIONS = 2

    def next(self) -> Pane:
        return Pane((self.value + 1) % len(Pane))

    def previous(self) -> Pane:
        return Pane((self.value - 1) % len(Pane))


# ---------------------------------------------------------------------------
# Pending side effects
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RegisterModule:
    """Add *module_name* to the parent descriptor once generation succeeds."""

    module_name: str


@dataclass(frozen=True, slots=True)
class FinalizeProject:
    """Post-generation fix-ups for a freshly created project."""

    artifact_id: str
    folder_name: str
    java_version: str | None = None


PendingSideEffect = RegisterModule | FinalizeProject

# ---------------------------------------------------------------------------
# Session aggregate
# ---------------------------------------------------------------------------


@dataclass
class SessionState:
    """Root state object for the session — mutated only by the controller."""

    project: Project
    tasks: list[Task] = field(default_factory=list)
    options: BuildOptions = field(default_factory=BuildOptions)

    screen: Screen = Screen.MAIN
    focused_pane: Pane = Pane.TASKS
    module_cursor: int = 0
    task_cursor: int = 0
    option_cursor: int = 0
    history_cursor: int = 0

    # Append-only within a session.
    history: list[ExecutionResult] = field(default_factory=list)

    log_lines: list[str] = field(default_factory=list)
    # Bumped whenever log_lines is replaced rather than appended to.
    log_generation: int = 0
    # Lines dropped from the front of the current generation by the size cap.
    log_trimmed: int = 0

    cancel_token: CancellationToken | None = None
    cancel_requested: bool = False
    current_command: str = ""
    pending_side_effect: PendingSideEffect | None = None

    wizard: ProjectWizard | ModuleWizard | DependencyWizard | None = None
    started_without_project: bool = False
    quit_requested: bool = False
    no_color: bool = False

    @property
    def running(self) -> bool:
        return self.cancel_token is not None

    @property
    def last_result(self) -> ExecutionResult | None:
        return self.history[-1] if self.history else None

    def reset_log(self, lines: list[str] | None = None) -> None:
        self.log_lines = list(lines or [])
        self.log_generation += 1
        self.log_trimmed = 0

    def append_log(self, *lines: str) -> None:
        self.log_lines.extend(lines)
        overflow = len(self.log_lines) - MAX_LOG_LINES
        if overflow > 0:
            del self.log_lines[:overflow]
            self.log_trimmed += overflow

    def history_newest_first(self) -> list[ExecutionResult]:
        return list(reversed(self.history))


__all__ = [
    "MAX_LOG_LINES",
    "FinalizeProject",
    "Pane",
    "PendingSideEffect",
    "RegisterModule",
    "Screen",
    "SessionState",
]
