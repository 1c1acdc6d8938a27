"""Controller layer — owns SessionState, translates keys into transitions.

File: src/mvn_tui/ui/tui/controller.py

NO widget/Textual imports. The controller:
1. Receives key presses from the view layer (Textual key names).
2. Applies the per-screen transition for that key.
3. Starts at most one Maven execution and reduces runner events into state.
4. Applies pending side effects once an execution succeeds.
5. Notifies the view layer via a callback when state changes.

This keeps all session logic testable without Textual.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable, Sequence
from contextlib import AbstractContextManager
from datetime import UTC, datetime
from pathlib import Path
from typing import Final, TypeVar

from mvn_tui.maven.command import Command, build_command
from mvn_tui.maven.java_version import JavaVersion, detect_java_versions
from mvn_tui.maven.pom_editor import (
    PomEditError,
    add_module_entry,
    declares_module,
    set_java_version,
)
from mvn_tui.maven.project import POM_FILENAME, ProjectLoadError, load_project
from mvn_tui.ui.tui.runner import (
    CancellationToken,
    ExecutionResult,
    InteractiveRunner,
    Runner,
    RunnerEventKind,
    SubprocessRunner,
)
from mvn_tui.ui.tui.state import (
    FinalizeProject,
    Pane,
    PendingSideEffect,
    RegisterModule,
    Screen,
    SessionState,
)
from mvn_tui.ui.tui.tasks import Task, built_in_tasks, first_run_task
from mvn_tui.ui.tui.wizards import (
    DependencyWizard,
    ModuleWizard,
    ProjectWizard,
    dependency_snippet,
)

logger = logging.getLogger(__name__)

# Type alias for the state-change notification callback
StateCallback = Callable[[], Awaitable[None] | None]
TerminalHandover = Callable[[], AbstractContextManager[object]]
KeyHandler = Callable[[str, str | None], None]
_W = TypeVar("_W", ProjectWizard, ModuleWizard, DependencyWizard)

# Digit key -> BuildOptions attribute, in options-pane display order.
OPTION_KEYS: Final[dict[str, tuple[str, str, str]]] = {
    "1": ("skip_tests", "Skip Tests", "-DskipTests"),
    "2": ("offline", "Offline", "-o"),
    "3": ("update_snapshots", "Update Snapshots", "-U"),
    "4": ("debug", "Debug", "-X"),
    "5": ("verbose", "Verbose", "-v"),
    "6": ("quiet", "Quiet", "-q"),
    "7": ("show_errors", "Show Errors", "-e"),
    "8": ("batch_mode", "Batch Mode", "-B"),
}

NO_RUN_TASK_MESSAGE: Final[str] = "No run task available for this project"
CANCELLING_MESSAGE: Final[str] = "Cancelling command..."


class SessionController:
    """Session state machine — the only writer of :class:`SessionState`."""

    def __init__(
        self,
        *,
        state: SessionState,
        runner: Runner | None = None,
        interactive_runner: InteractiveRunner | None = None,
        on_state_change: StateCallback | None = None,
        terminal_handover: TerminalHandover | None = None,
        java_versions: Sequence[JavaVersion] | None = None,
        executable: str | None = None,
    ) -> None:
        self.state = state
        self._runner: Runner = runner or SubprocessRunner()
        self._interactive_runner = interactive_runner or InteractiveRunner()
        self._on_state_change = on_state_change
        self._terminal_handover: TerminalHandover = terminal_handover or contextlib.nullcontext
        # None defers the JDK scan until the project wizard first opens.
        self._java_versions = tuple(java_versions) if java_versions is not None else None
        self._executable = executable
        self._run_task: asyncio.Task[None] | None = None
        self._java_scan: asyncio.Task[None] | None = None

        if not self.state.tasks:
            self.state.tasks = built_in_tasks(self.state.project)
        if self.state.started_without_project and self.state.wizard is None:
            self.open_project_wizard()

        self._handlers: dict[Screen, KeyHandler] = {
            Screen.MAIN: self._on_main_key,
            Screen.LOGS: self._on_logs_key,
            Screen.HISTORY: self._on_history_key,
            Screen.PROJECT_WIZARD: self._on_project_wizard_key,
            Screen.MODULE_WIZARD: self._on_module_wizard_key,
            Screen.DEPENDENCY_WIZARD: self._on_dependency_wizard_key,
        }

    # ------------------------------------------------------------------
    # State notification
    # ------------------------------------------------------------------

    async def _notify(self) -> None:
        if self._on_state_change is not None:
            result = self._on_state_change()
            if asyncio.iscoroutine(result):
                await result

    # ------------------------------------------------------------------
    # Intents (actions from the view)
    # ------------------------------------------------------------------

    async def handle_key(self, key: str, character: str | None = None) -> None:
        """Intent: the user pressed *key* (``character`` is the printable form)."""
        if key == "ctrl+c":
            if self.state.running:
                self._request_cancel()
            else:
                self.state.quit_requested = True
        else:
            self._handlers[self.state.screen](key, character)
        await self._notify()

    def open_project_wizard(self) -> None:
        """Enter the new-project wizard with fresh input.

        The first opening starts the JDK scan in a worker thread; the Java
        selector fills in when it finishes.
        """
        self.state.wizard = ProjectWizard(self._java_versions or ())
        self.state.screen = Screen.PROJECT_WIZARD
        self._start_java_scan()

    async def start(self) -> None:
        """Called once the event loop runs; picks up a scan deferred at construction."""
        if isinstance(self.state.wizard, ProjectWizard):
            self._start_java_scan()
        await self._notify()

    async def wait_for_java_scan(self) -> None:
        task = self._java_scan
        if task is not None:
            await task

    def _start_java_scan(self) -> None:
        if self._java_versions is not None or self._java_scan is not None:
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            # Constructed before the app loop; start() schedules it.
            return
        self._java_scan = asyncio.create_task(self._scan_java_versions())

    async def _scan_java_versions(self) -> None:
        try:
            versions = tuple(await asyncio.to_thread(detect_java_versions))
        except OSError:
            logger.warning("java version scan failed", exc_info=True)
            versions = ()
        self._java_versions = versions
        logger.info("java versions detected", extra={"count": len(versions)})
        wizard = self.state.wizard
        if isinstance(wizard, ProjectWizard) and not wizard.java_versions:
            wizard.set_java_versions(versions)
        await self._notify()

    async def wait_for_completion(self) -> None:
        """Block until the in-flight execution (if any) has been reduced."""
        task = self._run_task
        if task is not None:
            await task

    # ------------------------------------------------------------------
    # Per-screen transitions
    # ------------------------------------------------------------------

    def _on_main_key(self, key: str, character: str | None) -> None:
        state = self.state
        if key == "tab":
            state.focused_pane = state.focused_pane.next()
        elif key == "shift+tab":
            state.focused_pane = state.focused_pane.previous()
        elif key in ("up", "down"):
            self._move_cursor(-1 if key == "up" else 1)
        elif key == "enter":
            if state.focused_pane == Pane.TASKS and state.tasks:
                self._execute_task(state.tasks[state.task_cursor])
        elif key == "space":
            if state.focused_pane == Pane.MODULES:
                state.project.toggle_module(state.module_cursor)
            elif state.focused_pane == Pane.OPTIONS:
                state.project.toggle_profile(state.option_cursor)
        elif key in OPTION_KEYS:
            attribute = OPTION_KEYS[key][0]
            setattr(state.options, attribute, not getattr(state.options, attribute))
        elif key == "r":
            self._quick_run()
        elif key == "l":
            state.screen = Screen.LOGS
        elif key == "h":
            state.history_cursor = 0
            state.screen = Screen.HISTORY
        elif key == "p":
            self.open_project_wizard()
        elif key == "m":
            if not state.started_without_project:
                state.wizard = ModuleWizard()
                state.screen = Screen.MODULE_WIZARD
        elif key == "d":
            if not state.started_without_project:
                state.wizard = DependencyWizard()
                state.screen = Screen.DEPENDENCY_WIZARD
        elif key == "q" and not state.running:
            state.quit_requested = True

    def _on_logs_key(self, key: str, character: str | None) -> None:
        state = self.state
        if key == "escape":
            if state.running:
                self._request_cancel()
        elif key == "l":
            if not state.running:
                state.screen = Screen.MAIN
        elif key == "q" and not state.running:
            state.quit_requested = True

    def _on_history_key(self, key: str, character: str | None) -> None:
        state = self.state
        if key == "h":
            state.screen = Screen.MAIN
        elif key == "up":
            state.history_cursor = max(0, state.history_cursor - 1)
        elif key == "down":
            state.history_cursor = _clamp(state.history_cursor + 1, len(state.history))
        elif key == "enter":
            entries = state.history_newest_first()
            if entries:
                command = entries[state.history_cursor].command
                self._begin_execution(command, f"Re-executing: {command}")
        elif key == "q" and not state.running:
            state.quit_requested = True

    def _on_project_wizard_key(self, key: str, character: str | None) -> None:
        wizard = self._active_wizard(ProjectWizard)
        if wizard is None:
            return
        if key == "escape":
            # The wizard is the whole session until a project exists.
            if not self.state.started_without_project:
                self._close_wizard()
        elif key == "enter":
            wizard.submitted = True
            if wizard.validation_errors():
                return
            command = wizard.build_command(self._wizard_executable())
            java = wizard.java_version
            header = [
                f"Creating project: {command}",
                f"Folder name: {wizard.folder_name}",
                f"Maven artifact ID: {wizard.artifact_id}",
            ]
            if java is not None:
                header.append(f"Java version: {java.version}")
            self._begin_execution(command, *header, "", side_effect=wizard.side_effect())
        else:
            wizard.handle_key(key, character)

    def _on_module_wizard_key(self, key: str, character: str | None) -> None:
        wizard = self._active_wizard(ModuleWizard)
        if wizard is None:
            return
        if key == "escape":
            self._close_wizard()
        elif key == "enter":
            wizard.submitted = True
            if wizard.validation_errors():
                return
            command = wizard.build_command(self._wizard_executable())
            self._begin_execution(
                command,
                f"Creating module: {command}",
                side_effect=wizard.side_effect(),
            )
        else:
            wizard.handle_key(key, character)

    def _on_dependency_wizard_key(self, key: str, character: str | None) -> None:
        wizard = self._active_wizard(DependencyWizard)
        if wizard is None:
            return
        if key == "escape":
            if wizard.custom_mode:
                wizard.leave_custom_mode()
            else:
                self._close_wizard()
        elif key == "enter":
            dependency = wizard.chosen_dependency()
            if dependency is None:
                wizard.enter_custom_mode()
                return
            self.state.reset_log(dependency_snippet(dependency))
            self.state.wizard = None
            self.state.screen = Screen.LOGS
            logger.info(
                "dependency snippet rendered",
                extra={"group_id": dependency.group_id, "artifact_id": dependency.artifact_id},
            )
        else:
            wizard.handle_key(key, character)

    # ------------------------------------------------------------------
    # Main-screen helpers
    # ------------------------------------------------------------------

    def _move_cursor(self, step: int) -> None:
        state = self.state
        if state.focused_pane == Pane.MODULES:
            state.module_cursor = _clamp(state.module_cursor + step, len(state.project.modules))
        elif state.focused_pane == Pane.TASKS:
            state.task_cursor = _clamp(state.task_cursor + step, len(state.tasks))
        else:
            state.option_cursor = _clamp(state.option_cursor + step, len(state.project.profiles))

    def _execute_task(self, task: Task, *, header_prefix: str = "Executing") -> None:
        command = build_command(self.state.project, task.goals, self.state.options)
        label = task.name if header_prefix == "Quick Run" else str(command)
        self._begin_execution(command, f"{header_prefix}: {label}", interactive=task.interactive)

    def _quick_run(self) -> None:
        task = first_run_task(self.state.tasks)
        if task is None:
            self.state.append_log(NO_RUN_TASK_MESSAGE)
            return
        self._execute_task(task, header_prefix="Quick Run")

    def _close_wizard(self) -> None:
        self.state.wizard = None
        self.state.screen = Screen.MAIN

    def _active_wizard(self, kind: type[_W]) -> _W | None:
        """The open wizard if it matches the screen; otherwise fall back to main."""
        wizard = self.state.wizard
        if isinstance(wizard, kind):
            return wizard
        logger.warning(
            "wizard screen without a matching wizard",
            extra={"screen": self.state.screen.value, "wizard": type(wizard).__name__},
        )
        self._close_wizard()
        return None

    def _wizard_executable(self) -> str:
        return self._executable or self.state.project.executable

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def _request_cancel(self) -> None:
        state = self.state
        if state.cancel_token is None or state.cancel_requested:
            return
        state.cancel_requested = True
        state.cancel_token.cancel()
        state.append_log(CANCELLING_MESSAGE)
        logger.info("cancellation requested", extra={"command": state.current_command})

    def _begin_execution(
        self,
        command: Command,
        *header: str,
        interactive: bool = False,
        side_effect: PendingSideEffect | None = None,
    ) -> bool:
        """Start *command* unless one is already in flight; return whether it started."""
        state = self.state
        if state.running:
            logger.info("execution refused while running", extra={"command": str(command)})
            return False

        token = CancellationToken()
        state.reset_log(list(header))
        state.cancel_token = token
        state.cancel_requested = False
        state.current_command = str(command)
        state.pending_side_effect = side_effect
        state.screen = Screen.LOGS

        logger.info(
            "execution started",
            extra={"command": str(command), "interactive": interactive},
        )
        cwd = state.project.root_path
        self._run_task = asyncio.create_task(self._execute(command, cwd, token, interactive))
        return True

    async def _execute(
        self,
        command: Command,
        cwd: Path,
        token: CancellationToken,
        interactive: bool,
    ) -> None:
        start_time = datetime.now(UTC)
        try:
            if interactive:
                result = self._run_interactive(command, cwd)
            else:
                result = await self._run_streaming(command, cwd, token)
        except Exception as exc:
            logger.exception("execution failed", extra={"command": str(command)})
            result = ExecutionResult(
                command=command,
                exit_code=1,
                start_time=start_time,
                duration=(datetime.now(UTC) - start_time).total_seconds(),
                error=str(exc) or type(exc).__name__,
            )
        await self._complete_execution(result, streamed=not interactive)

    async def _run_streaming(
        self, command: Command, cwd: Path, token: CancellationToken
    ) -> ExecutionResult:
        result: ExecutionResult | None = None
        async for event in self._runner.run(command, cwd, token):
            if event.kind in (RunnerEventKind.STDOUT_LINE, RunnerEventKind.STDERR_LINE):
                self.state.append_log(event.text)
                await self._notify()
                # Yield to the event loop so Textual can render between events
                await asyncio.sleep(0)
            elif event.kind == RunnerEventKind.FINISHED:
                result = event.result
        if result is None:
            raise RuntimeError("runner finished without a result")
        return result

    def _run_interactive(self, command: Command, cwd: Path) -> ExecutionResult:
        # Blocks the event loop while the child owns the terminal.
        with self._terminal_handover():
            return self._interactive_runner.run(command, cwd)

    async def _complete_execution(self, result: ExecutionResult, *, streamed: bool) -> None:
        state = self.state
        state.cancel_token = None
        state.cancel_requested = False
        state.current_command = ""
        self._run_task = None

        state.history.append(result)
        state.history_cursor = 0

        if not streamed:
            state.append_log(*result.output)
        if result.error:
            state.append_log("", f"Error: {result.error}")
        state.append_log(
            "", f"Completed with exit code {result.exit_code} in {result.duration_text}"
        )

        state.wizard = None
        state.screen = Screen.LOGS

        logger.info(
            "execution finished",
            extra={
                "command": str(result.command),
                "exit_code": result.exit_code,
                "duration_seconds": round(result.duration, 3),
                "error": result.error,
            },
        )

        effect = state.pending_side_effect
        state.pending_side_effect = None
        if effect is not None and result.exit_code == 0:
            self._apply_side_effect(effect)

        await self._notify()

    # ------------------------------------------------------------------
    # Side effects
    # ------------------------------------------------------------------

    def _apply_side_effect(self, effect: PendingSideEffect) -> None:
        if isinstance(effect, RegisterModule):
            self._register_module(effect.module_name)
        elif isinstance(effect, FinalizeProject):
            self._finalize_project(effect)

    def _register_module(self, module_name: str) -> None:
        state = self.state
        pom_path = state.project.pom_path
        try:
            if declares_module(pom_path, module_name):
                state.append_log(f"Module '{module_name}' is already listed in parent pom.xml")
            else:
                add_module_entry(pom_path, module_name)
                state.append_log(f"✓ Module '{module_name}' successfully added to parent pom.xml")
        except (PomEditError, OSError) as exc:
            logger.warning(
                "module registration failed",
                extra={"module_name": module_name, "reason": str(exc)},
            )
            state.append_log(
                f"Warning: Failed to add module to pom.xml: {exc}",
                f"You may need to manually add <module>{module_name}</module> "
                "to your parent pom.xml",
            )
            return

        try:
            state.project = load_project(state.project.root_path, executable=self._executable)
        except ProjectLoadError as exc:
            logger.warning("project reload failed", extra={"reason": str(exc)})
            state.append_log(f"Warning: Failed to reload project: {exc}")
            return

        state.tasks = built_in_tasks(state.project)
        state.module_cursor = _clamp(state.module_cursor, len(state.project.modules))
        state.option_cursor = _clamp(state.option_cursor, len(state.project.profiles))
        state.task_cursor = _clamp(state.task_cursor, len(state.tasks))
        state.append_log("✓ Project reloaded with new module")
        logger.info("module registered", extra={"module_name": module_name})

    def _finalize_project(self, effect: FinalizeProject) -> None:
        state = self.state
        root = state.project.root_path
        generated = root / effect.artifact_id
        final_name = effect.artifact_id

        if effect.java_version:
            state.append_log(f"Updating Java version to {effect.java_version} in pom.xml...")
            try:
                set_java_version(generated / POM_FILENAME, effect.java_version)
            except (PomEditError, OSError) as exc:
                logger.warning("java version update failed", extra={"reason": str(exc)})
                state.append_log(f"Warning: Failed to update Java version: {exc}")
            else:
                state.append_log(f"✓ Java version updated to {effect.java_version}")

        if effect.folder_name != effect.artifact_id:
            target = root / effect.folder_name
            try:
                if target.exists():
                    raise FileExistsError(f"'{effect.folder_name}' already exists")
                generated.rename(target)
            except OSError as exc:
                logger.warning("project folder rename failed", extra={"reason": str(exc)})
                state.append_log(f"Warning: Failed to rename folder: {exc}")
            else:
                final_name = effect.folder_name

        state.append_log(f"✓ Project created successfully in '{final_name}'")
        logger.info("project created", extra={"path": root / final_name})


def _clamp(value: int, length: int) -> int:
    if length <= 0:
        return 0
    return max(0, min(value, length - 1))


__all__ = [
    "CANCELLING_MESSAGE",
    "NO_RUN_TASK_MESSAGE",
    "OPTION_KEYS",
    "SessionController",
    "StateCallback",
]
