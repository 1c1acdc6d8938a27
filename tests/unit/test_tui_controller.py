"""Unit tests for TUI controller — key->state transitions and execution reduction.

File: tests/unit/test_tui_controller.py

Tests:
- Controller initialization (task list, no-project wizard, lazy JDK scan)
- Main-screen navigation, toggles and quitting
- Executing tasks with a fake streaming runner (module selection, history, re-run)
- Single-flight execution and cancellation
- Interactive tasks and terminal handover
- Wizards: project creation, module registration, dependency snippets
- State change notification
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import AsyncIterator, Callable, Iterator
from datetime import UTC, datetime
from pathlib import Path
from unittest import mock

import pytest

from mvn_tui.maven.command import Command
from mvn_tui.maven.java_version import JavaVersion
from mvn_tui.maven.project import Project, load_project
from mvn_tui.ui.tui.controller import (
    CANCELLING_MESSAGE,
    NO_RUN_TASK_MESSAGE,
    SessionController,
)
from mvn_tui.ui.tui.runner import (
    CancellationToken,
    ExecutionResult,
    RunnerEvent,
    RunnerEventKind,
)
from mvn_tui.ui.tui.state import Pane, Screen, SessionState
from mvn_tui.ui.tui.wizards import (
    COMMON_DEPENDENCIES,
    DependencyWizard,
    ModuleWizard,
    ProjectWizard,
    dependency_snippet,
)

_JAVA = (
    JavaVersion(version="21", full_version="21.0.1", vendor="OpenJDK", is_default=True),
    JavaVersion(version="17", full_version="17.0.8", vendor="OpenJDK"),
)

_MULTI_MODULE_POM = """<project>
    <groupId>com.example</groupId>
    <artifactId>parent</artifactId>
    <version>1.0-SNAPSHOT</version>
    <packaging>pom</packaging>
    <modules>
        <module>m1</module>
        <module>m2</module>
        <module>m3</module>
    </modules>
    <profiles>
        <profile><id>dev</id></profile>
    </profiles>
</project>
"""

_JAR_POM = """<project>
    <groupId>com.acme</groupId>
    <artifactId>app</artifactId>
    <version>1.0</version>
</project>
"""

_GENERATED_POM = """<project>
    <groupId>com.acme</groupId>
    <artifactId>demo</artifactId>
    <properties>
        <maven.compiler.source>1.8</maven.compiler.source>
        <maven.compiler.target>1.8</maven.compiler.target>
    </properties>
</project>
"""


class FakeRunner:
    """Streams canned lines; optionally blocks until cancelled."""

    def __init__(
        self,
        lines: tuple[str, ...] = ("[INFO] BUILD SUCCESS",),
        *,
        exit_code: int = 0,
        block: bool = False,
        on_run: Callable[[Command, Path], None] | None = None,
    ) -> None:
        self.lines = lines
        self.exit_code = exit_code
        self.block = block
        self.on_run = on_run
        self.commands: list[Command] = []
        self.cwds: list[Path] = []

    async def run(
        self, command: Command, cwd: Path | str, token: CancellationToken
    ) -> AsyncIterator[RunnerEvent]:
        self.commands.append(command)
        self.cwds.append(Path(cwd))
        start_time = datetime.now(UTC)
        yield RunnerEvent(kind=RunnerEventKind.STARTED, text=str(command))
        for line in self.lines:
            yield RunnerEvent(kind=RunnerEventKind.STDOUT_LINE, text=line)
        exit_code = self.exit_code
        if self.block:
            await token.wait()
            exit_code = 130
            yield RunnerEvent(kind=RunnerEventKind.CANCEL_ACK, exit_code=exit_code)
        if self.on_run is not None:
            self.on_run(command, Path(cwd))
        result = ExecutionResult(
            command=command,
            exit_code=exit_code,
            start_time=start_time,
            duration=0.5,
            output=self.lines,
        )
        yield RunnerEvent(kind=RunnerEventKind.FINISHED, exit_code=exit_code, result=result)


class FailingRunner:
    async def run(
        self, command: Command, cwd: Path | str, token: CancellationToken
    ) -> AsyncIterator[RunnerEvent]:
        yield RunnerEvent(kind=RunnerEventKind.STARTED, text=str(command))
        raise RuntimeError("pipe exploded")


class FakeInteractiveRunner:
    def __init__(self) -> None:
        self.commands: list[Command] = []

    def run(self, command: Command, cwd: Path | str) -> ExecutionResult:
        self.commands.append(command)
        return ExecutionResult(
            command=command,
            exit_code=0,
            start_time=datetime.now(UTC),
            duration=1.0,
            output=("Hello from the app",),
        )


def _write_pom(root: Path, text: str) -> Path:
    path = root / "pom.xml"
    path.write_text(text, encoding="utf-8")
    return path


def _loaded_state(root: Path, text: str = _MULTI_MODULE_POM) -> SessionState:
    _write_pom(root, text)
    return SessionState(project=load_project(root, executable="mvn"))


async def _press(controller: SessionController, *keys: str) -> None:
    for key in keys:
        await controller.handle_key(key)


async def _type(controller: SessionController, text: str) -> None:
    for character in text:
        await controller.handle_key("space" if character == " " else character, character)


@pytest.mark.unit
class TestControllerInit:
    def test_builds_task_list(self, tmp_path: Path) -> None:
        controller = SessionController(state=_loaded_state(tmp_path), runner=FakeRunner())
        assert [task.name for task in controller.state.tasks][:2] == ["Clean", "Compile"]
        assert controller.state.screen == Screen.MAIN

    def test_no_project_opens_project_wizard(self, tmp_path: Path) -> None:
        state = SessionState(project=Project.empty(tmp_path), started_without_project=True)
        controller = SessionController(state=state, runner=FakeRunner(), java_versions=_JAVA)
        assert controller.state.screen == Screen.PROJECT_WIZARD
        assert isinstance(controller.state.wizard, ProjectWizard)

    @pytest.mark.asyncio
    async def test_jdk_scan_is_deferred_until_wizard_opens(self, tmp_path: Path) -> None:
        with mock.patch(
            "mvn_tui.ui.tui.controller.detect_java_versions", return_value=list(_JAVA)
        ) as detect:
            controller = SessionController(state=_loaded_state(tmp_path), runner=FakeRunner())
            detect.assert_not_called()
            await _press(controller, "p")
            await _press(controller, "escape", "p")
            await controller.wait_for_java_scan()
        detect.assert_called_once_with()
        wizard = controller.state.wizard
        assert isinstance(wizard, ProjectWizard)
        assert wizard.java_versions == _JAVA

    def test_no_project_start_does_not_block_on_jdk_scan(self, tmp_path: Path) -> None:
        state = SessionState(project=Project.empty(tmp_path), started_without_project=True)
        notifications: list[Screen] = []
        with mock.patch(
            "mvn_tui.ui.tui.controller.detect_java_versions", return_value=list(_JAVA)
        ) as detect:
            controller = SessionController(
                state=state,
                runner=FakeRunner(),
                on_state_change=lambda: notifications.append(state.screen),
            )
            detect.assert_not_called()
            wizard = state.wizard
            assert isinstance(wizard, ProjectWizard)
            assert wizard.java_versions == ()

            async def _mount() -> None:
                await controller.start()
                await controller.wait_for_java_scan()

            asyncio.run(_mount())

        detect.assert_called_once_with()
        assert wizard.java_versions == _JAVA
        assert wizard.java_version is not None
        assert notifications == [Screen.PROJECT_WIZARD, Screen.PROJECT_WIZARD]

    @pytest.mark.asyncio
    async def test_wizard_screen_without_matching_wizard_returns_to_main(
        self, tmp_path: Path
    ) -> None:
        controller = SessionController(state=_loaded_state(tmp_path), runner=FakeRunner())
        for screen, wizard in (
            (Screen.MODULE_WIZARD, None),
            (Screen.DEPENDENCY_WIZARD, ModuleWizard()),
            (Screen.PROJECT_WIZARD, DependencyWizard()),
        ):
            controller.state.screen = screen
            controller.state.wizard = wizard
            await _press(controller, "a")
            assert controller.state.screen == Screen.MAIN
            assert controller.state.wizard is None

    @pytest.mark.asyncio
    async def test_loaded_project_start_skips_jdk_scan(self, tmp_path: Path) -> None:
        with mock.patch("mvn_tui.ui.tui.controller.detect_java_versions") as detect:
            controller = SessionController(state=_loaded_state(tmp_path), runner=FakeRunner())
            await controller.start()
            await controller.wait_for_java_scan()
        detect.assert_not_called()


@pytest.mark.unit
class TestMainScreen:
    @pytest.fixture
    def controller(self, tmp_path: Path) -> SessionController:
        return SessionController(state=_loaded_state(tmp_path), runner=FakeRunner())

    @pytest.mark.asyncio
    async def test_tab_cycles_panes(self, controller: SessionController) -> None:
        assert controller.state.focused_pane == Pane.TASKS
        await _press(controller, "tab")
        assert controller.state.focused_pane == Pane.OPTIONS
        await _press(controller, "tab")
        assert controller.state.focused_pane == Pane.MODULES
        await _press(controller, "shift+tab")
        assert controller.state.focused_pane == Pane.OPTIONS

    @pytest.mark.asyncio
    async def test_cursor_is_clamped(self, controller: SessionController) -> None:
        await _press(controller, "up")
        assert controller.state.task_cursor == 0
        await _press(controller, *["down"] * 50)
        assert controller.state.task_cursor == len(controller.state.tasks) - 1

    @pytest.mark.asyncio
    async def test_option_toggle_twice_restores(self, controller: SessionController) -> None:
        await _press(controller, "1")
        assert controller.state.options.skip_tests is True
        await _press(controller, "1")
        assert controller.state.options.skip_tests is False

    @pytest.mark.asyncio
    async def test_each_digit_maps_to_its_option(self, controller: SessionController) -> None:
        await _press(controller, "2", "3", "4", "5", "6", "7", "8")
        options = controller.state.options
        assert options.offline and options.update_snapshots and options.debug
        assert options.verbose and options.quiet and options.show_errors and options.batch_mode
        assert options.skip_tests is False

    @pytest.mark.asyncio
    async def test_space_toggles_module_and_profile(self, controller: SessionController) -> None:
        await _press(controller, "shift+tab", "down", "space")
        assert controller.state.project.selected_modules() == ["m1", "m3"]
        await _press(controller, "space")
        assert controller.state.project.selected_modules() == ["m1", "m2", "m3"]

        await _press(controller, "shift+tab", "space")
        assert controller.state.project.enabled_profiles() == ["dev"]

    @pytest.mark.asyncio
    async def test_view_switching(self, controller: SessionController) -> None:
        await _press(controller, "l")
        assert controller.state.screen == Screen.LOGS
        await _press(controller, "l")
        assert controller.state.screen == Screen.MAIN
        await _press(controller, "h")
        assert controller.state.screen == Screen.HISTORY
        await _press(controller, "h")
        assert controller.state.screen == Screen.MAIN

    @pytest.mark.asyncio
    async def test_q_and_ctrl_c_quit_when_idle(self, controller: SessionController) -> None:
        await _press(controller, "q")
        assert controller.state.quit_requested is True

        controller.state.quit_requested = False
        await _press(controller, "ctrl+c")
        assert controller.state.quit_requested is True

    @pytest.mark.asyncio
    async def test_quick_run_without_run_task(self, controller: SessionController) -> None:
        await _press(controller, "r")
        assert controller.state.log_lines == [NO_RUN_TASK_MESSAGE]
        assert controller.state.running is False
        assert controller.state.screen == Screen.MAIN


@pytest.mark.unit
class TestExecution:
    @pytest.mark.asyncio
    async def test_package_with_excluded_module(self, tmp_path: Path) -> None:
        runner = FakeRunner(("[INFO] Building m1", "[INFO] BUILD SUCCESS"))
        controller = SessionController(state=_loaded_state(tmp_path), runner=runner)

        await _press(controller, "shift+tab", "down", "space", "tab", "down", "down", "down")
        assert controller.state.tasks[controller.state.task_cursor].name == "Package"
        await _press(controller, "enter")

        assert controller.state.screen == Screen.LOGS
        await controller.wait_for_completion()

        command = runner.commands[0]
        assert command.args == ("-pl", "m1,m3", "package")
        assert runner.cwds[0] == tmp_path
        state = controller.state
        assert state.log_lines == [
            "Executing: mvn -pl m1,m3 package",
            "[INFO] Building m1",
            "[INFO] BUILD SUCCESS",
            "",
            "Completed with exit code 0 in 500ms",
        ]
        assert len(state.history) == 1
        assert state.running is False
        assert state.current_command == ""

    @pytest.mark.asyncio
    async def test_single_flight(self, tmp_path: Path) -> None:
        runner = FakeRunner(block=True)
        controller = SessionController(state=_loaded_state(tmp_path), runner=runner)
        await _press(controller, "enter")
        assert controller.state.running is True

        started = controller._begin_execution(Command(executable="mvn", args=("verify",)))
        assert started is False

        await _press(controller, "ctrl+c")
        await controller.wait_for_completion()
        assert len(runner.commands) == 1
        assert len(controller.state.history) == 1

    @pytest.mark.asyncio
    async def test_cancel_with_ctrl_c(self, tmp_path: Path) -> None:
        runner = FakeRunner(block=True)
        controller = SessionController(state=_loaded_state(tmp_path), runner=runner)
        await _press(controller, "enter")
        assert controller.state.current_command == "mvn clean"

        await _press(controller, "ctrl+c")
        assert controller.state.cancel_requested is True
        assert controller.state.quit_requested is False
        assert CANCELLING_MESSAGE in controller.state.log_lines

        await controller.wait_for_completion()
        state = controller.state
        assert len(state.history) == 1
        assert state.history[0].exit_code != 0
        assert state.running is False
        assert state.cancel_requested is False
        assert state.log_lines[-1] == "Completed with exit code 130 in 500ms"

    @pytest.mark.asyncio
    async def test_escape_cancels_on_logs_and_keys_are_ignored_while_running(
        self, tmp_path: Path
    ) -> None:
        controller = SessionController(
            state=_loaded_state(tmp_path), runner=FakeRunner(block=True)
        )
        await _press(controller, "enter", "l", "q")
        assert controller.state.screen == Screen.LOGS
        assert controller.state.quit_requested is False

        await _press(controller, "escape")
        await controller.wait_for_completion()
        assert controller.state.history[-1].exit_code == 130

    @pytest.mark.asyncio
    async def test_runner_exception_becomes_failed_result(self, tmp_path: Path) -> None:
        controller = SessionController(state=_loaded_state(tmp_path), runner=FailingRunner())
        await _press(controller, "enter")
        await controller.wait_for_completion()

        result = controller.state.history[-1]
        assert result.exit_code == 1
        assert result.error == "pipe exploded"
        assert "Error: pipe exploded" in controller.state.log_lines
        assert controller.state.running is False

    @pytest.mark.asyncio
    async def test_history_rerun(self, tmp_path: Path) -> None:
        runner = FakeRunner()
        controller = SessionController(state=_loaded_state(tmp_path), runner=runner)
        await _press(controller, "enter")
        await controller.wait_for_completion()
        await _press(controller, "l", "enter")
        await controller.wait_for_completion()
        await _press(controller, "l", "h")
        assert controller.state.screen == Screen.HISTORY

        await _press(controller, "down", "enter")
        assert controller.state.log_lines[0] == "Re-executing: mvn clean"
        await controller.wait_for_completion()
        assert [str(result.command) for result in controller.state.history] == [
            "mvn clean",
            "mvn clean",
            "mvn clean",
        ]

    @pytest.mark.asyncio
    async def test_quick_run_uses_terminal_handover(self, tmp_path: Path) -> None:
        handovers: list[str] = []

        @contextlib.contextmanager
        def handover() -> Iterator[None]:
            handovers.append("suspend")
            yield
            handovers.append("resume")

        interactive = FakeInteractiveRunner()
        controller = SessionController(
            state=_loaded_state(tmp_path, _JAR_POM),
            runner=FakeRunner(),
            interactive_runner=interactive,  # type: ignore[arg-type]
            terminal_handover=handover,
        )
        await _press(controller, "r")
        await controller.wait_for_completion()

        assert handovers == ["suspend", "resume"]
        assert interactive.commands[0].args == (
            "compile",
            "exec:java",
            "-Dexec.mainClass=com.acme.App",
        )
        assert controller.state.log_lines == [
            "Quick Run: Run (Java)",
            "Hello from the app",
            "",
            "Completed with exit code 0 in 1.00s",
        ]


@pytest.mark.unit
class TestProjectWizardFlow:
    @pytest.mark.asyncio
    async def test_no_project_flow(self, tmp_path: Path) -> None:
        runner = FakeRunner(block=True)
        state = SessionState(project=Project.empty(tmp_path), started_without_project=True)
        controller = SessionController(state=state, runner=runner, java_versions=_JAVA)

        await _press(controller, "escape")
        assert controller.state.screen == Screen.PROJECT_WIZARD

        for value in ("demo", "com.acme", "demo", "1.0", "com.acme"):
            await _type(controller, value)
            await _press(controller, "tab")
        await _press(controller, "enter")

        assert controller.state.screen == Screen.LOGS
        assert controller.state.running is True
        assert controller.state.log_lines[:4] == [
            "Creating project: mvn archetype:generate -DgroupId=com.acme -DartifactId=demo",
            "Folder name: demo",
            "Maven artifact ID: demo",
            "Java version: 21",
        ]

        await _press(controller, "ctrl+c")
        await controller.wait_for_completion()
        assert not (tmp_path / "demo").exists()

    @pytest.mark.asyncio
    async def test_invalid_input_keeps_wizard_open(self, tmp_path: Path) -> None:
        runner = FakeRunner()
        state = SessionState(project=Project.empty(tmp_path), started_without_project=True)
        controller = SessionController(state=state, runner=runner, java_versions=_JAVA)

        await _type(controller, "demo")
        await _press(controller, "enter")

        wizard = controller.state.wizard
        assert isinstance(wizard, ProjectWizard)
        assert controller.state.screen == Screen.PROJECT_WIZARD
        assert "Organization is required" in wizard.visible_errors
        assert wizard.fields[0].value == "demo"
        assert runner.commands == []

    @pytest.mark.asyncio
    async def test_success_updates_java_and_renames_folder(self, tmp_path: Path) -> None:
        def generate(command: Command, cwd: Path) -> None:
            (cwd / "demo").mkdir()
            _write_pom(cwd / "demo", _GENERATED_POM)

        state = SessionState(project=Project.empty(tmp_path), started_without_project=True)
        controller = SessionController(
            state=state, runner=FakeRunner(on_run=generate), java_versions=_JAVA
        )
        for value in ("My Demo", "com.acme", "demo", "1.0", "com.acme"):
            await _type(controller, value)
            await _press(controller, "tab")
        await _press(controller, "enter")
        await controller.wait_for_completion()

        final_pom = tmp_path / "My Demo" / "pom.xml"
        assert final_pom.is_file()
        assert not (tmp_path / "demo").exists()
        assert "<maven.compiler.source>21</maven.compiler.source>" in final_pom.read_text(
            encoding="utf-8"
        )
        lines = controller.state.log_lines
        assert "✓ Java version updated to 21" in lines
        assert lines[-1] == "✓ Project created successfully in 'My Demo'"
        assert controller.state.wizard is None

    @pytest.mark.asyncio
    async def test_rename_conflict_keeps_generated_folder(self, tmp_path: Path) -> None:
        def generate(command: Command, cwd: Path) -> None:
            (cwd / "demo").mkdir()
            _write_pom(cwd / "demo", _GENERATED_POM)

        (tmp_path / "taken").mkdir()
        state = SessionState(project=Project.empty(tmp_path), started_without_project=True)
        controller = SessionController(
            state=state, runner=FakeRunner(on_run=generate), java_versions=()
        )
        for value in ("taken", "com.acme", "demo", "1.0", "com.acme"):
            await _type(controller, value)
            await _press(controller, "tab")
        await _press(controller, "enter")
        await controller.wait_for_completion()

        lines = controller.state.log_lines
        assert any(line.startswith("Warning: Failed to rename folder:") for line in lines)
        assert lines[-1] == "✓ Project created successfully in 'demo'"
        assert (tmp_path / "demo" / "pom.xml").is_file()

    @pytest.mark.asyncio
    async def test_escape_closes_wizard_when_project_loaded(self, tmp_path: Path) -> None:
        controller = SessionController(
            state=_loaded_state(tmp_path), runner=FakeRunner(), java_versions=_JAVA
        )
        await _press(controller, "p")
        assert controller.state.screen == Screen.PROJECT_WIZARD
        await _press(controller, "escape")
        assert controller.state.screen == Screen.MAIN
        assert controller.state.wizard is None


@pytest.mark.unit
class TestModuleWizardFlow:
    @pytest.mark.asyncio
    async def test_successful_generation_registers_module(self, tmp_path: Path) -> None:
        runner = FakeRunner()
        controller = SessionController(state=_loaded_state(tmp_path), runner=runner)
        await _press(controller, "m")
        assert isinstance(controller.state.wizard, ModuleWizard)

        await _type(controller, "m4")
        await _press(controller, "enter")
        assert controller.state.log_lines[0] == (
            "Creating module: mvn archetype:generate -DgroupId=com.example -DartifactId=m4"
        )
        await controller.wait_for_completion()

        content = (tmp_path / "pom.xml").read_text(encoding="utf-8")
        assert content.count("<module>m4</module>") == 1
        state = controller.state
        assert [module.name for module in state.project.modules] == ["m1", "m2", "m3", "m4"]
        assert "✓ Module 'm4' successfully added to parent pom.xml" in state.log_lines
        assert state.log_lines[-1] == "✓ Project reloaded with new module"
        assert state.screen == Screen.LOGS
        assert state.wizard is None

    @pytest.mark.asyncio
    async def test_existing_module_is_not_duplicated(self, tmp_path: Path) -> None:
        controller = SessionController(state=_loaded_state(tmp_path), runner=FakeRunner())
        await _press(controller, "m")
        await _type(controller, "m2")
        await _press(controller, "enter")
        await controller.wait_for_completion()

        content = (tmp_path / "pom.xml").read_text(encoding="utf-8")
        assert content.count("<module>m2</module>") == 1
        assert "Module 'm2' is already listed in parent pom.xml" in controller.state.log_lines

    @pytest.mark.asyncio
    async def test_failed_generation_leaves_pom_untouched(self, tmp_path: Path) -> None:
        controller = SessionController(
            state=_loaded_state(tmp_path), runner=FakeRunner(exit_code=1)
        )
        await _press(controller, "m")
        await _type(controller, "m9")
        await _press(controller, "enter")
        await controller.wait_for_completion()

        assert (tmp_path / "pom.xml").read_text(encoding="utf-8") == _MULTI_MODULE_POM
        assert controller.state.pending_side_effect is None

    @pytest.mark.asyncio
    async def test_q_is_typed_not_quit(self, tmp_path: Path) -> None:
        controller = SessionController(state=_loaded_state(tmp_path), runner=FakeRunner())
        await _press(controller, "m")
        await _type(controller, "q")
        assert controller.state.quit_requested is False
        wizard = controller.state.wizard
        assert isinstance(wizard, ModuleWizard)
        assert wizard.fields[0].value == "q"

    @pytest.mark.asyncio
    async def test_module_and_dependency_wizards_need_a_project(self, tmp_path: Path) -> None:
        state = SessionState(project=Project.empty(tmp_path), started_without_project=True)
        controller = SessionController(state=state, runner=FakeRunner(), java_versions=_JAVA)
        state.wizard = None
        state.screen = Screen.MAIN

        await _press(controller, "m", "d")
        assert controller.state.screen == Screen.MAIN
        assert controller.state.wizard is None


@pytest.mark.unit
class TestDependencyWizardFlow:
    @pytest.mark.asyncio
    async def test_curated_dependency_renders_snippet(self, tmp_path: Path) -> None:
        controller = SessionController(state=_loaded_state(tmp_path), runner=FakeRunner())
        await _press(controller, "d", "enter")

        junit = COMMON_DEPENDENCIES[0].dependency
        assert junit is not None
        assert controller.state.screen == Screen.LOGS
        assert controller.state.log_lines == dependency_snippet(junit)
        assert controller.state.running is False

    @pytest.mark.asyncio
    async def test_custom_entry_and_escape_back(self, tmp_path: Path) -> None:
        controller = SessionController(state=_loaded_state(tmp_path), runner=FakeRunner())
        await _press(controller, "d", *["down"] * len(COMMON_DEPENDENCIES), "enter")
        wizard = controller.state.wizard
        assert isinstance(wizard, DependencyWizard)
        assert wizard.custom_mode is True

        await _press(controller, "escape")
        assert wizard.custom_mode is False
        assert controller.state.screen == Screen.DEPENDENCY_WIZARD

        await _press(controller, "enter")
        await _type(controller, "io.acme")
        await _press(controller, "tab")
        await _type(controller, "widgets")
        await _press(controller, "enter")
        assert controller.state.screen == Screen.LOGS
        assert "      <groupId>io.acme</groupId>" in controller.state.log_lines
        assert "      <artifactId>widgets</artifactId>" in controller.state.log_lines

    @pytest.mark.asyncio
    async def test_escape_closes(self, tmp_path: Path) -> None:
        controller = SessionController(state=_loaded_state(tmp_path), runner=FakeRunner())
        await _press(controller, "d", "escape")
        assert controller.state.screen == Screen.MAIN
        assert controller.state.wizard is None


@pytest.mark.unit
class TestStateNotification:
    @pytest.mark.asyncio
    async def test_sync_and_async_callbacks(self, tmp_path: Path) -> None:
        calls: list[str] = []

        async def on_change() -> None:
            calls.append("async")

        controller = SessionController(
            state=_loaded_state(tmp_path), runner=FakeRunner(), on_state_change=on_change
        )
        await _press(controller, "tab")
        assert calls == ["async"]

        sync_callback = mock.Mock(return_value=None)
        controller = SessionController(
            state=_loaded_state(tmp_path), runner=FakeRunner(), on_state_change=sync_callback
        )
        await _press(controller, "enter")
        await controller.wait_for_completion()
        # key press + one streamed line + completion
        assert sync_callback.call_count == 3
