"""Streaming Maven runner with real cancellation — NO Textual imports.

File: src/mvn_tui/ui/tui/runner.py

Provides two execution strategies:
A) SubprocessRunner — spawns the command as a child process in its own process
   group, drains stdout/stderr concurrently line-by-line, and cancels via
   SIGINT, then SIGTERM, then SIGKILL.
B) InteractiveRunner — hands the terminal to the child (the caller suspends
   rendering) and recovers a typescript of the session afterwards.

The streaming runner emits RunnerEvent objects that the controller reduces
into session state; exactly one FINISHED event carrying the ExecutionResult
ends every run, including cancelled and failed-to-spawn runs.
"""

from __future__ import annotations

import asyncio
import contextlib
import enum
import logging
import os
import re
import shlex
import shutil
import signal
import subprocess
import sys
import tempfile
import time
from collections.abc import AsyncIterator
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Final, Protocol

from mvn_tui.maven.command import Command

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Cancellation token
# ---------------------------------------------------------------------------


class CancellationToken:
    """One-shot cancellation signal shared by the session and a single run."""

    __slots__ = ("_event",)

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()


# ---------------------------------------------------------------------------
# Result and event model
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """Outcome of one execution.

    ``error`` is set only when the process could not be run or its output could
    not be read. A process that ran and exited non-zero (including one that was
    cancelled) has ``error=None`` and reports through ``exit_code`` alone.
    """

    command: Command
    exit_code: int
    start_time: datetime
    duration: float
    output: tuple[str, ...] = ()
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0 and self.error is None

    @property
    def duration_text(self) -> str:
        return format_duration(self.duration)


class RunnerEventKind(enum.Enum):
    STDOUT_LINE = "stdout_line"
    STDERR_LINE = "stderr_line"
    STARTED = "started"
    FINISHED = "finished"
    CANCEL_ACK = "cancel_ack"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class RunnerEvent:
    kind: RunnerEventKind
    text: str = ""
    exit_code: int | None = None
    result: ExecutionResult | None = None


# ---------------------------------------------------------------------------
# Runner protocol
# ---------------------------------------------------------------------------


class Runner(Protocol):
    def run(
        self, command: Command, cwd: Path | str, token: CancellationToken
    ) -> AsyncIterator[RunnerEvent]: ...


# ---------------------------------------------------------------------------
# Subprocess runner (streaming + real cancel via signals)
# ---------------------------------------------------------------------------

_SIGTERM_GRACE_SECS: Final[float] = 2.0
_KILL_GRACE_SECS: Final[float] = 3.0
_STREAM_LIMIT_BYTES: Final[int] = 1024 * 1024
_EXIT_NOT_FOUND: Final[int] = 127
_EXIT_SPAWN_FAILED: Final[int] = 1


class SubprocessRunner:
    """Spawns a command, streams both output channels, cancels via signals."""

    def __init__(
        self,
        *,
        sigterm_grace: float = _SIGTERM_GRACE_SECS,
        kill_grace: float = _KILL_GRACE_SECS,
    ) -> None:
        self._sigterm_grace = sigterm_grace
        self._kill_grace = kill_grace

    async def run(
        self, command: Command, cwd: Path | str, token: CancellationToken
    ) -> AsyncIterator[RunnerEvent]:
        """Execute *command* in *cwd*, yielding events until FINISHED."""
        start_time = datetime.now(UTC)
        started = time.monotonic()

        yield RunnerEvent(kind=RunnerEventKind.STARTED, text=str(command))

        try:
            process = await asyncio.create_subprocess_exec(
                command.executable,
                *command.args,
                cwd=str(cwd),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                limit=_STREAM_LIMIT_BYTES,
                # New process group so the whole Maven tree can be signalled.
                start_new_session=sys.platform != "win32",
            )
        except FileNotFoundError:
            async for event in self._spawn_failed(
                command,
                start_time,
                started,
                f"Command not found: {command.executable}",
                _EXIT_NOT_FOUND,
            ):
                yield event
            return
        except OSError as exc:
            async for event in self._spawn_failed(
                command,
                start_time,
                started,
                f"Failed to start process: {exc}",
                _EXIT_SPAWN_FAILED,
            ):
                yield event
            return

        assert process.stdout is not None
        assert process.stderr is not None

        output: list[str] = []
        read_errors: list[str] = []
        queue: asyncio.Queue[RunnerEvent | None] = asyncio.Queue()

        async def _enqueue_stream(stream: asyncio.StreamReader, kind: RunnerEventKind) -> None:
            try:
                async for text in _read_lines(stream):
                    output.append(text)
                    await queue.put(RunnerEvent(kind=kind, text=text))
            except OSError as exc:
                read_errors.append(f"failed to read {kind.value.split('_')[0]}: {exc}")

        drains = [
            asyncio.create_task(_enqueue_stream(process.stdout, RunnerEventKind.STDOUT_LINE)),
            asyncio.create_task(_enqueue_stream(process.stderr, RunnerEventKind.STDERR_LINE)),
        ]

        async def _wait_drained() -> None:
            await asyncio.gather(*drains)
            await queue.put(None)

        done_task = asyncio.create_task(_wait_drained())
        watcher = asyncio.create_task(self._watch_cancellation(process, token))

        try:
            while True:
                event = await queue.get()
                if event is None:
                    break
                yield event

            exit_code = await process.wait()
            duration = time.monotonic() - started
        finally:
            watcher.cancel()
            done_task.cancel()
            for task in (watcher, done_task, *drains):
                with contextlib.suppress(asyncio.CancelledError, Exception):
                    await task
            if process.returncode is None:
                _signal_group(process, signal.SIGKILL if sys.platform != "win32" else None)

        error: str | None = None
        if read_errors:
            error = "; ".join(read_errors)
            yield RunnerEvent(kind=RunnerEventKind.ERROR, text=error)

        if token.cancelled:
            yield RunnerEvent(kind=RunnerEventKind.CANCEL_ACK, exit_code=exit_code)

        result = ExecutionResult(
            command=command,
            exit_code=exit_code,
            start_time=start_time,
            duration=duration,
            output=tuple(output),
            error=error,
        )
        yield RunnerEvent(kind=RunnerEventKind.FINISHED, exit_code=exit_code, result=result)

    async def execute(
        self,
        command: Command,
        cwd: Path | str,
        token: CancellationToken | None = None,
    ) -> ExecutionResult:
        """Run to completion and return only the final result."""
        result: ExecutionResult | None = None
        async for event in self.run(command, cwd, token or CancellationToken()):
            if event.kind == RunnerEventKind.FINISHED:
                result = event.result
        assert result is not None
        return result

    async def _spawn_failed(
        self,
        command: Command,
        start_time: datetime,
        started: float,
        message: str,
        exit_code: int,
    ) -> AsyncIterator[RunnerEvent]:
        logger.warning("spawn failed", extra={"command": str(command), "reason": message})
        yield RunnerEvent(kind=RunnerEventKind.ERROR, text=message, exit_code=exit_code)
        result = ExecutionResult(
            command=command,
            exit_code=exit_code,
            start_time=start_time,
            duration=time.monotonic() - started,
            error=message,
        )
        yield RunnerEvent(kind=RunnerEventKind.FINISHED, exit_code=exit_code, result=result)

    async def _watch_cancellation(
        self, process: asyncio.subprocess.Process, token: CancellationToken
    ) -> None:
        await token.wait()
        if process.returncode is not None:
            return
        logger.info("cancelling process", extra={"pid": process.pid})
        await self._terminate(process)

    async def _terminate(self, process: asyncio.subprocess.Process) -> None:
        """Send SIGINT, then SIGTERM and SIGKILL after grace periods."""
        if sys.platform == "win32":
            process.terminate()
            return

        if not _signal_group(process, signal.SIGINT):
            return
        try:
            await asyncio.wait_for(process.wait(), timeout=self._sigterm_grace)
            return
        except TimeoutError:
            pass

        if not _signal_group(process, signal.SIGTERM):
            return
        try:
            await asyncio.wait_for(process.wait(), timeout=self._kill_grace)
        except TimeoutError:
            _signal_group(process, signal.SIGKILL)


# ---------------------------------------------------------------------------
# Interactive runner (terminal handover, blocking)
# ---------------------------------------------------------------------------

NO_OUTPUT_CAPTURED: Final[str] = "(Program executed but no output was captured)"
CAPTURE_UNAVAILABLE: Final[str] = "(Output capture unavailable: 'script' not found on PATH)"

_ANSI_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"\x1b\[[0-?]*[ -/]*[@-~]|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)|\x1b[()][A-Za-z0-9]|\x1b[=>]"
)
_SCRIPT_BANNER: Final[re.Pattern[str]] = re.compile(r"^Script (started|done) on ")


class InteractiveRunner:
    """Runs a command attached to the real terminal.

    The caller is responsible for releasing the terminal first (the Textual app
    does this with ``App.suspend()``); this call blocks until the child exits.
    """

    def __init__(self, *, script_executable: str | None = None) -> None:
        self._script = script_executable if script_executable is not None else shutil.which("script")

    def run(self, command: Command, cwd: Path | str) -> ExecutionResult:
        start_time = datetime.now(UTC)
        started = time.monotonic()

        if not self._script:
            return self._run_uncaptured(command, cwd, start_time, started)

        with tempfile.TemporaryDirectory(prefix="mvn-tui-") as workdir:
            typescript = Path(workdir) / "typescript.txt"
            argv = _script_argv(self._script, typescript, command)
            try:
                completed = subprocess.run(argv, cwd=str(cwd), check=False)
            except OSError as exc:
                return ExecutionResult(
                    command=command,
                    exit_code=_EXIT_SPAWN_FAILED,
                    start_time=start_time,
                    duration=time.monotonic() - started,
                    error=f"Failed to start process: {exc}",
                )
            duration = time.monotonic() - started
            try:
                raw = typescript.read_bytes()
            except OSError:
                raw = b""

        lines = clean_typescript(raw)
        return ExecutionResult(
            command=command,
            exit_code=completed.returncode,
            start_time=start_time,
            duration=duration,
            output=tuple(lines) if lines else (NO_OUTPUT_CAPTURED,),
        )

    def _run_uncaptured(
        self, command: Command, cwd: Path | str, start_time: datetime, started: float
    ) -> ExecutionResult:
        try:
            completed = subprocess.run(command.argv, cwd=str(cwd), check=False)
        except FileNotFoundError:
            return ExecutionResult(
                command=command,
                exit_code=_EXIT_NOT_FOUND,
                start_time=start_time,
                duration=time.monotonic() - started,
                error=f"Command not found: {command.executable}",
            )
        except OSError as exc:
            return ExecutionResult(
                command=command,
                exit_code=_EXIT_SPAWN_FAILED,
                start_time=start_time,
                duration=time.monotonic() - started,
                error=f"Failed to start process: {exc}",
            )
        return ExecutionResult(
            command=command,
            exit_code=completed.returncode,
            start_time=start_time,
            duration=time.monotonic() - started,
            output=(CAPTURE_UNAVAILABLE,),
        )


def clean_typescript(raw: bytes) -> list[str]:
    """Turn a ``script`` typescript into plain log lines."""
    text = raw.decode("utf-8", errors="replace")
    lines: list[str] = []
    for physical in text.split("\n"):
        line = _apply_overstrikes(_ANSI_PATTERN.sub("", physical))
        if _SCRIPT_BANNER.match(line):
            continue
        lines.append(line)
    while lines and not lines[-1].strip():
        lines.pop()
    while lines and not lines[0].strip():
        lines.pop(0)
    return lines


def format_duration(seconds: float) -> str:
    """Compact human duration: ``850ms``, ``3.42s``, ``2m05.3s``."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    if seconds < 60:
        return f"{seconds:.2f}s"
    minutes, remainder = divmod(seconds, 60)
    return f"{int(minutes)}m{remainder:04.1f}s"


# ---------------------------------------------------------------------------
# Utility
# ---------------------------------------------------------------------------


OVERLONG_LINE_MARKER: Final[str] = (
    f"[output line longer than {_STREAM_LIMIT_BYTES // 1024} KiB omitted]"
)


async def _read_lines(stream: asyncio.StreamReader) -> AsyncIterator[str]:
    """Yield decoded lines until EOF; a line over the stream limit becomes a marker.

    The reader must keep draining after an overlong line, otherwise the
    child blocks on a full pipe and never exits.
    """
    dropping = False
    while True:
        try:
            raw = await stream.readuntil(b"\n")
        except asyncio.IncompleteReadError as exc:
            if exc.partial and not dropping:
                yield _decode_line(exc.partial)
            return
        except asyncio.LimitOverrunError as exc:
            # Nothing was consumed; discard the head of the line and keep going.
            await stream.readexactly(exc.consumed)
            if not dropping:
                dropping = True
                yield OVERLONG_LINE_MARKER
            continue
        if dropping:
            dropping = False
            continue
        yield _decode_line(raw)


def _decode_line(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace").rstrip("\r\n")


def _signal_group(process: asyncio.subprocess.Process, sig: int | None) -> bool:
    """Signal the child's process group; return False once it is gone."""
    try:
        if sig is None:
            process.kill()
        else:
            os.killpg(os.getpgid(process.pid), sig)
    except (ProcessLookupError, PermissionError, OSError):
        return False
    return True


def _script_argv(script: str, typescript: Path, command: Command) -> list[str]:
    if sys.platform.startswith("linux"):
        # util-linux: -e propagates the child's exit status.
        return [script, "-q", "-e", "-c", shlex.join(command.argv), str(typescript)]
    return [script, "-q", str(typescript), *command.argv]


def _apply_overstrikes(line: str) -> str:
    # Keep what a terminal would show: text after the last bare CR, backspaces applied.
    line = line.rstrip("\r")
    if "\r" in line:
        line = line.rsplit("\r", 1)[-1]
    if "\b" not in line:
        return line
    chars: list[str] = []
    for char in line:
        if char == "\b":
            if chars:
                chars.pop()
            continue
        chars.append(char)
    return "".join(chars)


__all__ = [
    "CAPTURE_UNAVAILABLE",
    "NO_OUTPUT_CAPTURED",
    "OVERLONG_LINE_MARKER",
    "CancellationToken",
    "ExecutionResult",
    "InteractiveRunner",
    "Runner",
    "RunnerEvent",
    "RunnerEventKind",
    "SubprocessRunner",
    "clean_typescript",
    "format_duration",
]
