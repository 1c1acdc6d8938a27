"""Command-line surface for mvn-tui."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from mvn_tui import version_banner
from mvn_tui.config import Settings, load_settings
from mvn_tui.maven.command import BuildOptions
from mvn_tui.maven.project import (
    Project,
    ProjectNotFoundError,
    find_project_root,
    load_project,
)
from mvn_tui.observability import (
    LoggingConfig,
    new_run_id,
    setup_structured_logging,
    shutdown_logging,
    silence_logging,
)
from mvn_tui.ui.tui.runner import SubprocessRunner
from mvn_tui.ui.tui.state import SessionState

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the single ``mvn-tui`` entry point."""

    parser = argparse.ArgumentParser(
        prog="mvn-tui",
        description=(
            "mvn-tui — interactive terminal front-end for Maven.\n\n"
            "Run it inside a Maven project (or any of its subdirectories) to pick\n"
            "modules, profiles, options and lifecycle tasks from a keyboard UI.\n"
            "Outside a project it opens the new-project wizard.\n\n"
            "Environment:\n"
            "  MVN_TUI_LOG_LEVEL     DEBUG/INFO/WARNING/ERROR or OFF (default: INFO)\n"
            "  MVN_TUI_LOG_DIR       session log directory\n"
            "  MVN_TUI_EXECUTABLE    Maven executable (default: ./mvnw if present, else mvn)\n"
            "  MVN_TUI_THREADS       initial -T value\n"
            "  MVN_TUI_SHOW_VERSION  start with -V enabled\n"
            "  MVN_TUI_CANCEL_GRACE  seconds between SIGINT and SIGTERM on cancel\n"
            "  NO_COLOR              monochrome rendering\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        "-v",
        action="store_true",
        default=False,
        help="Print version, commit and build date, then exit.",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        default=False,
        help="Disable colored output (also respects NO_COLOR env var).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Session log level, or OFF (overrides MVN_TUI_LOG_LEVEL).",
    )
    return parser


# ---------------------------------------------------------------------------
# Entrypoints
# ---------------------------------------------------------------------------


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Parse argv, start the interactive session, and return process exit code."""

    parser = build_parser()
    namespace = parser.parse_args(list(argv) if argv is not None else None)

    if namespace.version:
        print(version_banner())
        return 0

    settings = load_settings(
        cli_overrides={"no_color": namespace.no_color, "log_level": namespace.log_level}
    )
    _configure_logging(settings)
    try:
        state = build_session_state(Path.cwd(), settings)
        logger.info(
            "session started",
            extra={
                "root": state.project.root_path,
                "project": state.project.coordinates if state.project.is_loaded else None,
                "modules": len(state.project.modules),
                "started_without_project": state.started_without_project,
            },
        )

        from mvn_tui.ui.tui.app import run_tui_app

        return run_tui_app(
            state,
            runner=SubprocessRunner(sigterm_grace=settings.cancel_grace),
            executable=settings.executable,
        )
    finally:
        shutdown_logging()


def build_session_state(cwd: Path, settings: Settings) -> SessionState:
    """Locate and load the project around *cwd*; no descriptor means no-project mode.

    A descriptor that exists but cannot be parsed raises ``ProjectLoadError``.
    """
    try:
        root = find_project_root(cwd)
    except ProjectNotFoundError:
        logger.info("no pom.xml found", extra={"cwd": cwd})
        project = Project.empty(cwd)
        if settings.executable:
            project.executable = settings.executable
        started_without_project = True
    else:
        project = load_project(root, executable=settings.executable)
        started_without_project = False

    return SessionState(
        project=project,
        options=BuildOptions(threads=settings.threads, show_version=settings.show_version),
        started_without_project=started_without_project,
        no_color=settings.no_color,
    )


def _configure_logging(settings: Settings) -> None:
    if not settings.logging_enabled:
        silence_logging()
        return
    try:
        setup_structured_logging(
            LoggingConfig(
                run_id=new_run_id(),
                base_log_dir=settings.log_dir,
                level=settings.log_level,
            )
        )
    except OSError as exc:
        silence_logging()
        sys.stderr.write(f"warning: session logging disabled: {exc}\n")


__all__ = ["build_parser", "build_session_state", "run_cli"]
