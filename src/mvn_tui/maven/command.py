"""Command builder — maps project selection, goals and options to a Maven argv.

File: src/mvn_tui/maven/command.py

``build_command`` is pure: the same inputs always produce the same ``Command``,
and the argument order is fixed because Maven treats some flags positionally.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mvn_tui.maven.project import Project


@dataclass(slots=True)
class BuildOptions:
    """Session-wide build toggles, flipped in place by the option keys."""

    skip_tests: bool = False
    offline: bool = False
    update_snapshots: bool = False
    threads: str = ""
    debug: bool = False
    verbose: bool = False
    quiet: bool = False
    show_errors: bool = False
    batch_mode: bool = False
    show_version: bool = False


@dataclass(frozen=True, slots=True)
class Command:
    """An executable plus its ordered argument vector."""

    executable: str
    args: tuple[str, ...] = ()
    pretty: str = field(default="")

    def __post_init__(self) -> None:
        if not self.pretty:
            object.__setattr__(self, "pretty", " ".join(self.args))

    @property
    def argv(self) -> list[str]:
        return [self.executable, *self.args]

    def __str__(self) -> str:
        if not self.pretty:
            return self.executable
        return f"{self.executable} {self.pretty}"


def build_command(project: Project, goals: Sequence[str], options: BuildOptions) -> Command:
    """Assemble the Maven invocation for *goals* under the current selection."""
    args: list[str] = []

    profiles = project.enabled_profiles()
    if profiles:
        args.extend(["-P", ",".join(profiles)])

    selected = project.selected_modules()
    if 0 < len(selected) < len(project.modules):
        args.extend(["-pl", ",".join(selected)])

    if options.debug:
        args.append("-X")
    elif options.verbose:
        args.append("-v")
    elif options.quiet:
        args.append("-q")

    if options.show_errors:
        args.append("-e")
    if options.batch_mode:
        args.append("-B")
    if options.show_version:
        args.append("-V")

    if options.skip_tests:
        args.append("-DskipTests")
    if options.offline:
        args.append("-o")
    if options.update_snapshots:
        args.append("-U")
    if options.threads:
        args.extend(["-T", options.threads])

    args.extend(goals)

    return Command(executable=project.executable, args=tuple(args))


__all__ = ["BuildOptions", "Command", "build_command"]
