"""Maven collaborators: descriptor model, command builder, descriptor editor, JDK scanner.

Nothing in this package imports Textual; everything here is usable from tests
and scripts without a terminal.
"""

from __future__ import annotations

from mvn_tui.maven.command import BuildOptions, Command, build_command
from mvn_tui.maven.project import (
    Module,
    Profile,
    Project,
    ProjectLoadError,
    ProjectNotFoundError,
    find_project_root,
    load_project,
)

__all__ = [
    "BuildOptions",
    "Command",
    "Module",
    "Profile",
    "Project",
    "ProjectLoadError",
    "ProjectNotFoundError",
    "build_command",
    "find_project_root",
    "load_project",
]
