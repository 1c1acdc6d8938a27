"""Built-in Maven tasks offered on the main screen.

File: src/mvn_tui/ui/tui/tasks.py
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mvn_tui.maven.project import Project


@dataclass(frozen=True, slots=True)
class Task:
    """A named goal list; ``interactive`` tasks get the terminal handed over."""

    name: str
    description: str
    goals: tuple[str, ...]
    interactive: bool = False


_LIFECYCLE_TASKS: tuple[Task, ...] = (
    Task("Clean", "Remove build artifacts", ("clean",)),
    Task("Compile", "Compile source code", ("compile",)),
    Task("Test", "Run unit tests", ("test",)),
    Task("Package", "Create JAR/WAR package", ("package",)),
    Task("Verify", "Run integration tests", ("verify",)),
    Task("Install", "Install to local repository", ("install",)),
    Task("Clean Install", "Clean and install", ("clean", "install")),
)


def built_in_tasks(project: Project) -> list[Task]:
    """Lifecycle tasks plus the run tasks that fit the project's packaging."""
    tasks = list(_LIFECYCLE_TASKS)

    if project.has_spring_boot:
        tasks.append(
            Task(
                "Run (Spring Boot)",
                "Run Spring Boot application",
                ("spring-boot:run",),
                interactive=True,
            )
        )
    elif project.packaging == "jar":
        main_class = f"-Dexec.mainClass={project.group_id}.App"
        tasks.append(
            Task(
                "Run (Java)",
                "Compile and run Java application",
                ("compile", "exec:java", main_class),
                interactive=True,
            )
        )
        tasks.append(
            Task(
                "Run (exec:java only)",
                "Run without compiling (faster if already compiled)",
                ("exec:java", main_class),
                interactive=True,
            )
        )

    if project.packaging == "war":
        tasks.append(
            Task("Run (Tomcat)", "Run web application with Tomcat", ("tomcat7:run",), interactive=True)
        )

    return tasks


def first_run_task(tasks: list[Task]) -> Task | None:
    for task in tasks:
        if task.interactive:
            return task
    return None


__all__ = ["Task", "built_in_tasks", "first_run_task"]
