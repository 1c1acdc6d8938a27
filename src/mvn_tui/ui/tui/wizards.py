"""
mvn-tui — data-entry wizards (new project, new module, add dependency).

File: src/mvn_tui/ui/tui/wizards.py

Purpose
- Collect structured input through a fixed list of text fields, validate it,
  and turn it into a Maven command (or, for dependencies, a pom snippet).

What this file covers
- ``TextField`` editing primitives and focus cycling shared by all wizards.
- ``ProjectWizard``: archetype + Java version selectors, five required fields.
- ``ModuleWizard``: module name plus optional coordinates.
- ``DependencyWizard``: curated list with a custom-entry sub-mode.

Functional requirements
- NO Textual imports; keys arrive as Textual key names plus the typed character.
- Validation never clears entered input.
- Values are trimmed before validation and command construction; an empty
  optional field falls back to its placeholder.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

from mvn_tui.maven.command import Command
from mvn_tui.maven.java_version import JavaVersion
from mvn_tui.ui.tui.state import FinalizeProject, RegisterModule

ARTIFACT_ID_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-zA-Z][a-zA-Z0-9._-]*$")
GROUP_ID_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^[a-zA-Z][a-zA-Z0-9._-]*(\.[a-zA-Z][a-zA-Z0-9._-]*)*$"
)

_GROUP_ID_MESSAGE: Final[str] = (
    "must start with a letter and contain only letters, digits, dots, hyphens, "
    "and underscores (e.g., com.example)"
)
_ARTIFACT_ID_MESSAGE: Final[str] = (
    "must start with a letter and contain only letters, digits, hyphens, "
    "underscores, and periods"
)
_NO_SPACES_MESSAGE: Final[str] = "cannot contain spaces (use hyphens or underscores instead)"

_NEXT_KEYS: Final[frozenset[str]] = frozenset({"tab", "down"})
_PREVIOUS_KEYS: Final[frozenset[str]] = frozenset({"shift+tab", "up"})

# ---------------------------------------------------------------------------
# Field primitives
# ---------------------------------------------------------------------------


@dataclass
class TextField:
    """Single-line input with a placeholder used as the default value."""

    label: str
    placeholder: str = ""
    hint: str = ""
    value: str = ""
    max_length: int = 100

    @property
    def text(self) -> str:
        return self.value.strip()

    @property
    def resolved(self) -> str:
        return self.text or self.placeholder

    def insert(self, character: str) -> None:
        if len(self.value) < self.max_length:
            self.value += character

    def backspace(self) -> None:
        self.value = self.value[:-1]


def _is_printable(character: str | None) -> bool:
    return character is not None and len(character) == 1 and character.isprintable()


def _validate_artifact(label: str, value: str, *, required: bool) -> str | None:
    if not value:
        return f"{label} is required" if required else None
    if " " in value:
        return f"{label} {_NO_SPACES_MESSAGE}"
    if not ARTIFACT_ID_PATTERN.match(value):
        return f"{label} {_ARTIFACT_ID_MESSAGE}"
    return None


def _validate_group(label: str, value: str, *, required: bool) -> str | None:
    if not value:
        return f"{label} is required" if required else None
    if not GROUP_ID_PATTERN.match(value):
        return f"{label} {_GROUP_ID_MESSAGE}"
    return None


class FieldWizard:
    """Focus cycling and text editing over ``self.fields`` plus extra focus slots."""

    fields: list[TextField]
    extra_slots: int = 0

    def __init__(self) -> None:
        self.focus = 0
        self.submitted = False

    @property
    def slot_count(self) -> int:
        return len(self.fields) + self.extra_slots

    @property
    def focused_field(self) -> TextField | None:
        if self.focus < len(self.fields):
            return self.fields[self.focus]
        return None

    def handle_key(self, key: str, character: str | None = None) -> bool:
        """Apply an editing key; return False when the key is not for this wizard."""
        if key in _NEXT_KEYS:
            self.focus = (self.focus + 1) % self.slot_count
            return True
        if key in _PREVIOUS_KEYS:
            self.focus = (self.focus - 1) % self.slot_count
            return True

        target = self.focused_field
        if target is None:
            return False
        if key == "backspace":
            target.backspace()
            return True
        if _is_printable(character):
            assert character is not None
            target.insert(character)
            return True
        return False

    def validation_errors(self) -> list[str]:
        return []

    @property
    def visible_errors(self) -> list[str]:
        """Errors are shown once the user has tried to confirm."""
        return self.validation_errors() if self.submitted else []


# ---------------------------------------------------------------------------
# New project
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Archetype:
    name: str
    description: str
    group_id: str
    artifact_id: str
    version: str


COMMON_ARCHETYPES: Final[tuple[Archetype, ...]] = (
    Archetype(
        "Java Application",
        "Standard Java console application",
        "org.apache.maven.archetypes",
        "maven-archetype-quickstart",
        "1.4",
    ),
    Archetype(
        "Spring Boot App",
        "Spring Boot web application",
        "org.springframework.boot",
        "spring-boot-starter-parent",
        "3.2.0",
    ),
    Archetype(
        "Web Application",
        "Java web application (WAR)",
        "org.apache.maven.archetypes",
        "maven-archetype-webapp",
        "1.4",
    ),
)

_FOLDER, _ORGANIZATION, _PROJECT_ID, _VERSION, _PACKAGE = range(5)
_PINNED_COMPILER_ARGS: Final[tuple[str, str]] = (
    "-Dmaven.compiler.source=1.8",
    "-Dmaven.compiler.target=1.8",
)


class ProjectWizard(FieldWizard):
    """Collects the coordinates of a new project generated from an archetype."""

    extra_slots = 1

    def __init__(
        self,
        java_versions: Sequence[JavaVersion] = (),
        *,
        archetypes: Sequence[Archetype] = COMMON_ARCHETYPES,
    ) -> None:
        super().__init__()
        self.fields = [
            TextField("Folder Name", "my-app", "Directory name - can contain spaces"),
            TextField("Organization", "com.example", "e.g., com.example"),
            TextField(
                "Project ID",
                "my-app",
                "Maven artifact ID - no spaces, use hyphens or underscores",
            ),
            TextField("Version", "1.0-SNAPSHOT", max_length=50),
            TextField("Base Package", "com.example"),
        ]
        self.archetypes = tuple(archetypes)
        self.archetype_index = 0
        self.set_java_versions(java_versions)

    def set_java_versions(self, java_versions: Sequence[JavaVersion]) -> None:
        self.java_versions = tuple(java_versions)
        self.java_index = next(
            (index for index, item in enumerate(self.java_versions) if item.is_default), 0
        )

    @property
    def java_selector_focused(self) -> bool:
        return self.focus == len(self.fields)

    @property
    def archetype(self) -> Archetype:
        return self.archetypes[self.archetype_index]

    @property
    def java_version(self) -> JavaVersion | None:
        if not self.java_versions:
            return None
        return self.java_versions[self.java_index]

    @property
    def folder_name(self) -> str:
        return self.fields[_FOLDER].resolved

    @property
    def artifact_id(self) -> str:
        return self.fields[_PROJECT_ID].resolved

    def handle_key(self, key: str, character: str | None = None) -> bool:
        if key in ("left", "right"):
            step = 1 if key == "right" else -1
            if self.java_selector_focused and self.java_versions:
                self.java_index = (self.java_index + step) % len(self.java_versions)
            else:
                self.archetype_index = (self.archetype_index + step) % len(self.archetypes)
            return True
        return super().handle_key(key, character)

    def validation_errors(self) -> list[str]:
        errors: list[str] = []
        values = [item.text for item in self.fields]

        if not values[_FOLDER]:
            errors.append("Folder Name is required")

        for message in (
            _validate_group("Organization", values[_ORGANIZATION], required=True),
            _validate_artifact("Project ID", values[_PROJECT_ID], required=True),
        ):
            if message:
                errors.append(message)

        if not values[_VERSION]:
            errors.append("Version is required")

        if not values[_PACKAGE]:
            errors.append("Base Package is required")
        elif not GROUP_ID_PATTERN.match(values[_PACKAGE]):
            errors.append("Base Package must be a valid Java package name (e.g., com.example)")

        return errors

    def build_command(self, executable: str = "mvn") -> Command:
        group_id = self.fields[_ORGANIZATION].resolved
        artifact_id = self.artifact_id
        archetype = self.archetype
        args = (
            "archetype:generate",
            "-DinteractiveMode=false",
            f"-DgroupId={group_id}",
            f"-DartifactId={artifact_id}",
            f"-Dversion={self.fields[_VERSION].resolved}",
            f"-Dpackage={self.fields[_PACKAGE].resolved}",
            f"-DarchetypeGroupId={archetype.group_id}",
            f"-DarchetypeArtifactId={archetype.artifact_id}",
            f"-DarchetypeVersion={archetype.version}",
            *_PINNED_COMPILER_ARGS,
        )
        return Command(
            executable=executable,
            args=args,
            pretty=f"archetype:generate -DgroupId={group_id} -DartifactId={artifact_id}",
        )

    def side_effect(self) -> FinalizeProject:
        selected = self.java_version
        return FinalizeProject(
            artifact_id=self.artifact_id,
            folder_name=self.folder_name,
            java_version=selected.version if selected is not None else None,
        )


# ---------------------------------------------------------------------------
# New module
# ---------------------------------------------------------------------------

_MODULE_NAME, _MODULE_GROUP, _MODULE_ID, _MODULE_VERSION = range(4)


class ModuleWizard(FieldWizard):
    """Collects the name and optional coordinates of a new child module."""

    def __init__(self) -> None:
        super().__init__()
        self.fields = [
            TextField("Module Name", "my-module"),
            TextField("Organization", "com.example"),
            TextField("Module ID", "my-module", "defaults to the module name"),
            TextField("Version", "1.0-SNAPSHOT", max_length=50),
        ]

    @property
    def module_name(self) -> str:
        return self.fields[_MODULE_NAME].resolved

    def validation_errors(self) -> list[str]:
        values = [item.text for item in self.fields]
        messages = (
            _validate_artifact("Module Name", values[_MODULE_NAME], required=True),
            _validate_group("Organization", values[_MODULE_GROUP], required=False),
            _validate_artifact("Module ID", values[_MODULE_ID], required=False),
        )
        return [message for message in messages if message]

    def build_command(self, executable: str = "mvn") -> Command:
        module_name = self.module_name
        group_id = self.fields[_MODULE_GROUP].resolved
        artifact_id = self.fields[_MODULE_ID].text or module_name
        args = (
            "archetype:generate",
            "-DinteractiveMode=false",
            f"-DgroupId={group_id}",
            f"-DartifactId={artifact_id}",
            f"-Dversion={self.fields[_MODULE_VERSION].resolved}",
            f"-Dpackage={group_id}",
            "-DarchetypeGroupId=org.apache.maven.archetypes",
            "-DarchetypeArtifactId=maven-archetype-quickstart",
            "-DarchetypeVersion=1.4",
            *_PINNED_COMPILER_ARGS,
        )
        return Command(
            executable=executable,
            args=args,
            pretty=f"archetype:generate -DgroupId={group_id} -DartifactId={artifact_id}",
        )

    def side_effect(self) -> RegisterModule:
        return RegisterModule(module_name=self.module_name)


# ---------------------------------------------------------------------------
# Add dependency
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Dependency:
    group_id: str
    artifact_id: str
    version: str = ""
    scope: str = ""


@dataclass(frozen=True, slots=True)
class DependencyChoice:
    name: str
    description: str
    dependency: Dependency | None = None

    @property
    def is_custom(self) -> bool:
        return self.dependency is None


COMMON_DEPENDENCIES: Final[tuple[DependencyChoice, ...]] = (
    DependencyChoice(
        "JUnit 5",
        "Testing framework",
        Dependency("org.junit.jupiter", "junit-jupiter", "5.10.1", "test"),
    ),
    DependencyChoice(
        "Spring Boot Starter Web",
        "Spring Boot web applications",
        Dependency("org.springframework.boot", "spring-boot-starter-web"),
    ),
    DependencyChoice(
        "Spring Boot Starter Data JPA",
        "Spring Data JPA with Hibernate",
        Dependency("org.springframework.boot", "spring-boot-starter-data-jpa"),
    ),
    DependencyChoice(
        "Lombok",
        "Reduce boilerplate code",
        Dependency("org.projectlombok", "lombok", "1.18.30", "provided"),
    ),
    DependencyChoice("SLF4J API", "Logging facade", Dependency("org.slf4j", "slf4j-api", "2.0.9")),
    DependencyChoice(
        "Jackson Databind",
        "JSON processing",
        Dependency("com.fasterxml.jackson.core", "jackson-databind", "2.15.3"),
    ),
    DependencyChoice(
        "Apache Commons Lang",
        "Utility functions",
        Dependency("org.apache.commons", "commons-lang3", "3.14.0"),
    ),
    DependencyChoice(
        "PostgreSQL Driver",
        "PostgreSQL JDBC driver",
        Dependency("org.postgresql", "postgresql", "42.7.1", "runtime"),
    ),
    DependencyChoice(
        "MySQL Driver",
        "MySQL JDBC driver",
        Dependency("com.mysql", "mysql-connector-j", "8.2.0", "runtime"),
    ),
    DependencyChoice("Custom Dependency", "Enter custom dependency details"),
)


class DependencyWizard(FieldWizard):
    """Curated dependency picker with a free-form custom sub-mode."""

    def __init__(self, choices: Sequence[DependencyChoice] = COMMON_DEPENDENCIES) -> None:
        super().__init__()
        self.choices = tuple(choices)
        self.cursor = 0
        self.custom_mode = False
        self.fields = [
            TextField("Group ID", "org.example"),
            TextField("Library Name", "my-library"),
            TextField("Version", "1.0.0", max_length=50),
            TextField("Scope", "compile (optional)", max_length=20),
        ]

    @property
    def selected(self) -> DependencyChoice:
        return self.choices[self.cursor]

    def handle_key(self, key: str, character: str | None = None) -> bool:
        if self.custom_mode:
            return super().handle_key(key, character)
        if key == "up":
            self.cursor = max(0, self.cursor - 1)
            return True
        if key == "down":
            self.cursor = min(len(self.choices) - 1, self.cursor + 1)
            return True
        return False

    def enter_custom_mode(self) -> None:
        self.custom_mode = True
        self.focus = 0

    def leave_custom_mode(self) -> None:
        self.custom_mode = False

    def custom_dependency(self) -> Dependency:
        group, artifact, version, scope = (item.text for item in self.fields)
        return Dependency(
            group_id=group or self.fields[0].placeholder,
            artifact_id=artifact or self.fields[1].placeholder,
            version=version,
            scope=scope,
        )

    def chosen_dependency(self) -> Dependency | None:
        """The dependency to render, or ``None`` while the custom sentinel is selected."""
        if self.custom_mode:
            return self.custom_dependency()
        return self.selected.dependency


def dependency_snippet(dependency: Dependency) -> list[str]:
    """Log-view lines presenting *dependency* as a pom.xml fragment."""
    xml = [
        "    <dependency>",
        f"      <groupId>{dependency.group_id}</groupId>",
        f"      <artifactId>{dependency.artifact_id}</artifactId>",
    ]
    if dependency.version:
        xml.append(f"      <version>{dependency.version}</version>")
    if dependency.scope:
        xml.append(f"      <scope>{dependency.scope}</scope>")
    xml.append("    </dependency>")

    details = [
        "Dependency details:",
        f"  GroupID: {dependency.group_id}",
        f"  ArtifactID: {dependency.artifact_id}",
    ]
    if dependency.version:
        details.append(f"  Version: {dependency.version}")
    if dependency.scope:
        details.append(f"  Scope: {dependency.scope}")

    return [
        "Add this dependency to your pom.xml:",
        "",
        *xml,
        "",
        "Copy the above XML and add it to the <dependencies> section of your pom.xml",
        "",
        *details,
    ]


__all__ = [
    "ARTIFACT_ID_PATTERN",
    "COMMON_ARCHETYPES",
    "COMMON_DEPENDENCIES",
    "GROUP_ID_PATTERN",
    "Archetype",
    "Dependency",
    "DependencyChoice",
    "DependencyWizard",
    "FieldWizard",
    "ModuleWizard",
    "ProjectWizard",
    "TextField",
    "dependency_snippet",
]
