"""
mvn-tui — Maven project model.

File: src/mvn_tui/maven/project.py

Purpose
- Discover the nearest ``pom.xml`` and parse it into a mutable ``Project``.

What this file covers
- ``find_project_root`` walks ancestor directories looking for the descriptor.
- ``load_project`` parses identity, packaging, modules, profiles, and framework flags.
- Module/profile toggles used by the session (the only mutations of a loaded project).

Functional requirements
- Module and profile order always matches declaration order in the descriptor.
- A missing descriptor is a discovery error; a malformed one is a load error.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

POM_FILENAME: Final[str] = "pom.xml"
WRAPPER_FILENAME: Final[str] = "mvnw"
DEFAULT_EXECUTABLE: Final[str] = "mvn"
DEFAULT_PACKAGING: Final[str] = "jar"

_SPRING_BOOT_GROUP: Final[str] = "org.springframework.boot"
_SPRING_BOOT_STARTER: Final[str] = "spring-boot-starter"
_SPRING_BOOT_PARENT: Final[str] = "spring-boot-starter-parent"


class ProjectNotFoundError(FileNotFoundError):
    """Raised when no ``pom.xml`` exists in the start directory or any ancestor."""


class ProjectLoadError(ValueError):
    """Raised when a ``pom.xml`` exists but cannot be read or parsed."""


@dataclass(slots=True)
class Module:
    """A ``<module>`` entry of an aggregator descriptor."""

    name: str
    path: Path
    selected: bool = True


@dataclass(slots=True)
class Profile:
    """A ``<profile>`` declared in the descriptor."""

    id: str
    enabled: bool = False


@dataclass(slots=True)
class Project:
    """Parsed descriptor state owned by the session."""

    root_path: Path
    pom_path: Path
    group_id: str = ""
    artifact_id: str = ""
    version: str = ""
    packaging: str = DEFAULT_PACKAGING
    executable: str = DEFAULT_EXECUTABLE
    has_spring_boot: bool = False
    modules: list[Module] = field(default_factory=list)
    profiles: list[Profile] = field(default_factory=list)

    @classmethod
    def empty(cls, root_path: Path | str) -> Project:
        """Placeholder project used when the session starts without a descriptor."""
        root = Path(root_path)
        return cls(root_path=root, pom_path=root / POM_FILENAME)

    @property
    def is_loaded(self) -> bool:
        return bool(self.group_id or self.artifact_id)

    @property
    def coordinates(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"

    def toggle_module(self, index: int) -> None:
        if 0 <= index < len(self.modules):
            module = self.modules[index]
            module.selected = not module.selected

    def toggle_profile(self, index: int) -> None:
        if 0 <= index < len(self.profiles):
            profile = self.profiles[index]
            profile.enabled = not profile.enabled

    def selected_modules(self) -> list[str]:
        return [module.name for module in self.modules if module.selected]

    def enabled_profiles(self) -> list[str]:
        return [profile.id for profile in self.profiles if profile.enabled]


def find_project_root(start_dir: Path | str) -> Path:
    """Return the closest directory at or above *start_dir* holding a ``pom.xml``."""
    current = Path(start_dir).resolve()
    for candidate in (current, *current.parents):
        if (candidate / POM_FILENAME).is_file():
            return candidate
    raise ProjectNotFoundError(
        "no pom.xml found in current directory or parent directories"
    )


def find_maven_executable(project_root: Path | str) -> str:
    """Prefer the project's ``mvnw`` wrapper over a ``mvn`` found on PATH."""
    wrapper = Path(project_root) / WRAPPER_FILENAME
    if wrapper.is_file():
        return str(wrapper)
    return DEFAULT_EXECUTABLE


def load_project(root_path: Path | str, *, executable: str | None = None) -> Project:
    """Parse ``<root_path>/pom.xml`` into a :class:`Project`.

    Parameters
    ----------
    root_path:
        Directory containing the descriptor.
    executable:
        Optional override for the Maven executable; defaults to wrapper detection.
    """
    root = Path(root_path)
    pom_path = root / POM_FILENAME

    try:
        payload = pom_path.read_bytes()
    except OSError as exc:
        raise ProjectLoadError(f"failed to read pom.xml: {exc}") from exc

    try:
        document = ET.fromstring(payload)
    except ET.ParseError as exc:
        raise ProjectLoadError(f"failed to parse pom.xml: {exc}") from exc

    if _local_name(document.tag) != "project":
        raise ProjectLoadError(
            f"failed to parse pom.xml: root element is <{_local_name(document.tag)}>, "
            "expected <project>"
        )

    packaging = _child_text(document, "packaging") or DEFAULT_PACKAGING

    modules = [
        Module(name=name, path=root / name)
        for name in _grandchild_texts(document, "modules", "module")
    ]
    profiles = [
        Profile(id=_child_text(element, "id"))
        for element in _grandchildren(document, "profiles", "profile")
    ]

    return Project(
        root_path=root,
        pom_path=pom_path,
        group_id=_child_text(document, "groupId"),
        artifact_id=_child_text(document, "artifactId"),
        version=_child_text(document, "version"),
        packaging=packaging,
        executable=executable or find_maven_executable(root),
        has_spring_boot=_detect_spring_boot(document),
        modules=modules,
        profiles=profiles,
    )


# ---------------------------------------------------------------------------
# XML helpers (namespace-agnostic)
# ---------------------------------------------------------------------------


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child(element: ET.Element, name: str) -> ET.Element | None:
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def _child_text(element: ET.Element, name: str) -> str:
    child = _child(element, name)
    if child is None or child.text is None:
        return ""
    return child.text.strip()


def _grandchildren(element: ET.Element, container: str, name: str) -> list[ET.Element]:
    parent = _child(element, container)
    if parent is None:
        return []
    return [child for child in parent if _local_name(child.tag) == name]


def _grandchild_texts(element: ET.Element, container: str, name: str) -> list[str]:
    texts: list[str] = []
    for child in _grandchildren(element, container, name):
        text = (child.text or "").strip()
        if text:
            texts.append(text)
    return texts


def _detect_spring_boot(document: ET.Element) -> bool:
    for dependency in _grandchildren(document, "dependencies", "dependency"):
        group = _child_text(dependency, "groupId")
        artifact = _child_text(dependency, "artifactId")
        if group == _SPRING_BOOT_GROUP and artifact.startswith(_SPRING_BOOT_STARTER):
            return True

    parent = _child(document, "parent")
    if parent is None:
        return False
    return (
        _child_text(parent, "groupId") == _SPRING_BOOT_GROUP
        and _child_text(parent, "artifactId") == _SPRING_BOOT_PARENT
    )


__all__ = [
    "DEFAULT_EXECUTABLE",
    "DEFAULT_PACKAGING",
    "POM_FILENAME",
    "Module",
    "Profile",
    "Project",
    "ProjectLoadError",
    "ProjectNotFoundError",
    "find_maven_executable",
    "find_project_root",
    "load_project",
]
