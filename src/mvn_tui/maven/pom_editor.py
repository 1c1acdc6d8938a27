"""
mvn-tui — textual ``pom.xml`` edits.

File: src/mvn_tui/maven/pom_editor.py

Purpose
- Small, formatting-preserving edits to a descriptor after a successful generator run.

What this file covers
- ``add_module_entry``: append a ``<module>`` (creating ``<modules>`` if needed).
- ``remove_module_entry``: drop every line declaring a module.
- ``set_version_property``: rewrite (or append) properties inside ``<properties>``.
- ``set_java_version``: the compiler source/target pair, with ``8`` spelled ``1.8``.

Non-functional requirements
- Edits are plain text substitutions; comments and layout outside the edited
  span are preserved byte for byte. There is no locking against concurrent edits.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path
from typing import Final

_MODULES_OPEN: Final[str] = "<modules>"
_MODULES_CLOSE: Final[str] = "</modules>"
_PROPERTIES_CLOSE_PATTERN: Final[re.Pattern[str]] = re.compile(r"</properties>")
_PROPERTIES_OPEN_PATTERN: Final[re.Pattern[str]] = re.compile(r"<properties\s*>")
_MODULES_ANCHORS: Final[tuple[str, ...]] = ("</packaging>", "</version>", "</artifactId>")
_DEFAULT_INDENT: Final[str] = "    "

JAVA_VERSION_PROPERTIES: Final[tuple[str, str]] = (
    "maven.compiler.source",
    "maven.compiler.target",
)


class PomEditError(ValueError):
    """Raised when a descriptor cannot be read, edited, or written."""


class ModuleNotFoundInPomError(PomEditError):
    """Raised when removing a module the descriptor does not declare."""


def add_module_entry(pom_path: Path | str, module_name: str) -> None:
    """Append ``<module>module_name</module>`` to the descriptor's module list.

    No de-duplication is performed; callers decide whether the entry is new.
    """
    path = Path(pom_path)
    content = _read(path)

    if _MODULES_OPEN in content:
        updated = _insert_into_modules(content, module_name)
    else:
        updated = _insert_modules_section(content, module_name)

    _write(path, updated)


def remove_module_entry(pom_path: Path | str, module_name: str) -> None:
    """Remove every line declaring *module_name* as a module."""
    path = Path(pom_path)
    content = _read(path)
    tag = f"<module>{module_name}</module>"

    if tag not in content:
        raise ModuleNotFoundInPomError(f"module {module_name} not found in pom.xml")

    kept = [line for line in content.split("\n") if tag not in line]
    _write(path, "\n".join(kept))


def declares_module(pom_path: Path | str, module_name: str) -> bool:
    """Return whether the descriptor already lists *module_name*."""
    content = _read(Path(pom_path))
    pattern = re.compile(rf"<module>\s*{re.escape(module_name)}\s*</module>")
    return pattern.search(content) is not None


def set_version_property(
    pom_path: Path | str,
    property_names: Sequence[str],
    value: str,
) -> None:
    """Set each property in *property_names* to *value* inside ``<properties>``.

    Existing values are replaced in place; missing properties are appended at the
    end of the block. The block itself must already exist.
    """
    path = Path(pom_path)
    content = _read(path)

    open_match = _PROPERTIES_OPEN_PATTERN.search(content)
    if open_match is None:
        raise PomEditError("no <properties> section found in pom.xml")

    for name in property_names:
        pattern = re.compile(rf"(<{re.escape(name)}>)(.*?)(</{re.escape(name)}>)", re.DOTALL)
        if pattern.search(content) is not None:
            content = pattern.sub(lambda match: f"{match.group(1)}{value}{match.group(3)}", content)
            continue
        content = _append_property(content, name, value)

    _write(path, content)


def set_java_version(pom_path: Path | str, version: str) -> None:
    """Point the compiler source/target at Java *version*."""
    _require_non_empty(version, "java version")
    normalized = "1.8" if version.strip() == "8" else version.strip()
    set_version_property(pom_path, JAVA_VERSION_PROPERTIES, normalized)


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------


def _insert_into_modules(content: str, module_name: str) -> str:
    close_at = content.find(_MODULES_CLOSE, content.find(_MODULES_OPEN))
    if close_at == -1:
        raise PomEditError("malformed pom.xml: <modules> tag found but no closing tag")

    line_start = content.rfind("\n", 0, close_at) + 1
    prefix = content[line_start:close_at]
    entry = f"<module>{module_name}</module>"

    if prefix.strip():
        return content[:close_at] + entry + content[close_at:]

    indent = prefix
    child_indent = indent + _DEFAULT_INDENT if indent else _DEFAULT_INDENT * 2
    return content[:line_start] + f"{child_indent}{entry}\n" + content[line_start:]


def _insert_modules_section(content: str, module_name: str) -> str:
    insert_at = -1
    for anchor in _MODULES_ANCHORS:
        position = content.find(anchor)
        if position != -1:
            insert_at = position + len(anchor)
            break

    if insert_at == -1:
        raise PomEditError("could not find suitable location to insert modules section")

    indent = _indent_of_last_tag(content[:insert_at])
    section = (
        f"\n{indent}{_MODULES_OPEN}"
        f"\n{indent}{_DEFAULT_INDENT}<module>{module_name}</module>"
        f"\n{indent}{_MODULES_CLOSE}"
    )
    return content[:insert_at] + section + content[insert_at:]


def _indent_of_last_tag(head: str) -> str:
    for line in reversed(head.split("\n")):
        stripped = line.lstrip(" \t")
        if stripped.startswith("<"):
            indent = line[: len(line) - len(stripped)]
            if indent:
                return indent
    return _DEFAULT_INDENT


def _append_property(content: str, name: str, value: str) -> str:
    close_match = _PROPERTIES_CLOSE_PATTERN.search(content)
    if close_match is None:
        raise PomEditError("malformed pom.xml: <properties> tag found but no closing tag")

    close_at = close_match.start()
    line_start = content.rfind("\n", 0, close_at) + 1
    prefix = content[line_start:close_at]
    entry = f"<{name}>{value}</{name}>"

    if prefix.strip():
        return content[:close_at] + entry + content[close_at:]
    return content[:line_start] + f"{prefix}{_DEFAULT_INDENT}{entry}\n" + content[line_start:]


def _require_non_empty(value: str, label: str) -> None:
    if not value or not value.strip():
        raise PomEditError(f"{label} must not be empty")


def _read(path: Path) -> str:
    try:
        with path.open("r", encoding="utf-8", newline="") as handle:
            return handle.read()
    except OSError as exc:
        raise PomEditError(f"failed to read pom.xml: {exc}") from exc


def _write(path: Path, content: str) -> None:
    try:
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(content)
    except OSError as exc:
        raise PomEditError(f"failed to write pom.xml: {exc}") from exc


__all__ = [
    "JAVA_VERSION_PROPERTIES",
    "ModuleNotFoundInPomError",
    "PomEditError",
    "add_module_entry",
    "declares_module",
    "remove_module_entry",
    "set_java_version",
    "set_version_property",
]
