"""Best-effort discovery of installed JDKs.

File: src/mvn_tui/maven/java_version.py

Used by the new-project wizard to offer a compiler level. Detection never
raises: every probe that fails is skipped, and an empty scan is replaced by a
single placeholder entry so callers always have something to select.
"""

from __future__ import annotations

import os
import re
import subprocess
import sys
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Final

_PROBE_TIMEOUT_SECS: Final[float] = 5.0

_VERSION_BANNER: Final[re.Pattern[str]] = re.compile(r'version "([^"]+)"')
_MACOS_JAVA_HOME_LINE: Final[re.Pattern[str]] = re.compile(
    r'^\s*([\d.]+)\s+\([^)]+\)\s+"([^"]+)"\s+-\s+"([^"]+)"\s+(.+)$'
)

_LINUX_JVM_DIRS: Final[tuple[str, ...]] = ("/usr/lib/jvm", "/usr/java", "/opt/java", "/opt/jdk")
_WINDOWS_JVM_DIRS: Final[tuple[str, ...]] = (
    "C:\\Program Files\\Java",
    "C:\\Program Files (x86)\\Java",
    "C:\\Program Files\\Eclipse Adoptium",
    "C:\\Program Files\\Temurin",
    "C:\\Program Files\\OpenJDK",
)

# Ordered: first keyword hit wins.
_VENDOR_KEYWORDS: Final[tuple[tuple[tuple[str, ...], str], ...]] = (
    (("Oracle",), "Oracle"),
    (("Temurin", "Eclipse"), "Eclipse Temurin"),
    (("Azul", "Zulu"), "Azul Zulu"),
    (("Amazon", "Corretto"), "Amazon Corretto"),
    (("GraalVM",), "GraalVM"),
)
_DEFAULT_VENDOR: Final[str] = "OpenJDK"
_UNKNOWN_VENDOR: Final[str] = "Unknown"

CommandProbe = Callable[[list[str]], str | None]


@dataclass(frozen=True, slots=True)
class JavaVersion:
    """One detected (or suggested) Java runtime."""

    version: str
    full_version: str
    path: str = ""
    vendor: str = ""
    is_default: bool = False

    @property
    def display(self) -> str:
        label = f"Java {self.version}"
        if self.vendor and self.vendor != _UNKNOWN_VENDOR:
            label += f" ({self.vendor})"
        if self.is_default:
            label += " [Current]"
        return label


def detect_java_versions(
    *,
    platform: str | None = None,
    java_home: str | None = None,
    probe: CommandProbe | None = None,
) -> list[JavaVersion]:
    """Scan the host for JDKs, newest major version first.

    Always returns at least one entry.
    """
    host = platform or sys.platform
    current_home = java_home if java_home is not None else os.environ.get("JAVA_HOME", "")
    run = probe or _run_probe
    found: dict[str, JavaVersion] = {}

    if host == "darwin":
        _scan_macos(found, current_home, run)
    elif host.startswith("linux"):
        _scan_directories(found, _LINUX_JVM_DIRS, "bin/java", current_home, run)
        _scan_update_alternatives(found, current_home, run)
    elif host in ("win32", "cygwin"):
        _scan_directories(found, _WINDOWS_JVM_DIRS, "bin\\java.exe", current_home, run)

    default = _probe_java("java", run)
    if default is not None:
        found[default.version] = replace(
            default, path=current_home or default.path, is_default=True
        )

    result = sorted(found.values(), key=lambda item: _major_number(item.version), reverse=True)
    if not result:
        result.append(
            JavaVersion(
                version="17",
                full_version="17",
                path=current_home,
                vendor=_UNKNOWN_VENDOR,
                is_default=True,
            )
        )
    return result


def common_java_versions() -> list[JavaVersion]:
    """Well-known release lines offered when no scan result is wanted."""
    return [
        JavaVersion(version="25", full_version="25", vendor="Latest"),
        JavaVersion(version="23", full_version="23", vendor="Latest"),
        JavaVersion(version="21", full_version="21", vendor="LTS"),
        JavaVersion(version="17", full_version="17", vendor="LTS", is_default=True),
        JavaVersion(version="11", full_version="11", vendor="LTS"),
        JavaVersion(version="8", full_version="1.8", vendor="LTS"),
    ]


def extract_major_version(full_version: str) -> str:
    """``1.8.0_392`` -> ``8``; ``17.0.8`` -> ``17``."""
    if full_version.startswith("1.8"):
        return "8"
    return full_version.split(".", 1)[0]


def parse_version_banner(output: str) -> JavaVersion | None:
    """Parse ``java -version`` output into a :class:`JavaVersion` (without path)."""
    match = _VERSION_BANNER.search(output)
    if match is None:
        return None
    full_version = match.group(1)
    return JavaVersion(
        version=extract_major_version(full_version),
        full_version=full_version,
        vendor=_vendor_from_banner(output),
    )


# ---------------------------------------------------------------------------
# Platform probes
# ---------------------------------------------------------------------------


def _scan_macos(found: dict[str, JavaVersion], current_home: str, run: CommandProbe) -> None:
    output = run(["/usr/libexec/java_home", "-V"])
    if output is None:
        return
    for line in output.splitlines():
        match = _MACOS_JAVA_HOME_LINE.match(line)
        if match is None:
            continue
        full_version, vendor, path = match.group(1), match.group(2), match.group(4).strip()
        major = extract_major_version(full_version)
        found[major] = JavaVersion(
            version=major,
            full_version=full_version,
            path=path,
            vendor=vendor,
            is_default=path == current_home,
        )


def _scan_directories(
    found: dict[str, JavaVersion],
    roots: Iterable[str],
    relative_executable: str,
    current_home: str,
    run: CommandProbe,
) -> None:
    for root in roots:
        try:
            entries = sorted(Path(root).iterdir())
        except OSError:
            continue
        for entry in entries:
            if not entry.is_dir():
                continue
            executable = entry / relative_executable
            if not executable.exists():
                continue
            detected = _probe_java(str(executable), run)
            if detected is None:
                continue
            home = str(entry)
            found[detected.version] = replace(
                detected, path=home, is_default=home == current_home
            )


def _scan_update_alternatives(
    found: dict[str, JavaVersion], current_home: str, run: CommandProbe
) -> None:
    output = run(["update-alternatives", "--list", "java"])
    if output is None:
        return
    for line in output.splitlines():
        executable = line.strip()
        if not executable:
            continue
        detected = _probe_java(executable, run)
        if detected is None:
            continue
        home = executable.removesuffix("/bin/java") if "/bin/java" in executable else ""
        found[detected.version] = replace(detected, path=home, is_default=home == current_home)


def _probe_java(executable: str, run: CommandProbe) -> JavaVersion | None:
    output = run([executable, "-version"])
    if output is None:
        return None
    return parse_version_banner(output)


def _run_probe(argv: list[str]) -> str | None:
    """Run *argv* and return combined output, or ``None`` on any failure."""
    try:
        completed = subprocess.run(
            argv,
            capture_output=True,
            text=True,
            timeout=_PROBE_TIMEOUT_SECS,
            check=False,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired, OSError):
        return None
    if completed.returncode != 0:
        return None
    return (completed.stdout or "") + (completed.stderr or "")


def _vendor_from_banner(output: str) -> str:
    for keywords, vendor in _VENDOR_KEYWORDS:
        if any(keyword in output for keyword in keywords):
            return vendor
    return _DEFAULT_VENDOR


def _major_number(version: str) -> int:
    try:
        return int(version)
    except ValueError:
        return 0


__all__ = [
    "CommandProbe",
    "JavaVersion",
    "common_java_versions",
    "detect_java_versions",
    "extract_major_version",
    "parse_version_banner",
]
