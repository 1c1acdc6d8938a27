"""
mvn-tui — CLI subprocess smoke contracts

File: tests/integration/test_cli_smoke.py

Purpose
- Enforce the non-interactive CLI behavior of `python -m mvn_tui`.
- Verify exit codes and output for --version, --help and startup failures
  that happen before the terminal UI takes over.
"""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

import pytest

from mvn_tui import version_banner

PROJECT_ROOT = Path(__file__).resolve().parents[2]
SRC_PATH = PROJECT_ROOT / "src"


def _run_cli(cwd: Path, *args: str, **extra_env: str) -> subprocess.CompletedProcess[str]:
    env = os.environ.copy()
    existing_pythonpath = env.get("PYTHONPATH")
    src_pythonpath = str(SRC_PATH)
    env["PYTHONPATH"] = (
        src_pythonpath if not existing_pythonpath else f"{src_pythonpath}:{existing_pythonpath}"
    )
    env["MVN_TUI_LOG_DIR"] = str(cwd / ".mvn-tui-logs")
    env.update(extra_env)
    return subprocess.run(
        [sys.executable, "-m", "mvn_tui", *args],
        cwd=cwd,
        text=True,
        capture_output=True,
        check=False,
        env=env,
        timeout=60,
    )


@pytest.mark.integration
def test_version_prints_banner(tmp_path: Path) -> None:
    completed = _run_cli(tmp_path, "--version")
    assert completed.returncode == 0, completed.stderr
    assert completed.stdout.strip() == version_banner()


@pytest.mark.integration
def test_help_lists_flags_and_environment(tmp_path: Path) -> None:
    completed = _run_cli(tmp_path, "--help")
    assert completed.returncode == 0, completed.stderr
    assert "--no-color" in completed.stdout
    assert "--log-level" in completed.stdout
    assert "MVN_TUI_CANCEL_GRACE" in completed.stdout


@pytest.mark.integration
def test_unknown_flag_is_usage_error(tmp_path: Path) -> None:
    completed = _run_cli(tmp_path, "--frobnicate")
    assert completed.returncode == 2
    assert "usage: mvn-tui" in completed.stderr


@pytest.mark.integration
def test_invalid_environment_fails_before_ui(tmp_path: Path) -> None:
    completed = _run_cli(tmp_path, MVN_TUI_CANCEL_GRACE="never")
    assert completed.returncode == 1
    assert completed.stderr.strip() == "Error: MVN_TUI_CANCEL_GRACE must be a number"


@pytest.mark.integration
def test_malformed_pom_fails_before_ui(tmp_path: Path) -> None:
    (tmp_path / "pom.xml").write_text("<project><artifactId>", encoding="utf-8")
    completed = _run_cli(tmp_path, MVN_TUI_LOG_LEVEL="OFF")
    assert completed.returncode == 1
    assert completed.stderr.startswith("Error: failed to parse pom.xml")
    assert not (tmp_path / ".mvn-tui-logs").exists()
