"""
mvn-tui — runtime settings loader.

File: src/mvn_tui/config.py

Purpose
- Build effective runtime settings from environment variables and CLI overrides.

What should be included in this file
- Precedence logic: CLI > env (MVN_TUI_) > defaults.
- Deterministic environment variable mapping and coercion.
- Default log directory under the XDG state home.

Functional requirements
- Invalid values raise ``ConfigError`` with the offending variable name.
- No configuration file is read; the session keeps no persisted state.
"""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Final

ENV_PREFIX: Final[str] = "MVN_TUI_"
LOG_LEVEL_OFF: Final[str] = "OFF"
DEFAULT_LOG_LEVEL: Final[str] = "INFO"
DEFAULT_CANCEL_GRACE_SECS: Final[float] = 2.0

_BOOLEAN_TRUE: Final[frozenset[str]] = frozenset({"1", "true", "t", "yes", "y", "on"})
_BOOLEAN_FALSE: Final[frozenset[str]] = frozenset({"0", "false", "f", "no", "n", "off"})


class ConfigError(ValueError):
    """Raised when an environment variable or override cannot be coerced."""


@dataclass(frozen=True, slots=True)
class Settings:
    """Effective runtime settings for one session."""

    log_level: str = DEFAULT_LOG_LEVEL
    log_dir: Path = Path("logs")
    executable: str | None = None
    threads: str = ""
    show_version: bool = False
    cancel_grace: float = DEFAULT_CANCEL_GRACE_SECS
    no_color: bool = False

    @property
    def logging_enabled(self) -> bool:
        return self.log_level != LOG_LEVEL_OFF


def load_settings(
    environ: Mapping[str, str] | None = None,
    *,
    cli_overrides: Mapping[str, object] | None = None,
) -> Settings:
    """Load settings with deterministic precedence: CLI > env > defaults."""

    env_map = dict(os.environ if environ is None else environ)

    settings = Settings(
        log_level=_log_level(env_map.get(f"{ENV_PREFIX}LOG_LEVEL"), f"{ENV_PREFIX}LOG_LEVEL"),
        log_dir=_log_dir(env_map),
        executable=_optional_str(env_map.get(f"{ENV_PREFIX}EXECUTABLE")),
        threads=_threads(env_map.get(f"{ENV_PREFIX}THREADS")),
        show_version=_bool(env_map.get(f"{ENV_PREFIX}SHOW_VERSION"), f"{ENV_PREFIX}SHOW_VERSION"),
        cancel_grace=_positive_float(
            env_map.get(f"{ENV_PREFIX}CANCEL_GRACE"), f"{ENV_PREFIX}CANCEL_GRACE"
        ),
        # https://no-color.org: any non-empty value disables color.
        no_color=bool(env_map.get("NO_COLOR", "")),
    )
    return _apply_cli_overrides(settings, dict(cli_overrides or {}))


def default_log_dir(environ: Mapping[str, str] | None = None) -> Path:
    """``$XDG_STATE_HOME/mvn-tui/logs``, falling back to ``~/.local/state``."""
    env_map = os.environ if environ is None else environ
    state_home = env_map.get("XDG_STATE_HOME", "").strip()
    base = Path(state_home) if state_home else Path.home() / ".local" / "state"
    return base / "mvn-tui" / "logs"


# ---------------------------------------------------------------------------
# Coercion
# ---------------------------------------------------------------------------


def _apply_cli_overrides(settings: Settings, overrides: dict[str, object]) -> Settings:
    changes: dict[str, object] = {}
    if overrides.get("no_color"):
        changes["no_color"] = True
    log_level = overrides.get("log_level")
    if log_level is not None:
        if not isinstance(log_level, str):
            raise ConfigError("cli override 'log_level' must be a string")
        changes["log_level"] = _log_level(log_level, "--log-level")
    return replace(settings, **changes) if changes else settings


def _log_level(raw: str | None, source: str) -> str:
    if raw is None or not raw.strip():
        return DEFAULT_LOG_LEVEL
    value = raw.strip().upper()
    if value == LOG_LEVEL_OFF:
        return value
    if not isinstance(logging.getLevelName(value), int):
        raise ConfigError(f"{source} must be a logging level or OFF, got {raw!r}")
    return value


def _log_dir(environ: Mapping[str, str]) -> Path:
    raw = _optional_str(environ.get(f"{ENV_PREFIX}LOG_DIR"))
    if raw is None:
        return default_log_dir(environ)
    return Path(raw).expanduser()


def _threads(raw: str | None) -> str:
    value = _optional_str(raw)
    if value is None:
        return ""
    # Maven accepts a count ("4") or a per-core multiplier ("1C").
    digits = value[:-1] if value.upper().endswith("C") else value
    try:
        count = float(digits)
    except ValueError as exc:
        raise ConfigError(f"{ENV_PREFIX}THREADS must be a count or core multiplier like 1C") from exc
    if not math.isfinite(count):
        raise ConfigError(f"{ENV_PREFIX}THREADS must be a count or core multiplier like 1C")
    if count <= 0:
        raise ConfigError(f"{ENV_PREFIX}THREADS must be positive")
    return value


def _bool(raw: str | None, env_name: str) -> bool:
    if raw is None or not raw.strip():
        return False
    lowered = raw.strip().lower()
    if lowered in _BOOLEAN_TRUE:
        return True
    if lowered in _BOOLEAN_FALSE:
        return False
    raise ConfigError(f"{env_name} must be a boolean (true/false/1/0/yes/no/on/off)")


def _positive_float(raw: str | None, env_name: str) -> float:
    if raw is None or not raw.strip():
        return DEFAULT_CANCEL_GRACE_SECS
    try:
        value = float(raw.strip())
    except ValueError as exc:
        raise ConfigError(f"{env_name} must be a number") from exc
    if not math.isfinite(value):
        raise ConfigError(f"{env_name} must be a finite number")
    if value <= 0:
        raise ConfigError(f"{env_name} must be > 0")
    return value


def _optional_str(raw: str | None) -> str | None:
    if raw is None:
        return None
    value = raw.strip()
    return value or None


__all__ = [
    "DEFAULT_CANCEL_GRACE_SECS",
    "ENV_PREFIX",
    "LOG_LEVEL_OFF",
    "ConfigError",
    "Settings",
    "default_log_dir",
    "load_settings",
]
