"""Executable CLI entrypoint for ``mvn_tui``."""

from __future__ import annotations

import sys
import traceback
from enum import IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence


class ExitCode(IntEnum):
    """Process exit codes of ``mvn-tui`` (the TUI itself always quits with 0)."""

    SUCCESS = 0
    FAILURE = 1
    USAGE_ERROR = 2
    INTERNAL_ERROR = 4

    @classmethod
    def for_exception(cls, exc: BaseException) -> ExitCode:
        """Startup problems the user can fix are FAILURE; everything else is a bug."""
        from mvn_tui.config import ConfigError
        from mvn_tui.maven.project import ProjectLoadError

        expected = (
            ConfigError,
            ProjectLoadError,
            FileNotFoundError,
            NotADirectoryError,
            PermissionError,
        )
        if any(isinstance(item, expected) for item in _causes(exc)):
            return cls.FAILURE
        return cls.INTERNAL_ERROR


def cli_entrypoint(argv: Sequence[str] | None = None) -> int:
    """Entrypoint used by ``python -m mvn_tui`` and the ``mvn-tui`` script."""

    try:
        from mvn_tui.ui.cli import run_cli

        return _coerce_exit_code(run_cli(argv))
    except SystemExit as exc:  # argparse exits on --help and usage errors.
        return _coerce_exit_code(exc.code)
    except KeyboardInterrupt:
        return int(ExitCode.FAILURE)
    except BaseException as exc:  # noqa: BLE001 - CLI boundary normalization.
        code = ExitCode.for_exception(exc)
        if code is ExitCode.INTERNAL_ERROR:
            traceback.print_exception(type(exc), exc, exc.__traceback__, file=sys.stderr)
        else:
            _write_stderr(f"Error: {str(exc).strip() or type(exc).__name__}")
        return int(code)


def _coerce_exit_code(raw_code: object) -> int:
    if raw_code is None:
        return int(ExitCode.SUCCESS)
    if isinstance(raw_code, int) and raw_code in {code.value for code in ExitCode}:
        return raw_code
    if isinstance(raw_code, str) and raw_code.strip():
        _write_stderr(raw_code.strip())
    return int(ExitCode.INTERNAL_ERROR)


def _causes(exc: BaseException) -> Iterator[BaseException]:
    """Walk ``__cause__`` / unsuppressed ``__context__`` links, stopping on cycles."""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        if current.__cause__ is not None:
            current = current.__cause__
        elif not current.__suppress_context__:
            current = current.__context__
        else:
            current = None


def _write_stderr(message: str) -> None:
    sys.stderr.write(message.rstrip("\n") + "\n")


__all__ = ["ExitCode", "cli_entrypoint"]
