"""Fatal error reporting with remediation hints.

Configuration failures carry an :class:`ErrorHints` value describing which
follow-up actions make sense for the user. :func:`render_error` prints the
message and hints on stderr; :func:`quit_error` additionally terminates the
process.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import NoReturn

from rich.console import Console
from rich.markup import escape

from .exit_codes import ExitCode

err_console = Console(stderr=True)


@dataclass(frozen=True)
class ErrorHints:
    """Remediation hints attached to a fatal error."""

    config: bool = False
    config_test: bool = False

    def lines(self) -> list[str]:
        """Return the hint lines to show below the error message."""
        hints: list[str] = []
        if self.config:
            hints.append("Use '--config' to select a different configuration file.")
        if self.config_test:
            hints.append("Use 'lazymc config test' to validate your configuration file.")
        return hints


class ConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""

    def __init__(self, message: str, *, hints: ErrorHints | None = None) -> None:
        super().__init__(message)
        self.hints = hints or ErrorHints()


def render_error(error: ConfigError, *, console: Console | None = None) -> None:
    """Print *error* and its hints."""
    target = console or err_console
    target.print(f"[bold red]error:[/bold red] {escape(str(error))}", highlight=False)
    cause = error.__cause__
    if cause is not None and str(cause) not in str(error):
        target.print(f"  [red]caused by:[/red] {escape(str(cause))}", highlight=False)
    for hint in error.hints.lines():
        target.print(f"[bold]hint:[/bold] {escape(hint)}", highlight=False)


def quit_error(
    error: ConfigError,
    *,
    code: ExitCode = ExitCode.CONFIG,
    console: Console | None = None,
) -> NoReturn:
    """Report *error* with its hints and terminate the process."""
    render_error(error, console=console)
    raise SystemExit(int(code))


__all__ = ["ConfigError", "ErrorHints", "err_console", "quit_error", "render_error"]
