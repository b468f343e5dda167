# topmark:header:start
#
#   project      : TS Analyzer
#   file         : errors.py
#   file_relpath : src/tsanalyzer/cli/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions for the TS Analyzer CLI.

Commands translate core `AnalyzerError` subclasses into these
`click.ClickException` subclasses, which carry the matching `ExitCode`.

Styling:
    Errors are printed through the project console when one is present in the
    Click context (see `show()`); otherwise Click's default display is used.
"""

from __future__ import annotations

from typing import IO, Any

import click

from tsanalyzer.cli.exit_codes import ExitCode


class AnalyzerCliError(click.ClickException):
    """Base class for all TS Analyzer CLI errors."""

    exit_code = ExitCode.DATA_ERROR

    def format_message(self) -> str:
        """Return the plain error message text (color is applied in `show()`)."""
        return str(getattr(self, "message", ""))

    def show(self, file: IO[Any] | None = None) -> None:
        """Display the error using the project console if available."""
        ctx: click.Context | None = click.get_current_context(silent=True)
        obj: Any = getattr(ctx, "obj", None)
        console: Any = obj.get("console") if isinstance(obj, dict) else None
        if console is not None:
            console.error(console.styled(f"Error: {self.format_message()}", fg="bright_red"))
            return
        super().show(file)


class AnalyzerUsageError(AnalyzerCliError):
    """Error for command-line invocation errors (invalid flags or arguments)."""

    exit_code = ExitCode.USAGE_ERROR


class AnalyzerDataError(AnalyzerCliError):
    """Error for invalid diagnostic input (e.g. a non-positive line or column)."""

    exit_code = ExitCode.DATA_ERROR


class AnalyzerUnavailableError(AnalyzerCliError):
    """Error when the type checker cannot be started or times out."""

    exit_code = ExitCode.UNAVAILABLE


class AnalyzerConfigError(AnalyzerCliError):
    """Error for configuration errors (unreadable or malformed config)."""

    exit_code = ExitCode.CONFIG_ERROR
