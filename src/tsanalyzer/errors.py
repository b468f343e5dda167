# topmark:header:start
#
#   project      : TS Analyzer
#   file         : errors.py
#   file_relpath : src/tsanalyzer/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Recoverable error taxonomy for the TS Analyzer core.

Every error raised by the core is local: callers catch `AnalyzerError` and
fall back to the original, unenhanced diagnostic. Malformed checker output is
*not* an error (it yields an empty diagnostic set), so it has no class here.

Classes:
    * AnalyzerError: common base class.
    * RunnerUnavailable: the external type-checker process cannot be started.
    * InvalidField: a structured diagnostic field failed validation.
    * MissingSourceFile: the file a diagnostic points into cannot be read.
    * ConfigError: a configuration file is unreadable or not valid TOML.
"""

from __future__ import annotations

from pathlib import Path


class AnalyzerError(Exception):
    """Base class for all recoverable TS Analyzer errors."""


class RunnerUnavailable(AnalyzerError):
    """The type-checker executable could not be started or did not finish."""

    def __init__(self, command: str, reason: str) -> None:
        super().__init__(f"Type checker '{command}' is unavailable: {reason}")
        self.command = command
        self.reason = reason


class InvalidField(AnalyzerError):
    """A diagnostic field is missing or out of range."""

    def __init__(self, field: str, value: object, reason: str) -> None:
        super().__init__(f"Invalid diagnostic field '{field}'={value!r}: {reason}")
        self.field = field
        self.value = value
        self.reason = reason


class MissingSourceFile(AnalyzerError):
    """The source file referenced by a diagnostic cannot be read."""

    def __init__(self, path: str | Path, reason: str) -> None:
        super().__init__(f"Cannot read source file '{path}': {reason}")
        self.path = str(path)
        self.reason = reason


class ConfigError(AnalyzerError):
    """A configuration source is unreadable or malformed."""

    def __init__(self, path: str | Path, reason: str) -> None:
        super().__init__(f"Invalid configuration in '{path}': {reason}")
        self.path = str(path)
        self.reason = reason
