# topmark:header:start
#
#   project      : TS Analyzer
#   file         : model.py
#   file_relpath : src/tsanalyzer/diagnostic/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Core diagnostic types for TS Analyzer.

This module defines the uniform record every diagnostic source normalizes
into, regardless of whether it came from captured checker text or from a live
structured event.

Sections:
    * Severity: severity levels with associated terminal colors.
    * Diagnostic: immutable, validated diagnostic record (1-based positions).
    * normalize_code: canonicalization of loosely-typed diagnostic codes.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from yachalk import chalk

from tsanalyzer.config.logging import get_logger
from tsanalyzer.constants import CODE_PREFIX
from tsanalyzer.errors import InvalidField
from tsanalyzer.rendering.colored_enum import ColoredStrEnum

if TYPE_CHECKING:
    from tsanalyzer.config.logging import AnalyzerLogger

logger: AnalyzerLogger = get_logger(__name__)

#: Canonical shape of a normalized code: the checker prefix followed by the raw code.
CODE_PATTERN: Final[re.Pattern[str]] = re.compile(rf"^{CODE_PREFIX}\S+$")


class Severity(ColoredStrEnum):
    """Severity levels of a diagnostic.

    Levels map to terminal colors and are ordered by importance:
    ERROR > WARNING > INFO > HINT.
    """

    ERROR = "error", chalk.red_bright.bold
    WARNING = "warning", chalk.yellow.bold
    INFO = "info", chalk.blue
    HINT = "hint", chalk.gray

    @property
    def label(self) -> str:
        """Return the capitalized label used in rendered titles (``Error``)."""
        return self.value.capitalize()

    @classmethod
    def from_lsp(cls, value: object) -> Severity:
        """Map an LSP ``DiagnosticSeverity`` number (1..4) to a `Severity`.

        Unknown or missing values map to `Severity.ERROR`.
        """
        return {
            1: cls.ERROR,
            2: cls.WARNING,
            3: cls.INFO,
            4: cls.HINT,
        }.get(value if isinstance(value, int) else -1, cls.ERROR)

    @classmethod
    def from_word(cls, word: str | None) -> Severity:
        """Map a checker severity word (``error``, ``warning``, ``message``...) to a `Severity`."""
        if not word:
            return cls.ERROR
        return {
            "error": cls.ERROR,
            "warning": cls.WARNING,
            "message": cls.INFO,
            "info": cls.INFO,
            "suggestion": cls.HINT,
            "hint": cls.HINT,
        }.get(word.strip().lower(), cls.ERROR)


def normalize_code(raw: object) -> str | None:
    """Return the canonical, checker-prefixed form of a diagnostic code.

    Accepts the shapes a code arrives in: a bare ``int`` (``2322``), a string
    with or without prefix (``"2322"``, ``"ts2322"``, ``"TS2322"``), or a nested
    mapping carrying a ``value`` key (``{"value": 2322, "target": ...}``).

    Args:
        raw (object): The loosely-typed code.

    Returns:
        str | None: ``"TS2322"``-style code, or ``None`` when no code is present.
    """
    if isinstance(raw, Mapping):
        raw = raw.get("value")  # type: ignore[union-attr]
    if raw is None or isinstance(raw, bool):
        return None
    text: str = str(raw).strip()
    if not text:
        return None
    if text[: len(CODE_PREFIX)].upper() == CODE_PREFIX:
        text = text[len(CODE_PREFIX) :]
        if not text:
            return None
    return f"{CODE_PREFIX}{text}"


def _require_positive(field: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidField(field, value, "expected an integer")
    if value < 1:
        raise InvalidField(field, value, "positions are 1-based and must be >= 1")
    return value


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """One reported type-checking issue with a 1-based location.

    Instances are validated on construction and never mutated afterwards.

    Attributes:
        file_path (str): Path of the file the diagnostic refers to.
        line (int): 1-based start line.
        column (int): 1-based start column.
        end_line (int | None): 1-based end line, if known.
        end_column (int | None): 1-based, exclusive end column, if known.
        code (str | None): Canonical ``TS``-prefixed code (see `normalize_code`).
        message (str): First line of the checker message.
        severity (Severity): Diagnostic severity.
        details (tuple[str, ...]): Continuation lines collected from batch output.
    """

    file_path: str
    line: int
    column: int
    end_line: int | None = None
    end_column: int | None = None
    code: str | None = None
    message: str = ""
    severity: Severity = Severity.ERROR
    details: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.file_path, str) or not self.file_path.strip():
            raise InvalidField("file_path", self.file_path, "a file path is required")
        _require_positive("line", self.line)
        _require_positive("column", self.column)
        if self.end_line is not None:
            _require_positive("end_line", self.end_line)
            if self.end_line < self.line:
                raise InvalidField("end_line", self.end_line, "ends before the start line")
        if self.end_column is not None:
            _require_positive("end_column", self.end_column)
        if self.code is not None and CODE_PATTERN.match(self.code) is None:
            raise InvalidField("code", self.code, f"expected the '{CODE_PREFIX}' prefixed form")

    @property
    def location(self) -> str:
        """Return the ``file:line:column`` location string."""
        return f"{self.file_path}:{self.line}:{self.column}"

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly mapping of this diagnostic."""
        return {
            "file": self.file_path,
            "line": self.line,
            "column": self.column,
            "end_line": self.end_line,
            "end_column": self.end_column,
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "details": list(self.details),
        }
