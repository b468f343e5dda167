# topmark:header:start
#
#   project      : TS Analyzer
#   file         : source.py
#   file_relpath : src/tsanalyzer/diagnostic/source.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Normalize type-checker output into `Diagnostic` records.

Two input modes are supported:

Batch mode (`parse_batch`):
    The captured, mixed stdout/stderr text of a full ``tsc`` run. ANSI escape
    sequences are stripped first. A location header (``file(line,col): ...`` or
    ``file:line:col ...``) opens a record; following lines belong to it until
    the next header or the end of input. Summary lines (``Found 2 errors``,
    ``Total errors: 2``) are excluded and close the current record. Text before
    the first header is ignored, and input without any header yields ``[]``.

Single-event mode (`from_event`, `from_lsp`):
    One already-structured diagnostic from a live feed. No text parsing occurs;
    fields are validated and the loosely-typed LSP shape (0-based ranges, codes
    that may be nested) is normalized here and never leaks past this module.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Final

from tsanalyzer.config.logging import get_logger
from tsanalyzer.diagnostic.model import Diagnostic, Severity, normalize_code
from tsanalyzer.errors import InvalidField

if TYPE_CHECKING:
    from tsanalyzer.config.logging import AnalyzerLogger

logger: AnalyzerLogger = get_logger(__name__)

ANSI_ESCAPE_RE: Final[re.Pattern[str]] = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")

_SEVERITY_WORDS: Final[str] = r"error|warning|message|info|suggestion|hint"

# `tsc --pretty false`: src/a.ts(3,10): error TS2322: Type 'string' is not ...
PAREN_HEADER_RE: Final[re.Pattern[str]] = re.compile(
    r"^(?P<file>\S.*?)\((?P<line>-?\d+),(?P<col>-?\d+)\):\s*"
    rf"(?P<sev>{_SEVERITY_WORDS})(?:\s+(?P<code>TS\d+))?\s*:\s?(?P<msg>.*)$",
    re.IGNORECASE,
)

# `tsc --pretty`: src/a.ts:3:10 - error TS2322: Type 'string' is not ...
# Also the bare `file:line:column` header (message on the following lines).
COLON_HEADER_RE: Final[re.Pattern[str]] = re.compile(
    r"^(?P<file>\S.*?):(?P<line>-?\d+):(?P<col>-?\d+)"
    rf"(?:\s+-\s+(?P<sev>{_SEVERITY_WORDS})(?:\s+(?P<code>TS\d+))?\s*:\s?(?P<msg>.*))?\s*$",
    re.IGNORECASE,
)

SUMMARY_RE: Final[re.Pattern[str]] = re.compile(
    r"^\s*(?:Found \d+ (?:errors?|warnings?)\b.*"
    r"|Total errors:\s*\d+\s*"
    r"|Errors\s+Files\s*)$"
)

# Pretty-mode source excerpt row: `3 let x: number = y;`.
GUTTER_RE: Final[re.Pattern[str]] = re.compile(r"^\s*\d+\s")

# Pretty-mode code excerpts: a gutter line number or a squiggle row.
EXCERPT_RE: Final[re.Pattern[str]] = re.compile(r"^\s*(?:\d+\s|[~^\s]*[~^][~^\s]*$)")


def strip_ansi(text: str) -> str:
    """Remove ANSI CSI escape sequences (colors, cursor movement) from ``text``."""
    return ANSI_ESCAPE_RE.sub("", text)


@dataclass
class _Record:
    """Mutable accumulator for one batch record until it is closed."""

    file_path: str
    line: int
    column: int
    code: str | None
    message: str
    severity: Severity
    body: list[str] = field(default_factory=lambda: [])

    def close(self) -> Diagnostic | None:
        lines: list[str] = [b.strip() for b in self.body if b.strip() and not EXCERPT_RE.match(b)]
        message: str = self.message.strip()
        if not message and lines:
            message = lines.pop(0)
        try:
            return Diagnostic(
                file_path=self.file_path,
                line=self.line,
                column=self.column,
                code=self.code,
                message=message,
                severity=self.severity,
                details=tuple(lines),
            )
        except InvalidField as exc:
            logger.warning("Skipping malformed diagnostic header: %s", exc)
            return None


def _match_header(line: str) -> _Record | None:
    m: re.Match[str] | None = PAREN_HEADER_RE.match(line) or COLON_HEADER_RE.match(line)
    if m is None:
        return None
    return _Record(
        file_path=m.group("file").strip(),
        line=int(m.group("line")),
        column=int(m.group("col")),
        code=normalize_code(m.group("code")),
        message=m.group("msg") or "",
        severity=Severity.from_word(m.group("sev")),
    )


def parse_batch(text: str) -> list[Diagnostic]:
    """Parse the captured output of a full type-check run.

    Args:
        text (str): Combined checker output, possibly containing ANSI escapes.

    Returns:
        list[Diagnostic]: Diagnostics in output order. Empty when no location
        header is found; malformed input is never an error.
    """
    diagnostics: list[Diagnostic] = []
    current: _Record | None = None

    def flush() -> None:
        nonlocal current
        if current is not None:
            diag: Diagnostic | None = current.close()
            if diag is not None:
                diagnostics.append(diag)
            current = None

    for raw in strip_ansi(text).splitlines():
        # Excerpt rows may quote `file:line:col` text; they never open a record.
        if current is not None and GUTTER_RE.match(raw):
            current.body.append(raw)
            continue
        header: _Record | None = _match_header(raw)
        if header is not None:
            flush()
            current = header
            continue
        if SUMMARY_RE.match(raw):
            logger.trace("Summary line excluded: %r", raw)
            flush()
            continue
        if current is not None:
            current.body.append(raw)
        else:
            logger.trace("Ignoring line outside of a record: %r", raw)
    flush()

    logger.debug("Parsed %d diagnostic(s) from batch output", len(diagnostics))
    return diagnostics


def from_event(
    file_path: str,
    line: int,
    column: int,
    code: object,
    message: str,
    *,
    severity: Severity = Severity.ERROR,
    end_line: int | None = None,
    end_column: int | None = None,
) -> Diagnostic:
    """Wrap one structured diagnostic event into a `Diagnostic`.

    The ``code`` is normalized by prepending the checker prefix when it is
    absent and non-empty.

    Raises:
        InvalidField: On a missing file path or a non-positive line/column.
    """
    if not file_path:
        raise InvalidField("file_path", file_path, "a file path is required")
    return Diagnostic(
        file_path=file_path,
        line=line,
        column=column,
        end_line=end_line,
        end_column=end_column,
        code=normalize_code(code),
        message=message,
        severity=severity,
    )


def _position(payload: Mapping[str, Any], key: str) -> tuple[int, int]:
    pos: object = payload.get(key)
    if not isinstance(pos, Mapping):
        raise InvalidField(f"range.{key}", pos, "expected a position object")
    line: object = pos.get("line")  # type: ignore[union-attr]
    character: object = pos.get("character")  # type: ignore[union-attr]
    if not isinstance(line, int) or not isinstance(character, int):
        raise InvalidField(f"range.{key}", pos, "line and character must be integers")
    if line < 0 or character < 0:
        raise InvalidField(f"range.{key}", pos, "LSP positions are 0-based and non-negative")
    return line, character


def from_lsp(file_path: str, payload: Mapping[str, Any]) -> Diagnostic:
    """Normalize one LSP ``Diagnostic`` payload into a `Diagnostic`.

    LSP ranges are 0-based with an exclusive end character; they are converted
    to 1-based lines and columns here. The ``code`` may be an ``int``, a ``str``
    or a nested ``{"value": ...}`` structure.

    Args:
        file_path (str): Local path of the document (already resolved from its URI).
        payload (Mapping[str, Any]): The raw LSP diagnostic mapping.

    Returns:
        Diagnostic: The normalized diagnostic.

    Raises:
        InvalidField: If the range is missing or malformed.
    """
    rng: object = payload.get("range")
    if not isinstance(rng, Mapping):
        raise InvalidField("range", rng, "expected a range object")
    start_line, start_char = _position(rng, "start")  # type: ignore[arg-type]
    end_line, end_char = _position(rng, "end")  # type: ignore[arg-type]
    return from_event(
        file_path,
        start_line + 1,
        start_char + 1,
        payload.get("code"),
        str(payload.get("message", "")),
        severity=Severity.from_lsp(payload.get("severity")),
        end_line=max(end_line, start_line) + 1,
        end_column=end_char + 1,
    )
