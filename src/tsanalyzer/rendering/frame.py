# topmark:header:start
#
#   project      : TS Analyzer
#   file         : frame.py
#   file_relpath : src/tsanalyzer/rendering/frame.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Build positionally exact code frames for diagnostics.

A `Frame` annotates a single source line:

```text
  ╭─[ demo.ts:3:7 ]
3 │ const x: number = "hello";
  │       ^
  │       │
  │       ╰─ Ensure that the types are compatible or perform an explicit conversion.
──╯
```

Column model:
    One Python ``str`` character is one display column. Wide (East Asian) and
    combining characters are therefore not width-corrected. Tabs are copied
    verbatim from the source prefix into the filler so the pointer stays under
    the span whatever the terminal's tab stops are.

Spans:
    The highlighted span is ``[column, end_column)`` on the start line. Without
    an end it is one character wide. Spans that continue on later lines are
    clipped to the end of the start line, and a span is never narrower than one
    glyph.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Final

from yachalk import chalk

from tsanalyzer.config.logging import get_logger
from tsanalyzer.errors import MissingSourceFile
from tsanalyzer.rendering.colored_enum import ColoredStrEnum

if TYPE_CHECKING:
    from collections.abc import Iterator

    from tsanalyzer.config.logging import AnalyzerLogger
    from tsanalyzer.diagnostic.model import Diagnostic

logger: AnalyzerLogger = get_logger(__name__)

# Line terminators as counted by the TypeScript scanner (CRLF, CR, LF, LS, PS).
LINE_BREAK_RE: Final[re.Pattern[str]] = re.compile("\r\n|[\r\n\u2028\u2029]")

BORDER_GLYPH: Final[str] = "│"
HEADER_OPEN: Final[str] = "╭─["
HEADER_CLOSE: Final[str] = "]"
CONNECTOR_GLYPH: Final[str] = "│"
MESSAGE_GLYPH: Final[str] = "╰─"
FOOTER_CORNER: Final[str] = "╯"
RULE_GLYPH: Final[str] = "─"


class FrameStyle(ColoredStrEnum):
    """Style tags of the rows of a `Frame`."""

    HEADER = "header", chalk.gray
    SOURCE = "source", chalk.white
    POINTER = "pointer", chalk.red_bright.bold
    CONNECTOR = "connector", chalk.red_bright
    MESSAGE = "message", chalk.white
    FOOTER = "footer", chalk.gray


@dataclass(frozen=True, slots=True)
class FrameLine:
    """One style-tagged row of a frame."""

    style: FrameStyle
    text: str


@dataclass(frozen=True, slots=True)
class Frame:
    """Immutable, ordered sequence of style-tagged rows annotating one source line."""

    lines: tuple[FrameLine, ...]

    @property
    def text(self) -> str:
        """Return the rows joined with ``\\n`` (no trailing newline)."""
        return "\n".join(line.text for line in self.lines)

    def row(self, style: FrameStyle) -> FrameLine:
        """Return the first row tagged ``style``."""
        return next(line for line in self.lines if line.style is style)

    def __iter__(self) -> Iterator[FrameLine]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self.lines)


@dataclass(frozen=True)
class SourceText:
    """Source content split into lines once, reusable across diagnostics."""

    text: str
    lines: tuple[str, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "lines", tuple(LINE_BREAK_RE.split(self.text)))

    @classmethod
    def read(cls, path: str | Path) -> SourceText:
        """Read ``path`` as UTF-8 (a leading BOM is dropped).

        Raises:
            MissingSourceFile: If the file cannot be read or decoded.
        """
        try:
            text: str = Path(path).read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as exc:
            raise MissingSourceFile(path, str(exc)) from exc
        return cls(text)

    def line(self, number: int) -> str | None:
        """Return the 1-based line ``number`` without its terminator, or None if out of range."""
        if 1 <= number <= len(self.lines):
            return self.lines[number - 1]
        return None


class SourceCache:
    """Per-batch cache reading each source file at most once.

    Read failures are cached too, so a missing file is reported once per batch.
    """

    def __init__(self) -> None:
        self._entries: dict[str, SourceText | MissingSourceFile] = {}

    def get(self, path: str) -> SourceText:
        """Return the cached `SourceText` for ``path``.

        Raises:
            MissingSourceFile: If the file cannot be read.
        """
        entry = self._entries.get(path)
        if entry is None:
            try:
                entry = SourceText.read(path)
            except MissingSourceFile as exc:
                logger.warning("%s", exc)
                entry = exc
            self._entries[path] = entry
        if isinstance(entry, MissingSourceFile):
            raise entry
        return entry

    def __len__(self) -> int:
        return len(self._entries)


def message_lines(text: str) -> list[str]:
    """Return the non-blank lines of ``text``, stripped; the first one is the headline."""
    return [ln.strip() for ln in text.splitlines() if ln.strip()]


def compute_span(diagnostic: Diagnostic, source_line: str) -> tuple[int, int]:
    """Return ``(start, width)`` of the highlighted span on the start line.

    ``start`` is the 1-based start column; ``width`` is the number of pointer
    glyphs (always >= 1). Multi-line spans are clipped to the start line, and
    spans on the start line are clipped to its end.
    """
    start: int = diagnostic.column
    available: int = len(source_line) - start + 1

    if diagnostic.end_line is not None and diagnostic.end_line > diagnostic.line:
        width = available
    elif diagnostic.end_column is not None and diagnostic.end_column > start:
        width = min(diagnostic.end_column - start, available)
    else:
        width = 1
    return start, max(1, width)


def _filler(source_line: str, count: int, fill: str) -> str:
    # Keep tabs from the source prefix so alignment survives any tab width.
    prefix: str = source_line[:count]
    out: str = "".join("\t" if ch == "\t" else fill for ch in prefix)
    return out + fill * (count - len(prefix))


@dataclass(frozen=True)
class CodeFrameBuilder:
    """Build a `Frame` for one diagnostic.

    Attributes:
        pointer_glyph (str): Character repeated under the span.
        filler (str): Character used around the pointer run.
    """

    pointer_glyph: str = "^"
    filler: str = " "

    def build(
        self,
        diagnostic: Diagnostic,
        source: SourceText,
        label: str | None = None,
    ) -> Frame:
        """Return the frame for ``diagnostic`` over ``source``.

        Args:
            diagnostic (Diagnostic): The diagnostic to annotate.
            source (SourceText): Content of ``diagnostic.file_path``.
            label (str | None): Text of the trailing message row. Defaults to
                the first line of the diagnostic message.

        Returns:
            Frame: A freshly built, immutable frame.
        """
        source_line: str | None = source.line(diagnostic.line)
        if source_line is None:
            logger.debug(
                "Line %d is outside of %s (%d lines)",
                diagnostic.line,
                diagnostic.file_path,
                len(source.lines),
            )
            source_line = ""

        start, width = compute_span(diagnostic, source_line)
        lead: str = _filler(source_line, start - 1, self.filler)
        trail: str = self.filler * max(0, len(source_line) - (start - 1 + width))

        text: str = label if label is not None else diagnostic.message
        headline: list[str] = message_lines(text)
        text = headline[0] if headline else ""

        gutter_width: int = len(str(diagnostic.line))
        blank_gutter: str = " " * gutter_width
        rail: str = f"{blank_gutter} {BORDER_GLYPH} "

        lines: tuple[FrameLine, ...] = (
            FrameLine(
                FrameStyle.HEADER,
                f"{blank_gutter} {HEADER_OPEN} {diagnostic.location} {HEADER_CLOSE}",
            ),
            FrameLine(FrameStyle.SOURCE, f"{diagnostic.line} {BORDER_GLYPH} {source_line}"),
            FrameLine(FrameStyle.POINTER, f"{rail}{lead}{self.pointer_glyph * width}{trail}"),
            FrameLine(FrameStyle.CONNECTOR, f"{rail}{lead}{CONNECTOR_GLYPH}"),
            FrameLine(FrameStyle.MESSAGE, f"{rail}{lead}{MESSAGE_GLYPH} {text}".rstrip()),
            FrameLine(FrameStyle.FOOTER, f"{RULE_GLYPH * (gutter_width + 1)}{FOOTER_CORNER}"),
        )
        logger.trace("Built frame for %s (span %d+%d)", diagnostic.location, start, width)
        return Frame(lines)
