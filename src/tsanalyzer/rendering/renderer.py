# topmark:header:start
#
#   project      : TS Analyzer
#   file         : renderer.py
#   file_relpath : src/tsanalyzer/rendering/renderer.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Compose diagnostics, code frames and suggestions into rendered blocks.

A rendered block reads:

```text
[TS2322] Error: Type 'string' is not assignable to type 'number'.
  ╭─[ demo.ts:3:7 ]
3 │ const x: number = "hello";
  │       ^
  │       │
  │       ╰─ Type `string` is not assignable to `number`: make the types ...
──╯
  = note: <continuation line of the checker message>
```

When the source file cannot be read, the frame is omitted and the hint (if
any) is appended as ``  = help: <hint>``.

Rendering is pure: the same diagnostic, source and catalog always produce the
same text. No ANSI escapes are emitted here; see `tsanalyzer.rendering.styling`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from tsanalyzer.config.logging import get_logger
from tsanalyzer.constants import NO_ERRORS_MESSAGE, SUMMARY_PREFIX
from tsanalyzer.errors import MissingSourceFile
from tsanalyzer.rendering.frame import CodeFrameBuilder, Frame, SourceCache, message_lines
from tsanalyzer.rendering.suggestions import SuggestionCatalog

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from tsanalyzer.config.logging import AnalyzerLogger
    from tsanalyzer.diagnostic.model import Diagnostic
    from tsanalyzer.rendering.frame import SourceText

logger: AnalyzerLogger = get_logger(__name__)

NOTE_PREFIX: Final[str] = "  = note: "
HELP_PREFIX: Final[str] = "  = help: "


@dataclass(frozen=True, slots=True)
class Block:
    """Rendered, immutable annotation for one diagnostic.

    Attributes:
        diagnostic (Diagnostic): The diagnostic this block renders.
        frame (Frame | None): The code frame, or None when the source was unavailable.
        suggestion (str | None): The catalog hint, if any.
        rendered_text (str): Plain-text rendering (no trailing newline).
    """

    diagnostic: Diagnostic
    frame: Frame | None
    suggestion: str | None
    rendered_text: str

    @property
    def range(self) -> tuple[int, int, int | None, int | None]:
        """Return the raw 1-based ``(line, column, end_line, end_column)``."""
        d: Diagnostic = self.diagnostic
        return d.line, d.column, d.end_line, d.end_column

    @property
    def lines(self) -> list[str]:
        """Return the rendered text split into lines."""
        return self.rendered_text.split("\n")


def title_line(diagnostic: Diagnostic) -> str:
    """Return ``[TS2322] Error: <message>`` (without the code part when absent)."""
    lines: list[str] = message_lines(diagnostic.message)
    first: str = lines[0] if lines else ""
    title: str = f"{diagnostic.severity.label}: {first}".rstrip()
    if diagnostic.code:
        return f"[{diagnostic.code}] {title}"
    return title


def _notes(diagnostic: Diagnostic) -> list[str]:
    # Continuation lines of a multi-line message come first, then batch details.
    extra: list[str] = message_lines(diagnostic.message)[1:]
    return [f"{NOTE_PREFIX}{note}" for note in (*extra, *diagnostic.details)]


@dataclass(frozen=True)
class DiagnosticRenderer:
    """Render diagnostics into `Block` instances.

    Attributes:
        catalog (SuggestionCatalog): Hint lookup table.
        builder (CodeFrameBuilder): Frame builder.
    """

    catalog: SuggestionCatalog = field(default_factory=SuggestionCatalog.default)
    builder: CodeFrameBuilder = field(default_factory=CodeFrameBuilder)

    def render(self, diagnostic: Diagnostic, source: SourceText | None = None) -> Block:
        """Render one diagnostic.

        Args:
            diagnostic (Diagnostic): The diagnostic to render.
            source (SourceText | None): Content of the file it points into, or
                None when the file could not be read.

        Returns:
            Block: The rendered block.
        """
        suggestion: str | None = self.catalog.lookup(diagnostic.code, diagnostic.message)
        parts: list[str] = [title_line(diagnostic)]

        frame: Frame | None = None
        if source is not None:
            frame = self.builder.build(diagnostic, source, label=suggestion)
            parts.append(frame.text)
        parts.extend(_notes(diagnostic))
        if frame is None and suggestion:
            parts.append(f"{HELP_PREFIX}{suggestion}")

        return Block(
            diagnostic=diagnostic,
            frame=frame,
            suggestion=suggestion,
            rendered_text="\n".join(parts),
        )

    def render_all(
        self,
        diagnostics: Iterable[Diagnostic],
        cache: SourceCache | None = None,
    ) -> list[Block]:
        """Render a batch, reading each referenced file at most once.

        Unreadable files degrade to frame-less blocks.
        """
        cache = cache if cache is not None else SourceCache()
        blocks: list[Block] = []
        for diagnostic in diagnostics:
            try:
                source: SourceText | None = cache.get(diagnostic.file_path)
            except MissingSourceFile:
                source = None
            blocks.append(self.render(diagnostic, source))
        logger.debug("Rendered %d block(s) from %d file(s)", len(blocks), len(cache))
        return blocks


def summary_line(count: int) -> str:
    """Return the ``Total errors: N`` summary line."""
    return f"{SUMMARY_PREFIX} {count}"


def render_batch_report(blocks: Sequence[Block]) -> str:
    """Return the batch report: blocks separated by a blank line, then the summary."""
    if not blocks:
        return f"{NO_ERRORS_MESSAGE}\n{summary_line(0)}"
    body: str = "\n\n".join(block.rendered_text for block in blocks)
    return f"{body}\n\n{summary_line(len(blocks))}"
