# topmark:header:start
#
#   project      : TS Analyzer
#   file         : host.py
#   file_relpath : src/tsanalyzer/presentation/host.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Editor host boundary.

The presentation layer never talks to a concrete editor. It drives an
`EditorHost`, which owns the actual decorations of a buffer: range highlights
and at most one expanded annotation (virtual lines below a source line).

Positions crossing this boundary are 0-based ``(line, character)`` pairs, the
convention of editor APIs and LSP. Conversion from the 1-based diagnostic model
happens once, when an `OverlayEntry` is built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, NamedTuple, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tsanalyzer.rendering.styling import StyledChunk

BufferId = int


class Position(NamedTuple):
    """0-based ``(line, character)`` position in a buffer."""

    line: int
    character: int


AnnotationLines = tuple[tuple["StyledChunk", ...], ...]


class EditorHost(Protocol):
    """Operations the presentation layer needs from an editor."""

    def clear(self, buffer_id: BufferId) -> None:
        """Remove every decoration this tool owns in ``buffer_id``."""
        ...

    def add_highlight(self, buffer_id: BufferId, start: Position, end: Position) -> None:
        """Highlight the range ``[start, end)``."""
        ...

    def show_annotation(
        self,
        buffer_id: BufferId,
        row: int,
        lines: Sequence[Sequence[StyledChunk]],
    ) -> None:
        """Show ``lines`` as virtual lines below the 0-based ``row``."""
        ...


@dataclass
class Annotation:
    """An expanded annotation as recorded by `MemoryHost`."""

    row: int
    lines: AnnotationLines

    @property
    def text(self) -> str:
        """Return the annotation as plain text."""
        return "\n".join("".join(chunk for chunk, _ in line) for line in self.lines)


@dataclass
class MemoryHost:
    """In-process `EditorHost` recording the current decorations.

    Used for headless runs and tests: after any sequence of calls it holds
    exactly what an editor would display.
    """

    highlights: dict[BufferId, list[tuple[Position, Position]]] = field(default_factory=lambda: {})
    annotations: dict[BufferId, list[Annotation]] = field(default_factory=lambda: {})
    clear_count: int = 0

    def clear(self, buffer_id: BufferId) -> None:
        self.highlights.pop(buffer_id, None)
        self.annotations.pop(buffer_id, None)
        self.clear_count += 1

    def add_highlight(self, buffer_id: BufferId, start: Position, end: Position) -> None:
        self.highlights.setdefault(buffer_id, []).append((start, end))

    def show_annotation(
        self,
        buffer_id: BufferId,
        row: int,
        lines: Sequence[Sequence[StyledChunk]],
    ) -> None:
        frozen: AnnotationLines = tuple(tuple(line) for line in lines)
        self.annotations.setdefault(buffer_id, []).append(Annotation(row, frozen))

    def highlights_for(self, buffer_id: BufferId) -> list[tuple[Position, Position]]:
        """Return the highlights currently applied to ``buffer_id``."""
        return list(self.highlights.get(buffer_id, []))

    def annotations_for(self, buffer_id: BufferId) -> list[Annotation]:
        """Return the annotations currently shown in ``buffer_id``."""
        return list(self.annotations.get(buffer_id, []))
