# topmark:header:start
#
#   project      : TS Analyzer
#   file         : store.py
#   file_relpath : src/tsanalyzer/presentation/store.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Per-buffer overlay state.

`OverlayStateStore` owns, for each buffer, the map ``line -> OverlayEntry`` of
diagnostics that can be expanded, and a generation number that changes on
every repopulation.

Invariants:
    - A buffer's entry set is only ever swapped as a whole (`replace`,
      `apply_if_current`, `clear`, `close`); readers never see a partial set.
    - At most one entry is kept per line: the one with the lowest start column,
      the first one seen on ties.
    - Batch results are applied only when their request token is still the
      latest issued for the buffer and no `replace` or `clear` happened
      since it was issued (last request wins).

All reads and writes run under a single `threading.Lock`.
"""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from tsanalyzer.config.logging import get_logger
from tsanalyzer.presentation.host import Position

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from tsanalyzer.config.logging import AnalyzerLogger
    from tsanalyzer.presentation.host import BufferId
    from tsanalyzer.rendering.renderer import Block

logger: AnalyzerLogger = get_logger(__name__)


class PresentationState(str, Enum):
    """Observable presentation state of one buffer."""

    EMPTY = "empty"
    POPULATED = "populated"
    SHOWING = "showing"


@dataclass(frozen=True, slots=True)
class OverlayEntry:
    """One expandable diagnostic anchored to a buffer line.

    Attributes:
        buffer_id (BufferId): Buffer the entry belongs to.
        line (int): 1-based anchor line.
        block (Block): The rendered block shown when the line has focus.
        highlight_start (Position): 0-based start of the highlighted range.
        highlight_end (Position): 0-based, exclusive end of the highlighted range.
    """

    buffer_id: BufferId
    line: int
    block: Block
    highlight_start: Position
    highlight_end: Position

    @classmethod
    def from_block(cls, buffer_id: BufferId, block: Block) -> OverlayEntry:
        """Anchor ``block`` in ``buffer_id``, converting its range to 0-based positions.

        A missing or empty end yields a one-character highlight.
        """
        line, column, end_line, end_column = block.range
        start: Position = Position(line - 1, column - 1)
        end_row: int = (end_line if end_line is not None else line) - 1
        end_char: int = (end_column if end_column is not None else column + 1) - 1
        end: Position = Position(end_row, end_char)
        if end <= start:
            end = Position(start.line, start.character + 1)
        return cls(
            buffer_id=buffer_id,
            line=line,
            block=block,
            highlight_start=start,
            highlight_end=end,
        )

    @property
    def column(self) -> int:
        """Return the 1-based start column."""
        return self.highlight_start.character + 1


@dataclass(frozen=True)
class OverlaySnapshot:
    """Consistent view of one buffer: its generation and its entries by line."""

    generation: int
    entries: Mapping[int, OverlayEntry]

    @property
    def ordered(self) -> tuple[OverlayEntry, ...]:
        """Return the entries sorted by line."""
        return tuple(self.entries[line] for line in sorted(self.entries))


def index_by_line(buffer_id: BufferId, entries: Iterable[OverlayEntry]) -> dict[int, OverlayEntry]:
    """Index ``entries`` by line, keeping the lowest-column entry of each line.

    Raises:
        ValueError: If an entry belongs to another buffer.
    """
    table: dict[int, OverlayEntry] = {}
    for entry in entries:
        if entry.buffer_id != buffer_id:
            raise ValueError(
                f"Overlay entry for buffer {entry.buffer_id} cannot be stored in buffer {buffer_id}"
            )
        kept: OverlayEntry | None = table.get(entry.line)
        if kept is None or entry.column < kept.column:
            table[entry.line] = entry
        else:
            logger.trace("Line %d already has an entry; keeping column %d", entry.line, kept.column)
    return table


class OverlayStateStore:
    """Thread-safe owner of every buffer's overlay entries."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[BufferId, dict[int, OverlayEntry]] = {}
        self._generations: dict[BufferId, int] = {}
        self._requests: dict[BufferId, int] = {}
        # Shared by generations and request tokens, so values are never reused,
        # not even after a buffer is closed and its id recycled.
        self._counter: itertools.count[int] = itertools.count(1)

    def _swap(self, buffer_id: BufferId, table: dict[int, OverlayEntry]) -> int:
        # Caller holds the lock. A swap supersedes any batch request still running.
        self._requests.pop(buffer_id, None)
        generation: int = next(self._counter)
        self._entries[buffer_id] = table
        self._generations[buffer_id] = generation
        return generation

    def replace(self, buffer_id: BufferId, entries: Iterable[OverlayEntry]) -> int:
        """Atomically replace the entries of ``buffer_id``.

        Pending batch results for the buffer are discarded.

        Returns:
            int: The new generation of the buffer.
        """
        table: dict[int, OverlayEntry] = index_by_line(buffer_id, entries)
        with self._lock:
            generation: int = self._swap(buffer_id, table)
        logger.debug("Buffer %s: %d entries (generation %d)", buffer_id, len(table), generation)
        return generation

    def clear(self, buffer_id: BufferId) -> None:
        """Remove every entry of ``buffer_id``; pending batch results for it are discarded."""
        with self._lock:
            self._swap(buffer_id, {})

    def close(self, buffer_id: BufferId) -> None:
        """Forget ``buffer_id`` entirely; pending batch results for it are discarded."""
        with self._lock:
            self._entries.pop(buffer_id, None)
            self._requests.pop(buffer_id, None)
            self._generations[buffer_id] = next(self._counter)
        logger.debug("Buffer %s closed", buffer_id)

    def issue_request(self, buffer_id: BufferId) -> int:
        """Return a token identifying a new batch request; it supersedes older ones."""
        with self._lock:
            token: int = next(self._counter)
            self._requests[buffer_id] = token
        return token

    def apply_if_current(
        self,
        buffer_id: BufferId,
        token: int,
        entries: Iterable[OverlayEntry],
    ) -> bool:
        """Replace the entries of ``buffer_id`` only if ``token`` is still current.

        Returns:
            bool: True when the entries were applied, False for a stale result.
        """
        table: dict[int, OverlayEntry] = index_by_line(buffer_id, entries)
        with self._lock:
            if self._requests.get(buffer_id) != token:
                logger.debug("Buffer %s: discarding stale result for request %d", buffer_id, token)
                return False
            self._swap(buffer_id, table)
        return True

    def get(self, buffer_id: BufferId, line: int) -> OverlayEntry | None:
        """Return the entry anchored at 1-based ``line``, if any."""
        with self._lock:
            return self._entries.get(buffer_id, {}).get(line)

    def entries(self, buffer_id: BufferId) -> tuple[OverlayEntry, ...]:
        """Return the entries of ``buffer_id`` sorted by line."""
        return self.snapshot(buffer_id).ordered

    def snapshot(self, buffer_id: BufferId) -> OverlaySnapshot:
        """Return the generation and entries of ``buffer_id`` as one consistent view."""
        with self._lock:
            return OverlaySnapshot(
                generation=self._generations.get(buffer_id, 0),
                entries=dict(self._entries.get(buffer_id, {})),
            )

    def generation(self, buffer_id: BufferId) -> int:
        """Return the current generation of ``buffer_id`` (0 if never populated)."""
        with self._lock:
            return self._generations.get(buffer_id, 0)

    def state(self, buffer_id: BufferId) -> PresentationState:
        """Return `PresentationState.POPULATED` when the buffer has entries, else ``EMPTY``."""
        with self._lock:
            populated: bool = bool(self._entries.get(buffer_id))
        return PresentationState.POPULATED if populated else PresentationState.EMPTY

    def buffers(self) -> tuple[BufferId, ...]:
        """Return the ids of the buffers currently holding entries."""
        with self._lock:
            return tuple(b for b, table in self._entries.items() if table)
