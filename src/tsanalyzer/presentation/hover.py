# topmark:header:start
#
#   project      : TS Analyzer
#   file         : hover.py
#   file_relpath : src/tsanalyzer/presentation/hover.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Cursor-driven visibility of expanded diagnostic blocks.

`HoverController` shows the block of the diagnostic under the cursor and keeps
range highlights for every tracked diagnostic. Every transition is
clear-then-show: the host is cleared, all highlights are re-applied from the
store, then at most one annotation is shown. A buffer therefore never displays
more than one expanded block.

The controller only remembers which ``(line, generation)`` it last showed per
buffer. When the store is repopulated the generation changes, so the buffer
stops being `PresentationState.SHOWING` until the next cursor event.

Transitions are serialized by a per-controller lock, so batch results redrawn
on a worker thread never interleave with cursor events.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from tsanalyzer.config.logging import get_logger
from tsanalyzer.presentation.store import PresentationState
from tsanalyzer.rendering.styling import style_spans

if TYPE_CHECKING:
    from tsanalyzer.config.logging import AnalyzerLogger
    from tsanalyzer.presentation.host import BufferId, EditorHost
    from tsanalyzer.presentation.store import OverlayEntry, OverlaySnapshot, OverlayStateStore

logger: AnalyzerLogger = get_logger(__name__)


class HoverController:
    """Drive the annotation shown in each buffer from cursor events.

    Args:
        store (OverlayStateStore): Source of the tracked entries.
        host (EditorHost): Editor receiving the decorations.
    """

    def __init__(self, store: OverlayStateStore, host: EditorHost) -> None:
        self.store = store
        self.host = host
        self._lock = threading.RLock()
        self._shown: dict[BufferId, tuple[int, int]] = {}

    def _repaint(self, buffer_id: BufferId) -> OverlaySnapshot:
        snapshot: OverlaySnapshot = self.store.snapshot(buffer_id)
        self.host.clear(buffer_id)
        for entry in snapshot.ordered:
            self.host.add_highlight(buffer_id, entry.highlight_start, entry.highlight_end)
        return snapshot

    def on_cursor_moved(self, buffer_id: BufferId, line: int) -> OverlayEntry | None:
        """Show the block of 1-based ``line`` if it is tracked, hiding any other.

        Returns:
            OverlayEntry | None: The entry now shown, or None.
        """
        with self._lock:
            snapshot: OverlaySnapshot = self._repaint(buffer_id)
            entry: OverlayEntry | None = snapshot.entries.get(line)
            if entry is None:
                self._shown.pop(buffer_id, None)
                return None

            self.host.show_annotation(
                buffer_id,
                entry.line - 1,
                [style_spans(text) for text in entry.block.lines],
            )
            self._shown[buffer_id] = (line, snapshot.generation)
        logger.trace("Buffer %s: showing line %d", buffer_id, line)
        return entry

    def on_focus_lost(self, buffer_id: BufferId) -> None:
        """Hide the expanded block; highlights stay."""
        self.redraw(buffer_id)

    def redraw(self, buffer_id: BufferId) -> None:
        """Re-apply the highlights of ``buffer_id`` without any expanded block."""
        with self._lock:
            self._repaint(buffer_id)
            self._shown.pop(buffer_id, None)

    def shown(self, buffer_id: BufferId) -> int | None:
        """Return the line whose block is shown, or None.

        A block shown before the last repopulation of the buffer no longer counts.
        """
        with self._lock:
            record: tuple[int, int] | None = self._shown.get(buffer_id)
        if record is None:
            return None
        line, generation = record
        if generation != self.store.generation(buffer_id):
            return None
        return line

    def state(self, buffer_id: BufferId) -> PresentationState:
        """Return the presentation state of ``buffer_id``."""
        if self.shown(buffer_id) is not None:
            return PresentationState.SHOWING
        return self.store.state(buffer_id)

    def forget(self, buffer_id: BufferId) -> None:
        """Drop everything known about ``buffer_id`` (buffer closed)."""
        with self._lock:
            self._shown.pop(buffer_id, None)
            self.host.clear(buffer_id)
