# topmark:header:start
#
#   project      : TS Analyzer
#   file         : test_hover_controller.py
#   file_relpath : tests/presentation/test_hover_controller.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Cursor-driven visibility: at most one expanded block, highlights always applied."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tests.presentation.conftest import make_entry
from tsanalyzer.presentation.host import MemoryHost
from tsanalyzer.presentation.hover import HoverController
from tsanalyzer.presentation.store import OverlayStateStore, PresentationState

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tsanalyzer.presentation.host import Annotation, BufferId
    from tsanalyzer.presentation.store import OverlayEntry
    from tsanalyzer.rendering.styling import StyledChunk

BUF: int = 7


def _setup(*lines: int) -> tuple[OverlayStateStore, MemoryHost, HoverController]:
    store = OverlayStateStore()
    host = MemoryHost()
    store.replace(BUF, [make_entry(BUF, line, column=3) for line in lines])
    return store, host, HoverController(store, host)


def test_cursor_on_tracked_line_then_away() -> None:
    """Line 5 shows one block; line 6 shows none and keeps every highlight."""
    _, host, hover = _setup(5, 9)

    entry: OverlayEntry | None = hover.on_cursor_moved(BUF, 5)

    assert entry is not None
    annotations: list[Annotation] = host.annotations_for(BUF)
    assert len(annotations) == 1
    assert annotations[0].row == 4
    assert annotations[0].text == entry.block.rendered_text
    assert len(host.highlights_for(BUF)) == 2
    assert hover.state(BUF) is PresentationState.SHOWING
    assert hover.shown(BUF) == 5

    assert hover.on_cursor_moved(BUF, 6) is None

    assert host.annotations_for(BUF) == []
    assert len(host.highlights_for(BUF)) == 2
    assert hover.state(BUF) is PresentationState.POPULATED


def test_moving_between_tracked_lines_shows_one_block() -> None:
    _, host, hover = _setup(5, 9)

    hover.on_cursor_moved(BUF, 5)
    hover.on_cursor_moved(BUF, 9)

    annotations: list[Annotation] = host.annotations_for(BUF)
    assert [a.row for a in annotations] == [8]
    assert hover.shown(BUF) == 9


def test_annotation_lines_are_style_tagged() -> None:
    _, host, hover = _setup(5)

    hover.on_cursor_moved(BUF, 5)

    first_line = host.annotations_for(BUF)[0].lines[0]
    assert [text for text, _ in first_line][0] == "[TS2322]"


def test_repopulation_voids_showing() -> None:
    store, _, hover = _setup(5)
    hover.on_cursor_moved(BUF, 5)
    assert hover.state(BUF) is PresentationState.SHOWING

    store.replace(BUF, [make_entry(BUF, 5)])

    assert hover.shown(BUF) is None
    assert hover.state(BUF) is PresentationState.POPULATED

    hover.on_cursor_moved(BUF, 5)

    assert hover.state(BUF) is PresentationState.SHOWING


def test_focus_lost_hides_block_keeps_highlights() -> None:
    _, host, hover = _setup(5, 9)
    hover.on_cursor_moved(BUF, 9)

    hover.on_focus_lost(BUF)

    assert host.annotations_for(BUF) == []
    assert len(host.highlights_for(BUF)) == 2
    assert hover.state(BUF) is PresentationState.POPULATED


def test_every_transition_clears_first() -> None:
    _, host, hover = _setup(5)

    hover.on_cursor_moved(BUF, 5)
    hover.on_cursor_moved(BUF, 5)

    assert host.clear_count == 2
    assert len(host.annotations_for(BUF)) == 1
    assert len(host.highlights_for(BUF)) == 1


def test_empty_buffer() -> None:
    store = OverlayStateStore()
    host = MemoryHost()
    hover = HoverController(store, host)

    assert hover.on_cursor_moved(BUF, 1) is None
    assert hover.state(BUF) is PresentationState.EMPTY
    assert host.highlights_for(BUF) == []


def test_forget_clears_decorations() -> None:
    _, host, hover = _setup(5)
    hover.on_cursor_moved(BUF, 5)

    hover.forget(BUF)

    assert host.annotations_for(BUF) == []
    assert host.highlights_for(BUF) == []
    assert hover.shown(BUF) is None


@dataclass
class GatedHost(MemoryHost):
    """Host whose `show_annotation` blocks until the test releases it."""

    entered: threading.Event = field(default_factory=threading.Event)
    release: threading.Event = field(default_factory=threading.Event)

    def show_annotation(
        self,
        buffer_id: BufferId,
        row: int,
        lines: Sequence[Sequence[StyledChunk]],
    ) -> None:
        self.entered.set()
        self.release.wait(5)
        super().show_annotation(buffer_id, row, lines)


def test_redraw_from_another_thread_waits_for_cursor_transition() -> None:
    store = OverlayStateStore()
    store.replace(BUF, [make_entry(BUF, 5, column=3)])
    host = GatedHost()
    hover = HoverController(store, host)

    showing = threading.Thread(target=hover.on_cursor_moved, args=(BUF, 5))
    showing.start()
    assert host.entered.wait(5)

    redrawing = threading.Thread(target=hover.redraw, args=(BUF,))
    redrawing.start()
    redrawing.join(0.2)
    assert redrawing.is_alive()

    host.release.set()
    showing.join(5)
    redrawing.join(5)

    assert host.annotations_for(BUF) == []
    assert len(host.highlights_for(BUF)) == 1
    assert hover.shown(BUF) is None
