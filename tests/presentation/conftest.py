# topmark:header:start
#
#   project      : TS Analyzer
#   file         : conftest.py
#   file_relpath : tests/presentation/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Helpers shared by the presentation tests."""

from __future__ import annotations

from concurrent.futures import Future
from typing import TYPE_CHECKING, Any

from tests.conftest import make_catalog, make_diagnostic
from tsanalyzer.presentation.store import OverlayEntry
from tsanalyzer.rendering.renderer import DiagnosticRenderer

if TYPE_CHECKING:
    from collections.abc import Callable

    from tsanalyzer.presentation.host import BufferId
    from tsanalyzer.rendering.renderer import Block

RENDERER = DiagnosticRenderer(catalog=make_catalog())


def make_block(line: int, column: int = 1, **overrides: Any) -> Block:
    """Render a frame-less block for a diagnostic at ``line``/``column``."""
    return RENDERER.render(make_diagnostic(line=line, column=column, **overrides))


def make_entry(buffer_id: BufferId, line: int, column: int = 1, **overrides: Any) -> OverlayEntry:
    """Return an overlay entry of ``buffer_id`` anchored at ``line``."""
    return OverlayEntry.from_block(buffer_id, make_block(line, column, **overrides))


class ManualExecutor:
    """Executor stand-in that runs submitted jobs only when told to."""

    def __init__(self) -> None:
        self.jobs: list[tuple[Future[Any], Callable[..., Any], tuple[Any, ...]]] = []

    def submit(self, fn: Callable[..., Any], /, *args: Any) -> Future[Any]:
        future: Future[Any] = Future()
        self.jobs.append((future, fn, args))
        return future

    def run(self, index: int) -> None:
        future, fn, args = self.jobs[index]
        future.set_result(fn(*args))
