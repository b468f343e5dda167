# topmark:header:start
#
#   project      : TS Analyzer
#   file         : middleware.py
#   file_relpath : src/tsanalyzer/presentation/middleware.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Explicit middleware chain for ``publishDiagnostics`` events.

Handlers are called as ``handler(event, next_handler)`` and must return the
event produced by ``next_handler`` (possibly after rewriting the event they
pass to it). The most recently registered handler runs first and wraps the
ones registered before it; the terminal sink receives the final event.

Example:
    ```python
    chain = PublishChain(sink=editor_default_handler)

    def tag(event, next_handler):
        return next_handler(event.with_diagnostics(rewrite(event.diagnostics)))

    unregister = chain.register(tag)
    chain.dispatch(event)
    unregister()
    ```
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from tsanalyzer.config.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable

    from tsanalyzer.config.logging import AnalyzerLogger
    from tsanalyzer.presentation.host import BufferId

logger: AnalyzerLogger = get_logger(__name__)


@dataclass(frozen=True)
class PublishEvent:
    """One ``publishDiagnostics`` notification, already resolved to a buffer.

    Attributes:
        server_name (str): Name of the language server that sent it.
        buffer_id (BufferId): Buffer of the document.
        file_path (str): Local path of the document.
        diagnostics (tuple[Mapping[str, Any], ...]): Raw LSP diagnostic payloads.
    """

    server_name: str
    buffer_id: BufferId
    file_path: str
    diagnostics: tuple[Mapping[str, Any], ...] = ()

    def with_diagnostics(self, diagnostics: Iterable[Mapping[str, Any]]) -> PublishEvent:
        """Return a copy of this event carrying ``diagnostics``."""
        return replace(self, diagnostics=tuple(diagnostics))


NextHandler = Callable[[PublishEvent], PublishEvent]
PublishHandler = Callable[[PublishEvent, NextHandler], PublishEvent]
PublishSink = Callable[[PublishEvent], Any]


class PublishChain:
    """Ordered chain of publish handlers ending in a sink.

    Args:
        sink (PublishSink | None): Receives the event after every handler ran.
    """

    def __init__(self, sink: PublishSink | None = None) -> None:
        self._sink: PublishSink | None = sink
        self._handlers: list[tuple[int, PublishHandler]] = []
        self._ids: itertools.count[int] = itertools.count(1)

    def __len__(self) -> int:
        return len(self._handlers)

    def register(self, handler: PublishHandler) -> Callable[[], None]:
        """Add ``handler`` in front of the chain.

        Returns:
            Callable[[], None]: Removes this registration; calling it twice is a no-op.
        """
        handler_id: int = next(self._ids)
        self._handlers.append((handler_id, handler))

        def unregister() -> None:
            self._handlers[:] = [(i, h) for i, h in self._handlers if i != handler_id]

        return unregister

    def dispatch(self, event: PublishEvent) -> PublishEvent:
        """Run ``event`` through the chain and return what reached the sink."""
        handlers: tuple[PublishHandler, ...] = tuple(h for _, h in self._handlers)

        def call(index: int, current: PublishEvent) -> PublishEvent:
            if index < 0:
                if self._sink is not None:
                    self._sink(current)
                return current
            return handlers[index](current, lambda ev: call(index - 1, ev))

        logger.trace(
            "Dispatching %d diagnostic(s) from %s through %d handler(s)",
            len(event.diagnostics),
            event.server_name,
            len(handlers),
        )
        return call(len(handlers) - 1, event)
