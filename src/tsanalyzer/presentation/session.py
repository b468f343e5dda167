# topmark:header:start
#
#   project      : TS Analyzer
#   file         : session.py
#   file_relpath : src/tsanalyzer/presentation/session.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Per-editor analyzer session.

An `AnalyzerSession` wires the core together for one editor: it owns the
overlay store, the hover controller, the renderer and the host, and exposes
the editor events as methods.

Diagnostics arrive two ways:
    - **Language server**: the session registers a middleware on a
      `PublishChain`. Each LSP diagnostic from an allowed server is normalized,
      rendered and stored; its message is rewritten to ``[TS2322] message`` for
      the editor's list views, then the event continues down the chain.
    - **Batch**: `refresh_from_checker` runs the external checker. With an
      executor the run happens on a worker; only the result of the latest
      request per buffer is applied.

Any `AnalyzerError` for one diagnostic leaves that diagnostic unenhanced.

Threading:
    Host calls for a batch result are made on the thread that completes the
    run. The hover controller serializes them with cursor events; hosts
    bound to a UI thread must still marshal them.
"""

from __future__ import annotations

from concurrent.futures import Future
from pathlib import Path
from typing import TYPE_CHECKING, Any

from tsanalyzer.config.logging import get_logger
from tsanalyzer.constants import DEFAULT_SERVERS
from tsanalyzer.diagnostic.runner import CheckerRunner
from tsanalyzer.diagnostic.source import from_lsp
from tsanalyzer.errors import AnalyzerError, MissingSourceFile, RunnerUnavailable
from tsanalyzer.presentation.hover import HoverController
from tsanalyzer.presentation.store import OverlayEntry, OverlayStateStore
from tsanalyzer.rendering.frame import SourceCache, SourceText
from tsanalyzer.rendering.renderer import DiagnosticRenderer

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping
    from concurrent.futures import Executor

    from tsanalyzer.config.logging import AnalyzerLogger
    from tsanalyzer.config.model import Config
    from tsanalyzer.diagnostic.model import Diagnostic
    from tsanalyzer.presentation.host import BufferId, EditorHost
    from tsanalyzer.presentation.middleware import NextHandler, PublishChain, PublishEvent
    from tsanalyzer.presentation.store import PresentationState
    from tsanalyzer.rendering.renderer import Block

logger: AnalyzerLogger = get_logger(__name__)


def tagged_message(diagnostic: Diagnostic) -> str:
    """Return the list-view message ``[TS2322] <message>`` (unchanged without a code)."""
    if not diagnostic.code:
        return diagnostic.message
    tag: str = f"[{diagnostic.code}]"
    if diagnostic.message.startswith(tag):
        return diagnostic.message
    return f"{tag} {diagnostic.message}"


def _same_file(left: str, right: str) -> bool:
    return Path(left).resolve() == Path(right).resolve()


class AnalyzerSession:
    """Own the presentation state of one editor and react to its events.

    Args:
        host (EditorHost): Editor receiving decorations.
        renderer (DiagnosticRenderer | None): Block renderer (default catalog if None).
        runner (CheckerRunner | None): Checker used by `refresh_from_checker`.
        servers (Iterable[str]): Language servers whose diagnostics are enhanced.
        executor (Executor | None): Runs batch checks off the calling thread when set.
    """

    def __init__(
        self,
        host: EditorHost,
        *,
        renderer: DiagnosticRenderer | None = None,
        runner: CheckerRunner | None = None,
        servers: Iterable[str] = DEFAULT_SERVERS,
        executor: Executor | None = None,
    ) -> None:
        self.host = host
        self.renderer = renderer or DiagnosticRenderer()
        self.runner = runner or CheckerRunner()
        self.servers: frozenset[str] = frozenset(servers)
        self.executor = executor
        self.store = OverlayStateStore()
        self.hover = HoverController(self.store, host)
        self._unregister: Callable[[], None] | None = None

    @classmethod
    def from_config(
        cls,
        config: Config,
        host: EditorHost,
        *,
        executor: Executor | None = None,
    ) -> AnalyzerSession:
        """Build a session from the resolved configuration."""
        return cls(
            host,
            renderer=DiagnosticRenderer(catalog=config.suggestion_catalog()),
            runner=CheckerRunner.from_config(config),
            servers=config.servers,
            executor=executor,
        )

    # --- publish interception ---

    def attach(self, chain: PublishChain) -> Callable[[], None]:
        """Register the enhancement middleware on ``chain``; returns its unregister function."""
        self.detach()
        self._unregister = chain.register(self._enhance)
        return self._unregister

    def detach(self) -> None:
        """Remove the middleware registered by `attach`, if any."""
        if self._unregister is not None:
            self._unregister()
            self._unregister = None

    def _enhance(self, event: PublishEvent, next_handler: NextHandler) -> PublishEvent:
        if event.server_name not in self.servers:
            logger.trace("Ignoring diagnostics from server %r", event.server_name)
            return next_handler(event)
        rewritten: list[dict[str, Any]] = self.publish(
            event.buffer_id, event.file_path, event.diagnostics
        )
        return next_handler(event.with_diagnostics(rewritten))

    def publish(
        self,
        buffer_id: BufferId,
        file_path: str,
        diagnostics: Iterable[Mapping[str, Any]],
        *,
        source_text: str | None = None,
    ) -> list[dict[str, Any]]:
        """Render and store the LSP ``diagnostics`` of one document.

        Args:
            buffer_id (BufferId): Buffer of the document.
            file_path (str): Local path of the document.
            diagnostics (Iterable[Mapping[str, Any]]): Raw LSP diagnostic payloads.
            source_text (str | None): Current buffer content; the file on disk
                is read when None.

        Returns:
            list[dict[str, Any]]: The payloads with their messages rewritten for
            list views (unchanged for diagnostics that could not be enhanced).
        """
        cache: SourceCache = SourceCache()
        buffer_source: SourceText | None = SourceText(source_text) if source_text is not None else None
        entries: list[OverlayEntry] = []
        rewritten: list[dict[str, Any]] = []

        for payload in diagnostics:
            out: dict[str, Any] = dict(payload)
            try:
                diagnostic: Diagnostic = from_lsp(file_path, payload)
            except AnalyzerError as exc:
                logger.info("Diagnostic left unenhanced: %s", exc)
                rewritten.append(out)
                continue
            source: SourceText | None = buffer_source
            if source is None:
                try:
                    source = cache.get(diagnostic.file_path)
                except MissingSourceFile:
                    source = None
            block: Block = self.renderer.render(diagnostic, source)
            entries.append(OverlayEntry.from_block(buffer_id, block))
            out["message"] = tagged_message(diagnostic)
            rewritten.append(out)

        self.store.replace(buffer_id, entries)
        self.hover.redraw(buffer_id)
        return rewritten

    # --- batch mode ---

    def refresh_from_checker(self, buffer_id: BufferId, path: str) -> Future[bool]:
        """Run the checker for ``path`` and apply its diagnostics to ``buffer_id``.

        Issuing a new request supersedes any request still running for the
        same buffer. The future resolves to True when this request's result
        was applied, False when it was stale or the checker was unavailable.
        """
        token: int = self.store.issue_request(buffer_id)
        if self.executor is not None:
            return self.executor.submit(self._run_checker, buffer_id, path, token)

        future: Future[bool] = Future()
        future.set_result(self._run_checker(buffer_id, path, token))
        return future

    def _run_checker(self, buffer_id: BufferId, path: str, token: int) -> bool:
        try:
            diagnostics: list[Diagnostic] = self.runner.check(path)
        except RunnerUnavailable as exc:
            logger.warning("%s", exc)
            return False

        own: list[Diagnostic] = [d for d in diagnostics if _same_file(d.file_path, path)]
        blocks: list[Block] = self.renderer.render_all(own)
        entries: list[OverlayEntry] = [OverlayEntry.from_block(buffer_id, b) for b in blocks]
        if not self.store.apply_if_current(buffer_id, token, entries):
            return False
        self.hover.redraw(buffer_id)
        return True

    # --- editor events ---

    def cursor_moved(self, buffer_id: BufferId, line: int) -> OverlayEntry | None:
        """Handle a cursor move to 1-based ``line``."""
        return self.hover.on_cursor_moved(buffer_id, line)

    def focus_lost(self, buffer_id: BufferId) -> None:
        """Handle the buffer losing focus."""
        self.hover.on_focus_lost(buffer_id)

    def clear(self, buffer_id: BufferId) -> None:
        """Drop every entry of ``buffer_id`` and its decorations."""
        self.store.clear(buffer_id)
        self.hover.redraw(buffer_id)

    def close(self, buffer_id: BufferId) -> None:
        """Tear down the state of a closed buffer."""
        self.store.close(buffer_id)
        self.hover.forget(buffer_id)

    def state(self, buffer_id: BufferId) -> PresentationState:
        """Return the presentation state of ``buffer_id``."""
        return self.hover.state(buffer_id)
