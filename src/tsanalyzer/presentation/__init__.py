# topmark:header:start
#
#   project      : TS Analyzer
#   file         : __init__.py
#   file_relpath : src/tsanalyzer/presentation/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Editor-side presentation of rendered diagnostics.

Design:
    - `OverlayStateStore` owns the per-buffer ``line -> OverlayEntry`` map.
    - `HoverController` shows at most one expanded block per buffer, for the
      line under the cursor, and keeps range highlights for all entries.
    - `PublishChain` intercepts ``publishDiagnostics`` events; the
      `AnalyzerSession` middleware enhances them on the way to the editor.
    - Editors plug in through the `EditorHost` protocol (`MemoryHost` for
      headless use and tests).
"""

from __future__ import annotations

from tsanalyzer.presentation.host import EditorHost, MemoryHost, Position
from tsanalyzer.presentation.hover import HoverController
from tsanalyzer.presentation.middleware import PublishChain, PublishEvent
from tsanalyzer.presentation.session import AnalyzerSession
from tsanalyzer.presentation.store import (
    OverlayEntry,
    OverlayStateStore,
    PresentationState,
)

__all__ = [
    "AnalyzerSession",
    "EditorHost",
    "HoverController",
    "MemoryHost",
    "OverlayEntry",
    "OverlayStateStore",
    "Position",
    "PresentationState",
    "PublishChain",
    "PublishEvent",
]
