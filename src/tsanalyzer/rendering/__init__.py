# topmark:header:start
#
#   project      : TS Analyzer
#   file         : __init__.py
#   file_relpath : src/tsanalyzer/rendering/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Rendering of diagnostics into annotated text blocks.

This package turns a `Diagnostic` plus the source it points into a
deterministic, plain-text `Block`. Styling (terminal colors, editor highlight
groups) is re-derived from the rendered text and kept out of the text itself.

Public modules:
    - tsanalyzer.rendering.colored_enum
    - tsanalyzer.rendering.frame
    - tsanalyzer.rendering.suggestions
    - tsanalyzer.rendering.renderer
    - tsanalyzer.rendering.styling
"""

from __future__ import annotations
