# topmark:header:start
#
#   project      : TS Analyzer
#   file         : __init__.py
#   file_relpath : src/tsanalyzer/diagnostic/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Diagnostic records and the sources that produce them.

Design:
    - Every diagnostic is an immutable, validated `Diagnostic` (1-based positions).
    - `parse_batch` turns captured checker text into diagnostics (batch mode).
    - `from_event` / `from_lsp` wrap one structured event (single-event mode).
    - `CheckerRunner` invokes the external checker for batch mode.
"""

from __future__ import annotations

from tsanalyzer.diagnostic.model import Diagnostic, Severity, normalize_code
from tsanalyzer.diagnostic.runner import CheckerRunner
from tsanalyzer.diagnostic.source import from_event, from_lsp, parse_batch, strip_ansi

__all__ = [
    "CheckerRunner",
    "Diagnostic",
    "Severity",
    "from_event",
    "from_lsp",
    "normalize_code",
    "parse_batch",
    "strip_ansi",
]
