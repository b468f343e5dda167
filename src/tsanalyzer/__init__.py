# topmark:header:start
#
#   project      : TS Analyzer
#   file         : __init__.py
#   file_relpath : src/tsanalyzer/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""TS Analyzer package.

TS Analyzer turns raw TypeScript type-checker diagnostics into readable,
location-annotated blocks (code frame, pointer, suggestion), and manages the
editor-side state that shows the block of the line under the cursor while
keeping range highlights for every known diagnostic.
"""

from __future__ import annotations
