# topmark:header:start
#
#   project      : TS Analyzer
#   file         : __init__.py
#   file_relpath : src/tsanalyzer/cli/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Command-line interface of TS Analyzer (Click)."""
