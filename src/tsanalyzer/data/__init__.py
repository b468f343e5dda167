# topmark:header:start
#
#   project      : TS Analyzer
#   file         : __init__.py
#   file_relpath : src/tsanalyzer/data/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Bundled data resources (suggestion catalog)."""
