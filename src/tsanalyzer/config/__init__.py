# topmark:header:start
#
#   project      : TS Analyzer
#   file         : __init__.py
#   file_relpath : src/tsanalyzer/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration and logging for TS Analyzer.

Modules:
    - tsanalyzer.config.logging: logger factory, TRACE level, colored formatter.
    - tsanalyzer.config.keys: TOML schema constants.
    - tsanalyzer.config.io: TOML loading helpers (tomlkit).
    - tsanalyzer.config.model: `Config` / `MutableConfig` and the merge policy.

Nothing is re-exported here: every module of the package imports
`tsanalyzer.config.logging`, so this package must stay import-light.
"""

from __future__ import annotations
