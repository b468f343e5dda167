# topmark:header:start
#
#   project      : TS Analyzer
#   file         : constants.py
#   file_relpath : src/tsanalyzer/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""TS Analyzer Constants."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version

try:
    TSANALYZER_VERSION: str = get_version("ts-analyzer")
except PackageNotFoundError:  # running from a source checkout
    TSANALYZER_VERSION = "0.0.0"

# Canonical prefix of TypeScript diagnostic codes (``TS2322``).
CODE_PREFIX: str = "TS"

# Bundled data resources inside the package `tsanalyzer.data`.
DATA_PACKAGE: str = "tsanalyzer.data"
SUGGESTIONS_TOML_NAME: str = "suggestions.toml"

# Project configuration sources.
CONFIG_FILE_NAME: str = "ts-analyzer.toml"
PYPROJECT_FILE_NAME: str = "pyproject.toml"
PYPROJECT_TOOL_SECTION: str = "ts-analyzer"

DEFAULT_CHECKER_COMMAND: tuple[str, ...] = ("tsc",)
DEFAULT_CHECKER_ARGS: tuple[str, ...] = ("--noEmit", "--pretty", "false")
DEFAULT_CHECKER_TIMEOUT: float = 120.0

# LSP clients whose diagnostics get enhanced.
DEFAULT_SERVERS: tuple[str, ...] = ("ts_ls", "vtsls")

SUMMARY_PREFIX: str = "Total errors:"
NO_ERRORS_MESSAGE: str = "No errors were emitted."

