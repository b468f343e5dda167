# topmark:header:start
#
#   project      : TS Analyzer
#   file         : io.py
#   file_relpath : src/tsanalyzer/config/io.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Load TOML configuration sources and read typed values from them.

Parsing is done with `tomlkit` and returned as plain ``dict`` structures.
Unlike value lookups, which tolerate bad types (the caller reports them),
a file that cannot be read or is not valid TOML raises `ConfigError`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from tsanalyzer.config.logging import get_logger
from tsanalyzer.errors import ConfigError

if TYPE_CHECKING:
    from pathlib import Path

    from tsanalyzer.config.logging import AnalyzerLogger

logger: AnalyzerLogger = get_logger(__name__)

TomlTable = dict[str, Any]


def parse_toml_text(text: str, *, origin: str | Path) -> TomlTable:
    """Parse ``text`` into a plain dict.

    Raises:
        ConfigError: If ``text`` is not valid TOML.
    """
    try:
        data: Any = tomlkit.parse(text).unwrap()
    except TomlkitParseError as exc:
        raise ConfigError(origin, str(exc)) from exc
    return cast("TomlTable", data) if isinstance(data, dict) else {}


def load_toml_dict(path: Path) -> TomlTable:
    """Load and parse a TOML file from the filesystem.

    Args:
        path (Path): Path to a TOML document (``ts-analyzer.toml`` or ``pyproject.toml``).

    Returns:
        TomlTable: The parsed TOML content.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """
    logger.debug("Loading TOML from %s", path)
    try:
        text: str = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(path, str(exc)) from exc
    return parse_toml_text(text, origin=path)


def get_table_value(table: TomlTable, key: str) -> TomlTable:
    """Return the sub-table ``key``, or an empty dict when missing or not a table."""
    value: Any = table.get(key)
    return cast("TomlTable", value) if isinstance(value, dict) else {}


def is_string_list(value: Any) -> bool:
    """Return True if ``value`` is a list made of strings only."""
    return isinstance(value, list) and all(isinstance(v, str) for v in cast("list[Any]", value))
