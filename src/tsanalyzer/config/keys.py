# topmark:header:start
#
#   project      : TS Analyzer
#   file         : keys.py
#   file_relpath : src/tsanalyzer/config/keys.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Canonical TOML section and key names for TS Analyzer configuration.

The same schema is read from ``ts-analyzer.toml`` and from the
``[tool.ts-analyzer]`` table of ``pyproject.toml``:

```toml
[checker]
command = ["npx", "tsc"]
args = ["--noEmit", "--pretty", "false"]
timeout = 120

[editor]
servers = ["ts_ls", "vtsls"]

[render]
color = "auto"

[suggestions]
TS2322 = "Check the declared type of this variable."
```

Renaming or removing a key is a breaking change.
"""

from __future__ import annotations

from typing import Final


class Toml:
    """TOML section names and keys used by TS Analyzer configuration."""

    # [checker]
    SECTION_CHECKER: Final[str] = "checker"

    KEY_COMMAND: Final[str] = "command"
    KEY_ARGS: Final[str] = "args"
    KEY_TIMEOUT: Final[str] = "timeout"

    # [editor]
    SECTION_EDITOR: Final[str] = "editor"

    KEY_SERVERS: Final[str] = "servers"

    # [render]
    SECTION_RENDER: Final[str] = "render"

    KEY_COLOR: Final[str] = "color"

    # [suggestions] (code = hint)
    SECTION_SUGGESTIONS: Final[str] = "suggestions"

    # Known keys per section, used to report unknown ones.
    SCHEMA: Final[dict[str, frozenset[str]]] = {
        SECTION_CHECKER: frozenset({KEY_COMMAND, KEY_ARGS, KEY_TIMEOUT}),
        SECTION_EDITOR: frozenset({KEY_SERVERS}),
        SECTION_RENDER: frozenset({KEY_COLOR}),
    }
