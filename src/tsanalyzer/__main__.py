# topmark:header:start
#
#   project      : TS Analyzer
#   file         : __main__.py
#   file_relpath : src/tsanalyzer/__main__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Module entry point for running TS Analyzer via ``python -m tsanalyzer``.

Delegates to `tsanalyzer.cli.main.cli`, the same Click group as the
``ts-analyzer`` console script.

Examples:
    Run TS Analyzer using the module interface::

        python -m tsanalyzer check src/index.ts
"""

from __future__ import annotations

from tsanalyzer.cli.main import cli

if __name__ == "__main__":
    cli()
