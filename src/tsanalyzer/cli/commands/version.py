# topmark:header:start
#
#   project      : TS Analyzer
#   file         : version.py
#   file_relpath : src/tsanalyzer/cli/commands/version.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""TS Analyzer `version` command.

Prints the TS Analyzer version as installed in the active Python environment.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import click

from tsanalyzer.constants import TSANALYZER_VERSION

if TYPE_CHECKING:
    from tsanalyzer.cli.console import ClickConsole


@click.command(
    name="version",
    help="Show the current version of TS Analyzer.",
)
@click.pass_context
def version_command(ctx: click.Context) -> None:
    """Show the current version of TS Analyzer."""
    console: ClickConsole = ctx.obj["console"]
    if ctx.obj.get("verbosity_level", logging.WARNING) <= logging.INFO:
        console.print(console.styled("TS Analyzer version:", bold=True, underline=True))
        console.print(f"    {console.styled(TSANALYZER_VERSION, bold=True)}")
    else:
        console.print(console.styled(TSANALYZER_VERSION, bold=True))
