# topmark:header:start
#
#   project      : TS Analyzer
#   file         : format.py
#   file_relpath : src/tsanalyzer/cli/commands/format.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""TS Analyzer `format` command (single-event mode).

Formats one structured diagnostic event and prints exactly one block. The
source file is read to build the code frame; when it cannot be read the block
is printed without a frame.

Example:

    $ ts-analyzer format src/demo.ts 3 7 2322 "Type 'string' is not assignable to type 'number'."
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from tsanalyzer.cli.errors import AnalyzerDataError
from tsanalyzer.diagnostic.model import Severity
from tsanalyzer.diagnostic.source import from_event
from tsanalyzer.errors import InvalidField, MissingSourceFile
from tsanalyzer.rendering.frame import SourceText
from tsanalyzer.rendering.renderer import DiagnosticRenderer
from tsanalyzer.rendering.styling import colorize

if TYPE_CHECKING:
    from tsanalyzer.cli.console import ClickConsole
    from tsanalyzer.config.model import Config
    from tsanalyzer.diagnostic.model import Diagnostic
    from tsanalyzer.rendering.renderer import Block


@click.command(
    name="format",
    help="Format one diagnostic event: FILE LINE COLUMN CODE MESSAGE (1-based positions).",
)
@click.argument("file", type=str)
@click.argument("line", type=int)
@click.argument("column", type=int)
@click.argument("code", type=str)
@click.argument("message", type=str)
@click.option("--end-line", type=int, default=None, help="1-based end line of the span.")
@click.option(
    "--end-column", type=int, default=None, help="1-based, exclusive end column of the span."
)
@click.option(
    "--severity",
    type=click.Choice([s.value for s in Severity]),
    default=Severity.ERROR.value,
    help="Diagnostic severity.",
)
@click.pass_context
def format_command(
    ctx: click.Context,
    file: str,
    line: int,
    column: int,
    code: str,
    message: str,
    end_line: int | None,
    end_column: int | None,
    severity: str,
) -> None:
    """Print the block for one diagnostic event.

    Raises:
        AnalyzerDataError: If a field is invalid (empty path, non-positive position).
    """
    console: ClickConsole = ctx.obj["console"]
    config: Config = ctx.obj["config"]

    try:
        diagnostic: Diagnostic = from_event(
            file,
            line,
            column,
            code,
            message,
            severity=Severity(severity),
            end_line=end_line,
            end_column=end_column,
        )
    except InvalidField as exc:
        raise AnalyzerDataError(str(exc)) from exc

    try:
        source: SourceText | None = SourceText.read(diagnostic.file_path)
    except MissingSourceFile:
        source = None

    renderer: DiagnosticRenderer = DiagnosticRenderer(catalog=config.suggestion_catalog())
    block: Block = renderer.render(diagnostic, source)
    console.print(colorize(block.rendered_text) if console.enable_color else block.rendered_text)
