# topmark:header:start
#
#   project      : TS Analyzer
#   file         : check.py
#   file_relpath : src/tsanalyzer/cli/commands/check.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""TS Analyzer `check` command (batch mode).

Runs the configured type checker over a project or a single file, then prints
one annotated block per diagnostic, separated by blank lines, followed by the
``Total errors: N`` summary.

Examples:
  Check the project in the current directory:

    $ ts-analyzer check

  Check one file:

    $ ts-analyzer check src/index.ts

  Annotate output captured earlier:

    $ npx tsc --noEmit --pretty false | ts-analyzer check --stdin

  Emit the parsed diagnostics as JSON:

    $ ts-analyzer check --format json src/index.ts
"""

from __future__ import annotations

import json
from enum import Enum
from typing import TYPE_CHECKING

import click

from tsanalyzer.cli.errors import AnalyzerUnavailableError, AnalyzerUsageError
from tsanalyzer.cli.exit_codes import ExitCode
from tsanalyzer.config.logging import get_logger
from tsanalyzer.diagnostic.runner import CheckerRunner
from tsanalyzer.diagnostic.source import parse_batch
from tsanalyzer.errors import RunnerUnavailable
from tsanalyzer.rendering.renderer import DiagnosticRenderer, render_batch_report
from tsanalyzer.rendering.styling import colorize

if TYPE_CHECKING:
    from tsanalyzer.cli.console import ClickConsole
    from tsanalyzer.config.logging import AnalyzerLogger
    from tsanalyzer.config.model import Config
    from tsanalyzer.diagnostic.model import Diagnostic
    from tsanalyzer.rendering.renderer import Block

logger: AnalyzerLogger = get_logger(__name__)


class OutputFormat(str, Enum):
    """Output formats of the `check` command."""

    TEXT = "text"
    JSON = "json"


@click.command(
    name="check",
    help="Type-check TARGET (or the project) and print annotated diagnostics.",
)
@click.argument("target", required=False, type=click.Path(path_type=str))
@click.option(
    "--stdin",
    "from_stdin",
    is_flag=True,
    help="Read captured type-checker output from STDIN instead of running the checker.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat]),
    default=OutputFormat.TEXT.value,
    help="Output format: annotated text (default) or JSON records.",
)
@click.pass_context
def check_command(
    ctx: click.Context,
    target: str | None,
    from_stdin: bool,
    output_format: str,
) -> None:
    """Run batch mode and print the report.

    Exits with `ExitCode.DIAGNOSTICS_FOUND` when at least one diagnostic was reported.

    Raises:
        AnalyzerUsageError: If TARGET is combined with ``--stdin``.
        AnalyzerUnavailableError: If the type checker cannot be run.
    """
    console: ClickConsole = ctx.obj["console"]
    config: Config = ctx.obj["config"]

    if from_stdin and target:
        raise AnalyzerUsageError("TARGET cannot be combined with '--stdin'.")

    if from_stdin:
        diagnostics: list[Diagnostic] = parse_batch(click.get_text_stream("stdin").read())
    else:
        runner: CheckerRunner = CheckerRunner.from_config(config)
        try:
            diagnostics = runner.check(target)
        except RunnerUnavailable as exc:
            raise AnalyzerUnavailableError(str(exc)) from exc
    logger.info("%d diagnostic(s) found", len(diagnostics))

    if OutputFormat(output_format) is OutputFormat.JSON:
        console.print(json.dumps([d.to_dict() for d in diagnostics], indent=2))
    else:
        renderer: DiagnosticRenderer = DiagnosticRenderer(catalog=config.suggestion_catalog())
        blocks: list[Block] = renderer.render_all(diagnostics)
        report: str = render_batch_report(blocks)
        console.print(colorize(report) if console.enable_color else report)

    if diagnostics:
        ctx.exit(ExitCode.DIAGNOSTICS_FOUND)
