# topmark:header:start
#
#   project      : TS Analyzer
#   file         : main.py
#   file_relpath : src/tsanalyzer/cli/main.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Click entry point of the ``ts-analyzer`` CLI.

Group-level options (verbosity, color, config) are resolved once and placed
into ``ctx.obj``:

    - ``verbosity_level``: program-output level (a `logging` level).
    - ``config``: the frozen `Config`.
    - ``console``: the `ClickConsole` used for all program output.

Internal logging is configured from the ``TSANALYZER_LOG_LEVEL`` environment
variable only.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click

from tsanalyzer.cli.commands.check import check_command
from tsanalyzer.cli.commands.format import format_command
from tsanalyzer.cli.commands.version import version_command
from tsanalyzer.cli.console import ClickConsole
from tsanalyzer.cli.errors import AnalyzerConfigError
from tsanalyzer.cli.options import (
    common_color_options,
    common_config_options,
    common_verbose_options,
    resolve_color_mode,
    resolve_verbosity,
)
from tsanalyzer.config.logging import get_logger, resolve_env_log_level, setup_logging
from tsanalyzer.config.model import ColorMode, MutableConfig
from tsanalyzer.errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tsanalyzer.config.logging import AnalyzerLogger
    from tsanalyzer.config.model import Config

logger: AnalyzerLogger = get_logger(__name__)


def init_common_state(
    ctx: click.Context,
    *,
    verbose: int,
    quiet: int,
    color_mode: str | None,
    no_color: bool,
    config_paths: Sequence[str],
    no_config: bool,
) -> None:
    """Initialize shared state (verbosity, config, console) on the Click context.

    Raises:
        AnalyzerUsageError: If ``-v`` and ``-q`` are combined.
        AnalyzerConfigError: If a config file is unreadable or not valid TOML.
    """
    ctx.obj = ctx.obj or {}

    verbosity_level: int = resolve_verbosity(verbose, quiet)
    ctx.obj["verbosity_level"] = verbosity_level

    setup_logging(level=resolve_env_log_level())

    cli_color: ColorMode | None = ColorMode.NEVER if no_color else None
    if cli_color is None and color_mode is not None:
        cli_color = ColorMode(color_mode)

    # Errors raised while loading config are shown through this console.
    console: ClickConsole = ClickConsole(enable_color=cli_color != ColorMode.NEVER)
    ctx.obj["console"] = console

    try:
        draft: MutableConfig = MutableConfig.load_merged(
            extra_config_files=[Path(p) for p in config_paths],
            no_config=no_config,
        )
    except ConfigError as exc:
        raise AnalyzerConfigError(str(exc)) from exc
    config: Config = draft.apply_cli_args({"color_mode": cli_color}).freeze()
    ctx.obj["config"] = config

    enable_color: bool = resolve_color_mode(color_mode_override=config.color_mode)
    console.enable_color = enable_color
    ctx.color = enable_color

    if verbosity_level <= logging.WARNING:
        for diag in config.diagnostics:
            console.warn(f"[{diag.level.value}] {diag.message}")
    if verbosity_level <= logging.DEBUG:
        for source in config.config_files:
            console.warn(f"Config source: {source}")


@click.group(
    cls=click.Group,
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
    help="Readable, annotated TypeScript type-checker diagnostics.",
)
@common_verbose_options
@common_color_options
@common_config_options
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: int,
    quiet: int,
    color_mode: str | None,
    no_color: bool,
    config_paths: tuple[str, ...],
    no_config: bool,
) -> None:
    """Entry point for the TS Analyzer CLI."""
    init_common_state(
        ctx,
        verbose=verbose,
        quiet=quiet,
        color_mode=color_mode,
        no_color=no_color,
        config_paths=config_paths,
        no_config=no_config,
    )
    console: ClickConsole = ctx.obj["console"]

    if ctx.invoked_subcommand is None:
        console.print("Hint: use 'ts-analyzer check [TARGET]' to type-check and annotate.")
        console.print()
        console.print(ctx.get_help())


cli.add_command(version_command)

cli.add_command(check_command)

cli.add_command(format_command)

if __name__ == "__main__":
    cli()
