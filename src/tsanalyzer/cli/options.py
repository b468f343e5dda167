# topmark:header:start
#
#   project      : TS Analyzer
#   file         : options.py
#   file_relpath : src/tsanalyzer/cli/options.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Common CLI options (verbosity, color, config) and their resolution logic."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable
from typing import ParamSpec, TypeVar

import click

from tsanalyzer.cli.errors import AnalyzerUsageError
from tsanalyzer.config.logging import TRACE_LEVEL
from tsanalyzer.config.model import ColorMode

P = ParamSpec("P")
R = TypeVar("R")


def resolve_verbosity(verbose_count: int, quiet_count: int) -> int:
    """Resolve the program-output level from the ``-v`` / ``-q`` counts.

    Returns:
        int: A `logging` level: TRACE (``-vvv``), DEBUG (``-vv``), INFO (``-v``),
        ERROR (``-q``), WARNING otherwise.

    Raises:
        AnalyzerUsageError: If both verbose and quiet flags are used.
    """
    if verbose_count > 0 and quiet_count > 0:
        raise AnalyzerUsageError("The '--verbose' and '--quiet' options are mutually exclusive.")

    if verbose_count >= 3:
        return TRACE_LEVEL
    if verbose_count == 2:
        return logging.DEBUG
    if verbose_count == 1:
        return logging.INFO
    if quiet_count >= 1:
        return logging.ERROR
    return logging.WARNING


def resolve_color_mode(
    *,
    color_mode_override: ColorMode | None,
    stdout_isatty: bool | None = None,
) -> bool:
    """Determine whether color output should be enabled.

    Decision precedence:
        1. **Override**: ``ALWAYS`` gives True, ``NEVER`` gives False.
        2. **Environment**: ``FORCE_COLOR`` (set and not ``"0"``) gives True;
           ``NO_COLOR`` (set to any value) gives False.
        3. **Auto**: whether stdout is a TTY.

    Args:
        color_mode_override (ColorMode | None): From ``--color``/``--no-color``
            or the ``[render] color`` config key; None or ``AUTO`` falls through.
        stdout_isatty (bool | None): Override for TTY detection.
    """
    if color_mode_override == ColorMode.ALWAYS:
        return True
    if color_mode_override == ColorMode.NEVER:
        return False

    force_color: str | None = os.getenv("FORCE_COLOR")
    if force_color and force_color != "0":
        return True
    if os.getenv("NO_COLOR") is not None:
        return False

    if stdout_isatty is None:
        try:
            stdout_isatty = sys.stdout.isatty()
        except (OSError, ValueError):
            stdout_isatty = False
    return bool(stdout_isatty)


def common_verbose_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add the counting ``-v/--verbose`` and ``-q/--quiet`` options."""
    f = click.option(
        "-v",
        "--verbose",
        count=True,
        help="Increase verbosity. Specify up to three times for more detail.",
    )(f)
    f = click.option(
        "-q",
        "--quiet",
        count=True,
        help="Suppress warnings on stderr.",
    )(f)
    return f


def common_color_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add ``--color`` (auto, always, never) and ``--no-color``."""
    f = click.option(
        "--color",
        "color_mode",
        type=click.Choice([m.value for m in ColorMode]),
        default=None,
        help="Color output: auto (default), always, or never.",
    )(f)
    f = click.option(
        "--no-color",
        "no_color",
        is_flag=True,
        help="Disable color output (equivalent to --color=never).",
    )(f)
    return f


def common_config_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add ``--config PATH`` (repeatable) and ``--no-config``."""
    f = click.option(
        "--config",
        "config_paths",
        type=click.Path(dir_okay=False, path_type=str),
        multiple=True,
        help="Merge this TOML config file after discovered ones (repeatable).",
    )(f)
    f = click.option(
        "--no-config",
        "no_config",
        is_flag=True,
        help="Ignore pyproject.toml / ts-analyzer.toml discovery.",
    )(f)
    return f
