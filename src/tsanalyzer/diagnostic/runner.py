# topmark:header:start
#
#   project      : TS Analyzer
#   file         : runner.py
#   file_relpath : src/tsanalyzer/diagnostic/runner.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Invoke the external type checker and capture its output.

The checker is run with a no-emit type-check argument over a project (no
target) or a single file. A non-zero exit status with diagnostic text present
is the normal "errors found" outcome; only a checker that cannot be started
or does not finish in time is reported, as `RunnerUnavailable`.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tsanalyzer.config.logging import get_logger
from tsanalyzer.constants import (
    DEFAULT_CHECKER_ARGS,
    DEFAULT_CHECKER_COMMAND,
    DEFAULT_CHECKER_TIMEOUT,
)
from tsanalyzer.diagnostic.source import parse_batch
from tsanalyzer.errors import RunnerUnavailable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tsanalyzer.config.logging import AnalyzerLogger
    from tsanalyzer.config.model import Config
    from tsanalyzer.diagnostic.model import Diagnostic

logger: AnalyzerLogger = get_logger(__name__)


@dataclass(frozen=True)
class CheckerRunner:
    """Run the type checker and return its combined output.

    Attributes:
        command (tuple[str, ...]): Executable and leading arguments (e.g. ``("npx", "tsc")``).
        args (tuple[str, ...]): Arguments appended after the target.
        timeout (float | None): Seconds before the run is abandoned.
    """

    command: tuple[str, ...] = DEFAULT_CHECKER_COMMAND
    args: tuple[str, ...] = DEFAULT_CHECKER_ARGS
    timeout: float | None = DEFAULT_CHECKER_TIMEOUT

    @classmethod
    def from_config(cls, config: Config) -> CheckerRunner:
        """Build a runner from the resolved configuration."""
        return cls(
            command=config.checker_command,
            args=config.checker_args,
            timeout=config.checker_timeout,
        )

    def argv(self, target: str | None = None) -> list[str]:
        """Return the full argument vector for checking ``target`` (or the project)."""
        argv: list[str] = list(self.command)
        if target:
            argv.append(target)
        argv.extend(self.args)
        return argv

    def run(self, target: str | None = None, *, cwd: str | None = None) -> str:
        """Run the checker and return ``stdout + stderr``.

        Raises:
            RunnerUnavailable: If the executable is missing, cannot be started, or times out.
        """
        argv: Sequence[str] = self.argv(target)
        logger.debug("Running type checker: %s", " ".join(argv))
        try:
            proc = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
                cwd=cwd,
                check=False,
            )
        except FileNotFoundError as exc:
            raise RunnerUnavailable(argv[0], "executable not found") from exc
        except subprocess.TimeoutExpired as exc:
            raise RunnerUnavailable(argv[0], f"timed out after {self.timeout}s") from exc
        except OSError as exc:
            raise RunnerUnavailable(argv[0], str(exc)) from exc

        output: str = f"{proc.stdout or ''}{proc.stderr or ''}"
        logger.debug("Type checker exited with %d (%d chars of output)", proc.returncode, len(output))
        return output

    def check(self, target: str | None = None, *, cwd: str | None = None) -> list[Diagnostic]:
        """Run the checker and parse its output (batch mode)."""
        return parse_batch(self.run(target, cwd=cwd))
