# topmark:header:start
#
#   project      : TS Analyzer
#   file         : exit_codes.py
#   file_relpath : src/tsanalyzer/cli/exit_codes.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Standardized exit codes of the TS Analyzer CLI.

Error codes follow the BSD ``sysexits.h`` convention so that scripts can tell
a project with type errors apart from a broken setup.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes returned by ``ts-analyzer``.

    Attributes:
        SUCCESS (int): The run completed and reported no diagnostics.
        DIAGNOSTICS_FOUND (int): ``check`` printed at least one diagnostic block.
        USAGE_ERROR (int): Invalid command-line usage (EX_USAGE).
        DATA_ERROR (int): Invalid diagnostic input, e.g. a non-positive line (EX_DATAERR).
        UNAVAILABLE (int): The type checker could not be run (EX_UNAVAILABLE).
        CONFIG_ERROR (int): A configuration file is unreadable or invalid (EX_CONFIG).

    Usage:
        ```python
        import subprocess
        from tsanalyzer.cli.exit_codes import ExitCode

        result = subprocess.run(["ts-analyzer", "check", "src/index.ts"])
        if result.returncode == ExitCode.DIAGNOSTICS_FOUND:
            print("Type errors found.")
        ```
    """

    SUCCESS = 0
    DIAGNOSTICS_FOUND = 1
    USAGE_ERROR = 64
    DATA_ERROR = 65
    UNAVAILABLE = 69
    CONFIG_ERROR = 78
