# topmark:header:start
#
#   project      : TS Analyzer
#   file         : test_check_command.py
#   file_relpath : tests/cli/test_check_command.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""CLI `check` command (batch mode): report layout, formats and exit codes.

The Python interpreter running the tests stands in for ``tsc`` where a real
checker run is needed.
"""

from __future__ import annotations

import json
import sys
from typing import TYPE_CHECKING, Any

from tests.cli.conftest import (
    assert_DIAGNOSTICS_FOUND,
    assert_exit,
    assert_SUCCESS,
    assert_USAGE_ERROR,
    run_cli,
    run_cli_in,
)
from tests.conftest import mark_cli
from tsanalyzer.cli.exit_codes import ExitCode

if TYPE_CHECKING:
    from pathlib import Path

    from click.testing import Result

CAPTURED: str = (
    "demo.ts(3,10): error TS2322: Type 'string' is not assignable to type 'number'.\n"
    "  The expected type comes from property 'x'.\n"
    "Found 1 error.\n"
)


def _toml_str(value: str) -> str:
    # JSON string escapes are valid TOML basic-string escapes.
    return json.dumps(value)


def _fake_checker_config(tmp_path: Path, script: str) -> Path:
    config: Path = tmp_path / "checker.toml"
    config.write_text(
        "[checker]\n"
        f"command = [{_toml_str(sys.executable)}, \"-c\", {_toml_str(script)}]\n"
        "args = []\n",
        encoding="utf-8",
    )
    return config


@mark_cli
def test_check_stdin_renders_blocks_and_summary(tmp_path: Path) -> None:
    (tmp_path / "demo.ts").write_text(
        "// 1\n// 2\nconst a: number = 'hello';\n", encoding="utf-8"
    )

    result: Result = run_cli_in(tmp_path, ["--no-config", "check", "--stdin"], input_text=CAPTURED)

    assert_DIAGNOSTICS_FOUND(result)
    lines: list[str] = result.stdout.splitlines()
    assert lines[0] == "[TS2322] Error: Type 'string' is not assignable to type 'number'."
    assert "demo.ts:3:10" in lines[1]
    assert lines[2] == "3 │ const a: number = 'hello';"
    assert "  = note: The expected type comes from property 'x'." in lines
    assert lines[-2:] == ["", "Total errors: 1"]
    assert "Found 1 error." not in result.stdout


@mark_cli
def test_check_stdin_blocks_are_separated_by_blank_lines(tmp_path: Path) -> None:
    captured: str = (
        "a.ts(1,1): error TS2304: Cannot find name 'foo'.\n"
        "b.ts(2,3): error TS2304: Cannot find name 'bar'.\n"
    )

    result: Result = run_cli_in(tmp_path, ["--no-config", "check", "--stdin"], input_text=captured)

    assert_DIAGNOSTICS_FOUND(result)
    assert result.stdout == (
        "[TS2304] Error: Cannot find name 'foo'.\n"
        "  = help: Declare `foo` or import it into the current scope.\n"
        "\n"
        "[TS2304] Error: Cannot find name 'bar'.\n"
        "  = help: Declare `bar` or import it into the current scope.\n"
        "\n"
        "Total errors: 2\n"
    )


@mark_cli
def test_check_stdin_without_diagnostics() -> None:
    result: Result = run_cli(["check", "--stdin"], input_text="Version 5.4.5\n")

    assert_SUCCESS(result)
    assert result.stdout == "No errors were emitted.\nTotal errors: 0\n"


@mark_cli
def test_check_stdin_json() -> None:
    result: Result = run_cli(["check", "--stdin", "--format", "json"], input_text=CAPTURED)

    assert_DIAGNOSTICS_FOUND(result)
    records: list[dict[str, Any]] = json.loads(result.stdout)
    assert len(records) == 1
    assert records[0]["file"] == "demo.ts"
    assert (records[0]["line"], records[0]["column"]) == (3, 10)
    assert records[0]["code"] == "TS2322"


@mark_cli
def test_check_target_with_stdin_is_usage_error() -> None:
    result: Result = run_cli(["check", "--stdin", "a.ts"], input_text="")

    assert_USAGE_ERROR(result)


@mark_cli
def test_check_runs_configured_checker(tmp_path: Path) -> None:
    script: str = (
        "import sys; "
        "print(sys.argv[1] + \"(1,1): error TS1005: ';' expected.\"); "
        "sys.exit(2)"
    )
    config: Path = _fake_checker_config(tmp_path, script)

    result: Result = run_cli_in(
        tmp_path, ["--no-config", "--config", str(config), "check", "missing.ts"]
    )

    assert_DIAGNOSTICS_FOUND(result)
    assert result.stdout.startswith("[TS1005] Error: ';' expected.\n")
    assert result.stdout.endswith("Total errors: 1\n")


@mark_cli
def test_check_clean_project_exits_success(tmp_path: Path) -> None:
    config: Path = _fake_checker_config(tmp_path, "pass")

    result: Result = run_cli(["--config", str(config), "check"])

    assert_SUCCESS(result)
    assert result.stdout == "No errors were emitted.\nTotal errors: 0\n"


@mark_cli
def test_check_unavailable_checker(tmp_path: Path) -> None:
    config: Path = tmp_path / "checker.toml"
    config.write_text('[checker]\ncommand = ["definitely-missing-tsc-xyz"]\n', encoding="utf-8")

    result: Result = run_cli(["--config", str(config), "check"])

    assert_exit(result, ExitCode.UNAVAILABLE)
    assert "definitely-missing-tsc-xyz" in result.output
