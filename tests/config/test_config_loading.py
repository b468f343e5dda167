# topmark:header:start
#
#   project      : TS Analyzer
#   file         : test_config_loading.py
#   file_relpath : tests/config/test_config_loading.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for configuration loading, discovery and merging (`tsanalyzer.config.model`).

Configuration is read with tomlkit from ``ts-analyzer.toml`` and from the
``[tool.ts-analyzer]`` table of ``pyproject.toml``. Unknown keys and badly
typed values are reported as diagnostics; only unreadable or invalid TOML
raises `ConfigError`.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from tsanalyzer.config.io import load_toml_dict, parse_toml_text
from tsanalyzer.config.model import CLI_OVERRIDE_STR, ColorMode, ConfigLevel, MutableConfig
from tsanalyzer.constants import DEFAULT_CHECKER_COMMAND, DEFAULT_CHECKER_TIMEOUT, DEFAULT_SERVERS
from tsanalyzer.errors import ConfigError

if TYPE_CHECKING:
    from tsanalyzer.config.model import Config

FULL_CONFIG: str = """
[checker]
command = ["npx", "tsc"]
args = ["-p", "tsconfig.json"]
timeout = 30

[editor]
servers = ["vtsls"]

[render]
color = "never"

[suggestions]
TS2322 = "Project hint for `{0}`."
"""


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults() -> None:
    config: Config = MutableConfig().freeze()

    assert config.checker_command == DEFAULT_CHECKER_COMMAND
    assert config.checker_timeout == DEFAULT_CHECKER_TIMEOUT
    assert config.servers == DEFAULT_SERVERS
    assert config.color_mode is ColorMode.AUTO
    assert config.diagnostics == ()


def test_from_toml_dict_reads_every_section() -> None:
    draft: MutableConfig = MutableConfig.from_toml_dict(
        parse_toml_text(FULL_CONFIG, origin="inline"), origin="inline"
    )
    config: Config = draft.freeze()

    assert config.checker_command == ("npx", "tsc")
    assert config.checker_args == ("-p", "tsconfig.json")
    assert config.checker_timeout == 30.0
    assert config.servers == ("vtsls",)
    assert config.color_mode is ColorMode.NEVER
    assert dict(config.suggestions) == {"TS2322": "Project hint for `{0}`."}
    assert config.config_files == ("inline",)
    assert config.diagnostics == ()


def test_unknown_keys_are_warnings() -> None:
    text: str = '[checker]\ncommand = ["tsc"]\nflavour = 1\n\n[colour]\nx = 1\n'

    draft: MutableConfig = MutableConfig.from_toml_dict(
        parse_toml_text(text, origin="t.toml"), origin="t.toml"
    )

    messages: list[str] = [d.message for d in draft.diagnostics]
    assert all(d.level is ConfigLevel.WARNING for d in draft.diagnostics)
    assert any("unknown section [colour]" in m for m in messages)
    assert any("unknown key 'flavour' in [checker]" in m for m in messages)
    assert draft.checker_command == ["tsc"]


def test_bad_types_are_reported_and_ignored() -> None:
    text: str = (
        '[checker]\ncommand = "tsc"\ntimeout = "slow"\n'
        "[editor]\nservers = [1, 2]\n"
        '[render]\ncolor = "rainbow"\n'
        "[suggestions]\nTS2322 = 5\n"
    )

    draft: MutableConfig = MutableConfig.from_toml_dict(
        parse_toml_text(text, origin="t.toml"), origin="t.toml"
    )
    config: Config = draft.freeze()

    assert len(config.diagnostics) == 5
    assert config.checker_command == DEFAULT_CHECKER_COMMAND
    assert config.checker_timeout == DEFAULT_CHECKER_TIMEOUT
    assert config.servers == DEFAULT_SERVERS
    assert config.color_mode is ColorMode.AUTO
    assert dict(config.suggestions) == {}


def test_empty_command_is_rejected() -> None:
    draft: MutableConfig = MutableConfig.from_toml_dict(
        {"checker": {"command": []}}, origin="t.toml"
    )

    assert draft.checker_command is None
    assert len(draft.diagnostics) == 1


def test_zero_timeout_disables_timeout() -> None:
    draft: MutableConfig = MutableConfig.from_toml_dict({"checker": {"timeout": 0}}, origin="t")

    assert draft.freeze().checker_timeout is None


def test_invalid_toml_raises(tmp_path: Path) -> None:
    path: Path = _write(tmp_path / "ts-analyzer.toml", "[checker\ncommand = ")

    with pytest.raises(ConfigError) as excinfo:
        MutableConfig.from_toml_file(path)

    assert excinfo.value.path == str(path)


def test_unreadable_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_toml_dict(tmp_path / "missing.toml")


def test_pyproject_tool_section(tmp_path: Path) -> None:
    path: Path = _write(
        tmp_path / "pyproject.toml",
        '[project]\nname = "x"\n\n[tool.ts-analyzer.editor]\nservers = ["ts_ls"]\n',
    )

    draft: MutableConfig | None = MutableConfig.from_toml_file(path)

    assert draft is not None
    assert draft.servers == ["ts_ls"]
    assert draft.diagnostics == []


def test_pyproject_without_tool_section(tmp_path: Path) -> None:
    path: Path = _write(tmp_path / "pyproject.toml", '[project]\nname = "x"\n')

    assert MutableConfig.from_toml_file(path) is None


def test_discovery_walks_up_to_nearest_config(tmp_path: Path) -> None:
    _write(tmp_path / "pyproject.toml", '[tool.ts-analyzer.render]\ncolor = "always"\n')
    _write(tmp_path / "ts-analyzer.toml", '[render]\ncolor = "never"\n')
    nested: Path = tmp_path / "src" / "deep"
    nested.mkdir(parents=True)

    found: list[Path] = MutableConfig.discover_config_files(nested)

    assert [p.name for p in found] == ["pyproject.toml", "ts-analyzer.toml"]


def test_discovery_ignores_unrelated_pyproject(tmp_path: Path) -> None:
    _write(tmp_path / "pyproject.toml", '[tool.ts-analyzer.render]\ncolor = "always"\n')
    project: Path = tmp_path / "project"
    project.mkdir()
    _write(project / "pyproject.toml", '[project]\nname = "other"\n')

    found: list[Path] = MutableConfig.discover_config_files(project)

    assert found == [(tmp_path / "pyproject.toml").resolve()]


def test_load_merged_precedence(tmp_path: Path) -> None:
    """pyproject < ts-analyzer.toml < --config files < CLI overrides."""
    _write(
        tmp_path / "pyproject.toml",
        '[tool.ts-analyzer.checker]\ncommand = ["yarn", "tsc"]\ntimeout = 10\n'
        '[tool.ts-analyzer.render]\ncolor = "always"\n',
    )
    _write(tmp_path / "ts-analyzer.toml", '[render]\ncolor = "never"\n[checker]\ntimeout = 20\n')
    extra: Path = _write(tmp_path / "extra.toml", "[checker]\ntimeout = 40\n")

    draft: MutableConfig = MutableConfig.load_merged(anchor=tmp_path, extra_config_files=[extra])

    assert draft.checker_command == ["yarn", "tsc"]
    assert draft.checker_timeout == 40.0
    assert draft.color_mode is ColorMode.NEVER
    assert len(draft.config_files) == 3

    config: Config = draft.apply_cli_args({"color_mode": ColorMode.ALWAYS}).freeze()

    assert config.color_mode is ColorMode.ALWAYS
    assert config.config_files[-1] == CLI_OVERRIDE_STR


def test_load_merged_no_config_still_reads_extra_files(tmp_path: Path) -> None:
    _write(tmp_path / "ts-analyzer.toml", '[render]\ncolor = "never"\n')
    extra: Path = _write(tmp_path / "extra.toml", '[editor]\nservers = ["vtsls"]\n')

    draft: MutableConfig = MutableConfig.load_merged(
        anchor=tmp_path, extra_config_files=[extra], no_config=True
    )

    assert draft.color_mode is None
    assert draft.servers == ["vtsls"]


def test_merge_keeps_lower_layers_and_combines_suggestions() -> None:
    base = MutableConfig(servers=["ts_ls"], suggestions={"TS1": "a", "TS2": "b"})
    top = MutableConfig(checker_timeout=5.0, suggestions={"TS2": "c"})

    merged: MutableConfig = base.merge_with(top)

    assert merged.servers == ["ts_ls"]
    assert merged.checker_timeout == 5.0
    assert merged.suggestions == {"TS1": "a", "TS2": "c"}


def test_freeze_thaw_roundtrip() -> None:
    config: Config = MutableConfig(servers=["vtsls"], checker_timeout=0).freeze()

    thawed: MutableConfig = config.thaw()
    thawed.servers = ["ts_ls"]

    assert thawed.freeze().servers == ("ts_ls",)
    assert thawed.freeze().checker_timeout is None
    assert config.servers == ("vtsls",)


def test_project_suggestions_extend_bundled_catalog() -> None:
    config: Config = MutableConfig(suggestions={"2322": "Project hint for `{0}`."}).freeze()

    catalog = config.suggestion_catalog()

    assert catalog.lookup("TS2322", "Type 'string' is not assignable") == "Project hint for `string`."
    assert catalog.lookup("TS2304", "Cannot find name 'y'.") is not None
