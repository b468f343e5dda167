# topmark:header:start
#
#   project      : TS Analyzer
#   file         : model.py
#   file_relpath : src/tsanalyzer/config/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration model and merge policy.

This module defines:
    - `Config`: an immutable runtime snapshot.
    - `MutableConfig`: a mutable builder used while loading and merging; it is
      frozen into `Config` and can be thawed back for edits.

Merge order (lowest to highest precedence):
    1) Runtime defaults (see `tsanalyzer.constants`)
    2) ``[tool.ts-analyzer]`` in the nearest ``pyproject.toml``
    3) ``ts-analyzer.toml`` in the same directory
    4) Extra files passed with ``--config`` (in the order given)
    5) CLI overrides

Problems found while loading (unknown keys, values of the wrong type) are
collected as `ConfigDiagnostic` items and logged; they never abort loading.
Only an unreadable or syntactically invalid file raises `ConfigError`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

from yachalk import chalk

from tsanalyzer.config.io import get_table_value, is_string_list, load_toml_dict
from tsanalyzer.config.keys import Toml
from tsanalyzer.config.logging import get_logger
from tsanalyzer.constants import (
    CONFIG_FILE_NAME,
    DEFAULT_CHECKER_ARGS,
    DEFAULT_CHECKER_COMMAND,
    DEFAULT_CHECKER_TIMEOUT,
    DEFAULT_SERVERS,
    PYPROJECT_FILE_NAME,
    PYPROJECT_TOOL_SECTION,
)
from tsanalyzer.rendering.suggestions import SuggestionCatalog, entries_from_mapping

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from tsanalyzer.config.io import TomlTable
    from tsanalyzer.config.logging import AnalyzerLogger

# ArgsLike: generic mapping accepted by `MutableConfig.apply_cli_args`.
ArgsLike = Mapping[str, Any]

logger: AnalyzerLogger = get_logger(__name__)

CLI_OVERRIDE_STR: str = "<CLI overrides>"


class ColorMode(str, Enum):
    """User intent for colorized terminal output.

    Attributes:
        AUTO: Enable color only when appropriate (typically when stdout is a TTY).
        ALWAYS: Force-enable color regardless of TTY status.
        NEVER: Disable color entirely.
    """

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


class ConfigLevel(Enum):
    """Severity of a problem found while loading configuration."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def color(self) -> Callable[[str], str]:
        """Return the `yachalk` color function associated with this level."""
        return cast(
            "Callable[[str], str]",
            {
                ConfigLevel.INFO: chalk.blue,
                ConfigLevel.WARNING: chalk.yellow,
                ConfigLevel.ERROR: chalk.red_bright,
            }[self],
        )


@dataclass(frozen=True)
class ConfigDiagnostic:
    """A problem found while loading or merging configuration."""

    level: ConfigLevel
    message: str


# ------------------ Immutable runtime config ------------------


@dataclass(frozen=True, slots=True)
class Config:
    """Immutable runtime configuration.

    Attributes:
        checker_command (tuple[str, ...]): Executable and leading arguments of the type checker.
        checker_args (tuple[str, ...]): Arguments appended after the check target.
        checker_timeout (float | None): Seconds before a checker run is abandoned;
            None disables the timeout.
        servers (tuple[str, ...]): Language servers whose diagnostics are enhanced.
        color_mode (ColorMode): Requested terminal color mode.
        suggestions (Mapping[str, str]): Project suggestion overrides (``code -> hint``).
        config_files (tuple[str, ...]): Sources that contributed to this config.
        diagnostics (tuple[ConfigDiagnostic, ...]): Problems found while loading.
    """

    checker_command: tuple[str, ...]
    checker_args: tuple[str, ...]
    checker_timeout: float | None
    servers: tuple[str, ...]
    color_mode: ColorMode
    suggestions: Mapping[str, str]
    config_files: tuple[str, ...]
    diagnostics: tuple[ConfigDiagnostic, ...]

    def suggestion_catalog(self) -> SuggestionCatalog:
        """Return the bundled catalog extended with the project's suggestions."""
        base: SuggestionCatalog = SuggestionCatalog.default()
        if not self.suggestions:
            return base
        return base.extended(entries_from_mapping(self.suggestions, origin="[suggestions]"))

    def thaw(self) -> MutableConfig:
        """Return a mutable copy of this frozen config."""
        return MutableConfig(
            checker_command=list(self.checker_command),
            checker_args=list(self.checker_args),
            checker_timeout=self.checker_timeout if self.checker_timeout is not None else 0.0,
            servers=list(self.servers),
            color_mode=self.color_mode,
            suggestions=dict(self.suggestions),
            config_files=list(self.config_files),
            diagnostics=list(self.diagnostics),
        )


# -------------------------- Mutable builder --------------------------


@dataclass
class MutableConfig:
    """Mutable configuration used while loading and merging.

    ``None`` means "not set by this layer" so that merging keeps the value of
    lower layers. A ``checker_timeout`` of ``0`` (or less) disables the timeout.
    """

    checker_command: list[str] | None = None
    checker_args: list[str] | None = None
    checker_timeout: float | None = None
    servers: list[str] | None = None
    color_mode: ColorMode | None = None
    suggestions: dict[str, str] = field(default_factory=lambda: {})
    config_files: list[str] = field(default_factory=lambda: [])
    diagnostics: list[ConfigDiagnostic] = field(default_factory=lambda: [])

    def add_diagnostic(self, level: ConfigLevel, message: str) -> None:
        """Record and log a configuration problem."""
        self.diagnostics.append(ConfigDiagnostic(level, message))
        if level is ConfigLevel.ERROR:
            logger.error("%s", message)
        elif level is ConfigLevel.WARNING:
            logger.warning("%s", message)
        else:
            logger.info("%s", message)

    # ---------------------------- Build/freeze ----------------------------

    def freeze(self) -> Config:
        """Freeze this builder, filling unset values with runtime defaults."""
        timeout: float = (
            self.checker_timeout if self.checker_timeout is not None else DEFAULT_CHECKER_TIMEOUT
        )
        return Config(
            checker_command=tuple(self.checker_command or DEFAULT_CHECKER_COMMAND),
            checker_args=tuple(
                self.checker_args if self.checker_args is not None else DEFAULT_CHECKER_ARGS
            ),
            checker_timeout=timeout if timeout > 0 else None,
            servers=tuple(self.servers if self.servers is not None else DEFAULT_SERVERS),
            color_mode=self.color_mode or ColorMode.AUTO,
            suggestions=dict(self.suggestions),
            config_files=tuple(self.config_files),
            diagnostics=tuple(self.diagnostics),
        )

    # --------------------------- Loaders/parsers --------------------------

    @classmethod
    def from_toml_dict(cls, data: TomlTable, *, origin: str) -> MutableConfig:
        """Build a draft from a parsed TOML table.

        Args:
            data (TomlTable): The ``ts-analyzer`` schema table.
            origin (str): Name of the source, used in diagnostics.

        Returns:
            MutableConfig: The draft; invalid values are reported and left unset.
        """
        draft: MutableConfig = cls(config_files=[origin])

        for section in data:
            if section != Toml.SECTION_SUGGESTIONS and section not in Toml.SCHEMA:
                draft.add_diagnostic(ConfigLevel.WARNING, f"{origin}: unknown section [{section}]")
        for section, known in Toml.SCHEMA.items():
            for key in get_table_value(data, section):
                if key not in known:
                    draft.add_diagnostic(
                        ConfigLevel.WARNING, f"{origin}: unknown key '{key}' in [{section}]"
                    )

        checker: TomlTable = get_table_value(data, Toml.SECTION_CHECKER)
        draft.checker_command = draft._string_list(checker, Toml.KEY_COMMAND, origin)
        if draft.checker_command is not None and not draft.checker_command:
            draft.add_diagnostic(ConfigLevel.WARNING, f"{origin}: [checker] command is empty")
            draft.checker_command = None
        draft.checker_args = draft._string_list(checker, Toml.KEY_ARGS, origin)
        timeout: Any = checker.get(Toml.KEY_TIMEOUT)
        if timeout is not None:
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
                draft.add_diagnostic(
                    ConfigLevel.WARNING, f"{origin}: [checker] timeout must be a number of seconds"
                )
            else:
                draft.checker_timeout = float(timeout)

        editor: TomlTable = get_table_value(data, Toml.SECTION_EDITOR)
        draft.servers = draft._string_list(editor, Toml.KEY_SERVERS, origin)

        render: TomlTable = get_table_value(data, Toml.SECTION_RENDER)
        color: Any = render.get(Toml.KEY_COLOR)
        if color is not None:
            try:
                draft.color_mode = ColorMode(color)
            except ValueError:
                allowed: str = ", ".join(m.value for m in ColorMode)
                draft.add_diagnostic(
                    ConfigLevel.WARNING,
                    f"{origin}: invalid [render] color {color!r} (allowed values: {allowed})",
                )

        for code, hint in get_table_value(data, Toml.SECTION_SUGGESTIONS).items():
            if isinstance(hint, str):
                draft.suggestions[code] = hint
            else:
                draft.add_diagnostic(
                    ConfigLevel.WARNING, f"{origin}: suggestion for '{code}' must be a string"
                )
        return draft

    def _string_list(self, table: TomlTable, key: str, origin: str) -> list[str] | None:
        value: Any = table.get(key)
        if value is None:
            return None
        if not is_string_list(value):
            self.add_diagnostic(ConfigLevel.WARNING, f"{origin}: '{key}' must be a list of strings")
            return None
        return list(cast("list[str]", value))

    @classmethod
    def from_toml_file(cls, path: Path) -> MutableConfig | None:
        """Load configuration from one TOML file.

        For ``pyproject.toml`` only the ``[tool.ts-analyzer]`` table is read.

        Returns:
            MutableConfig | None: The draft, or None for a ``pyproject.toml``
            without a ``[tool.ts-analyzer]`` table.

        Raises:
            ConfigError: If the file cannot be read or is not valid TOML.
        """
        data: TomlTable = load_toml_dict(path)
        if path.name == PYPROJECT_FILE_NAME:
            tool: TomlTable = get_table_value(get_table_value(data, "tool"), PYPROJECT_TOOL_SECTION)
            if not tool:
                logger.debug("No [tool.%s] table in %s", PYPROJECT_TOOL_SECTION, path)
                return None
            data = tool
        return cls.from_toml_dict(data, origin=str(path))

    @classmethod
    def discover_config_files(cls, start: Path) -> list[Path]:
        """Return the config files of the nearest directory at or above ``start``.

        Within that directory ``pyproject.toml`` (when it has a
        ``[tool.ts-analyzer]`` table) comes first and ``ts-analyzer.toml``
        second, so the latter wins on merge.
        """
        anchor: Path = start.resolve()
        if anchor.is_file():
            anchor = anchor.parent
        for directory in (anchor, *anchor.parents):
            found: list[Path] = []
            pyproject: Path = directory / PYPROJECT_FILE_NAME
            if pyproject.is_file() and f"tool.{PYPROJECT_TOOL_SECTION}" in _read_quietly(pyproject):
                found.append(pyproject)
            tool_file: Path = directory / CONFIG_FILE_NAME
            if tool_file.is_file():
                found.append(tool_file)
            if found:
                logger.debug("Discovered config files: %s", ", ".join(str(p) for p in found))
                return found
        return []

    @classmethod
    def load_merged(
        cls,
        *,
        anchor: Path | None = None,
        extra_config_files: Iterable[Path] = (),
        no_config: bool = False,
    ) -> MutableConfig:
        """Discover and merge configuration layers into a draft.

        Args:
            anchor (Path | None): Discovery start (defaults to the current directory).
            extra_config_files (Iterable[Path]): Files merged after discovery.
            no_config (bool): Skip discovery (extra files are still merged).

        Raises:
            ConfigError: If a config file is unreadable or not valid TOML.
        """
        draft: MutableConfig = cls()
        sources: list[Path] = [] if no_config else cls.discover_config_files(anchor or Path.cwd())
        sources.extend(Path(p) for p in extra_config_files)
        for path in sources:
            layer: MutableConfig | None = cls.from_toml_file(path)
            if layer is not None:
                draft = draft.merge_with(layer)
        return draft

    # ------------------------------- Merging -------------------------------

    def merge_with(self, other: MutableConfig) -> MutableConfig:
        """Return a new draft where values set in ``other`` override this draft."""
        return MutableConfig(
            checker_command=(
                other.checker_command if other.checker_command is not None else self.checker_command
            ),
            checker_args=other.checker_args if other.checker_args is not None else self.checker_args,
            checker_timeout=(
                other.checker_timeout if other.checker_timeout is not None else self.checker_timeout
            ),
            servers=other.servers if other.servers is not None else self.servers,
            color_mode=other.color_mode if other.color_mode is not None else self.color_mode,
            suggestions={**self.suggestions, **other.suggestions},
            config_files=self.config_files + other.config_files,
            diagnostics=self.diagnostics + other.diagnostics,
        )

    def apply_cli_args(self, args: ArgsLike) -> MutableConfig:
        """Apply CLI overrides (``color_mode``, ``checker_command``, ``checker_timeout``)."""
        logger.debug("Applying CLI arguments to MutableConfig: %s", args)
        self.config_files.append(CLI_OVERRIDE_STR)
        if args.get("color_mode") is not None:
            self.color_mode = ColorMode(args["color_mode"])
        if args.get("checker_command"):
            self.checker_command = list(args["checker_command"])
        if args.get("checker_timeout") is not None:
            self.checker_timeout = float(args["checker_timeout"])
        return self


def _read_quietly(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Cannot read %s: %s", path, exc)
        return ""
