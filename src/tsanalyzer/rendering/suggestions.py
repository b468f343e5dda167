# topmark:header:start
#
#   project      : TS Analyzer
#   file         : suggestions.py
#   file_relpath : src/tsanalyzer/rendering/suggestions.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Suggestion catalog: map a diagnostic code to at most one hint.

The catalog is an ordered table of `SuggestionEntry` items. Each entry holds a
regular expression that must match the *whole* normalized code and a
``str.format`` template. Positional template fields (``{0}``, ``{1}``, ...) are
filled with the single-quoted values of the checker message, in order of
appearance:

    ```text
    message : Type 'string' is not assignable to type 'number'.
    values  : ("string", "number")
    template: Type `{0}` is not assignable to `{1}`.
    hint    : Type `string` is not assignable to `number`.
    ```

Fields the message cannot fill render as ``…``; a template that cannot be
formatted at all is returned verbatim. Lookup never raises.

The bundled table lives in ``tsanalyzer/data/suggestions.toml`` and is parsed
with `tomlkit`. Projects extend it through the ``[suggestions]`` configuration
table (``"TS2322" = "hint"``); extra entries take precedence.
"""

from __future__ import annotations

import re
import string
from dataclasses import dataclass
from functools import lru_cache
from importlib.resources import files
from typing import TYPE_CHECKING, Any, Final

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from tsanalyzer.config.logging import get_logger
from tsanalyzer.constants import DATA_PACKAGE, SUGGESTIONS_TOML_NAME
from tsanalyzer.diagnostic.model import normalize_code
from tsanalyzer.errors import ConfigError, InvalidField

if TYPE_CHECKING:
    import sys
    from collections.abc import Iterable, Iterator, Mapping, Sequence

    if sys.version_info < (3, 14):
        from importlib.abc import Traversable
    else:
        from importlib.resources.abc import Traversable

    from tsanalyzer.config.logging import AnalyzerLogger

logger: AnalyzerLogger = get_logger(__name__)

QUOTED_VALUE_RE: Final[re.Pattern[str]] = re.compile(r"'([^'\n]*)'")
UNFILLED_PLACEHOLDER: Final[str] = "…"

SUGGESTION_TABLE_KEY: Final[str] = "suggestion"
KEY_CODE: Final[str] = "code"
KEY_HINT: Final[str] = "hint"


class _HintFormatter(string.Formatter):
    """`string.Formatter` that renders unknown fields as a placeholder."""

    def get_value(
        self,
        key: int | str,
        args: Sequence[Any],
        kwargs: Mapping[str, Any],
    ) -> Any:
        if isinstance(key, int):
            return args[key] if key < len(args) else UNFILLED_PLACEHOLDER
        return kwargs.get(key, UNFILLED_PLACEHOLDER)


_FORMATTER: Final[_HintFormatter] = _HintFormatter()


def quoted_values(message: str) -> tuple[str, ...]:
    """Return the single-quoted values of ``message`` in order of appearance."""
    return tuple(QUOTED_VALUE_RE.findall(message))


def fill_template(template: str, values: Sequence[str]) -> str:
    """Fill ``template`` with ``values``; never raises.

    Args:
        template (str): A ``str.format`` template with positional fields.
        values (Sequence[str]): Values for the positional fields.

    Returns:
        str: The formatted hint, or ``template`` unchanged when it is malformed.
    """
    try:
        return _FORMATTER.format(template, *values)
    except (ValueError, AttributeError, IndexError, KeyError, TypeError) as exc:
        logger.debug("Cannot format hint template %r: %s", template, exc)
        return template


@dataclass(frozen=True, slots=True)
class SuggestionEntry:
    """One row of the suggestion catalog.

    Attributes:
        code_pattern (str): Regular expression matched against the whole normalized code.
        hint_template (str): ``str.format`` template for the hint.
    """

    code_pattern: str
    hint_template: str

    def __post_init__(self) -> None:
        if not self.hint_template.strip():
            raise InvalidField(KEY_HINT, self.hint_template, "must be a non-empty string")
        try:
            re.compile(self.code_pattern)
        except re.error as exc:
            raise InvalidField(KEY_CODE, self.code_pattern, f"invalid pattern: {exc}") from exc

    def matches(self, code: str) -> bool:
        """Return True when ``code`` fully matches this entry's pattern."""
        return re.fullmatch(self.code_pattern, code) is not None

    def hint_for(self, message: str) -> str:
        """Return the hint filled from the quoted values of ``message``."""
        return fill_template(self.hint_template, quoted_values(message))


class SuggestionCatalog:
    """Ordered, immutable suggestion table. The first matching entry wins."""

    def __init__(self, entries: Iterable[SuggestionEntry] = ()) -> None:
        self._entries: tuple[SuggestionEntry, ...] = tuple(entries)

    @property
    def entries(self) -> tuple[SuggestionEntry, ...]:
        """Return the catalog entries in lookup order."""
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[SuggestionEntry]:
        return iter(self._entries)

    def lookup(self, code: str | None, message: str = "") -> str | None:
        """Return the hint for ``code``, or None when no entry matches.

        Args:
            code (str | None): Diagnostic code; normalized before matching.
            message (str): Checker message providing template values.

        Returns:
            str | None: The filled hint, or None for an unknown or missing code.
        """
        normalized: str | None = normalize_code(code)
        if normalized is None:
            return None
        for entry in self._entries:
            if entry.matches(normalized):
                return entry.hint_for(message)
        return None

    def extended(self, entries: Iterable[SuggestionEntry]) -> SuggestionCatalog:
        """Return a new catalog where ``entries`` take precedence over this one."""
        return SuggestionCatalog((*entries, *self._entries))

    @classmethod
    def default(cls) -> SuggestionCatalog:
        """Return the catalog built from the bundled suggestion table (cached)."""
        return _bundled_catalog()


def entries_from_mapping(table: Mapping[str, Any], *, origin: str = "<config>") -> list[SuggestionEntry]:
    """Build entries from a ``code = hint`` mapping (the ``[suggestions]`` config table).

    Keys are normalized like diagnostic codes (``"2322"`` becomes ``"TS2322"``)
    and may be regular expressions. Invalid items are logged and skipped.
    """
    entries: list[SuggestionEntry] = []
    for key, hint in table.items():
        pattern: str | None = normalize_code(key)
        if pattern is None or not isinstance(hint, str):
            logger.warning("%s: ignoring suggestion %r (expected a code and a string hint)", origin, key)
            continue
        try:
            entries.append(SuggestionEntry(pattern, hint))
        except InvalidField as exc:
            logger.warning("%s: %s", origin, exc)
    return entries


def parse_catalog_toml(text: str, *, origin: str) -> list[SuggestionEntry]:
    """Parse a suggestion table document (``[[suggestion]]`` tables).

    Args:
        text (str): TOML document text.
        origin (str): Name of the document, used in messages.

    Returns:
        list[SuggestionEntry]: The valid entries in document order.

    Raises:
        ConfigError: If ``text`` is not valid TOML.
    """
    try:
        data: Any = tomlkit.parse(text).unwrap()
    except TomlkitParseError as exc:
        raise ConfigError(origin, str(exc)) from exc

    rows: Any = data.get(SUGGESTION_TABLE_KEY, [])
    if not isinstance(rows, list):
        logger.warning("%s: '%s' must be an array of tables", origin, SUGGESTION_TABLE_KEY)
        return []

    entries: list[SuggestionEntry] = []
    for index, row in enumerate(rows):
        code: Any = row.get(KEY_CODE) if isinstance(row, dict) else None
        hint: Any = row.get(KEY_HINT) if isinstance(row, dict) else None
        if not isinstance(code, str) or not isinstance(hint, str):
            logger.warning("%s: skipping suggestion #%d (missing 'code' or 'hint')", origin, index + 1)
            continue
        try:
            entries.append(SuggestionEntry(code, hint))
        except InvalidField as exc:
            logger.warning("%s: skipping suggestion #%d: %s", origin, index + 1, exc)
    return entries


@lru_cache(maxsize=1)
def _bundled_catalog() -> SuggestionCatalog:
    resource: Traversable = files(DATA_PACKAGE).joinpath(SUGGESTIONS_TOML_NAME)
    logger.debug("Loading suggestions from package resource: %s", resource)
    try:
        text: str = resource.read_text(encoding="utf-8")
    except OSError as exc:
        logger.error("Cannot read bundled suggestion table %s: %s", resource, exc)
        return SuggestionCatalog()
    try:
        entries: list[SuggestionEntry] = parse_catalog_toml(text, origin=SUGGESTIONS_TOML_NAME)
    except ConfigError as exc:
        logger.error("%s", exc)
        return SuggestionCatalog()
    logger.trace("Loaded %d bundled suggestions", len(entries))
    return SuggestionCatalog(entries)
