# topmark:header:start
#
#   project      : TS Analyzer
#   file         : conftest.py
#   file_relpath : tests/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Pytest configuration for the TS Analyzer test suite.

This file sets up global fixtures and customizes the logging configuration for
test runs, and provides small factories shared by the unit tests.

Notes:
    Tests should respect the immutable/mutable configuration split: build a
    `tsanalyzer.config.model.MutableConfig`, then `freeze()` it into a `Config`.
    Do **not** mutate a frozen `Config`; thaw it, edit, and freeze again.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar, cast

import pytest

from tsanalyzer.config import logging
from tsanalyzer.config.model import MutableConfig
from tsanalyzer.diagnostic.model import Diagnostic
from tsanalyzer.rendering.suggestions import SuggestionCatalog, SuggestionEntry

if TYPE_CHECKING:
    from pathlib import Path

    from tsanalyzer.config.model import Config

F = TypeVar("F", bound=Callable[..., object])

# This defines the type for the decorator function itself:
# It takes a Callable (F) and returns the same Callable (F).
DecoratorType = Callable[[F], F]


def as_typed_mark(mark: Any) -> DecoratorType[Any]:
    """Wrap a pytest mark so static type checkers preserve the function type.

    Args:
        mark (Any): A pytest mark decorator such as `pytest.mark.cli`.

    Returns:
        DecoratorType[Any]: A decorator that preserves the wrapped function's type.
    """

    def _decorator(func: F) -> F:
        return cast("F", mark(func))

    return _decorator


mark_cli: DecoratorType[Any] = as_typed_mark(pytest.mark.cli)


def parametrize(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.mark.parametrize`.

    Args:
        *args (Any): Positional arguments forwarded to `pytest.mark.parametrize`.
        **kwargs (Any): Keyword arguments forwarded to `pytest.mark.parametrize`.

    Returns:
        Callable[[F], F]: A decorator that preserves the wrapped function's type.
    """
    mark: pytest.MarkDecorator = pytest.mark.parametrize(*args, **kwargs)
    return as_typed_mark(mark)


def hookimpl(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.hookimpl`.

    Args:
        *args (Any): Positional arguments forwarded to `pytest.hookimpl`.
        **kwargs (Any): Keyword arguments forwarded to `pytest.hookimpl`.

    Returns:
        Callable[[F], F]: A decorator that preserves the wrapped function's type.
    """
    return as_typed_mark(pytest.hookimpl(*args, **kwargs))


def fixture(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.fixture`.

    Args:
        *args (Any): Positional arguments forwarded to `pytest.fixture`.
        **kwargs (Any): Keyword arguments forwarded to `pytest.fixture`.

    Returns:
        Callable[[F], F]: A decorator that preserves the wrapped function's type.
    """
    return as_typed_mark(pytest.fixture(*args, **kwargs))


@pytest.fixture(autouse=True)
def silence_analyzer_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure the runtime log level is not forced via env during tests.

    This avoids accidental DEBUG/TRACE noise when the developer has exported
    TSANALYZER_LOG_LEVEL in their shell. Color forcing variables are removed
    too so that CLI output is plain unless a test asks otherwise.

    Args:
        monkeypatch (pytest.MonkeyPatch): Pytest monkeypatch fixture used to manipulate
            environment variables.
    """
    monkeypatch.delenv(logging.LOG_LEVEL_ENV_VAR, raising=False)
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    monkeypatch.delenv("NO_COLOR", raising=False)


@hookimpl(tryfirst=True)
def pytest_configure(config: pytest.Config) -> None:  # pylint: disable=unused-argument
    """Set the logging level to TRACE for all tests.

    Args:
        config (pytest.Config): The pytest configuration object.
    """
    logging.setup_logging(level=logging.TRACE_LEVEL)


@pytest.fixture
def isolation(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run a test in an isolated project directory (no config discovery leaks).

    Args:
        tmp_path (Path): The pytest-provided temporary directory for the test.
        monkeypatch (pytest.MonkeyPatch): Fixture used to change the working directory.

    Returns:
        Path: The isolated working directory.
    """
    cwd: Path = tmp_path / "proj"
    cwd.mkdir()
    monkeypatch.chdir(cwd)
    return cwd


def make_diagnostic(**overrides: Any) -> Diagnostic:
    """Return a `Diagnostic` for ``a.ts:5:2`` (TS2322) with ``overrides`` applied.

    Args:
        **overrides (Any): Field values replacing the defaults.

    Returns:
        Diagnostic: The validated diagnostic.
    """
    fields: dict[str, Any] = {
        "file_path": "a.ts",
        "line": 5,
        "column": 2,
        "code": "TS2322",
        "message": "Type mismatch",
    }
    fields.update(overrides)
    return Diagnostic(**fields)


def make_catalog(table: dict[str, str] | None = None) -> SuggestionCatalog:
    """Return a catalog holding only ``table`` (``code pattern -> hint``).

    Args:
        table (dict[str, str] | None): Entries in lookup order.

    Returns:
        SuggestionCatalog: The catalog.
    """
    return SuggestionCatalog(SuggestionEntry(code, hint) for code, hint in (table or {}).items())


def make_config(**overrides: Any) -> Config:
    """Return a frozen `Config` built from defaults and overrides.

    Args:
        **overrides (Any): Attributes set on the mutable builder before freezing.

    Returns:
        Config: An immutable configuration snapshot.
    """
    m: MutableConfig = MutableConfig()
    for k, v in overrides.items():
        setattr(m, k, v)
    return m.freeze()
