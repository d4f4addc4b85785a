"""Shared test fixtures for peercomp.

Provides reusable fixtures for creating isolated config environments,
managing output and logging state, running CLI commands, and building a
completion engine with a fake path completer. These fixtures are
automatically discovered by pytest and available to all test modules
without explicit imports.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from peercomp.completion import CompletionEngine
from peercomp.grammar import PEERD_GRAMMAR, GrammarRegistry
from peercomp.output import reset_output


FAKE_PATHS = ("peerd.toml", "peerd.log", "data/")


# ---------------------------------------------------------------------------
# Auto-reset global output and logging state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager and the ``peercomp`` logger after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file"). The same holds for the Rich log
    handler installed by the root callback.
    """
    yield
    reset_output()
    logger = logging.getLogger("peercomp")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path,
    points HOME there too, so that tests never touch real user config or
    shell completion directories. Clears all PEERCOMP_* environment
    variables and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path / "home"))
    monkeypatch.setattr("peercomp.config._is_xdg_platform", lambda: True)

    for var in [
        "PEERCOMP_LOG_FILE",
        "PEERCOMP_MARK_DIRECTORIES",
        "PEERCOMP_SHOW_HIDDEN",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Engine fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def registry() -> GrammarRegistry:
    """A frozen registry holding only the built-in peerd grammar."""
    reg = GrammarRegistry([PEERD_GRAMMAR])
    reg.freeze()
    return reg


@pytest.fixture
def fake_paths():
    """A path completer returning :data:`FAKE_PATHS` regardless of the prefix."""
    return lambda prefix: list(FAKE_PATHS)


@pytest.fixture
def engine(registry: GrammarRegistry, fake_paths) -> CompletionEngine:
    """Completion engine over the peerd grammar with a fake path completer."""
    return CompletionEngine(registry, fake_paths)


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner.

    Returns a CliRunner instance that captures stdout/stderr and
    provides a consistent interface for invoking Typer apps in tests.
    """
    from typer.testing import CliRunner

    return CliRunner()
