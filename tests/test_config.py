"""Tests for peercomp.config -- XDG paths, atomic writes, grammars, precedence."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from peercomp.config import (
    _atomic_write,
    get_config_dir,
    get_data_dir,
    get_grammars_dir,
    list_grammar_files,
    load_global_config,
    resolve_config,
    save_grammar,
    write_script,
)
from peercomp.exceptions import ConfigError
from peercomp.grammar import PEERD_GRAMMAR
from peercomp.models import CommandGrammar, GlobalConfig, OptionSpec, ValueDomain


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    """Write a dict as JSON to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestXDGPathsLinux:
    """XDG paths on Linux (the default XDG platform)."""

    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("peercomp.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".config" / "peercomp"

    def test_config_dir_is_not_created(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("peercomp.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))

        result = get_config_dir()
        assert result == tmp_path / "cfg" / "peercomp"
        assert not result.exists()

    def test_data_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "custom_data"
        monkeypatch.setattr("peercomp.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_DATA_HOME", str(custom))

        result = get_data_dir()
        assert result == custom / "peercomp"
        assert result.is_dir()

    def test_grammars_dir_under_config(self, isolated_config: Path) -> None:
        assert get_grammars_dir() == isolated_config / "config" / "peercomp" / "grammars"


class TestXDGPathsFallback:
    """Fallback paths on non-XDG platforms (macOS, Windows)."""

    def test_config_dir_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("peercomp.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".peercomp"

    def test_data_dir_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("peercomp.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_data_dir()
        assert result == tmp_path / ".peercomp"
        assert result.is_dir()


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_writes_and_creates_parents(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "file.txt"
        _atomic_write(target, "hello")
        assert target.read_text(encoding="utf-8") == "hello"

    def test_replaces_existing(self, tmp_path: Path) -> None:
        target = tmp_path / "file.txt"
        target.write_text("old")
        _atomic_write(target, "new")
        assert target.read_text() == "new"

    def test_temp_file_removed_on_failure(self, tmp_path: Path) -> None:
        target = tmp_path / "file.txt"
        with patch("peercomp.config.os.replace", side_effect=OSError("boom")):
            with pytest.raises(OSError, match="boom"):
                _atomic_write(target, "data")
        assert list(tmp_path.iterdir()) == []

    def test_write_script(self, tmp_path: Path) -> None:
        target = tmp_path / ".zfunc" / "_peerd"
        write_script(target, "#compdef peerd\n")
        assert target.read_text() == "#compdef peerd\n"


# ---------------------------------------------------------------------------
# Global config
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_missing_file_returns_defaults(self, isolated_config: Path) -> None:
        assert load_global_config() == GlobalConfig()

    def test_reads_file(self, isolated_config: Path) -> None:
        _write_json(get_config_dir() / "config.json", {
            "grammar_files": ["/etc/peercomp/swap-cli.yaml"],
            "path": {"mark_directories": True},
        })

        loaded = load_global_config()
        assert loaded.grammar_files == ["/etc/peercomp/swap-cli.yaml"]
        assert loaded.path.mark_directories is True

    def test_invalid_json_raises(self, isolated_config: Path) -> None:
        path = get_config_dir() / "config.json"
        path.parent.mkdir(parents=True)
        path.write_text("{not json")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()

    def test_undecodable_bytes_raise_config_error(self, isolated_config: Path) -> None:
        path = get_config_dir() / "config.json"
        path.parent.mkdir(parents=True)
        path.write_bytes(b'{"log_file": "\xff\xfe"}')
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()

    def test_invalid_shape_raises(self, isolated_config: Path) -> None:
        _write_json(get_config_dir() / "config.json", {"path": {"show_hidden": "sometimes"}})
        with pytest.raises(ConfigError):
            load_global_config()


# ---------------------------------------------------------------------------
# User grammars
# ---------------------------------------------------------------------------


class TestUserGrammars:
    def test_save_grammar_writes_command_json(self, isolated_config: Path) -> None:
        grammar = CommandGrammar(
            command="swap-cli",
            options=(OptionSpec(long="--data-dir", short="-d", domain=ValueDomain.path()),),
        )
        path = save_grammar(grammar)

        assert path == get_grammars_dir() / "swap-cli.json"
        data = json.loads(path.read_text())
        assert data["command"] == "swap-cli"
        assert CommandGrammar.model_validate(data) == grammar

    def test_saved_peerd_grammar_reloads_identically(self, isolated_config: Path) -> None:
        path = save_grammar(PEERD_GRAMMAR)
        assert CommandGrammar.model_validate(json.loads(path.read_text())) == PEERD_GRAMMAR

    def test_list_grammar_files_sorted_and_filtered(self, isolated_config: Path) -> None:
        grammars = get_grammars_dir()
        grammars.mkdir(parents=True)
        for name in ["b.yaml", "a.json", "c.yml", "notes.txt"]:
            (grammars / name).write_text("{}")
        (grammars / "sub.json").mkdir()

        assert [p.name for p in list_grammar_files()] == ["a.json", "b.yaml", "c.yml"]

    def test_list_grammar_files_without_dir(self, isolated_config: Path) -> None:
        assert list_grammar_files() == []


# ---------------------------------------------------------------------------
# Precedence resolution
# ---------------------------------------------------------------------------


class TestResolveConfig:
    def test_defaults(self, isolated_config: Path) -> None:
        assert resolve_config() == GlobalConfig()

    def test_env_overrides_file(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _write_json(get_config_dir() / "config.json", {
            "path": {"mark_directories": False, "show_hidden": True},
            "log_file": "/tmp/from-file.log",
        })
        monkeypatch.setenv("PEERCOMP_MARK_DIRECTORIES", "yes")
        monkeypatch.setenv("PEERCOMP_SHOW_HIDDEN", "0")
        monkeypatch.setenv("PEERCOMP_LOG_FILE", "/tmp/from-env.log")

        config = resolve_config()
        assert config.path.mark_directories is True
        assert config.path.show_hidden is False
        assert config.log_file == "/tmp/from-env.log"

    def test_unrecognised_env_flag_ignored(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PEERCOMP_SHOW_HIDDEN", "maybe")
        assert resolve_config().path.show_hidden is True

    def test_cli_overrides_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PEERCOMP_LOG_FILE", "/tmp/from-env.log")
        config = resolve_config(cli_format="json", cli_log_file="/tmp/from-cli.log")
        assert config.log_file == "/tmp/from-cli.log"
        assert config.output.format == "json"

    def test_invalid_file_raises(self, isolated_config: Path) -> None:
        path = get_config_dir() / "config.json"
        path.parent.mkdir(parents=True)
        path.write_text("[]")
        with pytest.raises(ConfigError):
            resolve_config()

    def test_does_not_create_config_dir(self, isolated_config: Path) -> None:
        resolve_config()
        assert not os.path.exists(get_config_dir())
