"""Tests for peercomp.grammar.registry and the built-in peerd grammar."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from peercomp.config import get_grammars_dir
from peercomp.exceptions import GrammarError, UnknownCommandError
from peercomp.grammar import PEERD_GRAMMAR, GrammarRegistry, build_default_registry
from peercomp.grammar.peerd import OVERLAYS
from peercomp.models import CommandGrammar, DomainKind, GlobalConfig, OptionSpec


def _write_grammar(path: Path, command: str, options: list[dict]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"command": command, "options": options}))
    return path


class TestPeerdGrammar:
    def test_every_flag_present(self) -> None:
        assert [o.long for o in PEERD_GRAMMAR.options] == [
            "--help",
            "--version",
            "--listen",
            "--connect",
            "--port",
            "--overlay",
            "--peer-secret-key",
            "--wallet-token",
            "--data-dir",
            "--config",
            "--verbose",
            "--tor-proxy",
            "--msg-socket",
            "--ctl-socket",
            "--chain",
            "--electrum-server",
            "--monero-daemon",
            "--monero-rpc-wallet",
        ]

    def test_overlay_values(self) -> None:
        overlay = PEERD_GRAMMAR.get_option("-o")
        assert overlay.domain.kind == DomainKind.ENUM
        assert overlay.domain.values == OVERLAYS == ("tcp", "zmq", "http", "websocket", "smtp")

    @pytest.mark.parametrize("flag", ["--help", "-h", "--version", "-V", "--verbose"])
    def test_flags_without_value(self, flag: str) -> None:
        assert PEERD_GRAMMAR.get_option(flag).domain.kind == DomainKind.NONE

    def test_port_completes_paths(self) -> None:
        assert PEERD_GRAMMAR.get_option("-p").domain.kind == DomainKind.PATH

    def test_verbose_has_no_short_form(self) -> None:
        assert PEERD_GRAMMAR.get_option("--verbose").short is None
        assert PEERD_GRAMMAR.find_option("-v") is None


class TestGrammarRegistry:
    def test_lookup_and_get(self) -> None:
        registry = GrammarRegistry([PEERD_GRAMMAR])
        assert registry.lookup("peerd") is PEERD_GRAMMAR
        assert registry.get("peerd") is PEERD_GRAMMAR
        assert "peerd" in registry
        assert len(registry) == 1

    def test_lookup_is_exact(self) -> None:
        registry = GrammarRegistry([PEERD_GRAMMAR])
        assert registry.lookup("Peerd") is None
        assert registry.lookup("/usr/bin/peerd") is None

    def test_get_unknown_raises(self) -> None:
        with pytest.raises(UnknownCommandError) as exc_info:
            GrammarRegistry().get("swapd")
        assert exc_info.value.command == "swapd"
        assert exc_info.value.exit_code == 4

    def test_register_replaces(self) -> None:
        replacement = CommandGrammar(command="peerd", options=(OptionSpec(long="--only"),))
        registry = GrammarRegistry([PEERD_GRAMMAR, replacement])
        assert registry.get("peerd") is replacement
        assert registry.names() == ["peerd"]

    def test_frozen_rejects_register(self) -> None:
        registry = GrammarRegistry()
        registry.freeze()
        assert registry.frozen
        with pytest.raises(GrammarError, match="frozen"):
            registry.register(PEERD_GRAMMAR)

    def test_iterates_in_registration_order(self) -> None:
        other = CommandGrammar(command="swap-cli")
        registry = GrammarRegistry([PEERD_GRAMMAR, other])
        assert list(registry) == [PEERD_GRAMMAR, other]
        assert registry.names() == ["peerd", "swap-cli"]


class TestBuildDefaultRegistry:
    def test_builtin_only(self, isolated_config: Path) -> None:
        registry = build_default_registry()
        assert registry.names() == ["peerd"]
        assert registry.frozen

    def test_user_grammars_directory(self, isolated_config: Path) -> None:
        _write_grammar(get_grammars_dir() / "swap-cli.json", "swap-cli", [{"long": "--help"}])
        registry = build_default_registry()
        assert registry.names() == ["peerd", "swap-cli"]

    def test_config_grammar_files(self, isolated_config: Path) -> None:
        path = _write_grammar(isolated_config / "farcaster.json", "farcasterd", [])
        registry = build_default_registry(GlobalConfig(grammar_files=[str(path)]))
        assert "farcasterd" in registry

    def test_user_grammar_overrides_builtin(self, isolated_config: Path) -> None:
        _write_grammar(get_grammars_dir() / "peerd.json", "peerd", [{"long": "--only"}])
        grammar = build_default_registry().get("peerd")
        assert [o.long for o in grammar.options] == ["--only"]

    def test_broken_grammar_skipped(
        self, isolated_config: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        bad = get_grammars_dir() / "bad.json"
        bad.parent.mkdir(parents=True)
        bad.write_text("{not valid")
        with caplog.at_level(logging.WARNING, logger="peercomp"):
            registry = build_default_registry(GlobalConfig(grammar_files=["/nonexistent.yaml"]))
        assert registry.names() == ["peerd"]
        assert "Skipping grammar" in caplog.text

    def test_remote_sources_skipped_without_fetching(
        self, isolated_config: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        config = GlobalConfig(grammar_files=["https://example.com/swap-cli.json", "-"])
        with patch("peercomp.grammar.loader.httpx.get") as get, patch(
            "peercomp.grammar.loader.sys"
        ) as mock_sys:
            with caplog.at_level(logging.WARNING, logger="peercomp"):
                registry = build_default_registry(config)
        get.assert_not_called()
        mock_sys.stdin.read.assert_not_called()
        assert registry.names() == ["peerd"]
        assert "only local files" in caplog.text

    def test_undecodable_user_grammar_skipped(self, isolated_config: Path) -> None:
        broken = get_grammars_dir() / "broken.yaml"
        broken.parent.mkdir(parents=True)
        broken.write_bytes(b"command: x\xff\xfe\n")
        assert build_default_registry().names() == ["peerd"]
