"""Completion entry point and host-shell registration.

:class:`CompletionEngine` ties the pipeline together::

    words + cursor -> tokenize -> Resolver -> provider -> filter_candidates

and exposes it as :meth:`CompletionEngine.complete`, the handler the host
shell calls for every Tab press on a registered command. The engine holds no
per-request state, so identical requests always produce identical results.

Registration with a shell is explicit: :meth:`CompletionEngine.register_with`
hands the handler to a :class:`HostShell` for every command in the registry.
The script generators in :mod:`peercomp.shells` are such hosts.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol, Sequence

from peercomp.completion.formatter import filter_candidates
from peercomp.completion.providers import FilesystemPathCompleter, PathCompleter
from peercomp.completion.resolver import Resolution, Resolver
from peercomp.completion.tokenizer import tokenize
from peercomp.grammar.registry import GrammarRegistry, build_default_registry
from peercomp.models import CompletionRequest, CompletionResult, GlobalConfig

logger = logging.getLogger(__name__)

CompletionHandler = Callable[[Sequence[str], int], CompletionResult]
"""``(words, cursor_index) -> CompletionResult``"""


class HostShell(Protocol):
    """Capability of a host shell to route completion of a command to a handler."""

    def register(self, command: str, handler: CompletionHandler) -> None: ...


class CompletionEngine:
    """Resolves completion requests against a frozen grammar registry.

    Args:
        registry: Grammar registry built at process start.
        path_completer: Path-completion capability for ``PATH`` domains.

    Example:
        Typical usage::

            engine = CompletionEngine.from_config(config)
            engine.complete(["peerd", "--overlay", "t"], 2).candidates
            # -> ('tcp',)
    """

    def __init__(
        self,
        registry: GrammarRegistry,
        path_completer: Optional[PathCompleter] = None,
    ) -> None:
        self.registry = registry
        self._resolver = Resolver(registry, path_completer)

    @classmethod
    def from_config(cls, config: Optional[GlobalConfig] = None) -> CompletionEngine:
        """Build the registry and path completer from the effective configuration."""
        config = config or GlobalConfig()
        return cls(
            build_default_registry(config),
            FilesystemPathCompleter.from_config(config.path),
        )

    def complete(self, words: Sequence[str], cursor_index: int) -> CompletionResult:
        """Return the candidates for the word at *cursor_index*. Never raises."""
        return self.explain(words, cursor_index)[1]

    def explain(
        self, words: Sequence[str], cursor_index: int
    ) -> tuple[Optional[Resolution], CompletionResult]:
        """Like :meth:`complete`, also returning the resolver's intermediate outcome.

        The resolution is ``None`` only if an unexpected error aborted the run.
        """
        # No error may reach the shell during completion.
        try:
            request = tokenize(words, cursor_index)
            resolution = self.resolve(request)
            result = filter_candidates(resolution.candidates, request.current)
        except Exception:
            logger.exception("Completion failed for %r at %d", list(words), cursor_index)
            return None, CompletionResult()
        logger.debug(
            "state=%s previous=%r current=%r -> %d candidate(s)",
            resolution.state.value,
            request.previous,
            request.current,
            len(result),
        )
        return resolution, result

    def resolve(self, request: CompletionRequest) -> Resolution:
        return self._resolver.resolve(request)

    def register_with(self, host: HostShell) -> list[str]:
        """Register :meth:`complete` with *host* for every known command.

        Returns:
            The command names that were registered.
        """
        names = self.registry.names()
        for name in names:
            host.register(name, self.complete)
        return names
