"""Completion resolver -- decides which candidates apply to the cursor token.

The resolver is a small state machine evaluated once per request:

* cursor on the first token -> ``EXPECT_COMMAND_NAME``; the registered
  command names are the candidates.
* previous token is an option whose domain takes a value ->
  ``EXPECT_OPTION_VALUE``; the domain's provider supplies the candidates.
* anything else (unknown previous token, a flag without value) ->
  ``EXPECT_OPTION_OR_POSITIONAL``; every option spelling of the grammar is a
  candidate, whatever the current token looks like.

Option lookup is a single table lookup on the grammar, keyed by both long and
short spellings. Failures never leave :meth:`Resolver.resolve`: an unknown
command yields no candidates, an unmatched previous token falls back to the
option list, and an unavailable provider yields no candidates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from peercomp.completion.providers import PathCompleter, provider_for
from peercomp.exceptions import (
    ProviderUnavailableError,
    UnknownCommandError,
    UnmatchedPreviousTokenError,
)
from peercomp.grammar.registry import GrammarRegistry
from peercomp.models import CommandGrammar, CompletionRequest, OptionSpec, ResolverState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """Outcome of one resolver run, before prefix filtering.

    Attributes:
        state: The state the request resolved to.
        candidates: Unfiltered candidates in provider order.
        grammar: The grammar consulted, ``None`` on the command-name state or
            when the command is unknown.
        option: The option whose value is being completed, or the ``NONE``
            flag that was matched, otherwise ``None``.
    """

    state: ResolverState
    candidates: tuple[str, ...] = ()
    grammar: Optional[CommandGrammar] = None
    option: Optional[OptionSpec] = None


class Resolver:
    """Resolves a :class:`~peercomp.models.CompletionRequest` against a registry.

    Args:
        registry: The frozen grammar registry to consult.
        path_completer: Path-completion capability handed to the path
            provider. ``None`` uses the default filesystem completer.
    """

    def __init__(
        self,
        registry: GrammarRegistry,
        path_completer: Optional[PathCompleter] = None,
    ) -> None:
        self._registry = registry
        self._path_completer = path_completer

    def resolve(self, request: CompletionRequest) -> Resolution:
        if request.cursor_index == 0:
            return Resolution(
                state=ResolverState.EXPECT_COMMAND_NAME,
                candidates=tuple(self._registry.names()),
            )

        try:
            grammar = self._registry.get(request.command_name)
        except UnknownCommandError as exc:
            logger.debug("%s", exc)
            return Resolution(state=ResolverState.EXPECT_OPTION_OR_POSITIONAL)

        option: Optional[OptionSpec] = None
        try:
            option = grammar.get_option(request.previous)
        except UnmatchedPreviousTokenError as exc:
            logger.debug("%s, offering option names", exc)

        if option is None or not option.domain.takes_value:
            return Resolution(
                state=ResolverState.EXPECT_OPTION_OR_POSITIONAL,
                candidates=tuple(grammar.option_names()),
                grammar=grammar,
                option=option,
            )

        provider = provider_for(option.domain, self._path_completer)
        try:
            candidates = tuple(provider.candidates(option.domain, request.current))
        except ProviderUnavailableError as exc:
            logger.debug("No candidates for %s: %s", option.long, exc)
            candidates = ()

        return Resolution(
            state=ResolverState.EXPECT_OPTION_VALUE,
            candidates=candidates,
            grammar=grammar,
            option=option,
        )
