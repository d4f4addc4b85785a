"""Grammar registry -- the command name to grammar table.

:class:`GrammarRegistry` is built once at process start by
:func:`build_default_registry` and frozen; after that it is only read. The
built-in ``peerd`` grammar is registered first, followed by user grammars
from the grammars directory and from ``GlobalConfig.grammar_files``. A user
grammar for an already registered command replaces it.

Lookups are exact string matches on the command name, no aliasing.
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional

from peercomp.exceptions import GrammarError, UnknownCommandError
from peercomp.grammar.loader import is_local_source, load_grammar
from peercomp.grammar.peerd import PEERD_GRAMMAR
from peercomp.models import CommandGrammar, GlobalConfig

logger = logging.getLogger(__name__)


class GrammarRegistry:
    """Maps command names to their :class:`~peercomp.models.CommandGrammar`.

    Example:
        Typical usage::

            registry = GrammarRegistry([PEERD_GRAMMAR])
            registry.freeze()
            grammar = registry.lookup("peerd")
    """

    def __init__(self, grammars: Optional[list[CommandGrammar]] = None) -> None:
        self._grammars: dict[str, CommandGrammar] = {}
        self._frozen = False
        for grammar in grammars or ():
            self.register(grammar)

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def register(self, grammar: CommandGrammar) -> None:
        """Add *grammar*, replacing any grammar registered for the same command.

        Raises:
            GrammarError: If the registry has been frozen.
        """
        if self._frozen:
            raise GrammarError(
                f"Cannot register '{grammar.command}': registry is frozen"
            )
        if grammar.command in self._grammars:
            logger.debug("Replacing grammar for '%s'", grammar.command)
        self._grammars[grammar.command] = grammar

    def freeze(self) -> None:
        """Make the registry read-only."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ------------------------------------------------------------------
    # Querying
    # ------------------------------------------------------------------

    def lookup(self, command: str) -> Optional[CommandGrammar]:
        """Return the grammar registered for *command*, or ``None``."""
        return self._grammars.get(command)

    def get(self, command: str) -> CommandGrammar:
        """Return the grammar registered for *command*.

        Raises:
            UnknownCommandError: If no grammar is registered for *command*.
        """
        grammar = self.lookup(command)
        if grammar is None:
            raise UnknownCommandError(command)
        return grammar

    def names(self) -> list[str]:
        """Registered command names in registration order."""
        return list(self._grammars)

    def __contains__(self, command: object) -> bool:
        return command in self._grammars

    def __iter__(self) -> Iterator[CommandGrammar]:
        return iter(self._grammars.values())

    def __len__(self) -> int:
        return len(self._grammars)


def build_default_registry(config: Optional[GlobalConfig] = None) -> GrammarRegistry:
    """Build and freeze the process-wide registry.

    Registers the built-in ``peerd`` grammar, then every grammar document in
    the user grammars directory, then each entry of ``config.grammar_files``.
    Documents that fail to load are logged and skipped so that completion of
    the remaining commands keeps working. URLs and ``-`` in ``grammar_files``
    are skipped too: this runs on every Tab press and reads local files only.
    Fetch remote grammars once with ``peercomp grammar add``.

    Args:
        config: Effective configuration. Defaults are used when ``None``.

    Returns:
        A frozen :class:`GrammarRegistry`.
    """
    from peercomp.config import list_grammar_files

    config = config or GlobalConfig()
    registry = GrammarRegistry([PEERD_GRAMMAR])

    sources = [str(p) for p in list_grammar_files()] + list(config.grammar_files)
    for source in sources:
        if not is_local_source(source):
            logger.warning(
                "Skipping grammar %s: only local files are read during completion "
                "(use 'peercomp grammar add' to save a copy)",
                source,
            )
            continue
        try:
            registry.register(load_grammar(source))
        except GrammarError as exc:
            logger.warning("Skipping grammar %s: %s", source, exc)

    registry.freeze()
    logger.debug("Grammar registry ready: %s", ", ".join(registry.names()))
    return registry
