"""Command grammars -- the flag tables the resolver completes against.

Typical usage::

    from peercomp.grammar import build_default_registry

    registry = build_default_registry()
    grammar = registry.lookup("peerd")

Sub-modules:

* :mod:`~peercomp.grammar.peerd` -- The built-in ``peerd`` flag table.
* :mod:`~peercomp.grammar.loader` -- I/O layer (URL, file, stdin) for extra
  grammar documents in JSON or YAML.
* :mod:`~peercomp.grammar.registry` -- :class:`GrammarRegistry` and the
  process-start builder.
"""

from peercomp.grammar.loader import load_grammar, load_grammar_document
from peercomp.grammar.peerd import PEERD_GRAMMAR
from peercomp.grammar.registry import GrammarRegistry, build_default_registry

__all__ = [
    "PEERD_GRAMMAR",
    "GrammarRegistry",
    "build_default_registry",
    "load_grammar",
    "load_grammar_document",
]
