"""Completion resolution engine.

Typical usage::

    from peercomp.completion import CompletionEngine

    engine = CompletionEngine.from_config()
    engine.complete(["peerd", "--overlay", ""], 2).candidates
    # -> ('tcp', 'zmq', 'http', 'websocket', 'smtp')

Sub-modules:

* :mod:`~peercomp.completion.tokenizer` -- words/line + cursor to request.
* :mod:`~peercomp.completion.providers` -- enum, path, and none providers.
* :mod:`~peercomp.completion.resolver` -- the state machine.
* :mod:`~peercomp.completion.formatter` -- prefix filter and serialisers.
* :mod:`~peercomp.completion.engine` -- entry point and shell registration.
"""

from peercomp.completion.engine import CompletionEngine, CompletionHandler, HostShell
from peercomp.completion.formatter import RenderStyle, filter_candidates, render
from peercomp.completion.providers import (
    EnumProvider,
    FilesystemPathCompleter,
    NoneProvider,
    PathProvider,
    ValueProvider,
    provider_for,
)
from peercomp.completion.resolver import Resolution, Resolver
from peercomp.completion.tokenizer import tokenize, tokenize_line

__all__ = [
    "CompletionEngine",
    "CompletionHandler",
    "EnumProvider",
    "FilesystemPathCompleter",
    "HostShell",
    "NoneProvider",
    "PathProvider",
    "RenderStyle",
    "Resolution",
    "Resolver",
    "ValueProvider",
    "filter_candidates",
    "provider_for",
    "render",
    "tokenize",
    "tokenize_line",
]
