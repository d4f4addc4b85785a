"""Built-in CLI commands.

* :mod:`~peercomp.commands.complete` -- ``peercomp complete``, called by the
  shell glue on every Tab press.
* :mod:`~peercomp.commands.completion` -- ``peercomp completion show|install``.
* :mod:`~peercomp.commands.grammar` -- ``peercomp grammar list|show|check|add``.
"""

from __future__ import annotations

import typer

from peercomp.completion import CompletionEngine
from peercomp.models import GlobalConfig


def context_config(ctx: typer.Context) -> GlobalConfig:
    """Return the effective config stored by the root callback (defaults if absent)."""
    obj = ctx.find_root().obj
    if isinstance(obj, dict) and isinstance(obj.get("config"), GlobalConfig):
        return obj["config"]
    return GlobalConfig()


def build_engine(ctx: typer.Context) -> CompletionEngine:
    """Build the completion engine (and its grammar registry) for this process."""
    return CompletionEngine.from_config(context_config(ctx))
