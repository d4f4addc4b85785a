"""Prefix filter and output serialisers for completion results.

:func:`filter_candidates` is the last step of every resolution: keep the
candidates that start with the current token, drop duplicates, keep the
provider's order. :func:`render` turns the result into what a host shell
reads back.
"""

from __future__ import annotations

import json
import shlex
from enum import Enum
from typing import Iterable

from peercomp.models import CompletionResult


class RenderStyle(str, Enum):
    """Serialisation formats understood by the shell glue."""

    LINES = "lines"
    JSON = "json"
    BASH = "bash"


def filter_candidates(candidates: Iterable[str], current: str) -> CompletionResult:
    """Keep candidates prefixed by *current* (case-sensitive), de-duplicated, in order.

    An empty *current* matches everything.
    """
    seen: set[str] = set()
    kept: list[str] = []
    for candidate in candidates:
        if candidate in seen or not candidate.startswith(current):
            continue
        seen.add(candidate)
        kept.append(candidate)
    return CompletionResult(candidates=tuple(kept))


def render(result: CompletionResult, style: RenderStyle = RenderStyle.LINES) -> str:
    """Serialise *result* for a host shell.

    * ``lines`` -- one candidate per line, read with ``mapfile``/``${(f)...}``.
    * ``json`` -- ``{"candidates": [...]}``.
    * ``bash`` -- a ``COMPREPLY=( ... )`` assignment to ``eval``.
    """
    if style == RenderStyle.JSON:
        return json.dumps({"candidates": list(result.candidates)})
    if style == RenderStyle.BASH:
        words = " ".join(shlex.quote(c) for c in result.candidates)
        return f"COMPREPLY=( {words} )" if words else "COMPREPLY=()"
    return "\n".join(result.candidates)
