"""Turn the host shell's words and cursor position into a CompletionRequest.

Quoting and escaping are the host shell's job: bash hands over
``COMP_WORDS``/``COMP_CWORD`` already split, and :func:`tokenize` only has to
pick out the current and previous token. :func:`tokenize_line` serves hosts
that only expose the raw line and a cursor offset.

Neither function raises. Short or empty input degrades to empty tokens.
"""

from __future__ import annotations

import shlex
from typing import Sequence

from peercomp.models import CompletionRequest, Token


def tokenize(words: Sequence[str], cursor_index: int) -> CompletionRequest:
    """Build a request from already-split *words* and the cursor word index.

    A cursor index past the end of *words* means the cursor sits after a
    separator, so the missing words are padded with empty strings. A negative
    index is treated as 0.

    Example::

        >>> req = tokenize(["peerd", "--overlay", "t"], 2)
        >>> req.previous, req.current
        ('--overlay', 't')
    """
    cursor_index = max(cursor_index, 0)
    texts = list(words)
    if len(texts) <= cursor_index:
        texts.extend([""] * (cursor_index + 1 - len(texts)))
    tokens = tuple(
        Token(text=text, is_current=(i == cursor_index)) for i, text in enumerate(texts)
    )
    return CompletionRequest(tokens=tokens, cursor_index=cursor_index)


def split_line(line: str) -> list[str]:
    """Split *line* into shell words, tolerating an unterminated quote."""
    try:
        return shlex.split(line)
    except ValueError:
        # Unbalanced quote: the user is still typing the quoted word.
        return line.split()


def tokenize_line(line: str, point: int | None = None) -> CompletionRequest:
    """Build a request from a raw command line and a cursor character offset.

    Only the text before *point* is considered. Trailing whitespace before the
    cursor starts a new, empty current token.
    """
    if point is None:
        point = len(line)
    head = line[: max(point, 0)]
    words = split_line(head)
    if not words or head[-1:].isspace():
        words.append("")
    return tokenize(words, len(words) - 1)
