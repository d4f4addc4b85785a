"""``peercomp complete`` -- answer one completion request for the shell glue.

The glue scripts generated by :mod:`peercomp.shells` call this command with
the words of the command line and the cursor word index::

    peercomp complete --cword 2 -- peerd --overlay t
    tcp

Hosts that only know the raw line pass ``--line``/``--point`` instead.
Candidates go to stdout, one per line by default. The command always exits
0 and prints nothing when there is nothing to offer.
"""

from __future__ import annotations

from typing import List, Optional

import typer

from peercomp.commands import build_engine
from peercomp.completion import RenderStyle, render, tokenize_line
from peercomp.output import debug, print_data


def complete_command(
    ctx: typer.Context,
    words: Optional[List[str]] = typer.Argument(
        None, help="Words of the command line, e.g. bash's COMP_WORDS."
    ),
    cword: Optional[int] = typer.Option(
        None,
        "--cword",
        help="Index of the word under the cursor. Defaults to the last word.",
    ),
    line: Optional[str] = typer.Option(
        None, "--line", help="Raw command line, split here instead of passing WORDS."
    ),
    point: Optional[int] = typer.Option(
        None, "--point", help="Cursor offset into --line. Defaults to its end."
    ),
    style: RenderStyle = typer.Option(
        RenderStyle.LINES, "--style", help="Output format read by the shell."
    ),
) -> None:
    """Print completion candidates for the word under the cursor.

    Args:
        ctx: Typer invocation context.
        words: Already-split words, command name first.
        cword: Cursor word index into *words*.
        line: Raw line to split instead of *words*.
        point: Cursor character offset into *line*.
        style: ``lines``, ``json``, or ``bash``.

    Example::

        peercomp complete --cword 1 -- peerd --v
        peercomp complete --line "peerd --overlay z"
    """
    if line is not None:
        request = tokenize_line(line, point)
        words = [token.text for token in request.tokens]
        cword = request.cursor_index
    else:
        words = list(words or [])
        if cword is None:
            cword = max(len(words) - 1, 0)

    engine = build_engine(ctx)
    resolution, result = engine.explain(words, cword)
    if resolution is not None:
        option = resolution.option.long if resolution.option else "-"
        debug(f"state={resolution.state.value} option={option} candidates={len(result)}")

    text = render(result, style)
    if text:
        print_data(text)
