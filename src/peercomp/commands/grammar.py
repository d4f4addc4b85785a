"""Grammar commands -- examine and extend the grammar registry.

Provides the ``peercomp grammar`` sub-command group:

* ``list`` -- registered commands and their option counts.
* ``show`` -- the option table of one command.
* ``check`` -- load and validate a grammar document without saving it.
* ``add`` -- validate a grammar document and save it to the user grammars
  directory, where the registry picks it up on the next run.
"""

from __future__ import annotations

import typer

from peercomp.commands import build_engine
from peercomp.config import save_grammar
from peercomp.exceptions import GrammarError, UnknownCommandError
from peercomp.grammar import load_grammar
from peercomp.models import CommandGrammar, DomainKind
from peercomp.output import error, print_table, success, suggest


grammar_app = typer.Typer(no_args_is_help=True)


def _option_rows(grammar: CommandGrammar) -> list[list[str]]:
    rows: list[list[str]] = []
    for opt in grammar.options:
        rows.append([
            opt.long,
            opt.short or "-",
            opt.domain.kind.value,
            ", ".join(opt.domain.values) if opt.domain.kind == DomainKind.ENUM else "",
        ])
    return rows


def _load_or_exit(source: str) -> CommandGrammar:
    try:
        return load_grammar(source)
    except GrammarError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


@grammar_app.command("list")
def grammar_list(ctx: typer.Context) -> None:
    """List the commands peercomp can complete.

    Example::

        peercomp grammar list
    """
    registry = build_engine(ctx).registry
    rows = [[g.command, str(len(g.options))] for g in registry]
    print_table(
        ["Command", "Options"], rows, title=f"Registered grammars ({len(rows)})"
    )


@grammar_app.command("show")
def grammar_show(
    ctx: typer.Context,
    command: str = typer.Argument(..., help="Command name, e.g. peerd."),
) -> None:
    """Show the option table of a registered command.

    Args:
        ctx: Typer invocation context.
        command: Exact command name.

    Raises:
        typer.Exit: With code 4 when no grammar is registered for *command*.

    Example::

        peercomp grammar show peerd
        peercomp --json grammar show peerd
    """
    registry = build_engine(ctx).registry
    try:
        grammar = registry.get(command)
    except UnknownCommandError as exc:
        error(str(exc))
        suggest("Run: peercomp grammar list")
        raise typer.Exit(code=exc.exit_code) from None

    print_table(
        ["Long", "Short", "Domain", "Values"],
        _option_rows(grammar),
        title=f"{grammar.command} -- Options ({len(grammar.options)})",
    )


@grammar_app.command("check")
def grammar_check(
    source: str = typer.Argument(..., help="Grammar file, URL, or '-' for stdin."),
) -> None:
    """Validate a grammar document.

    Exits with code 7 when the document cannot be parsed or breaks a grammar
    rule (duplicate option names, malformed flag spellings, values on a
    non-enum domain).

    Example::

        peercomp grammar check ./swap-cli.yaml
    """
    grammar = _load_or_exit(source)
    success(f"Grammar for '{grammar.command}' is valid ({len(grammar.options)} options)")


@grammar_app.command("add")
def grammar_add(
    source: str = typer.Argument(..., help="Grammar file, URL, or '-' for stdin."),
) -> None:
    """Validate a grammar document and save it to the user grammars directory.

    A saved grammar replaces any grammar registered for the same command,
    including the built-in one.

    Example::

        peercomp grammar add https://example.org/grammars/swap-cli.json
    """
    grammar = _load_or_exit(source)
    path = save_grammar(grammar)
    success(f"Saved grammar for '{grammar.command}' to {path}")
    suggest(f"Run: peercomp completion install to hook up {grammar.command}")
