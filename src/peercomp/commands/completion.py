"""Shell completion commands -- install and display the glue scripts.

This module implements the ``peercomp completion`` command group with two
sub-commands:

* ``completion install`` -- Auto-detect (or explicitly specify) the user's
  shell and write one glue script per registered command to the shell's
  completion directory.
* ``completion show`` -- Print the glue scripts to stdout for manual
  installation or piping to a file.

Supported shells: bash, zsh, fish. The commands come from the grammar
registry, which the engine registers with a
:class:`~peercomp.shells.ScriptHost` at startup.
"""

from __future__ import annotations

import os
from typing import Optional

import typer

from peercomp.commands import build_engine
from peercomp.config import write_script
from peercomp.exceptions import InvalidUsageError
from peercomp.output import error, print_data, success, suggest
from peercomp.shells import ScriptHost, Shell, install_path, parse_shell

completion_app = typer.Typer(no_args_is_help=True)
"""Typer application for the ``completion`` command group."""

_ACTIVATION_HINTS = {
    Shell.BASH: "Restart your shell or run: source {path}",
    Shell.ZSH: "Add to .zshrc: fpath+=~/.zfunc && autoload -Uz compinit && compinit",
    Shell.FISH: "Restart your shell to activate completions.",
}


def _resolve_shell(shell: Optional[str]) -> Shell:
    """Parse *shell*, defaulting to ``$SHELL``; exit 2 when unsupported."""
    if shell is None:
        shell = os.path.basename(os.environ.get("SHELL", "bash"))
    try:
        return parse_shell(shell)
    except InvalidUsageError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def _registered_host(ctx: typer.Context, shell: Shell) -> ScriptHost:
    host = ScriptHost(shell)
    build_engine(ctx).register_with(host)
    return host


@completion_app.command("install")
def completion_install(
    ctx: typer.Context,
    shell: Optional[str] = typer.Argument(
        None,
        help="Shell to install completion for (bash, zsh, fish). Auto-detected if omitted.",
    ),
) -> None:
    """Install shell completion for every registered command.

    Writes one glue script per command to the standard location:

    * **bash**: ``~/.bash_completion.d/<command>``
    * **zsh**: ``~/.zfunc/_<command>``
    * **fish**: ``~/.config/fish/completions/<command>.fish``

    Args:
        ctx: Typer invocation context.
        shell: Shell name. Auto-detected from ``$SHELL`` if omitted.

    Raises:
        typer.Exit: With code 2 if the shell is unsupported.

    Example:
        ::

            peercomp completion install
            peercomp completion install zsh
    """
    target = _resolve_shell(shell)
    host = _registered_host(ctx, target)

    last_path = None
    for command in host.commands:
        path = install_path(target, command)
        write_script(path, host.script_for(command))
        success(f"{target.value.capitalize()} completion for {command} installed to {path}")
        last_path = path

    if last_path is not None:
        suggest(_ACTIVATION_HINTS[target].format(path=last_path))


@completion_app.command("show")
def completion_show(
    ctx: typer.Context,
    shell: str = typer.Argument(
        "bash",
        help="Shell to show completion for (bash, zsh, fish)",
    ),
) -> None:
    """Print the glue script for a shell to stdout.

    Args:
        ctx: Typer invocation context.
        shell: Shell name. Defaults to ``"bash"``.

    Example:
        ::

            peercomp completion show bash
            peercomp completion show zsh > ~/.zfunc/_peerd
    """
    target = _resolve_shell(shell)
    print_data(_registered_host(ctx, target).render())
