"""Shell glue scripts that route Tab presses to ``peercomp complete``.

:class:`ScriptHost` is the :class:`~peercomp.completion.engine.HostShell`
used at process start: the engine registers each command with it, and the
host renders a script that makes the real shell call back into
``peercomp complete`` for those commands. The bash script registers exactly
like a hand-written completion table would::

    complete -F _peerd_peercomp -o bashdefault -o default peerd

so bash falls back to its default completion when peercomp offers nothing.
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path

from peercomp.completion.engine import CompletionHandler
from peercomp.exceptions import InvalidUsageError


class Shell(str, Enum):
    """Shells a glue script can be generated for."""

    BASH = "bash"
    ZSH = "zsh"
    FISH = "fish"


_BASH_TEMPLATE = """\
{func}() {{
    mapfile -t COMPREPLY < <({program} complete --cword "$COMP_CWORD" -- "${{COMP_WORDS[@]}}" 2>/dev/null)
    return 0
}}

complete -F {func} -o bashdefault -o default {command}
"""

_ZSH_TEMPLATE = """\
#compdef {command}

{func}() {{
    local -a candidates
    candidates=(${{(f)"$({program} complete --cword $((CURRENT - 1)) -- "${{words[@]}}" 2>/dev/null)"}})
    if (( ${{#candidates}} )); then
        compadd -a candidates
    else
        _default
    fi
}}

compdef {func} {command}
"""

_FISH_TEMPLATE = """\
function {func}
    set -l current (commandline -ct)
    set -l words (commandline -opc) "$current"
    {program} complete --cword (math (count $words) - 1) -- $words 2>/dev/null
end

complete -c {command} -f -a '({func})'
"""

_TEMPLATES = {
    Shell.BASH: _BASH_TEMPLATE,
    Shell.ZSH: _ZSH_TEMPLATE,
    Shell.FISH: _FISH_TEMPLATE,
}


def parse_shell(name: str) -> Shell:
    """Return the :class:`Shell` for *name* (case-insensitive, path allowed).

    Raises:
        InvalidUsageError: If the shell is not supported.
    """
    key = Path(name).name.lower()
    try:
        return Shell(key)
    except ValueError:
        supported = ", ".join(s.value for s in Shell)
        raise InvalidUsageError(
            f"Unsupported shell: {name}. Supported: {supported}"
        ) from None


def function_name(command: str) -> str:
    """Shell function name used for *command*'s completion hook."""
    return f"_{re.sub(r'[^A-Za-z0-9_]', '_', command)}_peercomp"


def render_script(shell: Shell, command: str, program: str = "peercomp") -> str:
    """Render the glue script hooking *command* up in *shell*."""
    return _TEMPLATES[shell].format(
        func=function_name(command), command=command, program=program
    )


def install_path(shell: Shell, command: str, home: Path | None = None) -> Path:
    """Standard per-user location of *command*'s completion file for *shell*.

    * **bash**: ``~/.bash_completion.d/<command>``
    * **zsh**: ``~/.zfunc/_<command>``
    * **fish**: ``~/.config/fish/completions/<command>.fish``
    """
    home = home or Path.home()
    if shell == Shell.BASH:
        return home / ".bash_completion.d" / command
    if shell == Shell.ZSH:
        return home / ".zfunc" / f"_{command}"
    return home / ".config" / "fish" / "completions" / f"{command}.fish"


class ScriptHost:
    """Host-shell capability that turns registrations into glue scripts.

    Registered handlers are not stored. Each generated script calls
    ``<program> complete``, which rebuilds the engine and its handler for
    every Tab press.

    Args:
        shell: Target shell.
        program: How the shell should invoke peercomp.
    """

    def __init__(self, shell: Shell, program: str = "peercomp") -> None:
        self.shell = shell
        self.program = program
        self._commands: list[str] = []

    def register(self, command: str, handler: CompletionHandler) -> None:
        if command not in self._commands:
            self._commands.append(command)

    @property
    def commands(self) -> list[str]:
        return list(self._commands)

    def script_for(self, command: str) -> str:
        return render_script(self.shell, command, self.program)

    def render(self) -> str:
        """The combined script for every registered command."""
        return "\n".join(self.script_for(c) for c in self._commands)
