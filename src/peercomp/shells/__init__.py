"""Shell integration -- glue scripts for bash, zsh, and fish.

The main export is :class:`ScriptHost`, the host-shell capability the
completion engine registers its commands with.
"""

from peercomp.shells.scripts import (
    ScriptHost,
    Shell,
    function_name,
    install_path,
    parse_shell,
    render_script,
)

__all__ = [
    "ScriptHost",
    "Shell",
    "function_name",
    "install_path",
    "parse_shell",
    "render_script",
]
