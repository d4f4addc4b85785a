"""peercomp -- table-driven shell tab completion for ``peerd``.

This package answers one question per Tab press: given the words typed so far
and the cursor position, which strings should the shell offer? The answer is
derived from a flag grammar (option names and the kind of value each option
takes) rather than from running the target program.

Typical workflow::

    peercomp completion install         # hook peerd up in the current shell
    peerd --overlay <TAB>               # tcp zmq http websocket smtp

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration and user grammar storage.
    grammar: Built-in grammar, grammar loader, and registry.
    completion: Tokenizer, providers, resolver, filter, and engine.
    shells: Glue scripts for bash, zsh, and fish.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
