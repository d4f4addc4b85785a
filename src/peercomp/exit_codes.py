"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~peercomp.exceptions.PeercompError` subclass.

The ``peercomp complete`` command is the exception to the rule: it always
exits with :data:`EXIT_SUCCESS` because a completion call must never abort
the user's keystroke. The codes below only apply to the management commands
(``grammar``, ``completion``).

Example::

    $ peercomp grammar show lnd
    $ echo $?
    4   # EXIT_NOT_FOUND -- no grammar registered for that command
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or an unsupported shell."""

EXIT_NOT_FOUND = 4
"""The requested command grammar is not registered."""

EXIT_GRAMMAR_ERROR = 7
"""A grammar document could not be loaded, parsed, or validated."""

EXIT_PROVIDER_UNAVAILABLE = 8
"""A value-domain provider could not produce candidates (e.g. unreadable directory)."""
