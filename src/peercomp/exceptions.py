"""Exception hierarchy for peercomp.

All exceptions inherit from :class:`PeercompError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`peercomp.exit_codes`.
The top-level error handler in :func:`peercomp.app.main` catches
``PeercompError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Three of the classes describe the completion failure taxonomy
(:class:`UnknownCommandError`, :class:`UnmatchedPreviousTokenError`,
:class:`ProviderUnavailableError`). They are raised by the registry and the
providers, and caught inside :class:`~peercomp.completion.engine.CompletionEngine`,
which degrades each one to a (possibly empty) result.

Subclass hierarchy::

    PeercompError (exit 1)
    +-- InvalidUsageError            (exit 2)
    +-- ConfigError                  (exit 1)
    +-- UnknownCommandError          (exit 4)
    +-- GrammarError                 (exit 7)
    +-- ProviderUnavailableError     (exit 8)
    +-- UnmatchedPreviousTokenError  (exit 1)
"""

from peercomp.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_GRAMMAR_ERROR,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_PROVIDER_UNAVAILABLE,
)


class PeercompError(Exception):
    """Base exception for all peercomp errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`peercomp.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(PeercompError):
    """Raised for invalid CLI arguments, e.g. an unsupported shell name."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(PeercompError):
    """Raised for configuration problems (invalid JSON, failed validation)."""

    exit_code = EXIT_GENERIC_FAILURE


class UnknownCommandError(PeercompError):
    """Raised when no grammar is registered for a command name."""

    exit_code = EXIT_NOT_FOUND

    def __init__(self, command: str):
        super().__init__(f"No grammar registered for command '{command}'")
        self.command = command


class GrammarError(PeercompError):
    """Raised when a grammar document cannot be loaded or violates grammar invariants."""

    exit_code = EXIT_GRAMMAR_ERROR


class ProviderUnavailableError(PeercompError):
    """Raised when a value-domain provider cannot produce candidates."""

    exit_code = EXIT_PROVIDER_UNAVAILABLE


class UnmatchedPreviousTokenError(PeercompError):
    """Raised when the previous token matches no option of the active grammar."""

    def __init__(self, token: str):
        super().__init__(f"Token '{token}' does not name a known option")
        self.token = token
