"""Exception hierarchy for specsubset.

All exceptions inherit from :class:`SpecsubsetError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`specsubset.exit_codes`. The top-level error handler in
:func:`specsubset.app.main` catches ``SpecsubsetError`` and exits with the
appropriate code, while unexpected exceptions produce a crash log and exit
with :data:`EXIT_GENERIC_FAILURE`.

The extraction engine itself raises none of these: malformed structure,
dangling references and ambiguous security setups are all resolved by
omission. Only the I/O and configuration layers around it raise.

Subclass hierarchy::

    SpecsubsetError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- ConnectionError_    (exit 6)
    +-- SpecParseError      (exit 7)
    +-- OutputWriteError    (exit 8)
    +-- ConfigError         (exit 1)
"""

from specsubset.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SPEC_PARSE_ERROR,
    EXIT_WRITE_ERROR,
)


class SpecsubsetError(Exception):
    """Base exception for all specsubset errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specsubset.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpecsubsetError):
    """Raised for invalid CLI arguments (unknown output format, conflicting flags)."""

    exit_code = EXIT_INVALID_USAGE


class ConnectionError_(SpecsubsetError):
    """Raised on network-level failures while fetching a remote spec.

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class SpecParseError(SpecsubsetError):
    """Raised when the source spec cannot be read, parsed, or is not OpenAPI 3.x."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class OutputWriteError(SpecsubsetError):
    """Raised when the reduced spec cannot be serialised or written."""

    exit_code = EXIT_WRITE_ERROR


class ConfigError(SpecsubsetError):
    """Raised for configuration problems (invalid JSON, failed validation)."""

    exit_code = EXIT_GENERIC_FAILURE
