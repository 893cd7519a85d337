"""Exception hierarchy for econops.

All exceptions inherit from :class:`EconopsError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`econops.exit_codes`.
The CLI catches ``EconopsError`` and exits with the appropriate code, while
unexpected exceptions produce a crash log and exit with
:data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    EconopsError (exit 1)
    +-- InvalidUsageError    (exit 2)
    +-- SerializationError   (exit 2)
    +-- ConfigurationError   (exit 3)
    +-- NetworkError         (exit 4)
    +-- CacheError           (exit 1, never raised past the cache boundary)
"""

from econops.exit_codes import (
    EXIT_CONFIG_ERROR,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
)


class EconopsError(Exception):
    """Base exception for all econops errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`econops.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(EconopsError):
    """Raised for invalid CLI arguments, such as a payload that is not valid JSON."""

    exit_code = EXIT_INVALID_USAGE


class SerializationError(EconopsError):
    """Raised when a request payload cannot be normalised into JSON.

    Args:
        message: Description of the problem.
        path: JSON-path style location of the offending value (``$`` is the
            payload root).
    """

    exit_code = EXIT_INVALID_USAGE

    def __init__(self, message: str, path: str = "$"):
        super().__init__(f"{message} at {path}")
        self.path = path


class ConfigurationError(EconopsError):
    """Raised for configuration problems (missing token, invalid config file, bad credential sources)."""

    exit_code = EXIT_CONFIG_ERROR


class NetworkError(EconopsError):
    """Raised on transport failures (timeout, DNS resolution, connection refused, TLS)."""

    exit_code = EXIT_CONNECTION_ERROR


class CacheError(EconopsError):
    """Describes a failed cache read or write.

    The cache never raises this to its callers; it is returned inside a
    :class:`~econops.cache.CacheResult` so the client can decide to ignore it.
    """
