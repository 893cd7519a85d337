"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~econops.exceptions.EconopsError` subclass.
Shell scripts wrapping ``econops call`` can inspect the exit code to tell a
missing token apart from an unreachable server without parsing stderr.

Example::

    $ econops call /compute/pca '{"data": [[1, 2], [3, 4]]}'
    $ echo $?
    3   # EXIT_CONFIG_ERROR -- no token was configured
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or an unserialisable payload."""

EXIT_CONFIG_ERROR = 3
"""The client could not be configured (missing token, unreadable config)."""

EXIT_CONNECTION_ERROR = 4
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_INTERRUPTED = 130
"""The user pressed Ctrl-C (128 + SIGINT)."""
