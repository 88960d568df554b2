"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~webber.exceptions.WebberError` subclass or by the
CLI commands directly.

Example::

    $ webber get users --offline
    $ echo $?
    4   # EXIT_NO_DATA -- offline and nothing cached for this path
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_NO_DATA = 4
"""No value was available (network failure, cache miss, or undecodable body)."""

EXIT_INVALID_URL = 5
"""The server address and path did not form a usable URL."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred, or the device has no usable network route."""
