"""Exception hierarchy for webber.

All exceptions inherit from :class:`WebberError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`webber.exit_codes`.

Inside the library these exceptions are raised where the failure happens
(URL construction, transport, JSON decoding) and caught by the facades in
:mod:`webber.client`, which log them and turn them into a
:class:`~webber.models.FetchResult`. Only configuration problems and CLI
usage errors propagate to the caller.

Subclass hierarchy::

    WebberError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- InvalidURLError     (exit 5)
    +-- NetworkError        (exit 6)
    +-- DecodeError         (exit 4)
    +-- ConfigError         (exit 1)
"""

from webber.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_URL,
    EXIT_INVALID_USAGE,
    EXIT_NO_DATA,
)


class WebberError(Exception):
    """Base exception for all webber errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(WebberError):
    """Raised for invalid CLI arguments or API misuse (e.g. no running event loop)."""

    exit_code = EXIT_INVALID_USAGE


class InvalidURLError(WebberError):
    """Raised when ``server + "/" + path`` cannot be turned into an HTTP URL."""

    exit_code = EXIT_INVALID_URL


class NetworkError(WebberError):
    """Raised on transport failures and non-UTF-8 bodies."""

    exit_code = EXIT_CONNECTION_ERROR


class DecodeError(WebberError):
    """Raised when text is not valid JSON or its top level is not an array."""

    exit_code = EXIT_NO_DATA


class ConfigError(WebberError):
    """Raised for configuration problems (invalid JSON, failed validation)."""

    exit_code = EXIT_GENERIC_FAILURE
