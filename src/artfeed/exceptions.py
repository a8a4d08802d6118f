"""Exception hierarchy for artfeed.

All exceptions inherit from :class:`ArtfeedError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`artfeed.exit_codes`.
The entry point in :func:`artfeed.app.main` catches ``ArtfeedError`` and
exits with the matching code, while unexpected exceptions produce a crash
log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    ArtfeedError (exit 1)
    +-- InvalidUsageError        (exit 2)
    +-- ConfigError              (exit 1)
    +-- StoreError               (exit 8)
    +-- FetchError               (exit 9)
        +-- InvalidResponseError (exit 5)
        +-- ConnectionError_     (exit 6)
        +-- DecodeError          (exit 7)

Store and loader failures are raised to the immediate awaiting caller.
:class:`~artfeed.feed_cache.FeedCache` absorbs :class:`StoreError` and only
ever surfaces a :class:`FetchError`.
"""

from __future__ import annotations

from typing import Optional

from artfeed.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_DECODE_ERROR,
    EXIT_FETCH_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_RESPONSE,
    EXIT_INVALID_USAGE,
    EXIT_STORE_ERROR,
)


class ArtfeedError(Exception):
    """Base exception for all artfeed errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`artfeed.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ArtfeedError):
    """Raised for invalid CLI arguments or option values."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(ArtfeedError):
    """Raised for configuration problems (invalid JSON, failed validation)."""

    exit_code = EXIT_GENERIC_FAILURE


class StoreError(ArtfeedError):
    """Raised when the persisted feed cannot be read, decoded, or written."""

    exit_code = EXIT_STORE_ERROR


class FetchError(ArtfeedError):
    """Base class for every failure to obtain the feed from its source."""

    exit_code = EXIT_FETCH_ERROR


class InvalidResponseError(FetchError):
    """Raised when the endpoint answers with a non-2xx status or unusable body.

    Args:
        message: Human-readable error description.
        status_code: The HTTP status code, when one was received.
    """

    exit_code = EXIT_INVALID_RESPONSE

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ConnectionError_(FetchError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class DecodeError(FetchError):
    """Raised when a response body cannot be decoded into feed items."""

    exit_code = EXIT_DECODE_ERROR
