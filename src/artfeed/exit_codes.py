"""Numeric process exit codes used by the ``artfeed`` command line.

Each constant maps to one failure class and is referenced by the
corresponding :class:`~artfeed.exceptions.ArtfeedError` subclass, so shell
scripts can tell "the network is down" from "the cache file is corrupt"
without parsing stderr.

Example::

    $ artfeed feed show
    $ echo $?
    6   # EXIT_CONNECTION_ERROR -- the collection endpoint was unreachable
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_INVALID_RESPONSE = 5
"""The remote endpoint answered with a non-2xx status or an unusable body."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_DECODE_ERROR = 7
"""The remote payload could not be decoded into feed items."""

EXIT_STORE_ERROR = 8
"""The local feed store could not be read or written."""

EXIT_FETCH_ERROR = 9
"""The feed could not be fetched for an unclassified reason."""
