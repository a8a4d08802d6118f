"""Fetch the feed from the remote collection endpoint.

:class:`RemoteFeedLoader` issues one GET per :meth:`~RemoteFeedLoader.load`
and maps every failure onto the :class:`~artfeed.exceptions.FetchError`
family:

* network or timeout failure -- :class:`~artfeed.exceptions.ConnectionError_`
* non-2xx status -- :class:`~artfeed.exceptions.InvalidResponseError`
* body that does not decode into a feed -- :class:`~artfeed.exceptions.DecodeError`

There is no retry. A failed fetch is reported to the caller, which (for the
cache) means falling back to nothing rather than to stale data.
"""

from __future__ import annotations

from typing import Optional

import httpx
from pydantic import ValidationError

from artfeed.exceptions import ConnectionError_, DecodeError, InvalidResponseError
from artfeed.loader.base import FeedLoader
from artfeed.models import FeedItem, RemoteFeed
from artfeed.output import get_output


class RemoteFeedLoader(FeedLoader):
    """HTTP feed loader backed by :class:`httpx.AsyncClient`.

    Must be used as an async context manager, which opens and closes the
    underlying client. An injected *client* is used as is and left open on
    exit; its owner closes it.

    Args:
        url: Absolute URL of the collection endpoint.
        timeout: Request timeout in seconds.
        verify_ssl: Verify TLS certificates.
        client: Pre-built client, mainly for tests with
            :class:`httpx.MockTransport`.

    Example::

        async with RemoteFeedLoader(config.feed.url) as remote:
            items = await remote.load()
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 30,
        verify_ssl: bool = True,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._verify_ssl = verify_ssl
        self._client = client
        self._owns_client = client is None

    @property
    def url(self) -> str:
        return self._url

    async def __aenter__(self) -> RemoteFeedLoader:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                verify=self._verify_ssl,
                follow_redirects=True,
            )
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def load(self) -> list[FeedItem]:
        """GET the endpoint and decode the envelope's items.

        Raises:
            ConnectionError_: On network or timeout errors.
            InvalidResponseError: On a non-2xx status.
            DecodeError: If the body is not a valid feed envelope.
        """
        assert self._client is not None, "Client not initialised -- use as async context manager"

        output = get_output()
        output.debug(f"GET {self._url}")
        try:
            response = await self._client.get(self._url)
        except httpx.TransportError as exc:
            raise ConnectionError_(f"Connection failed: {exc}") from exc

        if not response.is_success:
            raise InvalidResponseError(
                f"HTTP {response.status_code} from {self._url}",
                status_code=response.status_code,
            )

        try:
            feed = RemoteFeed.model_validate_json(response.content)
        except ValidationError as exc:
            raise DecodeError(
                f"Cannot decode feed from {self._url}: {exc.error_count()} validation error(s)"
            ) from exc

        output.debug(f"Decoded {len(feed.items)} item(s) from {self._url}")
        return feed.items
