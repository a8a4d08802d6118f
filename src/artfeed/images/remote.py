"""Download images over HTTP, consulting the on-disk cache first."""

from __future__ import annotations

import asyncio
from typing import Optional

import httpx

from artfeed.exceptions import ConnectionError_, InvalidResponseError
from artfeed.images.base import ImageLoader
from artfeed.images.cache import ImageCache
from artfeed.output import get_output


class RemoteImageLoader(ImageLoader):
    """Fetch image bytes with :class:`httpx.AsyncClient`.

    A response is accepted only if its status is 2xx, its ``Content-Type``
    is ``image/*`` and its body is not empty. Accepted bytes are written to
    *cache*; a cache hit skips the network entirely. Cache reads and writes
    are blocking, so they run in a worker thread.

    Must be used as an async context manager unless a *client* is injected.

    Args:
        cache: Optional :class:`~artfeed.images.cache.ImageCache`.
        timeout: Request timeout in seconds.
        verify_ssl: Verify TLS certificates.
        client: Pre-built client, left open on exit.
    """

    def __init__(
        self,
        cache: Optional[ImageCache] = None,
        *,
        timeout: float = 30,
        verify_ssl: bool = True,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._cache = cache
        self._timeout = timeout
        self._verify_ssl = verify_ssl
        self._client = client
        self._owns_client = client is None

    @property
    def cache(self) -> Optional[ImageCache]:
        return self._cache

    async def __aenter__(self) -> RemoteImageLoader:
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

    async def load(self, url: str) -> bytes:
        """Return the image at *url*.

        Raises:
            ConnectionError_: On network or timeout errors.
            InvalidResponseError: On a non-2xx status, a non-image content
                type, or an empty body.
        """
        assert self._client is not None, "Client not initialised -- use as async context manager"
        output = get_output()

        if self._cache is not None:
            cached = await asyncio.to_thread(self._cache.get, url)
            if cached is not None:
                output.debug(f"Image cache hit: {url}")
                return cached

        try:
            response = await self._client.get(url)
        except httpx.TransportError as exc:
            raise ConnectionError_(f"Connection failed: {exc}") from exc

        if not response.is_success:
            raise InvalidResponseError(
                f"HTTP {response.status_code} from {url}",
                status_code=response.status_code,
            )
        content_type = response.headers.get("content-type", "")
        if not content_type.startswith("image/"):
            raise InvalidResponseError(
                f"Expected an image from {url}, got {content_type or 'no content type'}",
                status_code=response.status_code,
            )
        data = response.content
        if not data:
            raise InvalidResponseError(
                f"Empty image body from {url}", status_code=response.status_code
            )

        if self._cache is not None:
            await asyncio.to_thread(self._cache.set, url, data)
        return data
