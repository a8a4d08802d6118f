"""The image loading contract.

Decoding the bytes into something displayable is left to the consumer.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Optional

from artfeed.result import AnyFuture, Completion, run_with_completion


class ImageLoader(ABC):
    """Anything that can fetch the bytes of an image by URL."""

    @abstractmethod
    async def load(self, url: str) -> bytes:
        """Return the raw image bytes for *url*.

        Raises:
            FetchError: If the image could not be obtained.
        """
        ...

    @property
    def closed(self) -> bool:
        return False

    def load_with(
        self,
        url: str,
        completion: Completion[bytes],
        *,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> AnyFuture:
        """Completion-style :meth:`load`, with the same delivery rules as
        :meth:`artfeed.loader.base.FeedLoader.load_with`."""
        return run_with_completion(self.load(url), completion, owner=self, loop=loop)
