"""The consumer-facing feed loading contract."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Optional

from artfeed.models import FeedItem
from artfeed.result import AnyFuture, Completion, run_with_completion


class FeedLoader(ABC):
    """Anything that can produce the current feed.

    Implemented by :class:`~artfeed.loader.remote.RemoteFeedLoader`, by the
    :class:`~artfeed.feed_cache.FeedCache` in front of it, and by the
    decorators in :mod:`artfeed.dispatch`, so consumers never know which one
    they hold.
    """

    @abstractmethod
    async def load(self) -> list[FeedItem]:
        """Return the feed items.

        Raises:
            FetchError: If no feed could be produced.
        """
        ...

    @property
    def closed(self) -> bool:
        """True once the loader has been torn down. Never true by default."""
        return False

    def load_with(
        self,
        completion: Completion[list[FeedItem]],
        *,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> AnyFuture:
        """Run :meth:`load` and hand the outcome to *completion*.

        *completion* is called at most once, with a
        :class:`~artfeed.result.Result`. It is not called if the returned
        future is cancelled, or if this loader has been closed or garbage
        collected by the time the load finishes.

        Args:
            completion: Receives the :class:`~artfeed.result.Result`.
            loop: Run on this loop instead of the running one. Lets a
                thread without an event loop start a load.
        """
        return run_with_completion(self.load(), completion, owner=self, loop=loop)
