"""TTL read-through cache in front of a feed loader.

:class:`FeedCache` answers every :meth:`~FeedCache.load` from the durable
store when the stored feed is young enough, and otherwise refreshes it from
the remote loader and writes the result back::

    store.load()
      |-- StoreError ----------------+
      |-- EMPTY ---------------------+--> loader.load() --> store.save(...)
      |-- Present, stale ------------+          |               (failure ignored)
      |-- Present, fresh --> items              +--> items / FetchError

A read fails only when there is no usable stored feed *and* the fetch
fails. Store failures never reach the caller: an unreadable store counts as
a miss, and a failed write-back still returns the freshly fetched items.
A failed fetch never touches the store.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta
from typing import Callable

from artfeed.exceptions import StoreError
from artfeed.loader.base import FeedLoader
from artfeed.models import CachedFeed, FeedItem
from artfeed.output import get_output
from artfeed.store.base import FeedStore, Present


class FeedCache(FeedLoader):
    """Serve the feed from *store* while fresh, refresh from *loader* otherwise.

    A stored feed is fresh while ``current_date() - timestamp <= max_age``;
    the boundary itself still counts as fresh. Each call to :meth:`load` is
    independent: concurrent reads are not merged, and each one that misses
    fetches on its own.

    Args:
        store: The durable store holding the last fetched feed.
        loader: The source used on a miss, typically a
            :class:`~artfeed.loader.remote.RemoteFeedLoader`.
        max_age: How long a stored feed may be served.
        current_date: Clock used both for the freshness check and for the
            timestamp written back. Injected so tests control time. A naive
            result is taken as local time.

    Example::

        cache = FeedCache(
            LocalFeedStore(path),
            remote,
            max_age=timedelta(minutes=5),
            current_date=lambda: datetime.now(timezone.utc),
        )
        items = await cache.load()
    """

    def __init__(
        self,
        store: FeedStore,
        loader: FeedLoader,
        *,
        max_age: timedelta,
        current_date: Callable[[], datetime],
    ) -> None:
        self._store = store
        self._loader = loader
        self._max_age = max_age
        self._current_date = current_date
        self._inflight: set[asyncio.Task] = set()
        self._closed = False

    @property
    def max_age(self) -> timedelta:
        return self._max_age

    @property
    def closed(self) -> bool:
        return self._closed

    async def load(self) -> list[FeedItem]:
        """Return the feed, from the store when fresh, from the loader otherwise.

        Raises:
            FetchError: If the store held nothing usable and the fetch
                failed. The loader's error is raised unchanged.
            RuntimeError: If the cache has been closed.
        """
        if self._closed:
            raise RuntimeError("FeedCache is closed")
        task = asyncio.ensure_future(self._read_through())
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return await task

    def close(self) -> None:
        """Cancel in-flight reads; their completions are never delivered."""
        self._closed = True
        for task in list(self._inflight):
            task.cancel()

    def _now(self) -> datetime:
        now = self._current_date()
        return now if now.tzinfo is not None else now.astimezone()

    def is_fresh(self, payload: CachedFeed) -> bool:
        """True if *payload* may still be served at ``current_date()``."""
        return self._now() - payload.timestamp <= self._max_age

    async def _read_through(self) -> list[FeedItem]:
        output = get_output()
        try:
            state = await self._store.load()
        except StoreError as exc:
            output.debug(f"Feed store unreadable, treating as a miss: {exc}")
            return await self._refresh()

        if not isinstance(state, Present):
            output.debug("Feed cache miss: store is empty")
            return await self._refresh()

        if self.is_fresh(state.payload):
            output.debug(f"Feed cache hit: {len(state.payload.items)} item(s)")
            return list(state.payload.items)

        output.debug(f"Feed cache stale: fetched at {state.payload.timestamp.isoformat()}")
        return await self._refresh()

    async def _refresh(self) -> list[FeedItem]:
        items = await self._loader.load()
        payload = CachedFeed(items=items, timestamp=self._now())
        try:
            await self._store.save(payload)
        except StoreError as exc:
            get_output().debug(f"Could not write feed back to the store: {exc}")
        return items
