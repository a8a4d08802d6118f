"""Deliver completions on a designated event loop.

A UI or any other single-threaded consumer wants its callbacks on its own
thread. :class:`MainThreadDecorator` binds a decoratee to one event loop
(the "main thread") and :meth:`~MainThreadDecorator.run_on_main_thread`
runs an action there:

* already on that loop -- run inline, synchronously;
* anywhere else -- hand it over with ``call_soon_threadsafe`` and check
  again on arrival.

The hand-off holds only a weak reference to the decorator. If the decorator
has been garbage collected before the loop picks the action up, the action
is dropped.

The concrete decorators wrap a loader and re-expose its contract, changing
only where ``load_with`` completions run::

    main_loop = asyncio.get_running_loop()
    loader = MainThreadFeedLoader(cache, main_loop)
    loader.load_with(render, loop=worker_loop)   # render() runs on main_loop
"""

from __future__ import annotations

import asyncio
import weakref
from typing import Callable, Generic, Optional, TypeVar

from artfeed.images.base import ImageLoader
from artfeed.loader.base import FeedLoader
from artfeed.models import FeedItem
from artfeed.result import AnyFuture, Completion, Result

T = TypeVar("T")


class MainThreadDecorator(Generic[T]):
    """Binds *decoratee* to the event loop *loop*.

    Args:
        decoratee: The wrapped object. Exposed as :attr:`decoratee`.
        loop: The designated loop on which actions must run.
    """

    def __init__(self, decoratee: T, loop: asyncio.AbstractEventLoop) -> None:
        self.decoratee = decoratee
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    def is_main_thread(self) -> bool:
        """True if the caller is running inside the designated loop."""
        try:
            return asyncio.get_running_loop() is self._loop
        except RuntimeError:
            return False

    def run_on_main_thread(self, action: Callable[[], None]) -> None:
        """Run *action* on the designated loop, inline if already there."""
        if self.is_main_thread():
            action()
            return

        ref = weakref.ref(self)

        def _reenter() -> None:
            decorator = ref()
            if decorator is None:
                return
            decorator.run_on_main_thread(action)

        self._loop.call_soon_threadsafe(_reenter)

    def _dispatching(self, completion: Completion[T]) -> Completion[T]:
        def _deliver(result: Result[T]) -> None:
            self.run_on_main_thread(lambda: completion(result))

        return _deliver


class MainThreadFeedLoader(MainThreadDecorator[FeedLoader], FeedLoader):
    """A :class:`~artfeed.loader.base.FeedLoader` whose completions run on the designated loop."""

    @property
    def closed(self) -> bool:
        return self.decoratee.closed

    async def load(self) -> list[FeedItem]:
        return await self.decoratee.load()

    def load_with(
        self,
        completion: Completion[list[FeedItem]],
        *,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> AnyFuture:
        return self.decoratee.load_with(self._dispatching(completion), loop=loop)


class MainThreadImageLoader(MainThreadDecorator[ImageLoader], ImageLoader):
    """An :class:`~artfeed.images.base.ImageLoader` whose completions run on the designated loop."""

    @property
    def closed(self) -> bool:
        return self.decoratee.closed

    async def load(self, url: str) -> bytes:
        return await self.decoratee.load(url)

    def load_with(
        self,
        url: str,
        completion: Completion[bytes],
        *,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> AnyFuture:
        return self.decoratee.load_with(url, self._dispatching(completion), loop=loop)
