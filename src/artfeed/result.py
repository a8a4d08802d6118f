"""Completion-style delivery of asynchronous results.

Most of artfeed is awaited directly. Consumers that prefer callbacks (a UI
loop, a thread that cannot await) use ``load_with(completion)`` on a loader,
which runs the coroutine as a task and hands the outcome to
``completion(result)`` exactly once, as a :class:`Result`.

Two rules hold for every completion issued through
:func:`run_with_completion`:

* cancelled work never calls the completion;
* the completion is dropped if its owner has been garbage collected or
  reports ``closed`` by the time the work finishes.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import weakref
from dataclasses import dataclass
from typing import Any, Callable, Coroutine, Generic, Optional, TypeVar, Union

T = TypeVar("T")

AnyFuture = Union["asyncio.Future[Any]", "concurrent.futures.Future[Any]"]


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a single asynchronous operation: a value or an error.

    Example::

        def on_done(result: Result[list[FeedItem]]) -> None:
            if result.is_success:
                render(result.value)
            else:
                show_error(result.error)
    """

    value: Optional[T] = None
    error: Optional[BaseException] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: BaseException) -> "Result[T]":
        return cls(error=error)

    @classmethod
    def from_future(cls, future: AnyFuture) -> "Result[Any]":
        """Build a result from a finished, non-cancelled future."""
        exc = future.exception()
        if exc is not None:
            return cls.failure(exc)
        return cls.success(future.result())

    @property
    def is_success(self) -> bool:
        return self.error is None

    def get(self) -> T:
        """Return the value, or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


Completion = Callable[[Result[T]], None]


def notify_when_done(
    future: AnyFuture,
    completion: Completion[Any],
    owner: Any = None,
) -> None:
    """Call *completion* with the outcome of *future* once it finishes.

    Only a weak reference to *owner* is kept. The completion is skipped when
    the future was cancelled, the owner is gone, or ``owner.closed`` is true.
    """
    owner_ref = weakref.ref(owner) if owner is not None else None

    def _on_done(fut: AnyFuture) -> None:
        if fut.cancelled():
            return
        if owner_ref is not None:
            alive = owner_ref()
            if alive is None or getattr(alive, "closed", False):
                return
        completion(Result.from_future(fut))

    future.add_done_callback(_on_done)


def run_with_completion(
    coro: Coroutine[Any, Any, T],
    completion: Completion[T],
    *,
    owner: Any = None,
    loop: Optional[asyncio.AbstractEventLoop] = None,
) -> AnyFuture:
    """Schedule *coro* and deliver its outcome to *completion*.

    Without *loop* the coroutine becomes a task on the running loop. With
    *loop* it is submitted to that loop from any thread, and the completion
    runs on the loop's thread.

    Returns:
        The scheduled future; cancelling it suppresses the completion.
    """
    future: AnyFuture
    if loop is None:
        future = asyncio.ensure_future(coro)
    else:
        future = asyncio.run_coroutine_threadsafe(coro, loop)
    notify_when_done(future, completion, owner=owner)
    return future
