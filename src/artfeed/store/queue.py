"""Per-instance operation queue with concurrent reads and barrier writes.

:class:`BarrierQueue` gives one store instance the discipline of a
concurrent dispatch queue with barrier flags:

* operations are ordered when :meth:`BarrierQueue.submit` is *called*, not
  when the caller gets around to awaiting them;
* consecutive reads run concurrently with each other;
* a barrier waits for everything submitted before it, runs alone, and holds
  back everything submitted after it.

A single worker task consumes the queue. The submitted callables are
blocking (file I/O), so each runs in a worker thread via
:func:`asyncio.to_thread` and the event loop never blocks.

The queue belongs to the loop that first submits to it. A submission from
any other loop is handed to that loop, so there is still one worker and
barriers stay exclusive; the caller awaits a future on its own loop. Once
the home loop stops, the next submitting loop takes the queue over.

Example::

    queue = BarrierQueue("feed-store")
    first = queue.submit(write_a, barrier=True)
    second = queue.submit(read)          # starts after write_a finishes
    third = queue.submit(write_b, barrier=True)
    await asyncio.gather(first, second, third)
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass
class _Operation:
    """A queued callable and the future its caller awaits."""

    fn: Callable[[], Any]
    barrier: bool
    future: asyncio.Future


class BarrierQueue:
    """Serialises operations on one shared resource.

    The worker is started lazily on the first :meth:`submit`, on the loop
    running at that moment. That loop stays the home loop while it runs.

    Args:
        name: Used for the worker task name and error messages.
    """

    def __init__(self, name: str = "barrier-queue") -> None:
        self._name = name
        self._queue: Optional[asyncio.Queue[_Operation]] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._worker: Optional[asyncio.Task] = None
        self._readers: set[asyncio.Task] = set()
        self._pending: set[asyncio.Future] = set()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        """Number of submitted operations that have not completed yet."""
        return len(self._pending)

    def submit(self, fn: Callable[[], Any], *, barrier: bool = False) -> asyncio.Future:
        """Queue *fn* and return a future for its result.

        Must be called from a running event loop. From a loop other than the
        home loop, the operation is queued on the home loop and the returned
        future belongs to the calling loop.

        Args:
            fn: Blocking callable executed in a worker thread.
            barrier: Run *fn* exclusively, after all earlier operations and
                before all later ones.

        Returns:
            A future resolving to ``fn()``'s return value, or raising what
            it raised. Cancelling the future before the operation starts
            skips it.

        Raises:
            RuntimeError: If the queue has been closed.
        """
        if self._closed:
            raise RuntimeError(f"{self._name} is closed")

        loop = asyncio.get_running_loop()
        if self._loop is not None and self._loop is not loop and _is_live(self._loop):
            handoff = asyncio.run_coroutine_threadsafe(self._submit_here(fn, barrier), self._loop)
            return asyncio.wrap_future(handoff, loop=loop)
        if self._loop is not loop:
            self._loop = loop
            self._queue = asyncio.Queue()
            self._readers = set()
            self._pending = set()
            self._worker = loop.create_task(self._drain(), name=self._name)

        future = loop.create_future()
        self._pending.add(future)
        future.add_done_callback(self._pending.discard)
        assert self._queue is not None
        self._queue.put_nowait(_Operation(fn=fn, barrier=barrier, future=future))
        return future

    def close(self) -> None:
        """Stop the worker and cancel every queued or running operation.

        Callers awaiting those operations see :class:`asyncio.CancelledError`;
        no result is delivered after this point. A blocking call already
        running in a thread finishes in the background, but its outcome is
        discarded. Safe to call from any thread. Idempotent.
        """
        if self._closed:
            return
        self._closed = True
        home = self._loop
        if home is not None and _is_live(home) and not _runs_on(home):
            home.call_soon_threadsafe(self._cancel_all)
        else:
            self._cancel_all()

    def _cancel_all(self) -> None:
        if self._worker is not None:
            self._worker.cancel()
        for task in list(self._readers):
            task.cancel()
        for future in list(self._pending):
            future.cancel()

    async def _submit_here(self, fn: Callable[[], Any], barrier: bool) -> Any:
        return await self.submit(fn, barrier=barrier)

    async def _drain(self) -> None:
        assert self._queue is not None
        queue = self._queue
        while True:
            op = await queue.get()
            if op.barrier:
                if self._readers:
                    await asyncio.wait(set(self._readers))
                await self._execute(op)
            else:
                reader = asyncio.ensure_future(self._execute(op))
                self._readers.add(reader)
                reader.add_done_callback(self._readers.discard)

    async def _execute(self, op: _Operation) -> None:
        # Cancelled by its caller before it started.
        if op.future.done():
            return
        try:
            result = await asyncio.to_thread(op.fn)
        except Exception as exc:
            if not op.future.done():
                op.future.set_exception(exc)
        else:
            if not op.future.done():
                op.future.set_result(result)


def _is_live(loop: asyncio.AbstractEventLoop) -> bool:
    return loop.is_running() and not loop.is_closed()


def _runs_on(loop: asyncio.AbstractEventLoop) -> bool:
    try:
        return asyncio.get_running_loop() is loop
    except RuntimeError:
        return False
