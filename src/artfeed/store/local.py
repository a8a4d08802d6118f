"""File-backed :class:`~artfeed.store.base.FeedStore`.

The whole feed lives in a single file. A missing or zero-byte file means
the store is empty; anything else must be the JSON form of a
:class:`~artfeed.models.CachedFeed`. Writes go through
:func:`~artfeed.config.atomic_write`, so a concurrent reader sees either the
old content or the new one, never a torn file.

Access is serialised per instance by a
:class:`~artfeed.store.queue.BarrierQueue`: loads may overlap, ``save`` and
``delete`` run exclusively and in issue order.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable

from pydantic import ValidationError

from artfeed.config import atomic_write
from artfeed.exceptions import StoreError
from artfeed.models import CachedFeed
from artfeed.store.base import EMPTY, FeedStore, Present, StoreState
from artfeed.store.queue import BarrierQueue


class LocalFeedStore(FeedStore):
    """Persist one :class:`~artfeed.models.CachedFeed` at *path*.

    Args:
        path: The store file. Its parent directory is created on first
            write.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._queue = BarrierQueue(name=f"feed-store:{self._path.name}")

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return self._queue.closed

    def load(self) -> asyncio.Future:
        return self._submit(self._read)

    def save(self, payload: CachedFeed) -> asyncio.Future:
        return self._submit(lambda: self._write(payload), barrier=True)

    def delete(self) -> asyncio.Future:
        return self._submit(self._clear, barrier=True)

    def close(self) -> None:
        """Cancel every queued or running operation; later calls fail with :class:`StoreError`."""
        self._queue.close()

    def _submit(self, fn: Callable[[], Any], barrier: bool = False) -> asyncio.Future:
        if self._queue.closed:
            future = asyncio.get_running_loop().create_future()
            future.set_exception(StoreError(f"Feed store {self._path} is closed"))
            return future
        return self._queue.submit(fn, barrier=barrier)

    # --- Blocking file operations (run in worker threads) ---

    def _read(self) -> StoreState:
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            return EMPTY
        except OSError as exc:
            raise StoreError(f"Cannot read feed store {self._path}: {exc}") from exc

        if not raw:
            return EMPTY
        try:
            return Present(CachedFeed.model_validate_json(raw))
        except ValidationError as exc:
            raise StoreError(
                f"Feed store {self._path} is corrupt: {exc.error_count()} validation error(s)"
            ) from exc

    def _write(self, payload: CachedFeed) -> None:
        try:
            atomic_write(self._path, payload.model_dump_json(by_alias=True))
        except OSError as exc:
            raise StoreError(f"Cannot write feed store {self._path}: {exc}") from exc

    def _clear(self) -> None:
        try:
            atomic_write(self._path, b"")
        except OSError as exc:
            raise StoreError(f"Cannot clear feed store {self._path}: {exc}") from exc
