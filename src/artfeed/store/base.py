"""The feed store contract and the result of reading it.

A feed store persists exactly one :class:`~artfeed.models.CachedFeed`. Its
three operations each return an awaitable; failures are raised from that
awaitable as :class:`~artfeed.exceptions.StoreError`.

Reading a store yields a :class:`StoreState`, which is either
:data:`EMPTY` (nothing was ever written, or it was cleared) or
:class:`Present` wrapping the persisted payload. An empty store is a normal
state, not an error.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Awaitable, Union

from artfeed.models import CachedFeed


@dataclass(frozen=True)
class Empty:
    """The store holds no payload."""


@dataclass(frozen=True)
class Present:
    """The store holds *payload*."""

    payload: CachedFeed


StoreState = Union[Empty, Present]

EMPTY = Empty()


class FeedStore(ABC):
    """Abstract single-resource store for the cached feed.

    Implementations guarantee that ``save`` and ``delete`` never overlap any
    other operation on the same instance, and that operations complete in
    the order they were issued.
    """

    @abstractmethod
    def load(self) -> Awaitable[StoreState]:
        """Read the persisted payload.

        Returns:
            An awaitable resolving to :data:`EMPTY` or :class:`Present`.

        Raises:
            StoreError: From the awaitable, if the stored data is malformed
                or cannot be read.
        """
        ...

    @abstractmethod
    def save(self, payload: CachedFeed) -> Awaitable[None]:
        """Replace the persisted content with *payload* atomically."""
        ...

    @abstractmethod
    def delete(self) -> Awaitable[None]:
        """Clear the persisted content so the next :meth:`load` is empty."""
        ...

    def close(self) -> None:
        """Tear the store down. The default implementation does nothing."""
