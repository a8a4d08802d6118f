"""Durable single-resource store for the cached feed."""

from artfeed.store.base import EMPTY, Empty, FeedStore, Present, StoreState
from artfeed.store.local import LocalFeedStore
from artfeed.store.queue import BarrierQueue

__all__ = [
    "BarrierQueue",
    "EMPTY",
    "Empty",
    "FeedStore",
    "LocalFeedStore",
    "Present",
    "StoreState",
]
