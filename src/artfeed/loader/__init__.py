"""Feed loaders.

:class:`FeedLoader` is the one operation consumers depend on: load the feed,
either awaited or delivered to a completion callback.
:class:`RemoteFeedLoader` implements it over HTTP with :mod:`httpx`.
"""

from artfeed.loader.base import FeedLoader
from artfeed.loader.remote import RemoteFeedLoader

__all__ = ["FeedLoader", "RemoteFeedLoader"]
