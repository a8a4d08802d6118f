"""Image loading for feed items.

:class:`RemoteImageLoader` downloads the ``web_image`` / ``header_image``
URLs of a :class:`~artfeed.models.FeedItem`, validating that the response
really is an image, and keeps accepted bytes in an :class:`ImageCache`
backed by :mod:`diskcache`.
"""

from artfeed.images.base import ImageLoader
from artfeed.images.cache import ImageCache
from artfeed.images.remote import RemoteImageLoader

__all__ = ["ImageCache", "ImageLoader", "RemoteImageLoader"]
