"""On-disk cache of downloaded image bytes.

Uses :mod:`diskcache` to keep image downloads across runs with a
configurable time-to-live. Entries are keyed by the SHA-256 of the image
URL, so the same image is only fetched once per TTL regardless of which
feed item references it.

This is a URL-keyed byte cache for the image loader only. The feed itself
is persisted by :mod:`artfeed.store`.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Any, Optional

import diskcache

from artfeed.models import ImageCacheConfig


class ImageCache:
    """Disk-backed URL to bytes cache.

    Args:
        cache_dir: Root directory for the cache. An ``images/``
            subdirectory is created inside it.
        config: ``enabled`` flag and ``ttl_seconds``. When disabled every
            lookup misses and nothing is written.

    Example::

        cache = ImageCache(get_cache_dir(), ImageCacheConfig(ttl_seconds=3600))
        cache.set("https://img.example/a1.jpg", data)
        assert cache.get("https://img.example/a1.jpg") == data
    """

    def __init__(self, cache_dir: str | Path, config: ImageCacheConfig) -> None:
        self._config = config
        self._cache: Optional[diskcache.Cache] = None
        self._directory = Path(cache_dir) / "images"
        if config.enabled:
            self._cache = diskcache.Cache(str(self._directory))

    @property
    def enabled(self) -> bool:
        return self._cache is not None

    def get(self, url: str) -> Optional[bytes]:
        """Return the cached bytes for *url*, or ``None`` on a miss."""
        if self._cache is None:
            return None
        return self._cache.get(self._make_key(url))

    def set(self, url: str, data: bytes) -> None:
        """Store *data* for *url*. Empty payloads are not cached."""
        if self._cache is None or not data:
            return
        self._cache.set(self._make_key(url), data, expire=self._config.ttl_seconds)

    def invalidate(self, url: str) -> None:
        """Drop the entry for *url*, if any."""
        if self._cache is None:
            return
        self._cache.delete(self._make_key(url))

    def clear(self) -> None:
        """Remove all entries from the cache."""
        if self._cache is not None:
            self._cache.clear()

    def stats(self) -> dict[str, Any]:
        """Return cache statistics.

        Returns:
            ``{"enabled": False}`` when disabled, otherwise ``enabled``,
            ``size`` (number of entries), ``directory`` and ``ttl_seconds``.
        """
        if self._cache is None:
            return {"enabled": False}
        return {
            "enabled": True,
            "size": len(self._cache),
            "directory": str(self._directory),
            "ttl_seconds": self._config.ttl_seconds,
        }

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache`."""
        if self._cache is not None:
            self._cache.close()

    @staticmethod
    def _make_key(url: str) -> str:
        return hashlib.sha256(url.encode("utf-8")).hexdigest()
