"""Canonical Pydantic models shared across all artfeed modules.

The models fall into two groups:

**Feed models** -- the cached domain data and its wire envelope:
    :class:`FeedImage`, :class:`FeedItem`, :class:`CachedFeed`, and
    :class:`RemoteFeed`.

**Configuration models** -- serialised as JSON in the user's config
directory: :class:`FeedConfig`, :class:`RequestConfig`,
:class:`ImageCacheConfig`, :class:`OutputConfig`, and :class:`GlobalConfig`.

Feed items are frozen value objects compared field by field. Python
attribute names are snake_case; the camelCase names used on the wire and in
the store file are declared as aliases, so both ``FeedItem(object_number=...)``
and ``FeedItem.model_validate({"objectNumber": ...})`` work.
"""

from __future__ import annotations

from typing import Iterable

from pydantic import AliasChoices, AwareDatetime, BaseModel, ConfigDict, Field

DEFAULT_FEED_URL = (
    "https://www.rijksmuseum.nl/api/en/collection?involvedMaker=Rembrandt+van+Rijn"
)


# --- Feed models ---


class FeedImage(BaseModel):
    """Reference to a remote image: a stable ``guid`` and a fetchable ``url``."""

    model_config = ConfigDict(frozen=True)

    guid: str
    url: str


class FeedItem(BaseModel):
    """One object in the feed.

    ``id`` is the logical identity inside a feed, but uniqueness is not
    enforced: duplicates returned by the endpoint are passed through
    unchanged.

    Example::

        FeedItem(
            id="en-SK-C-5",
            object_number="SK-C-5",
            title="The Night Watch",
            long_title="The Night Watch, Rembrandt van Rijn, 1642",
            web_image=FeedImage(guid="a1", url="https://img.example/a1.jpg"),
            header_image=FeedImage(guid="h1", url="https://img.example/h1.jpg"),
        )
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    object_number: str = Field(alias="objectNumber")
    title: str
    long_title: str = Field(alias="longTitle")
    web_image: FeedImage = Field(alias="webImage")
    header_image: FeedImage = Field(alias="headerImage")


class CachedFeed(BaseModel):
    """The persisted payload: the feed items plus the instant they were fetched.

    ``timestamp`` always records when the items came back from the remote
    source, never when the payload was read from disk. It must carry a
    timezone; a stored payload with a naive timestamp fails validation and
    the store reports it as unreadable.
    """

    model_config = ConfigDict(frozen=True)

    items: list[FeedItem]
    timestamp: AwareDatetime


class RemoteFeed(BaseModel):
    """Wire envelope returned by the collection endpoint.

    The collection key is ``items``; ``artObjects`` (the key used by the
    upstream collection API) is accepted on input as well.
    """

    model_config = ConfigDict(populate_by_name=True)

    count: int
    items: list[FeedItem] = Field(validation_alias=AliasChoices("items", "artObjects"))

    @classmethod
    def encode(cls, items: Iterable[FeedItem]) -> bytes:
        """Serialise *items* into the wire envelope, as the endpoint would send it."""
        items = list(items)
        feed = cls(count=len(items), items=items)
        return feed.model_dump_json(by_alias=True).encode("utf-8")


# --- Configuration models ---


class FeedConfig(BaseModel):
    """Where the feed comes from and how long a stored copy stays fresh."""

    url: str = Field(default=DEFAULT_FEED_URL, description="Collection endpoint URL")
    max_age_seconds: int = Field(
        default=300, ge=0, description="Seconds a stored feed may be served"
    )
    store_file: str = Field(
        default="feed.store",
        description="Store file name under the cache directory, or an absolute path",
    )


class RequestConfig(BaseModel):
    """HTTP settings applied to every remote call."""

    timeout: float = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class ImageCacheConfig(BaseModel):
    """On-disk image response cache settings."""

    enabled: bool = Field(default=True, description="Enable image caching")
    ttl_seconds: int = Field(default=86400, description="Image cache TTL in seconds")


class OutputConfig(BaseModel):
    """Default output format preferences."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/artfeed/config.json``.

    Loaded and saved by :func:`~artfeed.config.load_global_config` and
    :func:`~artfeed.config.save_global_config`. See
    :func:`~artfeed.config.resolve_config` for how environment variables and
    CLI flags override it.
    """

    feed: FeedConfig = Field(default_factory=FeedConfig)
    request: RequestConfig = Field(default_factory=RequestConfig)
    images: ImageCacheConfig = Field(default_factory=ImageCacheConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
