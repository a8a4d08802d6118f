"""artfeed -- TTL read-through cache for a remote art collection feed.

The package sits between a consumer and a slow, unreliable collection
endpoint. Every read decides whether the feed persisted on disk is still
fresh enough to serve; otherwise it refreshes from the remote endpoint and
writes the result back for next time.

Typical use::

    store = LocalFeedStore(get_store_path(config))
    async with RemoteFeedLoader(config.feed.url) as remote:
        cache = FeedCache(store, remote, max_age=timedelta(minutes=5),
                          current_date=lambda: datetime.now(timezone.utc))
        items = await cache.load()

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the package.
    config: XDG-aware configuration with atomic writes.
    exceptions: Exception hierarchy with exit-code mapping.
    feed_cache: The TTL read-through orchestrator.
    dispatch: Decorators that deliver completions on a designated loop.
    store: Durable single-resource feed store.
    loader: Feed loader contract and the remote HTTP loader.
    images: Image loading with an on-disk response cache.
    output: stdout/stderr formatting with Rich support.
"""

__version__ = "0.1.0"
