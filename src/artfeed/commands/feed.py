"""Feed commands -- read, clear, and inspect the cached feed.

Provides the ``artfeed feed`` sub-command group:

* ``show`` reads the feed through the TTL cache and prints it;
* ``clear`` empties the local store so the next read refetches;
* ``status`` reports what the store holds and whether it is still fresh;
* ``image`` downloads one image through the on-disk image cache.

Each command resolves the effective configuration with
:func:`~artfeed.config.resolve_config`, runs its async work with
:func:`asyncio.run`, and turns an :class:`~artfeed.exceptions.ArtfeedError`
into an error message and the error's exit code.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import typer

from artfeed.exceptions import ArtfeedError, FetchError
from artfeed.models import FeedItem, GlobalConfig
from artfeed.output import (
    OutputFormat,
    debug,
    error,
    format_response,
    get_output,
    info,
    print_table,
    success,
    suggest,
)

if TYPE_CHECKING:
    from artfeed.images import RemoteImageLoader
    from artfeed.loader.remote import RemoteFeedLoader


feed_app = typer.Typer(no_args_is_help=True)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _build_remote_loader(config: GlobalConfig) -> RemoteFeedLoader:
    """Create the HTTP feed loader for *config*. Patched in tests."""
    from artfeed.loader.remote import RemoteFeedLoader

    return RemoteFeedLoader(
        config.feed.url,
        timeout=config.request.timeout,
        verify_ssl=config.request.verify_ssl,
    )


def _build_image_loader(config: GlobalConfig) -> RemoteImageLoader:
    """Create the HTTP image loader for *config*. Patched in tests."""
    from artfeed.config import get_cache_dir
    from artfeed.images import ImageCache, RemoteImageLoader

    return RemoteImageLoader(
        ImageCache(get_cache_dir(), config.images),
        timeout=config.request.timeout,
        verify_ssl=config.request.verify_ssl,
    )


def _resolve(url: Optional[str] = None, max_age: Optional[int] = None) -> GlobalConfig:
    from artfeed.config import resolve_config

    try:
        return resolve_config(cli_url=url, cli_max_age=max_age)
    except ArtfeedError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


async def _read_feed(config: GlobalConfig) -> list[FeedItem]:
    from artfeed.config import get_store_path
    from artfeed.feed_cache import FeedCache
    from artfeed.store import LocalFeedStore

    store = LocalFeedStore(get_store_path(config))
    try:
        async with _build_remote_loader(config) as remote:
            cache = FeedCache(
                store,
                remote,
                max_age=timedelta(seconds=config.feed.max_age_seconds),
                current_date=_now,
            )
            try:
                return await cache.load()
            finally:
                cache.close()
    finally:
        store.close()


@feed_app.command("show")
def feed_show(
    url: Optional[str] = typer.Option(
        None, "--url", help="Collection endpoint URL (overrides config)."
    ),
    max_age: Optional[int] = typer.Option(
        None, "--max-age", min=0, help="Seconds a stored feed may be served."
    ),
) -> None:
    """Show the feed, served from the local store while it is fresh.

    Example::

        artfeed feed show
        artfeed feed show --max-age 0
        artfeed --json feed show
    """
    config = _resolve(url, max_age)
    try:
        items = asyncio.run(_read_feed(config))
    except FetchError as exc:
        error(f"No feed available: {exc}")
        suggest("Try again later.")
        raise typer.Exit(code=exc.exit_code) from None

    if get_output().format == OutputFormat.JSON:
        format_response([item.model_dump(mode="json", by_alias=True) for item in items])
        return

    rows = [[item.object_number, item.title, item.web_image.url] for item in items]
    print_table(["Object", "Title", "Image"], rows, title=f"{len(items)} item(s)")


@feed_app.command("clear")
def feed_clear() -> None:
    """Empty the local store so the next read fetches from the endpoint.

    Example::

        artfeed feed clear
    """
    from artfeed.config import get_store_path
    from artfeed.store import LocalFeedStore

    config = _resolve()
    store = LocalFeedStore(get_store_path(config))

    async def _clear() -> None:
        try:
            await store.delete()
        finally:
            store.close()

    try:
        asyncio.run(_clear())
    except ArtfeedError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    success(f"Cleared {store.path}")


@feed_app.command("status")
def feed_status(
    max_age: Optional[int] = typer.Option(
        None, "--max-age", min=0, help="Freshness window in seconds (overrides config)."
    ),
) -> None:
    """Report what the local store holds and whether it would be served.

    Example::

        artfeed feed status
        artfeed --json feed status
    """
    from artfeed.config import get_store_path
    from artfeed.store import LocalFeedStore, Present

    config = _resolve(max_age=max_age)
    store = LocalFeedStore(get_store_path(config))

    async def _load():  # noqa: ANN202
        try:
            return await store.load()
        finally:
            store.close()

    try:
        state = asyncio.run(_load())
    except ArtfeedError as exc:
        error(str(exc))
        suggest("Run: artfeed feed clear")
        raise typer.Exit(code=exc.exit_code) from None

    report: dict[str, object] = {
        "store": str(store.path),
        "max_age_seconds": config.feed.max_age_seconds,
    }
    if isinstance(state, Present):
        age = _now() - state.payload.timestamp
        report.update(
            {
                "state": "present",
                "items": len(state.payload.items),
                "fetched_at": state.payload.timestamp.isoformat(),
                "age_seconds": int(age.total_seconds()),
                "fresh": age <= timedelta(seconds=config.feed.max_age_seconds),
            }
        )
    else:
        report["state"] = "empty"
    debug(f"Store state: {report['state']}")
    format_response(report)


@feed_app.command("image")
def feed_image(
    url: str = typer.Argument(help="Image URL, e.g. an item's web image."),
    output_path: Path = typer.Option(
        ..., "--output", "-o", help="File to write the image to."
    ),
) -> None:
    """Download one image through the on-disk image cache.

    Example::

        artfeed feed image https://img.example/a1.jpg -o night-watch.jpg
    """
    from artfeed.config import atomic_write

    config = _resolve()

    async def _download() -> bytes:
        loader = _build_image_loader(config)
        try:
            async with loader:
                return await loader.load(url)
        finally:
            if loader.cache is not None:
                loader.cache.close()

    try:
        data = asyncio.run(_download())
    except ArtfeedError as exc:
        error(f"Cannot load image: {exc}")
        raise typer.Exit(code=exc.exit_code) from None

    atomic_write(output_path, data)
    info(f"Wrote {len(data)} bytes to {output_path}")
