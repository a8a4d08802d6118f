"""Shared test fixtures for artfeed.

Provides sample feed items, spy doubles for the store and the loader,
isolated config environments, and output state management. These fixtures
are discovered by pytest and available to every test module.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import pytest

from artfeed.exceptions import InvalidResponseError, StoreError
from artfeed.loader.base import FeedLoader
from artfeed.models import CachedFeed, FeedImage, FeedItem
from artfeed.output import OutputFormat, OutputManager, reset_output, set_output
from artfeed.store.base import EMPTY, FeedStore, Present, StoreState


FIXED_NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_item(n: int) -> FeedItem:
    """Build a distinct, fully populated feed item."""
    return FeedItem(
        id=f"en-SK-A-{n}",
        object_number=f"SK-A-{n}",
        title=f"Painting {n}",
        long_title=f"Painting {n}, Rembrandt van Rijn, 16{n:02d}",
        web_image=FeedImage(guid=f"w{n}", url=f"https://img.example/w{n}.jpg"),
        header_image=FeedImage(guid=f"h{n}", url=f"https://img.example/h{n}.jpg"),
    )


class FakeClock:
    """A settable ``current_date`` for the feed cache."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class StoreSpy(FeedStore):
    """In-memory store that records every call.

    ``state`` is what ``load`` returns; set ``load_error`` / ``save_error``
    to make the corresponding call fail. ``load_gate`` holds ``load`` until
    the event is set.
    """

    def __init__(self, state: StoreState = EMPTY) -> None:
        self.state = state
        self.load_error: Optional[Exception] = None
        self.save_error: Optional[Exception] = None
        self.load_gate: Optional[asyncio.Event] = None
        self.calls: list[str] = []
        self.saved: list[CachedFeed] = []

    def load(self):  # noqa: ANN201
        self.calls.append("load")
        return self._load()

    async def _load(self) -> StoreState:
        if self.load_gate is not None:
            await self.load_gate.wait()
        if self.load_error is not None:
            raise self.load_error
        return self.state

    def save(self, payload: CachedFeed):  # noqa: ANN201
        self.calls.append("save")
        return self._save(payload)

    async def _save(self, payload: CachedFeed) -> None:
        if self.save_error is not None:
            raise self.save_error
        self.saved.append(payload)
        self.state = Present(payload)

    def delete(self):  # noqa: ANN201
        self.calls.append("delete")
        return self._delete()

    async def _delete(self) -> None:
        self.state = EMPTY


class LoaderSpy(FeedLoader):
    """Feed loader returning ``items`` or raising ``error``, counting calls."""

    def __init__(
        self,
        items: Optional[list[FeedItem]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.items = items if items is not None else []
        self.error = error
        self.load_count = 0

    async def load(self) -> list[FeedItem]:
        self.load_count += 1
        if self.error is not None:
            raise self.error
        return list(self.items)


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time; CliRunner swaps those streams per invocation.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Feed fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def items() -> list[FeedItem]:
    return [make_item(1), make_item(2), make_item(3)]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store_spy() -> StoreSpy:
    return StoreSpy()


@pytest.fixture
def loader_spy(items: list[FeedItem]) -> LoaderSpy:
    return LoaderSpy(items=items)


@pytest.fixture
def failing_loader() -> LoaderSpy:
    return LoaderSpy(error=InvalidResponseError("HTTP 503", status_code=503))


@pytest.fixture
def broken_store() -> StoreSpy:
    """A store whose load and save both fail."""
    spy = StoreSpy()
    spy.load_error = StoreError("unreadable")
    spy.save_error = StoreError("read-only")
    return spy


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME, XDG_CACHE_HOME, and XDG_DATA_HOME at
    subdirectories of tmp_path, clears the ARTFEED_* environment
    variables, and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ["ARTFEED_URL", "ARTFEED_MAX_AGE", "NO_COLOR"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def verbose_output() -> OutputManager:
    """Install a PLAIN-format, verbose, colourless OutputManager."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
