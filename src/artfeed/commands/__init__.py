"""Built-in CLI sub-commands for artfeed.

* :mod:`~artfeed.commands.feed` -- read the feed through the cache, clear
  the store, report its freshness, and download images.
* :mod:`~artfeed.commands.config` -- view and modify global settings.

Each module exports a :class:`typer.Typer` sub-application that
:mod:`artfeed.app` mounts on the root app.
"""
