"""The ``artfeed`` command line.

``artfeed feed ...`` reads the collection feed through the local TTL cache;
``artfeed config ...`` edits the settings that drive it. :func:`main` is the
console-script entry point: it turns an escaped
:class:`~artfeed.exceptions.ArtfeedError` into its exit code and anything
unexpected into a crash log under the data directory.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path

import typer

from artfeed import __version__
from artfeed.exit_codes import EXIT_GENERIC_FAILURE
from artfeed.output import OutputFormat, OutputManager, set_output

EXIT_INTERRUPTED = 130

app = typer.Typer(
    name="artfeed",
    help="Browse a remote art collection feed through a local TTL cache.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

from artfeed.commands.config import config_app  # noqa: E402
from artfeed.commands.feed import feed_app  # noqa: E402

app.add_typer(feed_app, name="feed", help="Read and manage the cached feed.")
app.add_typer(config_app, name="config", help="Show and edit the artfeed settings.")


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"artfeed {__version__}")
        raise typer.Exit()


def _pick_format(json_output: bool, plain_output: bool) -> OutputFormat:
    """Explicit flags win; otherwise use ``output.format`` from the config file.

    A config file that cannot be read, or names an unknown format, falls
    back to ``AUTO``. The command that loads the config reports the problem.
    """
    from artfeed.config import load_global_config
    from artfeed.exceptions import ConfigError

    if json_output:
        return OutputFormat.JSON
    if plain_output:
        return OutputFormat.PLAIN
    try:
        return OutputFormat(load_global_config().output.format)
    except (ConfigError, ValueError):
        return OutputFormat.AUTO


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", callback=_show_version, is_eager=True, help="Show version and exit."
    ),
    json_output: bool = typer.Option(False, "--json", help="Write data as JSON."),
    plain_output: bool = typer.Option(False, "--plain", help="Write data as plain text."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colour."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Hide informational messages."),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Trace what the feed cache does."
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmations."),
) -> None:
    """Install the output manager and share ``force``/``verbose`` through ``ctx.obj``."""
    set_output(
        OutputManager(
            format=_pick_format(json_output, plain_output),
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
        )
    )
    ctx.ensure_object(dict)
    ctx.obj.update(force=force, verbose=verbose)


def _on_sigint(signum: int, frame: object) -> None:
    sys.stderr.write("\nCancelled.\n")
    sys.exit(EXIT_INTERRUPTED)


def _write_crash_log(exc: BaseException) -> Path:
    """Save the traceback of *exc* to ``<data_dir>/logs/crash-<time>.log``."""
    from artfeed.config import get_data_dir

    log_path = get_data_dir() / "logs" / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    log_path.parent.mkdir(parents=True, exist_ok=True)
    log_path.write_text("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
    return log_path


def main() -> None:
    """Console-script entry point.

    Raises:
        SystemExit: Always; with the Typer exit code, the exit code of an
            escaped :class:`~artfeed.exceptions.ArtfeedError`,
            :data:`EXIT_INTERRUPTED` on Ctrl-C, or
            :data:`~artfeed.exit_codes.EXIT_GENERIC_FAILURE` after a crash.
    """
    from artfeed.exceptions import ArtfeedError
    from artfeed.output import error

    signal.signal(signal.SIGINT, _on_sigint)
    try:
        app()
    except KeyboardInterrupt:
        _on_sigint(signal.SIGINT, None)
    except ArtfeedError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        error(f"Unexpected error. Debug log: {_write_crash_log(exc)}")
        sys.exit(EXIT_GENERIC_FAILURE)
