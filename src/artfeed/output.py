"""Terminal output for artfeed: feed data on stdout, diagnostics on stderr.

Everything a script might parse (the feed table, ``--json`` documents,
status reports) goes to stdout. Everything meant for a human (progress,
warnings, errors, hints, and the ``--verbose`` cache trace) goes to
stderr, so ``artfeed --json feed show | jq`` keeps working while the cache
explains itself.

Format selection: ``--json`` and ``--plain`` force a format; otherwise
:attr:`OutputFormat.AUTO` picks Rich on an interactive terminal and plain
text when piped. ``NO_COLOR`` (any value), ``TERM=dumb``, and
``--no-color`` strip colour.

Library modules never hold an :class:`OutputManager`. They call the
module-level helpers (:func:`debug`, :func:`warning`, ...), which delegate
to whatever :func:`set_output` installed during CLI startup.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, NamedTuple, Optional

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """How data written to stdout is rendered."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class _Level(NamedTuple):
    prefix: str
    style: Optional[str]
    quietable: bool


_INFO = _Level("", None, True)
_SUCCESS = _Level("", "green", True)
_HINT = _Level("→ ", "dim", True)
_DEBUG = _Level("[debug] ", "dim", False)
_WARNING = _Level("Warning: ", "yellow", False)
_ERROR = _Level("Error: ", "bold red", False)


def _dumps(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


class OutputManager:
    """Routes data to stdout and diagnostics to stderr.

    Args:
        format: Desired data format; ``AUTO`` is resolved once, here.
        no_color: Disable colour even on a terminal.
        quiet: Drop informational messages, success notes, and hints.
            Warnings and errors are always shown.
        verbose: Show :meth:`debug` messages.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._format = self._resolve(format)

        rich_data = self._format == OutputFormat.RICH
        self._stdout = Console(file=sys.stdout, no_color=self._no_color, force_terminal=rich_data)
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    def _resolve(self, requested: OutputFormat) -> OutputFormat:
        if requested != OutputFormat.AUTO:
            return requested
        if _is_tty() and not self._no_color:
            return OutputFormat.RICH
        return OutputFormat.PLAIN

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # --- stdout ---

    def format_response(self, data: Any) -> None:
        """Write a report (dict, list, or scalar) in the active format."""
        if self._format == OutputFormat.JSON:
            self.print_data(_dumps(data))
            return
        if self._format == OutputFormat.RICH:
            self._stdout.print(Syntax(_dumps(data), "json", theme="monokai", word_wrap=True))
            return

        if isinstance(data, dict):
            lines = [f"{key}\t{value}" for key, value in data.items()]
        elif isinstance(data, list):
            lines = [
                "\t".join(str(v) for v in entry.values()) if isinstance(entry, dict) else str(entry)
                for entry in data
            ]
        else:
            lines = [str(data)]
        for line in lines:
            self.print_data(line)

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Write rows as a Rich table, JSON records, or tab-separated lines.

        *title* is only shown by the Rich renderer.
        """
        if self._format == OutputFormat.JSON:
            self.print_data(_dumps([dict(zip(headers, row)) for row in rows]))
        elif self._format == OutputFormat.PLAIN:
            for row in [headers, *rows]:
                self.print_data("\t".join(row))
        else:
            table = Table(*headers, title=title, header_style="bold cyan")
            for row in rows:
                table.add_row(*(escape(cell) for cell in row))
            self._stdout.print(table)

    # --- stderr ---

    def info(self, message: str) -> None:
        self._diagnostic(_INFO, message)

    def success(self, message: str) -> None:
        self._diagnostic(_SUCCESS, message)

    def warning(self, message: str) -> None:
        self._diagnostic(_WARNING, message)

    def error(self, message: str) -> None:
        self._diagnostic(_ERROR, message)

    def suggest(self, message: str) -> None:
        """Next-step hint, e.g. the command that fixes the problem."""
        self._diagnostic(_HINT, message)

    def debug(self, message: str) -> None:
        """Trace line, shown only with ``--verbose``."""
        if self._verbose:
            self._diagnostic(_DEBUG, message)

    def _diagnostic(self, level: _Level, message: str) -> None:
        if self._quiet and level.quietable:
            return
        text = f"{level.prefix}{message}"
        if self._no_color:
            print(text, file=sys.stderr, flush=True)
        elif level.style is None:
            self._stderr.print(text, markup=False, highlight=False)
        else:
            self._stderr.print(f"[{level.style}]{escape(text)}[/]", highlight=False)


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set to anything, or ``TERM=dumb``."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


# --- Global instance ---

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager; tests call this between cases."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_table(
    headers: list[str],
    rows: list[list[str]],
    title: Optional[str] = None,
) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def debug(message: str) -> None:
    get_output().debug(message)
