"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Quiet and verbose modes
- format_response and print_table in every format
- Global instance management and module-level helpers
"""

from __future__ import annotations

import json

import pytest

from artfeed import output as output_module
from artfeed.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture(autouse=True)
def _reset_global_output():
    reset_output()
    yield
    reset_output()


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch stdout.isatty() to return False."""
    monkeypatch.setattr("artfeed.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch stdout.isatty() to return True."""
    monkeypatch.setattr("artfeed.output._is_tty", lambda: True)


# ------------------------------------------------------------------ #
# OutputFormat resolution
# ------------------------------------------------------------------ #


class TestOutputFormatResolution:
    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.RICH

    def test_auto_resolves_to_plain_when_tty_but_no_color(self, tty):
        mgr = OutputManager(format=OutputFormat.AUTO, no_color=True)
        assert mgr.format == OutputFormat.PLAIN

    def test_explicit_json_stays_json(self, tty):
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON


# ------------------------------------------------------------------ #
# NO_COLOR / TERM=dumb detection
# ------------------------------------------------------------------ #


class TestColorDisabling:
    def test_no_color_env_any_value(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb_disables_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_term_keeps_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# stdout / stderr discipline
# ------------------------------------------------------------------ #


class TestStdoutStderrDiscipline:
    def test_print_data_goes_to_stdout(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).print_data("hello")
        captured = capfd.readouterr()
        assert captured.out == "hello\n"
        assert captured.err == ""

    @pytest.mark.parametrize("method", ["info", "error", "warning", "success", "suggest"])
    def test_diagnostics_go_to_stderr(self, capfd, non_tty, method):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        getattr(mgr, method)("feed refreshed")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "feed refreshed" in captured.err

    def test_error_prefix_without_color(self, capfd, non_tty):
        OutputManager(no_color=True).error("no feed")
        assert capfd.readouterr().err == "Error: no feed\n"

    def test_suggest_prefix(self, capfd, non_tty):
        OutputManager(no_color=True).suggest("Try again later.")
        assert "→ Try again later." in capfd.readouterr().err


# ------------------------------------------------------------------ #
# Quiet / verbose
# ------------------------------------------------------------------ #


class TestQuietAndVerbose:
    @pytest.mark.parametrize("method", ["info", "success", "suggest"])
    def test_quiet_suppresses(self, capfd, non_tty, method):
        getattr(OutputManager(no_color=True, quiet=True), method)("hidden")
        assert capfd.readouterr().err == ""

    @pytest.mark.parametrize("method", ["warning", "error"])
    def test_quiet_keeps_problems(self, capfd, non_tty, method):
        getattr(OutputManager(no_color=True, quiet=True), method)("shown")
        assert "shown" in capfd.readouterr().err

    def test_debug_hidden_by_default(self, capfd, non_tty):
        OutputManager(no_color=True).debug("cache hit")
        assert capfd.readouterr().err == ""

    def test_debug_shown_with_verbose(self, capfd, non_tty):
        mgr = OutputManager(no_color=True, verbose=True)
        mgr.debug("cache hit")
        assert capfd.readouterr().err == "[debug] cache hit\n"
        assert mgr.is_verbose


# ------------------------------------------------------------------ #
# Data formats
# ------------------------------------------------------------------ #


class TestFormatResponse:
    def test_json(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON).format_response({"state": "present", "items": 3})
        assert json.loads(capfd.readouterr().out) == {"state": "present", "items": 3}

    def test_plain_dict(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN).format_response({"state": "empty", "fresh": False})
        assert capfd.readouterr().out == "state\tempty\nfresh\tFalse\n"

    def test_plain_list_of_dicts(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN).format_response([{"a": 1, "b": 2}, {"a": 3, "b": 4}])
        assert capfd.readouterr().out == "1\t2\n3\t4\n"

    def test_rich_produces_output(self, capfd, non_tty):
        OutputManager(format=OutputFormat.RICH, no_color=True).format_response({"k": "v"})
        assert "k" in capfd.readouterr().out


class TestPrintTable:
    HEADERS = ["Object", "Title"]
    ROWS = [["SK-A-1", "Painting 1"], ["SK-A-2", "Painting 2"]]

    def test_plain_is_tab_separated(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN).print_table(self.HEADERS, self.ROWS)
        assert capfd.readouterr().out.splitlines() == [
            "Object\tTitle",
            "SK-A-1\tPainting 1",
            "SK-A-2\tPainting 2",
        ]

    def test_json_is_records(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON).print_table(self.HEADERS, self.ROWS)
        assert json.loads(capfd.readouterr().out) == [
            {"Object": "SK-A-1", "Title": "Painting 1"},
            {"Object": "SK-A-2", "Title": "Painting 2"},
        ]

    def test_rich_renders_cells(self, capfd, non_tty):
        OutputManager(format=OutputFormat.RICH, no_color=True).print_table(
            self.HEADERS, self.ROWS, title="2 item(s)"
        )
        out = capfd.readouterr().out
        assert "Object" in out
        assert "Painting" in out


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_get_output_creates_default(self):
        assert isinstance(get_output(), OutputManager)
        assert get_output() is get_output()

    def test_set_output_replaces(self):
        mgr = OutputManager(quiet=True)
        set_output(mgr)
        assert get_output() is mgr

    def test_module_helpers_delegate(self, capfd, non_tty):
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True))
        output_module.info("info line")
        output_module.debug("debug line")
        output_module.format_response("data line")
        captured = capfd.readouterr()
        assert captured.out == "data line\n"
        assert "info line" in captured.err
        assert "[debug] debug line" in captured.err
