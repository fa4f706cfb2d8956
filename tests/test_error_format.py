"""Tests for CLI error formatting."""

import click

from workspace_bundler.errors import BuildError
from workspace_bundler.errors import BundlerError
from workspace_bundler.errors import ConfigurationError
from workspace_bundler.utils.error_format import build_output_tail
from workspace_bundler.utils.error_format import escape_markup
from workspace_bundler.utils.error_format import to_click_exception


def test_click_exception_keeps_message():
    error = to_click_exception(ConfigurationError("Folder `x` was not found."))

    assert isinstance(error, click.ClickException)
    assert error.message == "Folder `x` was not found."


def test_click_exception_for_empty_message():
    assert to_click_exception(BundlerError()).message == "BundlerError (no details)"


def test_build_error_message():
    error = to_click_exception(BuildError("yarn build", 1, "boom"))

    assert error.message == "Build command 'yarn build' failed with exit code 1"


def test_build_output_tail_keeps_short_output():
    assert build_output_tail(BuildError("yarn build", 1, "one\ntwo\n")) == "one\ntwo"
    assert build_output_tail(BuildError("yarn build", 1)) == ""


def test_build_output_tail_truncates_long_output():
    output = "\n".join(f"line {i}" for i in range(10))

    tail = build_output_tail(BuildError("yarn build", 2, output), lines=3)

    assert tail.splitlines() == ["... (7 earlier lines omitted)", "line 7", "line 8", "line 9"]


def test_escape_markup():
    assert escape_markup("[red]x[/red]") == "\\[red]x\\[/red]"
