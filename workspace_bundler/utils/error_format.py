"""Turn bundler failures into CLI output.

Commands catch BundlerError and re-raise it as a click.ClickException; a
failed build additionally shows the tail of the build command's output.
"""

from __future__ import annotations

import click
from rich.markup import escape as _escape_markup

from ..errors import BuildError
from ..errors import BundlerError

BUILD_OUTPUT_LINES = 40


def build_output_tail(error: BuildError, lines: int = BUILD_OUTPUT_LINES) -> str:
    """Last `lines` lines of a failed build's output ("" when there was none)."""
    output = error.output.rstrip().splitlines()
    if len(output) <= lines:
        return "\n".join(output)
    omitted = len(output) - lines
    return "\n".join([f"... ({omitted} earlier lines omitted)", *output[-lines:]])


def to_click_exception(error: BundlerError) -> click.ClickException:
    """ClickException carrying the error message, never an empty one."""
    return click.ClickException(str(error) or f"{type(error).__name__} (no details)")


def escape_markup(value: object) -> str:
    """Escape a value for safe interpolation into Rich markup strings."""
    return _escape_markup(str(value))
