"""Deps command - show the dependency closure without bundling anything."""

import json
from pathlib import Path

import click

from ..bundler import Bundler
from ..console import console
from ..console import err_console
from ..display import closure_as_json
from ..display import render_closure
from ..display import render_warnings
from ..errors import BundlerError
from ..settings import load_bundle_options
from ..utils.error_format import to_click_exception


@click.command("deps")
@click.argument("folder")
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Workspace root (directory holding the root package.json)",
)
@click.option("--json", "as_json", is_flag=True, help="Print the closure as JSON")
@click.option("--strict", is_flag=True, help="Exit non-zero when warnings were reported")
def deps_cmd(folder: str, root: Path, as_json: bool, strict: bool):
    """List the external modules FOLDER would bundle."""
    try:
        options = load_bundle_options(root, strict=True if strict else None)
        bundler = Bundler(root, options)
        result = bundler.resolve(bundler.plan(folder))
    except BundlerError as e:
        raise to_click_exception(e)

    if as_json:
        click.echo(json.dumps(closure_as_json(result.dependencies, result.warnings), indent=2))
    else:
        render_closure(console, result.dependencies, root=Path(root).resolve())
        render_warnings(err_console, result.warnings)

    if result.warnings and options.strict:
        raise click.ClickException(f"{len(result.warnings)} resolution warning(s) in strict mode")
