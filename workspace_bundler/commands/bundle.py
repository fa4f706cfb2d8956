"""Bundle command - package one workspace package into a deployable archive."""

from pathlib import Path

import click

from ..bundler import Bundler
from ..console import console
from ..console import err_console
from ..display import render_closure
from ..display import render_warnings
from ..errors import BuildError
from ..errors import BundlerError
from ..settings import LAYOUTS
from ..settings import load_bundle_options
from ..utils.error_format import build_output_tail
from ..utils.error_format import escape_markup
from ..utils.error_format import to_click_exception


@click.command("bundle")
@click.argument("folder")
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Workspace root (directory holding the root package.json)",
)
@click.option("--build-dir", default=None, help="Scratch directory, relative to the root [default: _build]")
@click.option("--output", "-o", default=None, help="Archive path [default: <package-name>.zip]")
@click.option("--no-build", is_flag=True, help="Skip the package's build script")
@click.option("--layout", type=click.Choice(LAYOUTS), default=None, help="Where modules go inside the bundle")
@click.option("--keep-build-dir", is_flag=True, help="Do not delete the build directory afterwards")
@click.option("--no-archive", is_flag=True, help="Leave the bundle as a directory instead of a zip")
@click.option("--strict", is_flag=True, help="Fail when any dependency could not be resolved")
def bundle_cmd(
    folder: str,
    root: Path,
    build_dir: str | None,
    output: str | None,
    no_build: bool,
    layout: str | None,
    keep_build_dir: bool,
    no_archive: bool,
    strict: bool,
):
    """Package FOLDER with only the external modules it needs.

    FOLDER is the name of a workspace package directory.

    Examples:

        \b
        # Build and zip packages/api into api.zip
        workspace-bundler bundle api

        \b
        # Nest modules under the package name, keep the scratch dir
        workspace-bundler bundle api --layout layered --keep-build-dir
    """
    try:
        options = load_bundle_options(
            root,
            build_dir=build_dir,
            output=output,
            build=False if no_build else None,
            layout=layout,
            keep_build_dir=True if keep_build_dir else None,
            archive=False if no_archive else None,
            strict=True if strict else None,
        )
        report = Bundler(root, options).bundle(folder)
    except BuildError as e:
        tail = build_output_tail(e)
        if tail:
            err_console.print(escape_markup(tail), highlight=False)
        raise to_click_exception(e)
    except BundlerError as e:
        raise to_click_exception(e)

    render_closure(console, report.resolution.dependencies, root=Path(root).resolve())
    render_warnings(err_console, report.warnings)

    if report.archive is not None:
        console.print(f"[green]✓[/green] Wrote {escape_markup(report.archive)}")
    else:
        console.print(f"[green]✓[/green] Bundle ready in {escape_markup(report.build_dir)}")

    if report.warnings and options.strict:
        raise click.ClickException(f"{len(report.warnings)} warning(s) in strict mode")
