"""Rich rendering of resolution results."""

from pathlib import Path

from rich.console import Console
from rich.table import Table

from .models import PlacementWarning
from .models import ResolutionWarning
from .models import ResolvedDependency
from .utils.error_format import escape_markup


def display_path(path: Path, root: Path | None = None) -> str:
    """Show `path` relative to `root` when it lives underneath it."""
    if root is not None and path.is_relative_to(root):
        return path.relative_to(root).as_posix()
    return str(path)


def render_closure(
    console: Console,
    dependencies: list[ResolvedDependency],
    root: Path | None = None,
    title: str = "Bundled dependencies",
) -> None:
    if not dependencies:
        console.print("[dim]No external dependencies to bundle.[/dim]")
        return

    table = Table(title=title, title_justify="left")
    table.add_column("Specifier", style="cyan", no_wrap=True)
    table.add_column("Version", style="green")
    table.add_column("Source")
    for dependency in sorted(dependencies, key=lambda d: d.specifier):
        table.add_row(
            escape_markup(dependency.specifier),
            escape_markup(dependency.version or "-"),
            escape_markup(display_path(dependency.source_directory, root)),
        )
    console.print(table)


def render_warnings(console: Console, warnings: list[ResolutionWarning | PlacementWarning]) -> None:
    if not warnings:
        return
    console.print(f"[yellow]⚠ {len(warnings)} warning(s):[/yellow]")
    for warning in warnings:
        console.print(f"  [yellow]•[/yellow] {escape_markup(warning.message)}")


def closure_as_json(dependencies: list[ResolvedDependency], warnings: list[ResolutionWarning]) -> dict:
    """Machine-readable view of a resolution result."""
    return {
        "dependencies": [
            {
                "specifier": d.specifier,
                "name": d.name,
                "version": d.version,
                "source_directory": str(d.source_directory),
            }
            for d in dependencies
        ],
        "warnings": [warning.message for warning in warnings],
    }
