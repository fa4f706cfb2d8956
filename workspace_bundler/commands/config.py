"""Config commands - inspect and change persisted bundling defaults."""

from pathlib import Path

import click
import yaml

from ..console import console
from ..errors import ConfigurationError
from ..settings import BundlerSettings
from ..settings import SettingsPaths
from ..utils.error_format import escape_markup

_ROOT_OPTION = click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Workspace root",
)


@click.group()
def config():
    """Manage workspace-bundler settings.

    Settings are read from ~/.workspace-bundler/settings.yaml (global) and
    <root>/.workspace-bundler/settings.yaml (project); project wins.
    """


@config.command("show")
@_ROOT_OPTION
def show(root: Path):
    """Show the effective bundling options."""
    settings = BundlerSettings(SettingsPaths.default(root))
    try:
        options = settings.get_bundle_options()
    except (ConfigurationError, TypeError) as e:
        raise click.ClickException(f"Invalid settings: {e}")
    for key, value in vars(options).items():
        console.print(f"[cyan]{key}[/cyan]: {escape_markup(value)}")


@config.command("set")
@click.argument("key")
@click.argument("value")
@click.option("--global", "global_scope", is_flag=True, help="Write to the user settings instead of the project")
@_ROOT_OPTION
def set_value(key: str, value: str, global_scope: bool, root: Path):
    """Persist KEY=VALUE (VALUE is parsed as YAML, so `false` is a boolean)."""
    settings = BundlerSettings(SettingsPaths.default(root))
    scope = "global" if global_scope else "project"
    try:
        settings.set_setting(key, yaml.safe_load(value), scope=scope)
    except (ConfigurationError, TypeError, yaml.YAMLError) as e:
        raise click.ClickException(str(e))
    console.print(f"[green]✓[/green] Set {escape_markup(key)} ({scope})")
