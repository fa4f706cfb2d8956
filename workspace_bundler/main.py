"""workspace-bundler CLI - package one workspace package for deployment."""

import logging

import click

from .commands import bundle_cmd
from .commands import config
from .commands import deps_cmd
from .logging_setup import init_logging

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(package_name="workspace-bundler")
@click.option("--verbose", "-v", is_flag=True, help="Show debug output")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also write JSONL logs to this file",
)
def cli(verbose: bool, log_file: str | None):
    """Bundle a workspace package with just the dependencies it needs."""
    init_logging(verbose=verbose, log_file=log_file)


cli.add_command(bundle_cmd)
cli.add_command(deps_cmd)
cli.add_command(config)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
