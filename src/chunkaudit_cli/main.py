"""Chunkaudit command group."""
import click

from .check import check


@click.group()
@click.version_option(package_name="chunkaudit")
def cli():
    """Offline consistency auditor for chunk stores."""


cli.add_command(check)


if __name__ == "__main__":
    cli()
