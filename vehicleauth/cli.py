"""vehicleauth CLI - Main entry point and command registration hub."""
# ruff: noqa: E402 - Intentional lazy loading: commands imported after cli group definition

import click

from vehicleauth import __version__
from vehicleauth.utils.logging import set_console_level


@click.group()
@click.version_option(version=__version__, prog_name="vehicleauth")
@click.help_option("-h", "--help")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
@click.option("-q", "--quiet", is_flag=True, help="Only log errors")
def cli(verbose, quiet):
    """Vehicle Authorization Database Manager.

    Creates, verifies and backs up the vehicle authorization schema:
    19 entities, their indexes and foreign-key relationships.

    \b
    QUICK START:
      vehicleauth create            # Drop and recreate the schema
      vehicleauth verify            # Compare the database with the catalog
      vehicleauth menu              # Interactive menu (backs up first)

    \b
    Database and backup paths come from vehicleauth.toml or
    VEHICLEAUTH_PATHS_DATABASE / VEHICLEAUTH_PATHS_BACKUP_DIR."""
    if verbose:
        set_console_level("DEBUG")
    elif quiet:
        set_console_level("ERROR")


from vehicleauth.commands.backup import backup
from vehicleauth.commands.create import create
from vehicleauth.commands.ddl import ddl
from vehicleauth.commands.info import info
from vehicleauth.commands.menu import menu
from vehicleauth.commands.order import order
from vehicleauth.commands.verify import verify

cli.add_command(create)
cli.add_command(verify)
cli.add_command(backup)
cli.add_command(order)
cli.add_command(ddl)
cli.add_command(info)
cli.add_command(menu)


def main():
    """Main entry point for console script."""
    cli()


if __name__ == "__main__":
    main()
