#!/usr/bin/env python3

import click

from depstags.commands.update import update_handler
from depstags.commands.roots import roots_handler
from depstags.commands.config import config_cmd


@click.group()
@click.version_option(package_name='depstags')
def cli():
    """depstags - Tags files for a project and its dependency graph.

    Maintains one ctags file per unique dependency and regenerates only
    the ones that are missing or stale.
    """
    pass


cli.add_command(update_handler, name='update')
cli.add_command(roots_handler, name='roots')
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
