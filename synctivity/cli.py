#!/usr/bin/env python3

import click

from synctivity.commands.sync import sync_handler
from synctivity.commands.setup import setup_handler


@click.group()
@click.version_option(package_name='synctivity')
def cli():
    """synctivity - Replay your commit activity into one repository.

    Collects the commits you authored across many local repositories and
    recreates them, without any file content, in a single target repository.
    """
    pass


cli.add_command(setup_handler, name='setup')
cli.add_command(sync_handler, name='sync')


def main():
    cli()

if __name__ == "__main__":
    main()
