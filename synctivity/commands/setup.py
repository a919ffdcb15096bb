"""
Setup command for synctivity.

Creates the base directory and an empty target repository inside it.
"""

import click
from typing import Optional, Tuple

from ..config import load_config, save_config, get_base_dir, get_config_path, get_target_path
from ..cli_utils import standard_command, add_common_options
from ..domain import Identity
from ..infra import GitClient
from ..services import TargetRepository
from .sync import configured_emails, require_author_name


@click.command('setup')
@click.option('-n', '--author-name', help='Name to store in the configuration')
@click.option('-e', '--author-email', 'author_emails', multiple=True,
              help='Email address(es) to store in the configuration, comma-delimited')
@add_common_options('verbose', 'quiet')
@standard_command
def setup_handler(
    author_name: Optional[str],
    author_emails: Tuple[str, ...],
    verbose: bool,
    quiet: bool,
    progress,
):
    """
    Prepare ~/.synctivity with an empty target repository.

    Set SYNCTIVITY_HOME to use another base directory. Passing an author
    name and emails also writes them to the configuration file.

    Examples:

    \b
        synctivity setup
        synctivity setup -n "Jane Doe" -e jane@example.com,jane@corp.example
    """
    config = load_config()

    identity = None
    if author_name or author_emails:
        identity = Identity.create(
            require_author_name(author_name or config['author'].get('name')),
            list(author_emails) or configured_emails(config),
        )

    base_dir = get_base_dir()
    target_path = get_target_path(config)
    git = GitClient(timeout=config['git'].get('timeout_seconds'))

    if git.is_git_repo(target_path):
        if not quiet:
            click.echo(f"Already set up: {target_path}")
    else:
        base_dir.mkdir(parents=True, exist_ok=True)
        TargetRepository.initialize(
            target_path,
            git_client=git,
            initial_branch=config['sync'].get('initial_branch', 'main'),
        )
        if not quiet:
            click.echo(f"Created target repository: {target_path}")

    if identity is not None:
        config['author'] = identity.to_dict()
        config_path = save_config(config, get_config_path())
        progress(f"Configuration saved to {config_path}")
        if not quiet:
            click.echo(f"Saved author {identity.name} to {config_path}")
