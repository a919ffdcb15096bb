"""
Sync command for synctivity.

Replays the configured author's commits from every repository under an
input directory into a single content-free target repository.
"""

import click
import json
from pathlib import Path
from typing import List, Optional, Tuple

from ..config import load_config, configure_logging, get_base_dir, get_target_path
from ..cli_utils import standard_command, add_common_options
from ..domain import Identity, SigningMode
from ..exit_codes import InvalidInputError, ValidationError
from ..infra import GitClient
from ..services import DiscoveryService, SyncService, TargetRepository


def configured_emails(config: dict) -> List[str]:
    """Author emails from config; a single string counts as one entry."""
    emails = config['author'].get('emails') or []
    if isinstance(emails, str):
        return [emails]
    return list(emails)


def require_author_name(name: Optional[str]) -> str:
    """Reject a missing or blank author name."""
    if not name or not name.strip():
        raise ValidationError("An author name is required (use --author-name)")
    return name


def resolve_identity(config: dict, author_name: Optional[str], author_emails: Tuple[str, ...],
                     git: GitClient) -> Identity:
    """
    Build the Identity from flags, then config, then global git config.

    Raises:
        ValidationError: if no name or no email can be found, or one is malformed
    """
    name = author_name or config['author'].get('name') or git.config_get('user.name', global_scope=True)
    emails = list(author_emails) or configured_emails(config)
    if not emails:
        global_email = git.config_get('user.email', global_scope=True)
        emails = [global_email] if global_email else []

    return Identity.create(require_author_name(name), emails)


def resolve_signing_mode(config: dict, signing: Optional[str]) -> SigningMode:
    value = signing or config['sync'].get('signing', 'identity')
    try:
        return SigningMode(value)
    except ValueError:
        raise ValidationError(f"Unknown signing mode: {value}")


def validate_directory(path: str, label: str) -> Path:
    """Resolve path and require an existing directory."""
    resolved = Path(path).expanduser()
    if not resolved.exists():
        raise InvalidInputError(f"{label} directory does not exist: {path}")
    if not resolved.is_dir():
        raise InvalidInputError(f"{label} directory is invalid: {path}")
    return resolved.resolve()


@click.command('sync')
@click.option('-i', '--input-dir', default='.', type=click.Path(),
              help='A path containing the source repositories')
@click.option('-o', '--output-dir', default=None, type=click.Path(),
              help='Parent directory of the target repository (default: ~/.synctivity/repo)')
@click.option('-n', '--author-name', help='The name to sign the sync commits with')
@click.option('-e', '--author-email', 'author_emails', multiple=True,
              help='Email address(es) to match commits for, comma-delimited. '
                   'The first one also signs synced commits.')
@click.option('--signing', type=click.Choice(['identity', 'original']), default=None,
              help='Sign with the configured identity or copy the original author')
@click.option('--pretty', is_flag=True, help='Display a summary table with rich formatting')
@add_common_options('verbose', 'quiet', 'json', 'debug')
@standard_command
def sync_handler(
    input_dir: str,
    output_dir: Optional[str],
    author_name: Optional[str],
    author_emails: Tuple[str, ...],
    signing: Optional[str],
    pretty: bool,
    verbose: bool,
    quiet: bool,
    output_json: bool,
    debug: bool,
    progress,
):
    """
    Replay your commits from many repositories into one.

    Every matching commit is recreated in the target repository with an
    empty tree, its original message and its original author time.
    Repositories take turns, one commit each per round.

    Examples:

    \b
        synctivity sync -i ~/projects -n "Jane Doe" -e jane@example.com
        synctivity sync -i ~/work -e jane@corp.example,jane@example.com
        synctivity sync -i ~/projects -o ~/activity --signing original
        synctivity sync --json                 # JSONL progress and summary
    """
    config = load_config()
    configure_logging(config, debug)

    git = GitClient(timeout=config['git'].get('timeout_seconds'))

    # Validate everything before touching any repository
    identity = resolve_identity(config, author_name, author_emails, git)
    mode = resolve_signing_mode(config, signing)
    input_path = validate_directory(input_dir, "Input")
    if output_dir is not None:
        validate_directory(output_dir, "Output")
    target_path = get_target_path(config, output_dir)

    def emit(message: str):
        if quiet:
            return
        if output_json:
            print(json.dumps({'progress': message}), flush=True)
        else:
            click.echo(message)

    progress(f"Discovering repositories in {input_path}...")
    discovery = DiscoveryService(
        git_client=git,
        target_name=config['sync']['target_name'],
        target_path=target_path,
        config_dir=get_base_dir(),
    )
    sources = discovery.discover(input_path, notify=emit)
    progress(f"Found {len(sources)} repositories")

    target = TargetRepository.open_or_create(
        target_path,
        git_client=git,
        initial_branch=config['sync'].get('initial_branch', 'main'),
    )
    progress(f"Replaying into {target.path}")

    service = SyncService(identity, mode=mode)
    for message in service.sync(target, sources):
        emit(message)

    result = service.last_result
    if quiet:
        return

    if output_json:
        summary = result.to_dict()
        summary['target'] = str(target.path)
        summary['identity'] = identity.to_dict()
        summary['signing'] = mode.value
        print(json.dumps(summary), flush=True)
    elif pretty:
        from ..render import render_sync_summary
        render_sync_summary(result, str(target.path))
    else:
        progress.success(f"Synced {result.total} commit(s) into {target.path}")
