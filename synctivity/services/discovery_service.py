"""
Repository discovery for synctivity.

Finds the source repositories under an input directory: either the
directory itself, when it is a repository, or its immediate children.
The target repository is never returned, and repositories sharing a
remote URL are only returned once.
"""

import logging
import os
from pathlib import Path
from typing import Callable, List, Optional, Set, Union

from ..exit_codes import InvalidInputError, NoReposFoundError
from ..infra import GitClient
from .source_repository import SourceRepository

logger = logging.getLogger(__name__)


DEFAULT_TARGET_NAME = "synctivity"


class DiscoveryService:
    """
    Service for discovering source repositories.

    Example:
        service = DiscoveryService(target_name="synctivity")
        for source in service.discover("~/projects"):
            print(source.name)
    """

    def __init__(
        self,
        git_client: Optional[GitClient] = None,
        target_name: str = DEFAULT_TARGET_NAME,
        target_path: Optional[Union[str, Path]] = None,
        config_dir: Optional[Union[str, Path]] = None
    ):
        """
        Initialize DiscoveryService.

        Args:
            git_client: Git client instance (creates default if None)
            target_name: Directory name reserved for the target repository
            target_path: Location of the target repository, if known
            config_dir: Configuration directory, never valid as input
        """
        self.git = git_client or GitClient()
        self.target_name = target_name
        self.target_path = Path(target_path).resolve() if target_path else None
        self.config_dir = Path(config_dir).expanduser().resolve() if config_dir else None

    def discover(
        self,
        input_dir: Union[str, Path],
        excluded_url: Optional[str] = None,
        notify: Optional[Callable[[str], None]] = None
    ) -> List[SourceRepository]:
        """
        Discover source repositories.

        Args:
            input_dir: Directory to scan
            excluded_url: Remote URL that identifies the target repository
            notify: Receives non-fatal notices (duplicate remotes)

        Returns:
            Source repositories in discovery order

        Raises:
            InvalidInputError: bad input directory, or the target used as input
            NoReposFoundError: nothing to synchronize
        """
        input_path = Path(os.path.expanduser(str(input_dir)))
        if not input_path.exists():
            raise InvalidInputError(f"Input directory does not exist: {input_dir}")
        if not input_path.is_dir():
            raise InvalidInputError(f"Input directory is not a directory: {input_dir}")

        input_path = input_path.resolve()
        if self.config_dir is not None and input_path == self.config_dir:
            raise InvalidInputError("Cannot use the configuration directory as input")
        if self.target_path is not None and input_path == self.target_path:
            raise InvalidInputError(f"Cannot read the {self.target_name} repository as input")

        if self.git.is_git_repo(input_path):
            source = SourceRepository.open(input_path, git_client=self.git)
            if self._is_target(source, excluded_url):
                raise InvalidInputError(f"Cannot read the {self.target_name} repository as input")
            return [source]

        repositories: List[SourceRepository] = []
        seen_remotes: Set[str] = set()

        for entry in sorted(os.scandir(input_path), key=lambda e: e.name):
            if not entry.is_dir():
                continue

            entry_path = Path(entry.path)
            if not self.git.is_git_repo(entry_path):
                continue

            if entry.name == self.target_name:
                logger.debug(f"Skipping target repository {entry_path}")
                continue

            source = SourceRepository.open(entry_path, git_client=self.git)
            if self._is_target(source, excluded_url):
                logger.debug(f"Skipping target repository {entry_path}")
                continue

            if source.remote_url:
                if source.remote_url in seen_remotes:
                    message = f"Ignoring duplicate repository at {source.remote_url}."
                    logger.info(message)
                    if notify:
                        notify(message)
                    continue
                seen_remotes.add(source.remote_url)

            repositories.append(source)

        if not repositories:
            raise NoReposFoundError()

        return repositories

    def _is_target(self, source: SourceRepository, excluded_url: Optional[str]) -> bool:
        """True if source is the target repository."""
        if source.path.name == self.target_name:
            return True
        if self.target_path is not None and source.path == self.target_path:
            return True
        return bool(excluded_url) and source.remote_url == excluded_url
