"""
Target repository for synctivity.

The destination of a sync run. It only ever receives commits that carry
the empty tree, each chained to the previously appended one, so the
resulting history is linear and content free.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from ..domain import CommitMetadata
from ..exit_codes import ExistingHistoryError
from ..infra import GitClient

logger = logging.getLogger(__name__)


DEFAULT_INITIAL_BRANCH = "main"


class TargetRepository:
    """
    Append-only wrapper around the destination repository.

    Commit signing: the signature in the CommitMetadata is used as both
    author and committer. With SigningMode.IDENTITY that is the configured
    identity's name and first email; with SigningMode.ORIGINAL it is the
    source commit's author line. In both cases the original author time
    and message are kept.

    Example:
        target = TargetRepository.open_or_create("~/.synctivity/repo")
        commit_id = target.append_commit(metadata)
    """

    def __init__(self, path: Union[str, Path], git_client: Optional[GitClient] = None):
        self.path = Path(path)
        self.git = git_client or GitClient()
        # Rolling tip: empty before the first append, one id afterwards
        self.parents: List[str] = []
        self._empty_tree: Optional[str] = None

    @classmethod
    def initialize(
        cls,
        path: Union[str, Path],
        git_client: Optional[GitClient] = None,
        initial_branch: str = DEFAULT_INITIAL_BRANCH
    ) -> 'TargetRepository':
        """Create a new repository with an unborn initial branch."""
        git = git_client or GitClient()
        repo_path = git.init(Path(path).expanduser(), initial_branch=initial_branch)
        logger.info(f"Initialized target repository at {repo_path}")
        return cls(repo_path, git_client=git)

    @classmethod
    def open_or_create(
        cls,
        path: Union[str, Path],
        git_client: Optional[GitClient] = None,
        initial_branch: str = DEFAULT_INITIAL_BRANCH
    ) -> 'TargetRepository':
        """
        Open the repository at path, initializing it if absent.

        Raises:
            ExistingHistoryError: if the repository already has a commit
        """
        git = git_client or GitClient()
        path = Path(path).expanduser()

        if not git.is_git_repo(path):
            return cls.initialize(path, git_client=git, initial_branch=initial_branch)

        if git.has_head(path):
            raise ExistingHistoryError(
                f"Cannot handle existing repository history yet: {path.resolve()}"
            )

        logger.debug(f"Opened empty target repository at {path}")
        return cls(path.resolve(), git_client=git)

    @property
    def tip(self) -> Optional[str]:
        """Most recently appended commit id."""
        return self.parents[0] if self.parents else None

    def empty_tree(self) -> str:
        """Id of the empty tree, written once and reused."""
        if self._empty_tree is None:
            self._empty_tree = self.git.empty_tree(self.path)
        return self._empty_tree

    def append_commit(self, metadata: CommitMetadata) -> str:
        """
        Append one empty-tree commit on top of the rolling tip.

        The commit becomes the new tip and HEAD's branch is moved to it.

        Returns:
            The new commit id
        """
        commit_id = self.git.commit_tree(
            self.path,
            tree=self.empty_tree(),
            parents=list(self.parents),
            author=metadata.signature,
            committer=metadata.signature,
            message=metadata.message,
        )
        self.git.update_head(self.path, commit_id)

        self.parents = [commit_id]
        logger.debug(f"Appended {commit_id[:12]} (from {metadata.source_id})")
        return commit_id
