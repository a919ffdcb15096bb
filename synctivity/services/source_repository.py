"""
Source repository accessor for synctivity.

Wraps one repository on disk and yields the commits authored by the
identity being synchronized.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from ..domain import EmailAddress, Identity, SourceCommit
from ..exit_codes import GitCommandError
from ..infra import GitClient

logger = logging.getLogger(__name__)


class SourceRepository:
    """
    A repository to harvest commits from.

    Example:
        source = SourceRepository.open("/home/user/projects/myrepo")
        for commit in source.get_author_commits(identity):
            print(commit.id, commit.summary)
    """

    def __init__(
        self,
        path: Union[str, Path],
        name: Optional[str] = None,
        remote_url: Optional[str] = None,
        git_client: Optional[GitClient] = None
    ):
        self.path = Path(path)
        self.name = name or self.path.name
        self.remote_url = remote_url
        self.git = git_client or GitClient()

    @classmethod
    def open(
        cls,
        path: Union[str, Path],
        git_client: Optional[GitClient] = None,
        name: Optional[str] = None
    ) -> 'SourceRepository':
        """
        Open the repository at path.

        Raises:
            GitCommandError: if path is not a git repository
        """
        git = git_client or GitClient()
        path = Path(path).resolve()

        if not git.is_git_repo(path):
            raise GitCommandError(f"Not a git repository: {path}")

        return cls(
            path=path,
            name=name or path.name,
            remote_url=git.remote_url(path),
            git_client=git,
        )

    def get_author_commits(
        self,
        author: Union[Identity, Iterable[Union[EmailAddress, str]]]
    ) -> List[SourceCommit]:
        """
        Commits from HEAD whose author email matches an alias.

        Commits come ancestors first (reversed topological order). Matching
        is exact and case-sensitive; commits without an author email never
        match. A repository with no commits yields an empty list.

        Args:
            author: Identity or collection of email aliases

        Returns:
            Matching commits, oldest first
        """
        if isinstance(author, Identity):
            aliases = {str(email) for email in author.emails}
        else:
            aliases = {str(email) for email in author}

        if not self.git.has_head(self.path):
            logger.debug(f"{self.name} has no commits")
            return []

        commits = [
            commit for commit in self.git.commits(self.path)
            if commit.author_email is not None and commit.author_email in aliases
        ]

        logger.debug(f"{self.name}: {len(commits)} matching commit(s)")
        return commits

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'name': self.name,
            'path': str(self.path),
        }
        if self.remote_url:
            data['remote_url'] = self.remote_url
        return data

    def __repr__(self) -> str:
        return f"SourceRepository(name={self.name!r}, path={str(self.path)!r})"
