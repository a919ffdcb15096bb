"""
Git client infrastructure for synctivity.

Provides a clean abstraction over git command execution.
All git operations go through this client, making them:
- Easy to mock for testing
- Consistent in error handling
- Isolated from business logic
"""

import os
import re
import subprocess
from typing import Dict, List, Optional, Sequence, Tuple, Union
from pathlib import Path
import logging

from ..domain.commit import CommitSignature, SourceCommit
from ..exit_codes import GitCommandError

logger = logging.getLogger(__name__)


# `Name <email> 1700000000 +0100`
AUTHOR_LINE = re.compile(rb'^(?P<name>.*?) ?<(?P<email>[^<>]*)> (?P<ts>-?\d+) (?P<tz>[+-]\d{4})$')


def parse_commit_object(commit_id: str, raw: bytes) -> SourceCommit:
    """
    Parse a raw commit object as printed by `git cat-file commit`.

    Only the author header and the message are read. A missing or empty
    author email is recorded as None.

    Raises:
        GitCommandError: if the object has no author line or the message
            is not valid UTF-8
    """
    header, _, body = raw.partition(b'\n\n')

    author = None
    for line in header.split(b'\n'):
        if line.startswith(b'author '):
            author = line[len(b'author '):]
            break

    if author is None:
        raise GitCommandError(f"Commit {commit_id} has no author line")

    match = AUTHOR_LINE.match(author)
    if match:
        name = match.group('name').decode('utf-8', errors='replace')
        email = match.group('email').decode('utf-8', errors='replace') or None
        signature = CommitSignature(
            name=name,
            email=email,
            timestamp=int(match.group('ts')),
            offset=match.group('tz').decode('ascii'),
        )
    else:
        # Malformed ident: keep what we can, it will never match an alias
        logger.debug(f"Unparseable author line in {commit_id}: {author!r}")
        signature = CommitSignature(
            name=author.decode('utf-8', errors='replace'),
            email=None,
            timestamp=0,
        )

    try:
        message = body.decode('utf-8')
    except UnicodeDecodeError as e:
        raise GitCommandError(f"Commit {commit_id} has a message that is not valid UTF-8: {e}")

    return SourceCommit(id=commit_id, author=signature, message=message)


class GitClient:
    """
    Abstraction over git commands.

    Provides one method per repository primitive the sync engine needs,
    with consistent error handling and return types.

    Example:
        client = GitClient()
        if client.has_head("/path/to/repo"):
            for commit in client.commits("/path/to/repo"):
                print(commit.id, commit.summary)
    """

    def __init__(self, timeout: Optional[int] = None, git: str = "git"):
        """
        Initialize GitClient.

        Args:
            timeout: Command timeout in seconds (None waits for git to finish)
            git: Git executable to invoke
        """
        self.timeout = timeout
        self.git = git

    def _run(
        self,
        args: Sequence[str],
        cwd: Optional[Union[str, Path]] = None,
        check: bool = False,
        input: Optional[Union[str, bytes]] = None,
        env: Optional[Dict[str, str]] = None,
        text: bool = True
    ) -> Tuple[Optional[Union[str, bytes]], int]:
        """
        Run a git command.

        Args:
            args: Arguments after the git executable
            cwd: Working directory
            check: Raise GitCommandError on non-zero exit or timeout
            input: Data for stdin
            env: Extra environment variables
            text: Decode output as text

        Returns:
            Tuple of (stdout, returncode)
        """
        cmd = [self.git, *args]
        run_env = None
        if env:
            run_env = os.environ.copy()
            run_env.update(env)

        try:
            result = subprocess.run(
                cmd,
                cwd=str(cwd) if cwd is not None else None,
                capture_output=True,
                text=text,
                input=input,
                env=run_env,
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired:
            logger.warning(f"Git command timed out: {' '.join(cmd)}")
            if check:
                raise GitCommandError(
                    f"Git command timed out after {self.timeout}s: {' '.join(cmd)}",
                    cmd=cmd
                )
            return None, -1
        except OSError as e:
            logger.error(f"Git command failed: {' '.join(cmd)} - {e}")
            if check:
                raise GitCommandError(f"Could not run git: {e}", cmd=cmd) from e
            return None, -1

        if check and result.returncode != 0:
            stderr = result.stderr if text else result.stderr.decode('utf-8', errors='replace')
            raise GitCommandError(
                f"git {' '.join(args)} failed: {stderr.strip() or 'exit code ' + str(result.returncode)}",
                cmd=cmd,
                returncode=result.returncode,
                stderr=stderr
            )

        output = result.stdout
        if text:
            return output.strip() if output else None, result.returncode
        return output, result.returncode

    def is_git_repo(self, path: Union[str, Path]) -> bool:
        """Check if path is a git repository."""
        git_dir = Path(path) / ".git"
        return git_dir.is_dir()

    def config_get(
        self,
        key: str,
        path: Optional[Union[str, Path]] = None,
        global_scope: bool = False
    ) -> Optional[str]:
        """
        Read a configuration value.

        Args:
            key: Dotted config key, e.g. "remote.origin.url"
            path: Repository to read from (current directory if None)
            global_scope: Read the user's global configuration

        Returns:
            Value or None if the key is not set
        """
        args = ["config"]
        if global_scope:
            args.append("--global")
        args.extend(["--get", key])

        output, code = self._run(args, cwd=path)
        if code == 0 and output:
            return output
        return None

    def remote_url(self, path: Union[str, Path], remote: str = "origin") -> Optional[str]:
        """Get remote URL, or None if the remote is not configured."""
        return self.config_get(f"remote.{remote}.url", path=path)

    def has_head(self, path: Union[str, Path]) -> bool:
        """True if HEAD resolves to a commit."""
        _, code = self._run(["rev-parse", "--verify", "--quiet", "HEAD^{commit}"], cwd=path)
        return code == 0

    def init(self, path: Union[str, Path], initial_branch: str = "main") -> Path:
        """
        Initialize a new repository.

        Args:
            path: Directory for the new repository (created if missing)
            initial_branch: Name of the unborn initial branch

        Returns:
            Resolved repository path
        """
        path = Path(path)
        path.mkdir(parents=True, exist_ok=True)
        self._run(["init", "--quiet", f"--initial-branch={initial_branch}"], cwd=path, check=True)
        return path.resolve()

    def rev_list(self, path: Union[str, Path], rev: str = "HEAD") -> List[str]:
        """
        List commit ids reachable from rev, ancestors first.

        Uses topological order reversed, so every parent comes before
        its children and the order is stable for a fixed repository state.
        """
        output, _ = self._run(
            ["rev-list", "--topo-order", "--reverse", rev],
            cwd=path,
            check=True
        )
        if not output:
            return []
        return output.split('\n')

    def read_commits(self, path: Union[str, Path], commit_ids: List[str]) -> List[SourceCommit]:
        """
        Read commit objects in one `git cat-file --batch` call.

        Returns:
            SourceCommit objects in the same order as commit_ids
        """
        if not commit_ids:
            return []

        request = ('\n'.join(commit_ids) + '\n').encode('ascii')
        output, _ = self._run(["cat-file", "--batch"], cwd=path, check=True,
                              input=request, text=False)

        commits = []
        pos = 0
        while pos < len(output):
            end = output.index(b'\n', pos)
            header = output[pos:end].decode('ascii', errors='replace').split()
            pos = end + 1

            if len(header) < 3:
                raise GitCommandError(f"Object {header[0] if header else '?'} is missing")
            object_id, object_type, size = header[0], header[1], int(header[2])
            if object_type != "commit":
                raise GitCommandError(f"Object {object_id} is a {object_type}, not a commit")

            commits.append(parse_commit_object(object_id, output[pos:pos + size]))
            pos += size + 1  # content is followed by a newline

        return commits

    def commits(self, path: Union[str, Path], rev: str = "HEAD") -> List[SourceCommit]:
        """All commits reachable from rev, ancestors first."""
        return self.read_commits(path, self.rev_list(path, rev))

    def empty_tree(self, path: Union[str, Path]) -> str:
        """Write the empty tree object and return its id."""
        output, _ = self._run(["mktree"], cwd=path, check=True, input="")
        if not output:
            raise GitCommandError("git mktree did not print a tree id", cmd=[self.git, "mktree"])
        return output

    def commit_tree(
        self,
        path: Union[str, Path],
        tree: str,
        parents: Sequence[str],
        author: CommitSignature,
        committer: CommitSignature,
        message: str
    ) -> str:
        """
        Create a commit object without touching any ref.

        Returns:
            The new commit id
        """
        args = ["commit-tree", tree, "--no-gpg-sign"]
        for parent in parents:
            args.extend(["-p", parent])

        env = {
            "GIT_AUTHOR_NAME": author.name,
            "GIT_AUTHOR_EMAIL": author.email or "",
            "GIT_AUTHOR_DATE": author.git_date,
            "GIT_COMMITTER_NAME": committer.name,
            "GIT_COMMITTER_EMAIL": committer.email or "",
            "GIT_COMMITTER_DATE": committer.git_date,
        }

        output, _ = self._run(args, cwd=path, check=True,
                              input=message.encode('utf-8'), env=env, text=False)
        return output.decode('ascii').strip()

    def update_head(self, path: Union[str, Path], commit_id: str) -> None:
        """Point HEAD (through its branch) at commit_id."""
        self._run(["update-ref", "HEAD", commit_id], cwd=path, check=True)
