"""
Shared fixtures: throwaway git repositories with deterministic history.
"""

import os
import subprocess
from pathlib import Path

import pytest


BASE_TIME = 1700000000

# Id of the empty tree in a SHA-1 repository
EMPTY_TREE_ID = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"


def git(cwd, *args, env=None):
    """Run git in cwd and return stripped stdout."""
    run_env = os.environ.copy()
    run_env.update(env or {})
    result = subprocess.run(
        ['git', *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        env=run_env,
        check=True,
    )
    return result.stdout.strip()


class RepoBuilder:
    """Builds a repository commit by commit."""

    _clock = 0

    def __init__(self, path: Path, remote: str = None, branch: str = 'main'):
        self.path = Path(path)
        self.path.mkdir(parents=True, exist_ok=True)
        git(self.path, 'init', '-q', f'--initial-branch={branch}')
        if remote:
            git(self.path, 'remote', 'add', 'origin', remote)

    @classmethod
    def _tick(cls) -> int:
        cls._clock += 60
        return BASE_TIME + cls._clock

    def commit(self, email: str, message: str, name: str = 'Dev', files=None,
               offset: str = '+0000') -> str:
        """Create a commit authored by email; returns its id."""
        for filename, content in (files or {}).items():
            (self.path / filename).write_text(content)
            git(self.path, 'add', filename)

        when = f"{self._tick()} {offset}"
        env = {
            'GIT_AUTHOR_NAME': name,
            'GIT_AUTHOR_EMAIL': email,
            'GIT_AUTHOR_DATE': when,
            'GIT_COMMITTER_NAME': name,
            'GIT_COMMITTER_EMAIL': email,
            'GIT_COMMITTER_DATE': when,
        }
        git(self.path, '-c', 'commit.gpgsign=false', 'commit', '-q',
            '--allow-empty', '--allow-empty-message', '-m', message, env=env)
        return self.head()

    def head(self) -> str:
        return git(self.path, 'rev-parse', 'HEAD')


@pytest.fixture(autouse=True)
def isolated_home(tmp_path_factory, monkeypatch):
    """Keep git and synctivity away from the real user configuration."""
    home = tmp_path_factory.mktemp('home')
    monkeypatch.setenv('HOME', str(home))
    monkeypatch.setenv('GIT_CONFIG_NOSYSTEM', '1')
    monkeypatch.setenv('SYNCTIVITY_HOME', str(home / '.synctivity'))
    for key in list(os.environ):
        if key.startswith('SYNCTIVITY_') and key != 'SYNCTIVITY_HOME':
            monkeypatch.delenv(key)
        elif key.startswith('GIT_AUTHOR_') or key.startswith('GIT_COMMITTER_'):
            monkeypatch.delenv(key)
    return home


@pytest.fixture
def make_repo():
    """Factory: make_repo(path, remote=None) -> RepoBuilder."""
    def _make(path, remote=None, branch='main'):
        return RepoBuilder(path, remote=remote, branch=branch)
    return _make


@pytest.fixture
def log_target():
    """Factory: log_target(path) -> list of (id, parents, tree, author, email, date, message), oldest first."""
    def _log(path):
        ids = git(path, 'rev-list', '--reverse', 'HEAD').split('\n')
        entries = []
        for commit_id in ids:
            parents = git(path, 'rev-list', '--parents', '-n', '1', commit_id).split()[1:]
            tree = git(path, 'rev-parse', f'{commit_id}^{{tree}}')
            author = git(path, 'log', '-1', '--format=%an', commit_id)
            email = git(path, 'log', '-1', '--format=%ae', commit_id)
            date = git(path, 'log', '-1', '--format=%at %ai', commit_id)
            committer = git(path, 'log', '-1', '--format=%cn <%ce>', commit_id)
            message = git(path, 'log', '-1', '--format=%B', commit_id)
            entries.append({
                'id': commit_id,
                'parents': parents,
                'tree': tree,
                'author': author,
                'email': email,
                'date': date,
                'committer': committer,
                'message': message,
            })
        return entries
    return _log
