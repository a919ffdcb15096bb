"""
Infrastructure layer for synctivity.

Contains abstractions for external systems:
- GitClient: Git command execution

These provide clean interfaces that can be mocked for testing.
"""

from .git_client import GitClient, parse_commit_object

__all__ = [
    'GitClient',
    'parse_commit_object',
]
