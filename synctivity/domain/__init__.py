"""
Domain layer for synctivity.

Contains pure domain objects with no I/O or side effects:
- EmailAddress: A validated email alias
- Identity: The person being synchronized
- SourceCommit: A commit harvested from a source repository
- CommitMetadata: Signature and message of a commit to replay

These objects are immutable and provide serialization methods for JSONL output.
"""

from .email import EmailAddress, InvalidEmailAddressError
from .identity import Identity
from .commit import (
    CommitMetadata,
    CommitSignature,
    SigningMode,
    SourceCommit,
)

__all__ = [
    'EmailAddress',
    'InvalidEmailAddressError',
    'Identity',
    'CommitMetadata',
    'CommitSignature',
    'SigningMode',
    'SourceCommit',
]
