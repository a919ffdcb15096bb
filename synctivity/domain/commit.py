"""
Commit domain objects for synctivity.

SourceCommit is the read-only view of a commit harvested from a source
repository. CommitSignature is the name/email/time triple stamped on a
replayed commit, and SigningMode chooses where that triple comes from.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Optional

from .identity import Identity


class SigningMode(Enum):
    """Where the author/committer of a replayed commit comes from."""
    IDENTITY = "identity"  # Configured Identity name + signature email
    ORIGINAL = "original"  # Source commit's author line, verbatim


def parse_offset(offset: str) -> timezone:
    """Convert a git `+hhmm`/`-hhmm` offset into a timezone."""
    sign = -1 if offset.startswith('-') else 1
    digits = offset.lstrip('+-')
    hours, minutes = int(digits[:2]), int(digits[2:4])
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


@dataclass(frozen=True)
class CommitSignature:
    """Author or committer line of a git commit."""
    name: str
    email: Optional[str]
    timestamp: int
    offset: str = "+0000"

    @property
    def when(self) -> datetime:
        """Timestamp as an aware datetime in the original offset."""
        return datetime.fromtimestamp(self.timestamp, tz=parse_offset(self.offset))

    @property
    def git_date(self) -> str:
        """Date in git's internal `<seconds> <offset>` format."""
        return f"{self.timestamp} {self.offset}"


@dataclass(frozen=True)
class SourceCommit:
    """A commit read from a source repository. Never mutated."""
    id: str
    author: CommitSignature
    message: str

    @property
    def author_name(self) -> str:
        return self.author.name

    @property
    def author_email(self) -> Optional[str]:
        return self.author.email

    @property
    def summary(self) -> str:
        """First line of the message."""
        return self.message.split('\n', 1)[0]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'author_name': self.author.name,
            'author_email': self.author.email,
            'date': self.author.when.isoformat(),
            'summary': self.summary,
        }


@dataclass(frozen=True)
class CommitMetadata:
    """Everything needed to append one synthetic commit."""
    signature: CommitSignature
    message: str
    source_id: Optional[str] = None

    @classmethod
    def from_source(
        cls,
        commit: SourceCommit,
        mode: SigningMode = SigningMode.IDENTITY,
        identity: Optional[Identity] = None
    ) -> 'CommitMetadata':
        """
        Build replay metadata for a source commit.

        IDENTITY mode re-signs with the identity's name and signature email
        but keeps the original author time. ORIGINAL mode copies the
        author line verbatim.
        """
        if mode is SigningMode.IDENTITY:
            if identity is None:
                raise ValueError("identity signing requires an Identity")
            signature = CommitSignature(
                name=identity.name,
                email=str(identity.signature_email()),
                timestamp=commit.author.timestamp,
                offset=commit.author.offset,
            )
        else:
            signature = commit.author

        return cls(signature=signature, message=commit.message, source_id=commit.id)
