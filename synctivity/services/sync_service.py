"""
Sync service for synctivity.

Harvests the identity's commits from every source repository and replays
them into the target repository, one commit per source per round.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Dict, Generator, Iterator, List, Optional, Sequence, Tuple, TypeVar

from ..domain import CommitMetadata, Identity, SigningMode
from .source_repository import SourceRepository
from .target_repository import TargetRepository

logger = logging.getLogger(__name__)

T = TypeVar('T')


def round_robin(sequences: Sequence[Sequence[T]]) -> Iterator[Tuple[int, T, int]]:
    """
    Interleave sequences one item per sequence per round.

    Sequences are visited in their given order; exhausted ones drop out
    and the rest continue among themselves.

    Yields:
        (sequence index, item, items left in that sequence)
    """
    queues = [deque(sequence) for sequence in sequences]

    while any(queues):
        for index, queue in enumerate(queues):
            if not queue:
                continue
            item = queue.popleft()
            yield index, item, len(queue)


@dataclass
class SourceSummary:
    """Per-source outcome of a sync run."""
    name: str
    path: str
    matched: int = 0
    replayed: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'path': self.path,
            'matched': self.matched,
            'replayed': self.replayed,
        }


@dataclass
class SyncResult:
    """Result of a sync run."""
    sources: List[SourceSummary] = field(default_factory=list)
    commit_ids: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.commit_ids)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'summary',
            'total': self.total,
            'sources': [source.to_dict() for source in self.sources],
        }


def completion_notice(count: int, name: str) -> str:
    return f"Synced {count} commit(s) from {name}."


class SyncService:
    """
    Service that replays an identity's activity into a target repository.

    The service owns the identity for the duration of a run; sources and
    target are handed in per call.

    Example:
        service = SyncService(identity)
        for message in service.sync(target, sources):
            print(message)  # "Synced 3 commit(s) from myrepo."

        result = service.last_result
        print(f"Replayed {result.total} commits")
    """

    def __init__(self, identity: Identity, mode: SigningMode = SigningMode.IDENTITY):
        """
        Initialize SyncService.

        Args:
            identity: Person whose commits are synchronized
            mode: How replayed commits are signed
        """
        self.identity = identity
        self.mode = mode
        self.last_result: Optional[SyncResult] = None

    def sync(
        self,
        target: TargetRepository,
        sources: Sequence[SourceRepository]
    ) -> Generator[str, None, SyncResult]:
        """
        Harvest and replay commits.

        Yields a completion notice as each source runs out of commits,
        returns the SyncResult. Any failure propagates immediately;
        commits appended before it stay in the target.

        Args:
            target: Repository receiving the synthetic commits
            sources: Source repositories in discovery order

        Yields:
            Progress messages

        Returns:
            SyncResult with per-source counts
        """
        result = SyncResult()
        self.last_result = result

        harvested = []
        for source in sources:
            commits = source.get_author_commits(self.identity)
            result.sources.append(SourceSummary(
                name=source.name,
                path=str(source.path),
                matched=len(commits),
            ))
            harvested.append(commits)

        for summary in result.sources:
            if summary.matched == 0:
                logger.info(f"No matching commits in {summary.name}")
                yield completion_notice(0, summary.name)

        for index, commit, remaining in round_robin(harvested):
            metadata = CommitMetadata.from_source(commit, self.mode, self.identity)
            commit_id = target.append_commit(metadata)

            summary = result.sources[index]
            summary.replayed += 1
            result.commit_ids.append(commit_id)

            if remaining == 0:
                yield completion_notice(summary.matched, summary.name)

        logger.debug(f"Replayed {result.total} commit(s) from {len(result.sources)} source(s)")
        return result

    def run(
        self,
        target: TargetRepository,
        sources: Sequence[SourceRepository]
    ) -> SyncResult:
        """Run sync to completion, discarding progress messages."""
        for _ in self.sync(target, sources):
            pass
        return self.last_result
