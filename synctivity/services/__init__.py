"""
Service layer for synctivity.

Contains the sync engine and the repository wrappers it coordinates:
- SourceRepository: Harvests an identity's commits from one repository
- DiscoveryService: Finds source repositories under an input directory
- TargetRepository: Append-only, content-free destination repository
- SyncService: Round-robin replay of harvested commits

Services are the primary API for commands to use.
"""

from .source_repository import SourceRepository
from .discovery_service import DiscoveryService, DEFAULT_TARGET_NAME
from .target_repository import TargetRepository, DEFAULT_INITIAL_BRANCH
from .sync_service import SyncService, SyncResult, SourceSummary, round_robin

__all__ = [
    'SourceRepository',
    'DiscoveryService',
    'DEFAULT_TARGET_NAME',
    'TargetRepository',
    'DEFAULT_INITIAL_BRANCH',
    'SyncService',
    'SyncResult',
    'SourceSummary',
    'round_robin',
]
