"""
synctivity - A content-free activity timeline across git repositories.

synctivity scans local repositories for the commits you authored and
replays them into a single target repository. Replayed commits keep their
message and author time but carry an empty tree, so no file content is
ever copied.

Quick Start:
    from synctivity import (
        DiscoveryService, Identity, SyncService, TargetRepository
    )

    identity = Identity.create("Jane Doe", ["jane@example.com"])
    sources = DiscoveryService().discover("~/projects")
    target = TargetRepository.open_or_create("~/activity/synctivity")

    for message in SyncService(identity).sync(target, sources):
        print(message)  # "Synced 12 commit(s) from myrepo."

Domain Objects:
    EmailAddress - Validated email alias
    Identity - Name plus one or more email aliases
    SourceCommit - Commit harvested from a source repository

Services:
    DiscoveryService - Finds source repositories
    SourceRepository - Harvests an identity's commits
    TargetRepository - Append-only, empty-tree destination
    SyncService - Round-robin replay
"""

__version__ = "0.1.0"

# Domain objects
from .domain import (
    EmailAddress,
    Identity,
    SigningMode,
    SourceCommit,
)

# Services
from .services import (
    DiscoveryService,
    SourceRepository,
    SyncResult,
    SyncService,
    TargetRepository,
)

# Configuration
from .config import load_config, save_config

__all__ = [
    # Version
    "__version__",
    # Domain objects
    "EmailAddress",
    "Identity",
    "SigningMode",
    "SourceCommit",
    # Services
    "DiscoveryService",
    "SourceRepository",
    "SyncResult",
    "SyncService",
    "TargetRepository",
    # Configuration
    "load_config",
    "save_config",
]
