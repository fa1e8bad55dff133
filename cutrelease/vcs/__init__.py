"""Version control collaborator.

Usage:
    from cutrelease.vcs import GitRepository, TagFound

    repo = GitRepository(Path("."))
    lookup = repo.lookup_tag("v1.2.3")
"""

from cutrelease.vcs.git import (
    GitError,
    GitRepository,
    SyncState,
    TagFound,
    TagLookup,
    TagNotFound,
    VersionControl,
)

__all__ = [
    "GitError",
    "GitRepository",
    "SyncState",
    "TagFound",
    "TagLookup",
    "TagNotFound",
    "VersionControl",
]
