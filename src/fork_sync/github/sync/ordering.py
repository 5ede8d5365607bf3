"""Visit order for a sync run.

Forks are attempted oldest-first so that a run cut short by the rate
limit still moves the backlog forward on the next run.
"""

from __future__ import annotations

from collections.abc import Iterable

from fork_sync.schemas.metadata import SyncMetadata


def order_repositories(repositories: Iterable[str], metadata: SyncMetadata) -> list[str]:
    """Order repositories by ascending last_update, then identifier.

    Repositories missing from the metadata count as synced at the epoch and
    therefore come first. Duplicates are dropped.

    Args:
        repositories: Repository identifiers (owner/name)
        metadata: Current sync metadata

    Returns:
        Identifiers in visit order
    """
    unique = {repo for repo in repositories if repo}
    return sorted(unique, key=lambda repo: (metadata.last_update(repo), repo))
