"""Tests for fork visit ordering."""

from fork_sync.github.sync import order_repositories
from fork_sync.schemas import SyncMetadata
from tests.conftest import JAN_10, JAN_15, JAN_16, ORG
from tests.factories import make_metadata


class TestOrderRepositories:
    """Tests for order_repositories."""

    def test_oldest_first(self):
        metadata = make_metadata(
            {f"{ORG}/a": JAN_16, f"{ORG}/b": JAN_10, f"{ORG}/c": JAN_15}
        )

        ordered = order_repositories([f"{ORG}/a", f"{ORG}/b", f"{ORG}/c"], metadata)

        assert ordered == [f"{ORG}/b", f"{ORG}/c", f"{ORG}/a"]

    def test_never_synced_first(self):
        """Repositories missing from the metadata come before all others."""
        metadata = make_metadata({f"{ORG}/old": JAN_10})

        ordered = order_repositories([f"{ORG}/old", f"{ORG}/new"], metadata)

        assert ordered == [f"{ORG}/new", f"{ORG}/old"]

    def test_ties_broken_by_identifier(self):
        metadata = make_metadata({f"{ORG}/b": JAN_10, f"{ORG}/a": JAN_10})

        ordered = order_repositories(
            [f"{ORG}/b", f"{ORG}/c", f"{ORG}/a", f"{ORG}/d"], metadata
        )

        assert ordered == [f"{ORG}/c", f"{ORG}/d", f"{ORG}/a", f"{ORG}/b"]

    def test_non_decreasing_last_update(self):
        """The visit order never goes back in time."""
        synced = {f"{ORG}/r{i}": when for i, when in enumerate([JAN_16, JAN_10, JAN_15, JAN_10])}
        metadata = make_metadata(synced)
        repos = [*synced, f"{ORG}/fresh"]

        ordered = order_repositories(repos, metadata)
        stamps = [metadata.last_update(r) for r in ordered]

        assert stamps == sorted(stamps)
        assert ordered[0] == f"{ORG}/fresh"

    def test_duplicates_visited_once(self):
        ordered = order_repositories([f"{ORG}/a", f"{ORG}/a", f"{ORG}/b"], SyncMetadata())
        assert ordered == [f"{ORG}/a", f"{ORG}/b"]

    def test_empty_identifiers_dropped(self):
        assert order_repositories(["", f"{ORG}/a"], SyncMetadata()) == [f"{ORG}/a"]

    def test_deterministic(self):
        metadata = make_metadata({f"{ORG}/a": JAN_15})
        repos = [f"{ORG}/c", f"{ORG}/a", f"{ORG}/b"]

        assert order_repositories(repos, metadata) == order_repositories(
            list(reversed(repos)), metadata
        )

    def test_empty_input(self):
        assert order_repositories([], SyncMetadata()) == []
