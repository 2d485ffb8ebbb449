"""Tests for the AssignmentCache."""

from unittest.mock import MagicMock

import pytest

from assignment_transfer.domain.assignment import Assignment
from assignment_transfer.infrastructure.persistence.repository_interface import (
    AssignmentRepositoryInterface,
)
from assignment_transfer.services.assignment_cache import AssignmentCache


@pytest.fixture(name="mock_repository")
def mock_repository_fixture(assignments: dict[str, Assignment]) -> MagicMock:
    """Create a mock repository holding the shared assignments."""
    mock = MagicMock(spec=AssignmentRepositoryInterface)
    mock.query_assignments.return_value = tuple(assignments.values())
    return mock


@pytest.fixture(name="cache")
def cache_fixture(mock_repository: MagicMock) -> AssignmentCache:
    """Create an AssignmentCache with a mock repository."""
    return AssignmentCache(mock_repository)


class TestAssignmentCache:
    """Tests for lazy loading and invalidation."""

    def test_lazy(self, cache: AssignmentCache, mock_repository: MagicMock) -> None:
        """Nothing is fetched before the first access."""
        assert not cache.is_loaded
        mock_repository.query_assignments.assert_not_called()

    def test_fetches_once(
        self, cache: AssignmentCache, mock_repository: MagicMock
    ) -> None:
        """The snapshot is fetched on first access and reused."""
        first = cache.get_assignments()
        second = cache.get_assignments()

        assert first is second
        assert len(first) == 5
        assert cache.is_loaded
        mock_repository.query_assignments.assert_called_once_with()

    def test_invalidate_refetches_wholesale(
        self,
        cache: AssignmentCache,
        mock_repository: MagicMock,
        assignments: dict[str, Assignment],
    ) -> None:
        """After invalidation the next access refetches everything."""
        cache.get_assignments()
        mock_repository.query_assignments.return_value = (assignments["a1"],)

        cache.invalidate()

        assert not cache.is_loaded
        assert cache.get_assignments() == (assignments["a1"],)
        assert mock_repository.query_assignments.call_count == 2
