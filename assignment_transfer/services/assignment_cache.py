"""Lazy-loaded cache of the stored assignments."""

import logging

from assignment_transfer.domain.assignment import Assignment
from assignment_transfer.infrastructure.persistence.repository_interface import (
    AssignmentRepositoryInterface,
)

logger = logging.getLogger(__name__)


class AssignmentCache:
    """Lazy-loaded snapshot of every assignment in the store.

    Filtering runs in memory over this snapshot. It is fetched on first
    access and dropped wholesale by :meth:`invalidate` after every mutation;
    the next access refetches it.
    """

    def __init__(self, repository: AssignmentRepositoryInterface) -> None:
        self._repository = repository
        self._assignments: tuple[Assignment, ...] | None = None

    @property
    def is_loaded(self) -> bool:
        """True if the snapshot is currently held."""
        return self._assignments is not None

    def get_assignments(self) -> tuple[Assignment, ...]:
        """Get all assignments, newest first, fetching them if necessary."""
        if self._assignments is None:
            self._assignments = self._repository.query_assignments()
            logger.debug("Fetched %d assignments", len(self._assignments))
        return self._assignments

    def invalidate(self) -> None:
        """Drop the snapshot."""
        self._assignments = None
