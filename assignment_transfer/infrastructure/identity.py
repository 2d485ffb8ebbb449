"""Providers of the identity of the user performing an operation."""

from abc import ABC, abstractmethod

from assignment_transfer.core.types import UserId


class ActorIdentityProvider(ABC):
    """Source of the current user's identity."""

    @abstractmethod
    def current_user_id(self) -> UserId | None:
        """Return the current user ID, or None if it cannot be resolved."""


class StaticIdentityProvider(ActorIdentityProvider):
    """Identity fixed at construction, e.g. read from the configuration."""

    def __init__(self, user_id: UserId | None) -> None:
        self._user_id = user_id

    def current_user_id(self) -> UserId | None:
        return self._user_id
