"""
User Directory Repositories

Interface to the user directory that resolves identity ids. Accounts are
provisioned by the identity provider; the core only reads them.
"""

from abc import ABC, abstractmethod
from typing import Optional

from .entities import UserInfo


class UserDirectory(ABC):
    """Abstract repository interface for user lookups."""

    @abstractmethod
    def get(self, user_id: str) -> Optional[UserInfo]:
        """
        Resolve an identity id.

        Returns:
            UserInfo if the user exists, None otherwise
        """
        pass  # pragma: no cover

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[UserInfo]:
        """
        Resolve a user by email address (case-insensitive).

        Returns:
            UserInfo if found, None otherwise
        """
        pass  # pragma: no cover

    @abstractmethod
    def register(self, user: UserInfo) -> None:
        """Add or update a user record."""
        pass  # pragma: no cover

    def exists(self, user_id: str) -> bool:
        """Check whether an identity id resolves to a known user."""
        return self.get(user_id) is not None
