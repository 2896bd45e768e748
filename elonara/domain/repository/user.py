"""User repository interface."""

from abc import ABC, abstractmethod

from elonara.domain.model.user import User
from elonara.domain.value import BlueskyDID, EmailAddress, UserId


class UserRepository(ABC):
    """Repository for User entity."""

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> User | None:
        """Find a user by ID.

        Args:
            user_id: The user's unique identifier

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: EmailAddress) -> User | None:
        """Find a user by normalized email address.

        Args:
            email: Email address

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_bluesky_did(self, did: BlueskyDID) -> User | None:
        """Find a user by linked Bluesky DID.

        Args:
            did: Bluesky DID

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, user: User) -> User:
        """Save a user (create or update).

        Args:
            user: The user to save

        Returns:
            The saved user

        Raises:
            IntegrityError: If the email is already registered
        """
        pass
