"""In-memory user repository for testing."""

from typing import Optional

from sqlalchemy.exc import IntegrityError

from elonara.domain.model import User
from elonara.domain.repository import UserRepository
from elonara.domain.value import BlueskyDID, EmailAddress, UserId

from .base import SnapshotMixin


class InMemoryUserRepository(SnapshotMixin, UserRepository):
    """In-memory implementation of UserRepository for testing."""

    _state_attrs = ("_users",)

    def __init__(self) -> None:
        self._users: dict[UserId, User] = {}

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        return self._users.get(user_id)

    async def find_by_email(self, email: EmailAddress) -> Optional[User]:
        for user in self._users.values():
            if user.email == email:
                return user
        return None

    async def find_by_bluesky_did(self, did: BlueskyDID) -> Optional[User]:
        for user in self._users.values():
            if user.bluesky_did == did:
                return user
        return None

    async def save(self, user: User) -> User:
        """Save a user.

        Raises:
            IntegrityError: If another user already has this email
        """
        for existing in self._users.values():
            if existing.id != user.id and existing.email == user.email:
                raise IntegrityError("Duplicate email", None, Exception())
        self._users[user.id] = user
        return user
