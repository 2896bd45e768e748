"""In-memory Bluesky repositories for testing."""

from typing import Optional

from elonara.domain.model import BlueskyCredentials, Follower
from elonara.domain.repository import BlueskyCredentialRepository, FollowerRepository
from elonara.domain.value import UserId

from .base import SnapshotMixin


class InMemoryBlueskyCredentialRepository(SnapshotMixin, BlueskyCredentialRepository):
    """In-memory implementation of BlueskyCredentialRepository."""

    _state_attrs = ("_credentials",)

    def __init__(self) -> None:
        self._credentials: dict[UserId, BlueskyCredentials] = {}

    async def find_by_user(self, user_id: UserId) -> Optional[BlueskyCredentials]:
        return self._credentials.get(user_id)

    async def save(self, credentials: BlueskyCredentials) -> BlueskyCredentials:
        self._credentials[credentials.user_id] = credentials
        return credentials


class InMemoryFollowerRepository(SnapshotMixin, FollowerRepository):
    """In-memory implementation of FollowerRepository."""

    _state_attrs = ("_followers",)

    def __init__(self) -> None:
        self._followers: dict[UserId, list[Follower]] = {}

    async def replace_for_user(
        self, user_id: UserId, followers: list[Follower]
    ) -> int:
        unique: dict[str, Follower] = {}
        for follower in followers:
            unique.setdefault(follower.did.root, follower)
        self._followers[user_id] = list(unique.values())
        return len(unique)

    async def list_for_user(self, user_id: UserId) -> list[Follower]:
        return sorted(self._followers.get(user_id, []), key=lambda f: f.handle)
