"""Bluesky credential and follower cache repository interfaces."""

from abc import ABC, abstractmethod

from elonara.domain.model.bluesky import BlueskyCredentials, Follower
from elonara.domain.value import UserId


class BlueskyCredentialRepository(ABC):
    """Stored Bluesky sessions of users who connected their account."""

    @abstractmethod
    async def find_by_user(self, user_id: UserId) -> BlueskyCredentials | None:
        """Find the stored credentials of a user.

        Args:
            user_id: User ID

        Returns:
            Credentials if the user connected Bluesky, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, credentials: BlueskyCredentials) -> BlueskyCredentials:
        """Save (create or replace) credentials.

        Args:
            credentials: Credentials to store

        Returns:
            The stored credentials
        """
        pass


class FollowerRepository(ABC):
    """Cached follower lists, refreshed by a follower sync."""

    @abstractmethod
    async def replace_for_user(
        self, user_id: UserId, followers: list[Follower]
    ) -> int:
        """Replace the cached followers of a user.

        Args:
            user_id: User whose followers were fetched
            followers: Fresh follower list

        Returns:
            Number of followers stored
        """
        pass

    @abstractmethod
    async def list_for_user(self, user_id: UserId) -> list[Follower]:
        """List cached followers of a user, ordered by handle.

        Args:
            user_id: User ID

        Returns:
            Cached followers (empty if never synced)
        """
        pass
