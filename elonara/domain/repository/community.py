"""Community repository interface."""

from abc import ABC, abstractmethod

from elonara.domain.model.community import Community
from elonara.domain.value import CommunityId, UserId


class CommunityRepository(ABC):
    """Repository for Community entity."""

    @abstractmethod
    async def find_by_id(self, community_id: CommunityId) -> Community | None:
        """Find a community by ID.

        Args:
            community_id: The community's unique identifier

        Returns:
            The community if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_owner(self, owner_id: UserId) -> list[Community]:
        """List communities owned by a user, oldest first.

        Args:
            owner_id: Owner's user ID

        Returns:
            List of communities
        """
        pass

    @abstractmethod
    async def save(self, community: Community) -> Community:
        """Save a community (create or update).

        Args:
            community: The community to save

        Returns:
            The saved community
        """
        pass
