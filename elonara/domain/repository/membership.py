"""Membership repository interface."""

from abc import ABC, abstractmethod

from elonara.domain.model.membership import Membership
from elonara.domain.value import (
    EntityId,
    EntityType,
    MembershipId,
    MembershipStatus,
    UserId,
)


class MembershipRepository(ABC):
    """Repository for Membership entity."""

    @abstractmethod
    async def find_active(
        self, entity_type: EntityType, entity_id: EntityId, user_id: UserId
    ) -> Membership | None:
        """Find the active membership of a user in an entity.

        Args:
            entity_type: Entity kind (always community today)
            entity_id: Community ID
            user_id: Member

        Returns:
            Active membership if any
        """
        pass

    @abstractmethod
    async def add_active(self, membership: Membership) -> tuple[Membership, bool]:
        """Insert an active membership unless one already exists.

        Args:
            membership: Membership to insert

        Returns:
            The active membership and whether it was created by this call
        """
        pass

    @abstractmethod
    async def set_status(
        self, membership_id: MembershipId, status: MembershipStatus
    ) -> Membership | None:
        """Change a membership's status.

        Args:
            membership_id: Membership to update
            status: New status

        Returns:
            Updated membership, None if it does not exist
        """
        pass

    @abstractmethod
    async def list_for_entity(
        self,
        entity_type: EntityType,
        entity_id: EntityId,
        status: MembershipStatus | None = MembershipStatus.ACTIVE,
    ) -> list[Membership]:
        """List memberships of an entity, oldest first.

        Args:
            entity_type: Entity kind
            entity_id: Community ID
            status: Optional status filter (active by default)

        Returns:
            List of memberships
        """
        pass
