"""Management permission checks for events and communities."""

import logfire

from elonara.domain.error import NotAuthorizedError, NotFoundError
from elonara.domain.model import Community, Event, RequestContext
from elonara.domain.repository import (
    CommunityRepository,
    EventRepository,
    MembershipRepository,
)
from elonara.domain.value import CommunityId, EntityId, EntityType, EventId, UserId

from .base import Service


class AccessService(Service):
    """Decides who may invite to, and manage the guest list of, an entity.

    - Events: the host
    - Communities: active members with an owner, admin or moderator role
    - Site admins: everything, when acting as themselves
    """

    def __init__(
        self,
        event_repository: EventRepository,
        community_repository: CommunityRepository,
        membership_repository: MembershipRepository,
        context: RequestContext,
    ) -> None:
        self.event_repository = event_repository
        self.community_repository = community_repository
        self.membership_repository = membership_repository
        self.context = context

    async def load_entity(
        self, entity_type: EntityType, entity_id: EntityId
    ) -> Event | Community:
        """Load the event or community an invitation belongs to.

        Raises:
            NotFoundError: If it does not exist
        """
        entity: Event | Community | None
        if entity_type == EntityType.EVENT:
            entity = await self.event_repository.find_by_id(EventId(entity_id))
            resource = "Event"
        else:
            entity = await self.community_repository.find_by_id(
                CommunityId(entity_id)
            )
            resource = "Community"
        if entity is None:
            raise NotFoundError(resource, str(entity_id))
        return entity

    async def can_manage(
        self, entity_type: EntityType, entity_id: EntityId, user_id: UserId | None
    ) -> bool:
        """Whether ``user_id`` may manage invitations of the entity."""
        if user_id is None:
            return False
        if self.context.is_admin and self.context.user_id == user_id:
            return True

        entity = await self.load_entity(entity_type, entity_id)
        if isinstance(entity, Event):
            return entity.host_id == user_id

        membership = await self.membership_repository.find_active(
            entity_type, entity_id, user_id
        )
        return membership is not None and membership.role.can_manage

    async def require_manage(
        self,
        entity_type: EntityType,
        entity_id: EntityId,
        user_id: UserId | None,
        action: str = "manage invitations for",
    ) -> Event | Community:
        """Load the entity and check the caller may manage it.

        Returns:
            The event or community

        Raises:
            NotFoundError: If the entity does not exist
            NotAuthorizedError: If the user may not manage it
        """
        entity = await self.load_entity(entity_type, entity_id)
        if not await self.can_manage(entity_type, entity_id, user_id):
            logfire.warn(
                "Management denied",
                entity_type=entity_type.value,
                entity_id=str(entity_id),
                user_id=str(user_id) if user_id else None,
            )
            raise NotAuthorizedError(
                action, entity_type.value, str(user_id) if user_id else None
            )
        return entity
