"""PostgreSQL implementation of Invitation repository."""

import secrets
from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy import and_, case, func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from elonara.domain.error import InvalidTransitionError, NotFoundError
from elonara.domain.model import Invitation, ResponderDetails
from elonara.domain.repository import InvitationRepository
from elonara.domain.value import (
    Channel,
    EntityId,
    EntityType,
    EventId,
    InvitationId,
    InvitationStatus,
    RsvpToken,
    UserId,
    utcnow,
)
from elonara.persistence.mappers import invitation_to_dict, row_to_invitation
from elonara.persistence.tables import (
    ACTIVE_INVITATION_INDEX_ELEMENTS,
    active_invitation_where,
    invitations_table,
)

# Fields a status change may touch
_MUTABLE_FIELDS = (
    "status",
    "user_id",
    "responder_name",
    "responder_phone",
    "plus_one",
    "plus_one_name",
    "dietary_restrictions",
    "notes",
    "responded_at",
)


class PostgresInvitationRepository(InvitationRepository):
    """PostgreSQL implementation of InvitationRepository."""

    def __init__(self, session: AsyncSession, token_bytes: int = 32) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
            token_bytes: Entropy of generated RSVP tokens
        """
        self.session = session
        self.token_bytes = token_bytes

    async def upsert_pending(
        self,
        entity_type: EntityType,
        entity_id: EntityId,
        recipient: str,
        channel: Channel,
        inviter_id: UserId,
        personal_message: str = "",
        expires_at: Optional[datetime] = None,
    ) -> tuple[Invitation, bool]:
        """Insert a pending row, or return the active one.

        ``ON CONFLICT DO NOTHING`` against the partial unique index settles
        races: the loser's insert is a no-op and it reads the winner's row.
        """
        # A concurrent cancel can free the slot between insert and read
        for _ in range(3):
            values = {
                "id": uuid4(),
                "entity_type": entity_type.value,
                "entity_id": entity_id,
                "recipient_identifier": recipient,
                "status": InvitationStatus.PENDING.value,
                "rsvp_token": secrets.token_hex(self.token_bytes),
                "source_channel": channel.value,
                "inviter_id": inviter_id,
                "personal_message": personal_message,
                "expires_at": expires_at,
                "created_at": utcnow(),
            }
            stmt = (
                pg_insert(invitations_table)
                .values(**values)
                .on_conflict_do_nothing(
                    index_elements=ACTIVE_INVITATION_INDEX_ELEMENTS,
                    index_where=active_invitation_where,
                )
                .returning(invitations_table)
            )
            result = await self.session.execute(stmt)
            row = result.mappings().first()
            if row:
                await self.session.flush()
                return row_to_invitation(dict(row)), True

            existing = await self._find_active(entity_type, entity_id, recipient)
            if existing:
                return existing, False

        raise InvalidTransitionError("cancelled", InvitationStatus.PENDING.value)

    async def _find_active(
        self, entity_type: EntityType, entity_id: EntityId, recipient: str
    ) -> Optional[Invitation]:
        stmt = select(invitations_table).where(
            and_(
                invitations_table.c.entity_type == entity_type.value,
                invitations_table.c.entity_id == entity_id,
                invitations_table.c.recipient_identifier == recipient,
                active_invitation_where,
            )
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invitation(dict(row)) if row else None

    async def find_by_id(self, invitation_id: InvitationId) -> Optional[Invitation]:
        """Find an invitation by ID."""
        stmt = select(invitations_table).where(invitations_table.c.id == invitation_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invitation(dict(row)) if row else None

    async def find_by_token(self, token: RsvpToken) -> Optional[Invitation]:
        """Find an invitation by its RSVP token.

        Args:
            token: RSVP token value object (its ``.root`` is queried)

        Returns:
            Invitation if found, None otherwise
        """
        stmt = select(invitations_table).where(
            invitations_table.c.rsvp_token == token.root
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invitation(dict(row)) if row else None

    async def set_status(
        self,
        invitation_id: InvitationId,
        new_status: InvitationStatus,
        response: ResponderDetails | None = None,
        expected_status: InvitationStatus | None = None,
    ) -> Invitation:
        """Conditional update: ``WHERE id = :id AND status = :expected``.

        ``expected`` defaults to the status read here. Zero rows updated
        means another request changed the status first.
        """
        current = await self.find_by_id(invitation_id)
        if current is None:
            raise NotFoundError("Invitation", str(invitation_id))
        expected = expected_status or current.status
        if current.status != expected:
            raise InvalidTransitionError(current.status.value, new_status.value)

        updated = current.transitioned(new_status, response)
        row_values = invitation_to_dict(updated)
        stmt = (
            update(invitations_table)
            .where(
                and_(
                    invitations_table.c.id == invitation_id,
                    invitations_table.c.status == expected.value,
                )
            )
            .values(**{field: row_values[field] for field in _MUTABLE_FIELDS})
            .returning(invitations_table)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        if not row:
            latest = await self.find_by_id(invitation_id)
            raise InvalidTransitionError(
                latest.status.value if latest else current.status.value,
                new_status.value,
            )
        await self.session.flush()
        return row_to_invitation(dict(row))

    async def bind_user(
        self, invitation_id: InvitationId, user_id: UserId
    ) -> Invitation:
        """Attach an account; only fills an empty ``user_id``."""
        stmt = (
            update(invitations_table)
            .where(
                and_(
                    invitations_table.c.id == invitation_id,
                    invitations_table.c.user_id.is_(None),
                )
            )
            .values(user_id=user_id)
        )
        await self.session.execute(stmt)
        await self.session.flush()

        invitation = await self.find_by_id(invitation_id)
        if invitation is None:
            raise NotFoundError("Invitation", str(invitation_id))
        return invitation

    async def record_delivery(
        self, invitation_id: InvitationId, expires_at: Optional[datetime] = None
    ) -> Invitation:
        """Increment the delivery counter and refresh expiry."""
        values: dict = {
            "delivery_count": invitations_table.c.delivery_count + 1,
            "last_sent_at": utcnow(),
        }
        if expires_at is not None:
            values["expires_at"] = expires_at

        stmt = (
            update(invitations_table)
            .where(invitations_table.c.id == invitation_id)
            .values(**values)
            .returning(invitations_table)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        if not row:
            raise NotFoundError("Invitation", str(invitation_id))
        await self.session.flush()
        return row_to_invitation(dict(row))

    async def list_for_entity(
        self,
        entity_type: EntityType,
        entity_id: EntityId,
        status: Optional[InvitationStatus] = None,
    ) -> list[Invitation]:
        """List invitations of an entity, newest first."""
        stmt = (
            select(invitations_table)
            .where(
                and_(
                    invitations_table.c.entity_type == entity_type.value,
                    invitations_table.c.entity_id == entity_id,
                )
            )
            .order_by(invitations_table.c.created_at.desc())
        )
        if status:
            stmt = stmt.where(invitations_table.c.status == status.value)

        result = await self.session.execute(stmt)
        return [row_to_invitation(dict(row)) for row in result.mappings().all()]

    async def find_unbound_for_recipients(
        self, recipients: list[str], statuses: list[InvitationStatus]
    ) -> list[Invitation]:
        """Find unbound invitations addressed to any of ``recipients``."""
        if not recipients or not statuses:
            return []

        stmt = (
            select(invitations_table)
            .where(
                and_(
                    invitations_table.c.recipient_identifier.in_(recipients),
                    invitations_table.c.status.in_([s.value for s in statuses]),
                    invitations_table.c.user_id.is_(None),
                )
            )
            .order_by(invitations_table.c.created_at.asc())
        )
        result = await self.session.execute(stmt)
        return [row_to_invitation(dict(row)) for row in result.mappings().all()]

    async def count_guests(self, event_id: EventId) -> int:
        """Sum of confirmed guests and their plus-ones."""
        plus_ones = func.sum(case((invitations_table.c.plus_one.is_(True), 1), else_=0))
        stmt = select(func.count(), func.coalesce(plus_ones, 0)).where(
            and_(
                invitations_table.c.entity_type == EntityType.EVENT.value,
                invitations_table.c.entity_id == event_id,
                invitations_table.c.status == InvitationStatus.CONFIRMED.value,
            )
        )
        result = await self.session.execute(stmt)
        confirmed, extra = result.one()
        return int(confirmed or 0) + int(extra or 0)
