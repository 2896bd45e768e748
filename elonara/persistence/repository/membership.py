"""PostgreSQL implementation of Membership repository."""

from typing import Optional

from sqlalchemy import and_, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from elonara.domain.model import Membership
from elonara.domain.repository import MembershipRepository
from elonara.domain.value import (
    EntityId,
    EntityType,
    MembershipId,
    MembershipStatus,
    UserId,
)
from elonara.persistence.mappers import membership_to_dict, row_to_membership
from elonara.persistence.tables import (
    ACTIVE_MEMBERSHIP_INDEX_ELEMENTS,
    active_membership_where,
    memberships_table,
)


class PostgresMembershipRepository(MembershipRepository):
    """PostgreSQL implementation of MembershipRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_active(
        self, entity_type: EntityType, entity_id: EntityId, user_id: UserId
    ) -> Optional[Membership]:
        """Find the active membership of a user in an entity."""
        stmt = select(memberships_table).where(
            and_(
                memberships_table.c.entity_type == entity_type.value,
                memberships_table.c.entity_id == entity_id,
                memberships_table.c.user_id == user_id,
                active_membership_where,
            )
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_membership(dict(row)) if row else None

    async def add_active(self, membership: Membership) -> tuple[Membership, bool]:
        """Insert unless the partial unique index already holds a row."""
        stmt = (
            pg_insert(memberships_table)
            .values(**membership_to_dict(membership))
            .on_conflict_do_nothing(
                index_elements=ACTIVE_MEMBERSHIP_INDEX_ELEMENTS,
                index_where=active_membership_where,
            )
            .returning(memberships_table)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        if row:
            await self.session.flush()
            return row_to_membership(dict(row)), True

        existing = await self.find_active(
            membership.entity_type, membership.entity_id, membership.user_id
        )
        if existing is None:
            # Only reachable if the winner was removed in between
            return await self.add_active(membership)
        return existing, False

    async def set_status(
        self, membership_id: MembershipId, status: MembershipStatus
    ) -> Optional[Membership]:
        """Change a membership's status."""
        stmt = (
            update(memberships_table)
            .where(memberships_table.c.id == membership_id)
            .values(status=status.value)
            .returning(memberships_table)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        await self.session.flush()
        return row_to_membership(dict(row)) if row else None

    async def list_for_entity(
        self,
        entity_type: EntityType,
        entity_id: EntityId,
        status: Optional[MembershipStatus] = MembershipStatus.ACTIVE,
    ) -> list[Membership]:
        """List memberships of an entity, oldest first."""
        stmt = (
            select(memberships_table)
            .where(
                and_(
                    memberships_table.c.entity_type == entity_type.value,
                    memberships_table.c.entity_id == entity_id,
                )
            )
            .order_by(memberships_table.c.joined_at.asc())
        )
        if status:
            stmt = stmt.where(memberships_table.c.status == status.value)

        result = await self.session.execute(stmt)
        return [row_to_membership(dict(row)) for row in result.mappings().all()]
