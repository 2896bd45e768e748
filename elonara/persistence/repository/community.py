"""PostgreSQL implementation of Community repository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from elonara.domain.model import Community
from elonara.domain.repository import CommunityRepository
from elonara.domain.value import CommunityId, UserId
from elonara.persistence.mappers import community_to_dict, row_to_community
from elonara.persistence.tables import communities_table


class PostgresCommunityRepository(CommunityRepository):
    """PostgreSQL implementation of CommunityRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_id(self, community_id: CommunityId) -> Optional[Community]:
        """Find a community by ID."""
        stmt = select(communities_table).where(communities_table.c.id == community_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_community(dict(row)) if row else None

    async def find_by_owner(self, owner_id: UserId) -> list[Community]:
        """List communities owned by a user, oldest first."""
        stmt = (
            select(communities_table)
            .where(communities_table.c.owner_id == owner_id)
            .order_by(communities_table.c.created_at.asc())
        )
        result = await self.session.execute(stmt)
        return [row_to_community(dict(row)) for row in result.mappings().all()]

    async def save(self, community: Community) -> Community:
        """Insert or update a community."""
        values = community_to_dict(community)
        stmt = pg_insert(communities_table).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[communities_table.c.id],
            set_={k: v for k, v in values.items() if k not in ("id", "created_at")},
        )
        await self.session.execute(stmt)
        await self.session.flush()
        return community
