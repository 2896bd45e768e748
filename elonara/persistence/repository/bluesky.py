"""PostgreSQL implementations of the Bluesky repositories."""

from typing import Optional

from sqlalchemy import delete, insert, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from elonara.domain.model import BlueskyCredentials, Follower
from elonara.domain.repository import BlueskyCredentialRepository, FollowerRepository
from elonara.domain.value import UserId, utcnow
from elonara.persistence.mappers import row_to_bluesky_credentials, row_to_follower
from elonara.persistence.tables import (
    bluesky_credentials_table,
    bluesky_followers_table,
)


class PostgresBlueskyCredentialRepository(BlueskyCredentialRepository):
    """PostgreSQL implementation of BlueskyCredentialRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_user(self, user_id: UserId) -> Optional[BlueskyCredentials]:
        """Find the stored credentials of a user."""
        stmt = select(bluesky_credentials_table).where(
            bluesky_credentials_table.c.user_id == user_id
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_bluesky_credentials(dict(row)) if row else None

    async def save(self, credentials: BlueskyCredentials) -> BlueskyCredentials:
        """Create or replace credentials."""
        values = {
            "user_id": credentials.user_id,
            "did": credentials.did.root,
            "handle": credentials.handle,
            "access_jwt": credentials.access_jwt,
            "refresh_jwt": credentials.refresh_jwt,
            "updated_at": credentials.updated_at,
        }
        stmt = pg_insert(bluesky_credentials_table).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[bluesky_credentials_table.c.user_id],
            set_={k: v for k, v in values.items() if k != "user_id"},
        )
        await self.session.execute(stmt)
        await self.session.flush()
        return credentials


class PostgresFollowerRepository(FollowerRepository):
    """PostgreSQL implementation of FollowerRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def replace_for_user(
        self, user_id: UserId, followers: list[Follower]
    ) -> int:
        """Delete the old cache and insert the fresh list."""
        await self.session.execute(
            delete(bluesky_followers_table).where(
                bluesky_followers_table.c.user_id == user_id
            )
        )

        # Pages can overlap when the follower list changes mid-sync
        unique: dict[str, Follower] = {}
        for follower in followers:
            unique.setdefault(follower.did.root, follower)

        if unique:
            synced_at = utcnow()
            await self.session.execute(
                insert(bluesky_followers_table),
                [
                    {
                        "user_id": user_id,
                        "did": follower.did.root,
                        "handle": follower.handle,
                        "display_name": follower.display_name,
                        "avatar_url": follower.avatar_url,
                        "synced_at": synced_at,
                    }
                    for follower in unique.values()
                ],
            )
        await self.session.flush()
        return len(unique)

    async def list_for_user(self, user_id: UserId) -> list[Follower]:
        """List cached followers, ordered by handle."""
        stmt = (
            select(bluesky_followers_table)
            .where(bluesky_followers_table.c.user_id == user_id)
            .order_by(bluesky_followers_table.c.handle.asc())
        )
        result = await self.session.execute(stmt)
        return [row_to_follower(dict(row)) for row in result.mappings().all()]
