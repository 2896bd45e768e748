"""initial_schema

Create the foundational schema for Elonara Social:
- Users (email identity, optional Bluesky DID)
- Communities and events
- Invitations (one row per recipient per entity, history kept by status)
- Memberships (community members, created from accepted invitations)
- Bluesky credentials and cached followers

Revision ID: 3f1c9a7d2b64
Revises:
Create Date: 2026-09-14 10:12:41.508213

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f1c9a7d2b64"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ENUM_TYPES = {
    "community_kind": ("public", "circle"),
    "entity_type": ("event", "community"),
    "invitation_status": ("pending", "confirmed", "declined", "cancelled"),
    "invitation_channel": ("email", "link", "bluesky"),
    "membership_role": ("owner", "admin", "moderator", "member"),
    "membership_status": ("active", "removed"),
}


def _enum(name: str) -> postgresql.ENUM:
    return postgresql.ENUM(*ENUM_TYPES[name], name=name, create_type=False)


def _created_at(name: str = "created_at") -> sa.Column:
    return sa.Column(
        name,
        sa.TIMESTAMP(timezone=True),
        nullable=False,
        server_default=sa.text("NOW()"),
    )


def _uuid_pk() -> sa.Column:
    return sa.Column(
        "id",
        sa.UUID(),
        server_default=sa.text("uuid_generate_v4()"),
        nullable=False,
    )


def upgrade() -> None:
    """Upgrade schema."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # Create ENUM types (idempotent)
    for name, values in ENUM_TYPES.items():
        labels = ", ".join(f"'{value}'" for value in values)
        op.execute(f"""
            DO $$ BEGIN
                CREATE TYPE {name} AS ENUM ({labels});
            EXCEPTION
                WHEN duplicate_object THEN null;
            END $$;
        """)

    # ========================================================================
    # USERS table
    # ========================================================================
    op.create_table(
        "users",
        _uuid_pk(),
        sa.Column("email", sa.String(255), nullable=False),  # Lower-cased
        sa.Column("display_name", sa.String(255), nullable=False),
        sa.Column("bluesky_did", sa.String(255), nullable=True),
        sa.Column("bluesky_handle", sa.String(255), nullable=True),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default="false"),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.UniqueConstraint("bluesky_did", name="uq_users_bluesky_did"),
    )

    # ========================================================================
    # COMMUNITIES table
    # ========================================================================
    op.create_table(
        "communities",
        _uuid_pk(),
        sa.Column("owner_id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(100), nullable=False),
        sa.Column(
            "kind", _enum("community_kind"), nullable=False, server_default="public"
        ),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        _created_at(),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug", name="uq_communities_slug"),
    )
    op.create_index("idx_communities_owner_id", "communities", ["owner_id"])

    # ========================================================================
    # EVENTS table
    # ========================================================================
    op.create_table(
        "events",
        _uuid_pk(),
        sa.Column("host_id", sa.UUID(), nullable=False),
        sa.Column("community_id", sa.UUID(), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(100), nullable=False),
        sa.Column("event_date", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("venue_info", sa.Text(), nullable=False, server_default=""),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        # 0 means no guest limit
        sa.Column("max_guests", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "allow_plus_ones", sa.Boolean(), nullable=False, server_default="true"
        ),
        _created_at(),
        sa.ForeignKeyConstraint(["host_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["community_id"], ["communities.id"], ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug", name="uq_events_slug"),
    )
    op.create_index("idx_events_host_id", "events", ["host_id"])

    # ========================================================================
    # INVITATIONS table
    # ========================================================================
    op.create_table(
        "invitations",
        _uuid_pk(),
        sa.Column("entity_type", _enum("entity_type"), nullable=False),
        sa.Column("entity_id", sa.UUID(), nullable=False),  # events.id / communities.id
        sa.Column("recipient_identifier", sa.String(255), nullable=False),
        sa.Column(
            "status",
            _enum("invitation_status"),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("rsvp_token", sa.String(128), nullable=False),
        sa.Column("source_channel", _enum("invitation_channel"), nullable=False),
        sa.Column("inviter_id", sa.UUID(), nullable=False),
        sa.Column("personal_message", sa.Text(), nullable=False, server_default=""),
        sa.Column("user_id", sa.UUID(), nullable=True),
        sa.Column("responder_name", sa.String(255), nullable=False, server_default=""),
        sa.Column("responder_phone", sa.String(50), nullable=False, server_default=""),
        sa.Column("plus_one", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("plus_one_name", sa.String(255), nullable=False, server_default=""),
        sa.Column(
            "dietary_restrictions", sa.Text(), nullable=False, server_default=""
        ),
        sa.Column("notes", sa.Text(), nullable=False, server_default=""),
        sa.Column("delivery_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_sent_at", sa.TIMESTAMP(timezone=True), nullable=True),
        _created_at(),
        sa.Column("responded_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["inviter_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("rsvp_token", name="uq_invitations_rsvp_token"),
    )
    op.create_index(
        "idx_invitations_entity_status",
        "invitations",
        ["entity_type", "entity_id", "status"],
    )
    op.create_index(
        "idx_invitations_recipient", "invitations", ["recipient_identifier"]
    )
    op.create_index("idx_invitations_user_id", "invitations", ["user_id"])

    # Partial unique index: one active invitation per entity + recipient.
    # Cancelled rows stay as history and free the slot.
    op.execute("""
        CREATE UNIQUE INDEX idx_invitations_unique_active_recipient
        ON invitations (entity_type, entity_id, recipient_identifier)
        WHERE status != 'cancelled'
    """)

    # ========================================================================
    # MEMBERSHIPS table
    # ========================================================================
    op.create_table(
        "memberships",
        _uuid_pk(),
        sa.Column(
            "entity_type",
            _enum("entity_type"),
            nullable=False,
            server_default="community",
        ),
        sa.Column("entity_id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column(
            "role", _enum("membership_role"), nullable=False, server_default="member"
        ),
        sa.Column(
            "status",
            _enum("membership_status"),
            nullable=False,
            server_default="active",
        ),
        sa.Column("invitation_id", sa.UUID(), nullable=True),
        _created_at("joined_at"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["invitation_id"], ["invitations.id"], ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_memberships_user_id", "memberships", ["user_id"])

    # Accepting the same invitation twice must not add a second member
    op.execute("""
        CREATE UNIQUE INDEX idx_memberships_unique_active_member
        ON memberships (entity_type, entity_id, user_id)
        WHERE status = 'active'
    """)

    # ========================================================================
    # BLUESKY tables
    # ========================================================================
    op.create_table(
        "bluesky_credentials",
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("did", sa.String(255), nullable=False),
        sa.Column("handle", sa.String(255), nullable=False),
        sa.Column("access_jwt", sa.Text(), nullable=False),
        sa.Column("refresh_jwt", sa.Text(), nullable=False),
        _created_at("updated_at"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("user_id"),
    )

    op.create_table(
        "bluesky_followers",
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("did", sa.String(255), nullable=False),
        sa.Column("handle", sa.String(255), nullable=False),
        sa.Column("display_name", sa.String(255), nullable=False, server_default=""),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        _created_at("synced_at"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", "did", name="uq_bluesky_followers_user_did"),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("bluesky_followers")
    op.drop_table("bluesky_credentials")
    op.drop_table("memberships")
    op.drop_table("invitations")
    op.drop_table("events")
    op.drop_table("communities")
    op.drop_table("users")

    for name in reversed(list(ENUM_TYPES)):
        op.execute(f"DROP TYPE IF EXISTS {name}")
