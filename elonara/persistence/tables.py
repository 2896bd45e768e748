"""SQLAlchemy table definitions for Elonara.

Core tables used by the repositories. They match the schema created in the
Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    Column,
    Enum,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

metadata = MetaData()

# ============================================================================
# USERS TABLE
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("email", String(255), nullable=False, unique=True),  # Lower-cased
    Column("display_name", String(255), nullable=False),
    Column("bluesky_did", String(255), nullable=True, unique=True),
    Column("bluesky_handle", String(255), nullable=True),
    Column("is_admin", Boolean, nullable=False, server_default="false"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

# ============================================================================
# COMMUNITIES TABLE
# ============================================================================
communities_table = Table(
    "communities",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "owner_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    ),
    Column("name", String(255), nullable=False),
    Column("slug", String(100), nullable=False, unique=True),
    Column(
        "kind",
        Enum("public", "circle", name="community_kind", create_type=False),
        nullable=False,
        server_default="public",
    ),
    Column("description", Text, nullable=False, server_default=""),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_communities_owner_id", communities_table.c.owner_id)

# ============================================================================
# EVENTS TABLE
# ============================================================================
events_table = Table(
    "events",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "host_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    ),
    Column(
        "community_id",
        UUID,
        ForeignKey("communities.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("title", String(255), nullable=False),
    Column("slug", String(100), nullable=False, unique=True),
    Column("event_date", TIMESTAMP(timezone=True), nullable=True),
    Column("venue_info", Text, nullable=False, server_default=""),
    Column("description", Text, nullable=False, server_default=""),
    Column("max_guests", Integer, nullable=False, server_default="0"),  # 0 = no limit
    Column("allow_plus_ones", Boolean, nullable=False, server_default="true"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_events_host_id", events_table.c.host_id)

# ============================================================================
# INVITATIONS TABLE
# ============================================================================
invitations_table = Table(
    "invitations",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "entity_type",
        Enum("event", "community", name="entity_type", create_type=False),
        nullable=False,
    ),
    Column("entity_id", UUID, nullable=False),  # events.id or communities.id
    Column("recipient_identifier", String(255), nullable=False),
    Column(
        "status",
        Enum(
            "pending",
            "confirmed",
            "declined",
            "cancelled",
            name="invitation_status",
            create_type=False,
        ),
        nullable=False,
        server_default="pending",
    ),
    Column("rsvp_token", String(128), nullable=False, unique=True),
    Column(
        "source_channel",
        Enum("email", "link", "bluesky", name="invitation_channel", create_type=False),
        nullable=False,
    ),
    Column(
        "inviter_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    ),
    Column("personal_message", Text, nullable=False, server_default=""),
    Column(
        "user_id", UUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    ),
    Column("responder_name", String(255), nullable=False, server_default=""),
    Column("responder_phone", String(50), nullable=False, server_default=""),
    Column("plus_one", Boolean, nullable=False, server_default="false"),
    Column("plus_one_name", String(255), nullable=False, server_default=""),
    Column("dietary_restrictions", Text, nullable=False, server_default=""),
    Column("notes", Text, nullable=False, server_default=""),
    Column("delivery_count", Integer, nullable=False, server_default="0"),
    Column("last_sent_at", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("responded_at", TIMESTAMP(timezone=True), nullable=True),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=True),
)

Index(
    "idx_invitations_entity_status",
    invitations_table.c.entity_type,
    invitations_table.c.entity_id,
    invitations_table.c.status,
)
Index("idx_invitations_recipient", invitations_table.c.recipient_identifier)
Index("idx_invitations_user_id", invitations_table.c.user_id)

# One active invitation per entity + recipient; cancelled rows are history
ACTIVE_INVITATION_INDEX_ELEMENTS = ["entity_type", "entity_id", "recipient_identifier"]
active_invitation_where = invitations_table.c.status != "cancelled"
Index(
    "idx_invitations_unique_active_recipient",
    invitations_table.c.entity_type,
    invitations_table.c.entity_id,
    invitations_table.c.recipient_identifier,
    unique=True,
    postgresql_where=active_invitation_where,
)

# ============================================================================
# MEMBERSHIPS TABLE
# ============================================================================
memberships_table = Table(
    "memberships",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "entity_type",
        Enum("event", "community", name="entity_type", create_type=False),
        nullable=False,
        server_default="community",
    ),
    Column("entity_id", UUID, nullable=False),
    Column(
        "user_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    ),
    Column(
        "role",
        Enum(
            "owner",
            "admin",
            "moderator",
            "member",
            name="membership_role",
            create_type=False,
        ),
        nullable=False,
        server_default="member",
    ),
    Column(
        "status",
        Enum("active", "removed", name="membership_status", create_type=False),
        nullable=False,
        server_default="active",
    ),
    Column(
        "invitation_id",
        UUID,
        ForeignKey("invitations.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column(
        "joined_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

ACTIVE_MEMBERSHIP_INDEX_ELEMENTS = ["entity_type", "entity_id", "user_id"]
active_membership_where = memberships_table.c.status == "active"
Index(
    "idx_memberships_unique_active_member",
    memberships_table.c.entity_type,
    memberships_table.c.entity_id,
    memberships_table.c.user_id,
    unique=True,
    postgresql_where=active_membership_where,
)
Index("idx_memberships_user_id", memberships_table.c.user_id)

# ============================================================================
# BLUESKY TABLES
# ============================================================================
bluesky_credentials_table = Table(
    "bluesky_credentials",
    metadata,
    Column(
        "user_id",
        UUID,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("did", String(255), nullable=False),
    Column("handle", String(255), nullable=False),
    Column("access_jwt", Text, nullable=False),
    Column("refresh_jwt", Text, nullable=False),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

bluesky_followers_table = Table(
    "bluesky_followers",
    metadata,
    Column(
        "user_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    ),
    Column("did", String(255), nullable=False),
    Column("handle", String(255), nullable=False),
    Column("display_name", String(255), nullable=False, server_default=""),
    Column("avatar_url", Text, nullable=True),
    Column(
        "synced_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("user_id", "did", name="uq_bluesky_followers_user_did"),
)
