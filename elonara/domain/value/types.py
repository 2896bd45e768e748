"""Domain value objects for Elonara.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules for recipients, tokens and statuses.
"""

import re
from enum import Enum

from pydantic import field_validator

from elonara.domain.value.common import RootValueObject

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_HEX_TOKEN_RE = re.compile(r"^[0-9a-f]{32,128}$")


class EntityType(str, Enum):
    """Kind of entity an invitation or membership belongs to."""

    EVENT = "event"
    COMMUNITY = "community"


class InvitationStatus(str, Enum):
    """Lifecycle status of an invitation.

    pending -> confirmed | declined | cancelled
    confirmed -> cancelled
    declined -> cancelled
    cancelled is terminal.
    """

    PENDING = "pending"
    CONFIRMED = "confirmed"
    DECLINED = "declined"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self is InvitationStatus.CANCELLED


class Channel(str, Enum):
    """Delivery channel an invitation was sent through."""

    EMAIL = "email"
    LINK = "link"
    BLUESKY = "bluesky"


class MembershipRole(str, Enum):
    """Role of a member within a community."""

    OWNER = "owner"
    ADMIN = "admin"
    MODERATOR = "moderator"
    MEMBER = "member"

    @property
    def can_manage(self) -> bool:
        """Whether the role may invite, resend and cancel."""
        return self in (
            MembershipRole.OWNER,
            MembershipRole.ADMIN,
            MembershipRole.MODERATOR,
        )


class MembershipStatus(str, Enum):
    """Status of a membership row."""

    ACTIVE = "active"
    REMOVED = "removed"


class CommunityKind(str, Enum):
    """Public communities are discoverable; circles are private."""

    PUBLIC = "public"
    CIRCLE = "circle"


class RsvpResponse(str, Enum):
    """Guest answer carried by ``?rsvp=`` links and the RSVP form."""

    YES = "yes"
    NO = "no"


class NonceScope(str, Enum):
    """Action families a nonce can authorize."""

    EVENT_ACTION = "app_event_action"
    COMMUNITY_ACTION = "app_community_action"
    BLUESKY_ACTION = "app_bluesky_action"
    RSVP_ACTION = "app_rsvp_action"


class RsvpToken(RootValueObject[str]):
    """Unguessable hex token embedded in invitation URLs."""

    @field_validator("root")
    @classmethod
    def validate_token_format(cls, v: str) -> str:
        """Validate token is lowercase hex of a plausible length."""
        if not _HEX_TOKEN_RE.match(v):
            raise ValueError("RSVP token must be 32-128 lowercase hex characters")
        return v


class EmailAddress(RootValueObject[str]):
    """Normalized (trimmed, lower-cased) email address."""

    @field_validator("root", mode="before")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Trim, lower-case and check the basic address shape."""
        if not isinstance(v, str):
            raise ValueError("Email must be a string")
        v = v.strip().lower()
        if len(v) > 255 or not _EMAIL_RE.match(v):
            raise ValueError("Please provide a valid email address.")
        return v


class BlueskyDID(RootValueObject[str]):
    """AT Protocol Decentralized Identifier (DID).

    Format: did:plc:<identifier> or did:web:<domain>. Stored lower-cased.
    """

    @field_validator("root", mode="before")
    @classmethod
    def validate_did_format(cls, v: str) -> str:
        """Validate DID starts with 'did:'."""
        if not isinstance(v, str):
            raise ValueError("DID must be a string")
        v = v.strip().lower()
        if not v.startswith("did:"):
            raise ValueError("DID must start with 'did:'")
        if len(v) > 255:
            raise ValueError("DID must be 1-255 characters")
        return v


class LinkLabel(RootValueObject[str]):
    """Free-text label identifying who a shareable link was made for."""

    @field_validator("root", mode="before")
    @classmethod
    def validate_label(cls, v: str) -> str:
        """Validate label is non-empty and within length limits."""
        if not isinstance(v, str):
            raise ValueError("Label must be a string")
        v = v.strip()
        if len(v) < 1 or len(v) > 255:
            raise ValueError("Link label must be 1-255 characters")
        # Labels that look like addresses dedupe with email invitations
        if _EMAIL_RE.match(v):
            v = v.lower()
        return v


class Slug(RootValueObject[str]):
    """URL-safe slug for events and communities."""

    @field_validator("root")
    @classmethod
    def validate_slug_format(cls, v: str) -> str:
        """Validate slug format."""
        if not re.match(r"^[a-z0-9]+(?:-[a-z0-9]+)*$", v):
            raise ValueError(
                "Slug must be lowercase alphanumeric with hyphens, "
                "no leading/trailing hyphens or consecutive hyphens"
            )
        if len(v) > 100:
            raise ValueError("Slug must be 1-100 characters")
        return v

    @classmethod
    def from_name(cls, name: str, suffix: str = "") -> "Slug":
        """Build a slug from a display name."""
        base = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")[:80] or "item"
        if suffix:
            base = f"{base}-{suffix}"
        return cls(base)
