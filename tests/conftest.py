"""Test configuration and helpers."""

from datetime import timedelta
from uuid import uuid4

from elonara.domain.model import Community, Event, User
from elonara.domain.repository import (
    CommunityRepository,
    EventRepository,
    UserRepository,
)
from elonara.domain.service import RosterReconciler
from elonara.domain.value import (
    BlueskyDID,
    CommunityId,
    CommunityKind,
    EmailAddress,
    EntityType,
    EventId,
    Slug,
    UserId,
    utcnow,
)


def make_user(
    email: str = "host@example.com",
    display_name: str = "Host",
    bluesky_did: str | None = None,
    is_admin: bool = False,
) -> User:
    """Build a user with a fresh ID."""
    return User(
        id=UserId(uuid4()),
        email=EmailAddress(email),
        display_name=display_name,
        bluesky_did=BlueskyDID(bluesky_did) if bluesky_did else None,
        is_admin=is_admin,
    )


def make_event(
    host: User,
    title: str = "Garden Party",
    max_guests: int = 0,
    allow_plus_ones: bool = True,
) -> Event:
    """Build an event hosted by ``host`` a week from now."""
    event_id = EventId(uuid4())
    return Event(
        id=event_id,
        host_id=host.id,
        title=title,
        slug=Slug.from_name(title, event_id.hex[:8]),
        event_date=utcnow() + timedelta(days=7),
        venue_info="12 Elm Street",
        description="Bring a snack.",
        max_guests=max_guests,
        allow_plus_ones=allow_plus_ones,
    )


def make_community(
    owner: User,
    name: str = "Book Club",
    kind: CommunityKind = CommunityKind.PUBLIC,
) -> Community:
    """Build a community owned by ``owner`` (owner membership not seeded)."""
    community_id = CommunityId(uuid4())
    return Community(
        id=community_id,
        owner_id=owner.id,
        name=name,
        slug=Slug.from_name(name, community_id.hex[:8]),
        kind=kind,
    )


async def seed_event(env, **event_kwargs) -> tuple[User, Event]:
    """Save a host and an event they host."""
    host = await (await env.get(UserRepository)).save(make_user())
    event = await (await env.get(EventRepository)).save(
        make_event(host, **event_kwargs)
    )
    return host, event


async def seed_community(env) -> tuple[User, Community]:
    """Save an owner and a community with its owner membership."""
    owner = await (await env.get(UserRepository)).save(make_user())
    community = await (await env.get(CommunityRepository)).save(make_community(owner))
    reconciler = await env.get(RosterReconciler)
    await reconciler.seed_owner(EntityType.COMMUNITY, community.id, owner.id)
    return owner, community
