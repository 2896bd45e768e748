"""Domain models for Elonara."""

from elonara.domain.model.bluesky import BlueskyCredentials, Follower
from elonara.domain.model.common import DomainModel
from elonara.domain.model.community import Community
from elonara.domain.model.context import RequestContext
from elonara.domain.model.event import Event
from elonara.domain.model.invitation import (
    ALLOWED_TRANSITIONS,
    Invitation,
    ResponderDetails,
    can_transition,
)
from elonara.domain.model.membership import Membership
from elonara.domain.model.nonce import Nonce, NonceKey
from elonara.domain.model.user import User

__all__ = [
    "DomainModel",
    "BlueskyCredentials",
    "Follower",
    "Community",
    "RequestContext",
    "Event",
    "ALLOWED_TRANSITIONS",
    "Invitation",
    "ResponderDetails",
    "can_transition",
    "Membership",
    "Nonce",
    "NonceKey",
    "User",
]
