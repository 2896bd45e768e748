"""Delivery channel port.

Each channel (email, shareable link, Bluesky) implements ``ChannelAdapter``;
the container assembles them once into a ``dict[Channel, ChannelAdapter]``.
"""

from abc import ABC, abstractmethod

from elonara.domain.model import Invitation
from elonara.domain.value import Channel, EntityType, ValueObject


class DeliveryResult(ValueObject):
    """Outcome of handing an invitation to a channel."""

    channel: Channel
    success: bool
    url: str | None = None
    error_message: str | None = None

    # Bluesky only: a post was published / the stored session is unusable
    posted: bool = False
    needs_reauth: bool = False


def invitation_url(invitation: Invitation, base_url: str) -> str:
    """Public URL carrying the invitation's RSVP token.

    Args:
        invitation: Invitation to link to
        base_url: Public site URL

    Returns:
        ``/rsvp/<token>`` for events, ``/invitation/accept?token=`` for communities
    """
    base = base_url.rstrip("/")
    token = invitation.rsvp_token.root
    if invitation.entity_type == EntityType.EVENT:
        return f"{base}/rsvp/{token}"
    return f"{base}/invitation/accept?token={token}"


class ChannelAdapter(ABC):
    """Sends one invitation through one channel."""

    channel: Channel

    @abstractmethod
    async def send(
        self, invitation: Invitation, personal_message: str = ""
    ) -> DeliveryResult:
        """Deliver an invitation.

        Implementations report failures in the result instead of raising.

        Args:
            invitation: Persisted invitation (token already assigned)
            personal_message: Inviter's note

        Returns:
            Delivery result
        """
        pass
