"""Adapter layer errors."""


class AdapterError(Exception):
    """Base adapter error."""

    pass


class ChannelDeliveryError(AdapterError):
    """An invitation could not be delivered through its channel.

    Never rolls back the stored invitation; the token stays valid.
    """

    pass


class MailTransportError(ChannelDeliveryError):
    """Mail could not be handed to the transport."""

    pass


class BlueskyClientError(ChannelDeliveryError):
    """A Bluesky XRPC call failed."""

    pass


class BlueskyReauthRequiredError(BlueskyClientError):
    """Stored Bluesky credentials are missing or expired.

    The user must reconnect their Bluesky account before we can act for them.
    """

    pass


class IdentityResolutionError(AdapterError):
    """Failed to resolve a Bluesky handle to a DID."""

    pass
