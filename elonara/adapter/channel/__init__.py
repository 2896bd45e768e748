"""Invitation delivery channels."""

from .bluesky import BlueskyChannel
from .email import EmailChannel
from .link import LinkChannel

__all__ = ["BlueskyChannel", "EmailChannel", "LinkChannel"]
