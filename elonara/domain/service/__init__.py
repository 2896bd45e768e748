"""Domain services."""

from .access import AccessService
from .base import Service
from .channel import ChannelAdapter, DeliveryResult, invitation_url
from .community_service import CommunityService
from .invitation_service import AcceptResult, InvitationService, InviteOutcome
from .jwt_service import JWTService
from .nonce_guard import NonceGuard
from .roster_reconciler import ReconcileResult, RosterReconciler, RosterState
from .user_service import RegistrationResult, UserService

__all__ = [
    "AcceptResult",
    "AccessService",
    "ChannelAdapter",
    "CommunityService",
    "DeliveryResult",
    "InvitationService",
    "InviteOutcome",
    "JWTService",
    "NonceGuard",
    "ReconcileResult",
    "RegistrationResult",
    "RosterReconciler",
    "RosterState",
    "Service",
    "UserService",
    "invitation_url",
]
