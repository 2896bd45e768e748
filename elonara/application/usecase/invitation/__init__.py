"""Invitation use cases."""

from elonara.application.usecase.invitation.accept_invitation import (
    AcceptInvitationRequest,
    AcceptInvitationResponse,
    AcceptInvitationUseCase,
)
from elonara.application.usecase.invitation.cancel_invitation import (
    CancelInvitationRequest,
    CancelInvitationResponse,
    CancelInvitationUseCase,
)
from elonara.application.usecase.invitation.invite_followers import (
    InviteFollowersRequest,
    InviteFollowersResponse,
    InviteFollowersUseCase,
)
from elonara.application.usecase.invitation.item import InvitationItem
from elonara.application.usecase.invitation.list_invitations import (
    ListInvitationsRequest,
    ListInvitationsResponse,
    ListInvitationsUseCase,
)
from elonara.application.usecase.invitation.resend_invitation import (
    ResendInvitationRequest,
    ResendInvitationResponse,
    ResendInvitationUseCase,
)
from elonara.application.usecase.invitation.rsvp import (
    GetRsvpRequest,
    GetRsvpUseCase,
    RespondRsvpRequest,
    RespondRsvpUseCase,
    RsvpResponseBody,
)
from elonara.application.usecase.invitation.send_invitation import (
    SendInvitationRequest,
    SendInvitationResponse,
    SendInvitationUseCase,
)

__all__ = [
    "AcceptInvitationRequest",
    "AcceptInvitationResponse",
    "AcceptInvitationUseCase",
    "CancelInvitationRequest",
    "CancelInvitationResponse",
    "CancelInvitationUseCase",
    "GetRsvpRequest",
    "GetRsvpUseCase",
    "InvitationItem",
    "InviteFollowersRequest",
    "InviteFollowersResponse",
    "InviteFollowersUseCase",
    "ListInvitationsRequest",
    "ListInvitationsResponse",
    "ListInvitationsUseCase",
    "ResendInvitationRequest",
    "ResendInvitationResponse",
    "ResendInvitationUseCase",
    "RespondRsvpRequest",
    "RespondRsvpUseCase",
    "RsvpResponseBody",
    "SendInvitationRequest",
    "SendInvitationResponse",
    "SendInvitationUseCase",
]
