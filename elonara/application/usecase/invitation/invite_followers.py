"""Bulk invite Bluesky followers use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel, Field

from elonara.application.usecase.base import BaseUseCase
from elonara.domain.error import ValidationError
from elonara.domain.service import InvitationService
from elonara.domain.value import Channel, EntityId, EntityType, UserId


class InviteFollowersRequest(BaseModel):
    """Invite selected followers to an event or community."""

    entity_type: EntityType
    entity_id: UUID
    inviter_id: UUID | None
    follower_dids: list[str] = Field(max_length=500)
    personal_message: str | None = Field(default=None, max_length=2000)


class InviteFollowersResponse(BaseModel):
    """Per-batch counts; partial failure is not an error."""

    invited: int = 0
    posted: int = 0
    skipped: int = 0
    failed: int = 0
    errors: list[str] = []
    needs_reauth: bool = False
    message: str = ""


def normalize_dids(dids: list[str]) -> list[str]:
    """Trim, lower-case and dedupe, keeping first-seen order."""
    seen: dict[str, None] = {}
    for did in dids:
        normalized = did.strip().lower()
        if normalized:
            seen.setdefault(normalized, None)
    return list(seen)


class InviteFollowersUseCase(BaseUseCase):
    """Calls ``invite`` once per selected follower over the Bluesky channel.

    Stops at the first post that needs the inviter to reconnect Bluesky;
    invitations created before that point stay.
    """

    def __init__(self, invitation_service: InvitationService) -> None:
        self.invitation_service = invitation_service

    async def execute(self, request: InviteFollowersRequest) -> InviteFollowersResponse:
        dids = normalize_dids(request.follower_dids)
        if not dids:
            raise ValidationError("Please select at least one follower.")

        inviter_id = UserId(request.inviter_id) if request.inviter_id else None
        result = InviteFollowersResponse()

        with logfire.span(
            "invite_followers",
            entity_type=request.entity_type.value,
            entity_id=str(request.entity_id),
            count=len(dids),
        ):
            for did in dids:
                try:
                    outcome = await self.invitation_service.invite(
                        entity_type=request.entity_type,
                        entity_id=EntityId(request.entity_id),
                        recipient=did,
                        channel=Channel.BLUESKY,
                        inviter_user_id=inviter_id,
                        personal_message=request.personal_message,
                    )
                except ValidationError as e:
                    result.failed += 1
                    result.errors.append(f"Failed to invite {did[:20]}...: {e.message}")
                    continue

                if not outcome.created:
                    result.skipped += 1
                    continue

                result.invited += 1
                delivery = outcome.delivery
                if delivery is not None and delivery.posted:
                    result.posted += 1
                elif delivery is not None and delivery.needs_reauth:
                    result.needs_reauth = True
                    result.errors.append(
                        "Bluesky authorization expired. Please reauthorize."
                    )
                    break
                elif delivery is not None and not delivery.success:
                    result.errors.append(
                        f"Invited {did[:20]}... but the Bluesky post failed."
                    )

            result.message = compose_result_message(
                result.invited, result.posted, result.skipped
            )
            logfire.info(
                "Followers invited",
                invited=result.invited,
                posted=result.posted,
                skipped=result.skipped,
                failed=result.failed,
            )
            return result


def compose_result_message(invited: int, posted: int, skipped: int) -> str:
    """Human summary of a bulk invite."""
    message = f"Invited {invited} followers"
    if posted > 0:
        message += f", posted {posted} invitations to Bluesky"
    if skipped > 0:
        message += f", skipped {skipped} already invited"
    return message
