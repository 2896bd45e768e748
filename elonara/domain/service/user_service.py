"""User domain service."""

from uuid import uuid4

import logfire

from elonara.domain.error import NotFoundError, ValidationError
from elonara.domain.model import Community, User
from elonara.domain.repository import TransactionManager, UserRepository
from elonara.domain.value import BlueskyDID, EmailAddress, UserId, ValueObject

from .base import Service
from .community_service import CommunityService
from .roster_reconciler import ReconcileResult, RosterReconciler


class RegistrationResult(ValueObject):
    """A new account and what registration attached to it."""

    user: User
    communities: list[Community]
    attached: list[ReconcileResult]


class UserService(Service):
    """Domain service for user operations."""

    def __init__(
        self,
        user_repository: UserRepository,
        transaction_manager: TransactionManager,
        community_service: CommunityService,
        roster_reconciler: RosterReconciler,
    ) -> None:
        """Initialize user service.

        Args:
            user_repository: User repository
            transaction_manager: Transaction boundary
            community_service: Creates the default communities
            roster_reconciler: Attaches invitations waiting for this account
        """
        self.user_repository = user_repository
        self.transaction_manager = transaction_manager
        self.community_service = community_service
        self.roster_reconciler = roster_reconciler

    async def get_by_id(self, user_id: UserId) -> User:
        """Get user by ID.

        Raises:
            NotFoundError: If user not found
        """
        with logfire.span("user_service.get_by_id", user_id=str(user_id)):
            user = await self.user_repository.find_by_id(user_id)
            if not user:
                logfire.warn("User not found", user_id=str(user_id))
                raise NotFoundError("User", str(user_id))
            return user

    async def register(
        self,
        email: str,
        display_name: str,
        bluesky_did: str | None = None,
        bluesky_handle: str | None = None,
    ) -> RegistrationResult:
        """Create an account.

        In one transaction: saves the user, creates their public community
        and private circle, and binds invitations sent to their email or
        Bluesky DID before they had an account (creating the memberships
        of invitations they already accepted).

        Args:
            email: Account email
            display_name: Name shown to others
            bluesky_did: Connected Bluesky DID, if any
            bluesky_handle: Connected Bluesky handle, if any

        Returns:
            Registration result

        Raises:
            ValidationError: If the email or DID is malformed or the email is
                already registered
        """
        try:
            address = EmailAddress(email)
        except ValueError:
            raise ValidationError("Please provide a valid email address.")
        try:
            did = BlueskyDID(bluesky_did) if bluesky_did else None
        except ValueError:
            raise ValidationError("Please provide a valid Bluesky DID.")
        if not display_name.strip():
            raise ValidationError("Please provide a display name.")

        with logfire.span("user_service.register", email_domain=address.root.split("@")[1]):
            async with self.transaction_manager.atomic():
                if await self.user_repository.find_by_email(address):
                    raise ValidationError("An account with this email already exists.")

                user = await self.user_repository.save(
                    User(
                        id=UserId(uuid4()),
                        email=address,
                        display_name=display_name.strip(),
                        bluesky_did=did,
                        bluesky_handle=bluesky_handle,
                    )
                )
                communities = await self.community_service.create_default_communities(
                    user
                )
                attached = await self.roster_reconciler.attach_pending_for_user(user)

            logfire.info(
                "User registered",
                user_id=str(user.id),
                attached_invitations=len(attached),
            )
            return RegistrationResult(
                user=user, communities=communities, attached=attached
            )
