"""Nonce enforcement for mutating endpoints."""

from elonara.domain.model import RequestContext
from elonara.domain.service import NonceGuard
from elonara.domain.value import EntityType, NonceScope

SECURITY_FAILED_MESSAGE = "Security verification failed."


class NonceRejectedError(Exception):
    """A mutating request carried no valid nonce (HTTP 403)."""

    def __init__(self, scope: NonceScope):
        self.scope = scope
        super().__init__(SECURITY_FAILED_MESSAGE)


def scope_for(entity_type: EntityType) -> NonceScope:
    """Nonce scope guarding an entity's host actions."""
    if entity_type == EntityType.EVENT:
        return NonceScope.EVENT_ACTION
    return NonceScope.COMMUNITY_ACTION


async def require_nonce(
    nonce_guard: NonceGuard,
    context: RequestContext,
    scope: NonceScope,
    token: str | None,
) -> None:
    """Reject the request unless ``token`` is a live nonce for this caller.

    Raises:
        NonceRejectedError: If validation fails
    """
    if not await nonce_guard.validate(scope, context.user_id, token):
        raise NonceRejectedError(scope)


async def rotate_nonce(
    nonce_guard: NonceGuard, context: RequestContext, scope: NonceScope
) -> str:
    """Fresh nonce to return with a successful mutation."""
    return await nonce_guard.rotate(scope, context.user_id)
