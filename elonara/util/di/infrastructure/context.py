"""Request context providers."""

import logfire
from dishka import Scope, provide
from fastapi import Request

from elonara.config import AuthSettings
from elonara.domain.model import RequestContext
from elonara.domain.repository import UserRepository
from elonara.domain.service import JWTService
from elonara.util.di.base import ProviderBase


class ContextProvider(ProviderBase):
    """Request context component base."""

    __mock_component__ = "context"


class ProdContextProvider(ContextProvider):
    """Builds the caller context from cookies."""

    __is_mock__ = False

    @provide(scope=Scope.REQUEST)
    async def get_request_context(
        self,
        request: Request,
        jwt_service: JWTService,
        user_repository: UserRepository,
        settings: AuthSettings,
    ) -> RequestContext:
        """Resolve session id, user and admin flag once per request.

        The session middleware guarantees ``request.state.session_id``.
        """
        session_id = getattr(request.state, "session_id", None) or request.cookies.get(
            settings.session_cookie_name, ""
        )

        user_id = jwt_service.resolve_user_id(
            request.cookies.get(jwt_service.cookie_name)
        )
        if user_id is None:
            return RequestContext(session_id=session_id)

        user = await user_repository.find_by_id(user_id)
        if user is None:
            logfire.warn("Token for unknown user, treating as anonymous", user_id=str(user_id))
            return RequestContext(session_id=session_id)

        return RequestContext(
            session_id=session_id, user_id=user.id, is_admin=user.is_admin
        )
