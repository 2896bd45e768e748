"""Browser session middleware."""

import secrets

from fastapi import FastAPI, Request

from elonara.config import Settings


def add_session_middleware(app: FastAPI, settings: Settings) -> None:
    """Give every browser a ``session_id`` cookie that nonces bind to.

    Anonymous guests get one too, so RSVP nonces work without an account.
    """
    cookie_name = settings.auth.session_cookie_name
    secure = settings.api.protocol == "https"

    @app.middleware("http")
    async def session_cookie(request: Request, call_next):
        existing = request.cookies.get(cookie_name)
        session_id = existing or secrets.token_urlsafe(24)
        request.state.session_id = session_id

        response = await call_next(request)
        if existing != session_id:
            response.set_cookie(
                cookie_name,
                session_id,
                httponly=True,
                samesite="lax",
                secure=secure,
            )
        return response
