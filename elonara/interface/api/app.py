"""FastAPI application."""

from dishka import AsyncContainer
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from elonara.config import Settings
from elonara.interface.api.errors import register_error_handlers
from elonara.interface.api.middleware import add_session_middleware
from elonara.interface.api.routes import (
    auth,
    bluesky,
    entity_invitations,
    health,
    invitations,
    nonce,
    rsvp,
)
from elonara.util.di.container import create_container, setup_di
from elonara.util.observability import (
    instrument_fastapi,
    instrument_httpx,
)


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        container: DI container to use; tests pass one built with mocks.
            Defaults to the production container.
    """
    settings = Settings()

    # Instrument httpx for outbound HTTP requests (Bluesky, handle resolution)
    instrument_httpx()

    app_instance = FastAPI(
        title="Elonara Social API",
        description="Backend API for Elonara Social - events, communities, invitations and RSVPs",
        version="0.1.0",
    )

    instrument_fastapi(app_instance)

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=[
            settings.api.frontend_url,
            "http://localhost:3000",  # Local development
        ],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "Accept",
            "Origin",
            "User-Agent",
            "Cache-Control",
            "X-Requested-With",
        ],
        expose_headers=["Content-Length", "Content-Type"],
        max_age=600,  # Cache preflight requests for 10 minutes
    )

    # Registered after CORS so it runs inside it
    add_session_middleware(app_instance, settings)
    register_error_handlers(app_instance)

    setup_di(app_instance, container or create_container())

    app_instance.include_router(health.router)
    app_instance.include_router(nonce.router)
    app_instance.include_router(auth.router)
    app_instance.include_router(entity_invitations.router)
    app_instance.include_router(invitations.router)
    app_instance.include_router(rsvp.router)
    app_instance.include_router(bluesky.router)

    return app_instance


# Create app instance for uvicorn
# Note: Logfire must be configured before this module is imported
# In production: start_app.py handles this
app = create_app()
