#!/usr/bin/env python3
"""Serve the Elonara API with uvicorn, reporting startup errors to Logfire."""

import sys

import logfire
import uvicorn

from elonara.config import Settings
from elonara.util.logging import setup_logging
from elonara.util.observability import configure_logfire


def main() -> int:
    settings = Settings()

    # Configured before the app import so import-time failures are captured
    configure_logfire(settings)
    setup_logging(settings)

    logfire.info(
        "Starting Elonara API",
        environment=settings.environment,
        port=settings.port,
        git_sha=settings.git_sha,
    )
    try:
        uvicorn.run(
            "elonara.interface.api.app:app",
            host="0.0.0.0",
            port=settings.port,
            log_level="debug" if settings.debug else "info",
            proxy_headers=True,
        )
    except Exception as e:
        logfire.error(
            "Elonara API failed to start",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise

    return 0


if __name__ == "__main__":
    sys.exit(main())
