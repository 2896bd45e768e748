#!/usr/bin/env python3
"""Apply Alembic migrations before the API starts.

Usage:
    python scripts/run_migrations.py            # upgrade to head
    python scripts/run_migrations.py <revision> # upgrade (or downgrade) to revision
"""

import sys

import logfire
from alembic import command
from alembic.config import Config

from elonara.config import Settings
from elonara.util.observability import configure_logfire


def main(argv: list[str]) -> int:
    """Migrate the configured database, reporting failures to Logfire."""
    settings = Settings()
    configure_logfire(settings)

    target = argv[1] if len(argv) > 1 else "head"
    alembic_cfg = Config("alembic.ini")

    with logfire.span(
        "Migrate database", target=target, environment=settings.environment
    ):
        try:
            if target == "base" or target.startswith("-"):
                command.downgrade(alembic_cfg, target)
            else:
                command.upgrade(alembic_cfg, target)
        except Exception as e:
            logfire.error(
                "Database migration failed",
                target=target,
                error=str(e),
                error_type=type(e).__name__,
                _exc_info=sys.exc_info(),
            )
            # The container must not start against a half-migrated schema
            raise

    logfire.info("Database migrated", target=target)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
