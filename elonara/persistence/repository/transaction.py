"""SQLAlchemy transaction manager."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import logfire
from sqlalchemy.ext.asyncio import AsyncSession

from elonara.domain.repository import TransactionManager


class SqlAlchemyTransactionManager(TransactionManager):
    """Atomic blocks on the request's session.

    The session autobegins on the first read, so the outermost block
    usually runs as a SAVEPOINT inside that transaction and then commits
    it. Nested blocks join the outermost one.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self._depth = 0

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        if self._depth:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        self._depth = 1
        try:
            if self.session.in_transaction():
                async with self.session.begin_nested():
                    yield
                await self.session.commit()
            else:
                async with self.session.begin():
                    yield
        finally:
            self._depth = 0
        logfire.debug("Atomic block committed")
