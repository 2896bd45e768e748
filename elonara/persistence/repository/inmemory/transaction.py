"""In-memory transaction manager for testing."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from elonara.domain.repository import TransactionManager

from .base import SnapshotMixin


class InMemoryTransactionManager(TransactionManager):
    """Snapshots the repositories on entry and restores them on error.

    Nested blocks join the outermost one, mirroring the SQL manager.
    """

    def __init__(self, repositories: list[SnapshotMixin]) -> None:
        self.repositories = repositories
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

        snapshots = [(repo, repo.snapshot()) for repo in self.repositories]
        self._depth = 1
        try:
            yield
        except BaseException:
            for repo, state in snapshots:
                repo.restore(state)
            raise
        finally:
            self._depth = 0
