"""Transaction boundary interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager


class TransactionManager(ABC):
    """Unit-of-work boundary shared by the repositories of one request.

    ``atomic()`` commits when the block exits normally and rolls every
    repository write in the block back when it raises. Blocks are short:
    never hold one open across a call to an external channel.
    """

    @abstractmethod
    def atomic(self) -> AbstractAsyncContextManager[None]:
        """Open an atomic block.

        Usage:
            async with transactions.atomic():
                invitation = await invitations.set_status(...)
                await reconciler.reconcile(invitation)
        """
        pass
