"""Nonce store interface."""

from abc import ABC, abstractmethod

from elonara.domain.model.nonce import Nonce, NonceKey


class NonceStore(ABC):
    """Short-lived storage for action nonces.

    Nonces live only in the process cache layer; losing them on restart
    just means the next mutating request gets a 403 and a fresh page.
    """

    @abstractmethod
    async def live(self, key: NonceKey) -> list[Nonce]:
        """Unexpired nonces for a key, newest first.

        Args:
            key: Session, scope and subject binding

        Returns:
            Live nonces (possibly empty)
        """
        pass

    @abstractmethod
    async def add(self, nonce: Nonce, max_live: int) -> None:
        """Store a nonce, keeping at most ``max_live`` values per key.

        Args:
            nonce: Nonce to store
            max_live: Cap on live values kept for the key
        """
        pass

    @abstractmethod
    async def purge_expired(self) -> int:
        """Drop expired nonces.

        Returns:
            Number of nonces removed
        """
        pass
