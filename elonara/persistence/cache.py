"""Process-local cache layer.

Holds action nonces. They are temporary (24h by default) and don't need
to survive restarts: a user whose nonce was lost gets a 403 and reloads
the page.

With several API processes behind a load balancer, use sticky sessions
or move this store to a shared cache.
"""

import logfire

from elonara.domain.model.nonce import Nonce, NonceKey
from elonara.domain.repository import NonceStore
from elonara.domain.value import utcnow


class InMemoryNonceStore(NonceStore):
    """In-memory nonce store.

    Attributes:
        _nonces: Dict mapping NonceKey -> nonces, newest first
    """

    def __init__(self) -> None:
        self._nonces: dict[NonceKey, list[Nonce]] = {}

    async def live(self, key: NonceKey) -> list[Nonce]:
        """Unexpired nonces for a key; expired ones are dropped on read."""
        now = utcnow()
        nonces = [n for n in self._nonces.get(key, []) if not n.is_expired(now)]
        if nonces:
            self._nonces[key] = nonces
        else:
            self._nonces.pop(key, None)
        return list(nonces)

    async def add(self, nonce: Nonce, max_live: int) -> None:
        """Store a nonce as the newest value for its key."""
        current = await self.live(nonce.key)
        self._nonces[nonce.key] = [nonce, *current][: max(1, max_live)]

    async def purge_expired(self) -> int:
        """Drop expired nonces across all keys."""
        now = utcnow()
        removed = 0
        for key in list(self._nonces):
            kept = [n for n in self._nonces[key] if not n.is_expired(now)]
            removed += len(self._nonces[key]) - len(kept)
            if kept:
                self._nonces[key] = kept
            else:
                del self._nonces[key]
        if removed:
            logfire.debug("Expired nonces purged", removed=removed)
        return removed
