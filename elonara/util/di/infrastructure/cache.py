"""Process-local cache providers."""

from dishka import Scope, provide

from elonara.domain.repository import NonceStore
from elonara.persistence.cache import InMemoryNonceStore
from elonara.util.di.base import ProviderBase


class ProdCacheProvider(ProviderBase):
    """Nonce store shared by every request of this process."""

    @provide(scope=Scope.APP)
    def get_nonce_store(self) -> NonceStore:
        """Provide the in-process nonce store."""
        return InMemoryNonceStore()
