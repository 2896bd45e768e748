"""Infrastructure providers."""

# Import bases
from .bluesky import BlueskyProvider
from .cache import ProdCacheProvider
from .context import ContextProvider
from .mail import MailProvider
from .persistence import PersistenceProvider

# Import implementations (needed for __subclasses__())
from .bluesky import ProdBlueskyProvider  # noqa: F401
from .context import ProdContextProvider  # noqa: F401
from .mail import ProdMailProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401

__all__ = [
    "BlueskyProvider",
    "ContextProvider",
    "MailProvider",
    "PersistenceProvider",
    "ProdBlueskyProvider",
    "ProdCacheProvider",
    "ProdContextProvider",
    "ProdMailProvider",
    "ProdPersistenceProvider",
]
