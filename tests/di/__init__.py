"""Mock providers for testing."""

from .bluesky import MockBlueskyProvider
from .context import ContextHolder, MockContextProvider
from .mail import MockMailProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "ContextHolder",
    "MockBlueskyProvider",
    "MockContextProvider",
    "MockMailProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
