"""Mock providers for testing."""

from .identity import MockIdentityServiceProvider
from .notification import MockNotificationProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockIdentityServiceProvider",
    "MockNotificationProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
