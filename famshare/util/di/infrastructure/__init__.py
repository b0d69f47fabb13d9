"""Infrastructure providers."""

# Import bases
from .identity import IdentityServiceProvider
from .notification import NotificationProvider
from .persistence import PersistenceProvider

# Import implementations (needed for __subclasses__())
from .identity import ProdIdentityServiceProvider  # noqa: F401
from .notification import ProdNotificationProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401

__all__ = [
    "IdentityServiceProvider",
    "NotificationProvider",
    "PersistenceProvider",
    "ProdIdentityServiceProvider",
    "ProdNotificationProvider",
    "ProdPersistenceProvider",
]
