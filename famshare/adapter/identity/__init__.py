"""Identity provider adapter."""

from .client import (
    HttpIdentityProvider,
    HttpIdentityProviderFactory,
    InMemoryIdentityDirectory,
    InMemoryIdentityProvider,
    user_from_payload,
)

__all__ = [
    "HttpIdentityProvider",
    "HttpIdentityProviderFactory",
    "InMemoryIdentityDirectory",
    "InMemoryIdentityProvider",
    "user_from_payload",
]
