"""In-memory repository implementations for testing."""

from .account import InMemoryAccountRepository
from .invitation import InMemoryInvitationRepository
from .membership import InMemoryMembershipRepository
from .profile import InMemoryProfileRepository

__all__ = [
    "InMemoryAccountRepository",
    "InMemoryInvitationRepository",
    "InMemoryMembershipRepository",
    "InMemoryProfileRepository",
]
