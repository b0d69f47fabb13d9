"""Domain services."""

from .base import Service
from .identity_provider import (
    AnonymousIdentityProvider,
    IdentityProvider,
    IdentityProviderFactory,
    SessionListener,
)
from .invitation_service import InvitationResult, InvitationService
from .membership_service import MembershipService
from .notification_dispatcher import NotificationDispatcher

__all__ = [
    "AnonymousIdentityProvider",
    "IdentityProvider",
    "IdentityProviderFactory",
    "InvitationResult",
    "InvitationService",
    "MembershipService",
    "NotificationDispatcher",
    "Service",
    "SessionListener",
]
