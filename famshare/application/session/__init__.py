"""Per-client session state: caching, single-flight resolution and invitation notices."""

from .cache import EphemeralCache
from .client_session import (
    ClientSession,
    SessionFactory,
    SessionRegistry,
    extract_bearer_token,
)
from .invitation_monitor import PendingInvitationMonitor
from .resolver import SessionResolver
from .single_flight import SingleFlight

__all__ = [
    "ClientSession",
    "EphemeralCache",
    "PendingInvitationMonitor",
    "SessionFactory",
    "SessionRegistry",
    "SessionResolver",
    "SingleFlight",
    "extract_bearer_token",
]
