"""Domain value objects for famshare."""

from famshare.domain.value.identifiers import AccountId, InvitationId, UserId
from famshare.domain.value.types import (
    BillingState,
    InvitationStatus,
    InvitationTarget,
    MemberRole,
    SelectionSource,
    SessionEvent,
    TargetKind,
    normalize_email,
    normalize_phone,
)

__all__ = [
    # Identifiers
    "UserId",
    "AccountId",
    "InvitationId",
    # Types
    "BillingState",
    "InvitationStatus",
    "InvitationTarget",
    "MemberRole",
    "SelectionSource",
    "SessionEvent",
    "TargetKind",
    "normalize_email",
    "normalize_phone",
]
