"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from famshare.domain.model import Account, Invitation, Membership
from famshare.domain.value import (
    AccountId,
    BillingState,
    InvitationId,
    InvitationTarget,
    MemberRole,
    TargetKind,
    UserId,
)


def _uuid(value: Any) -> Optional[UUID]:
    if value is None:
        return None
    return UUID(value) if isinstance(value, str) else value


def row_to_account(row: Dict[str, Any]) -> Account:
    """Convert database row to Account domain model.

    Args:
        row: Database row as dict

    Returns:
        Account domain model
    """
    bootstrapped_for = _uuid(row.get("bootstrapped_for"))
    pending_invitation_id = _uuid(row.get("pending_invitation_id"))
    return Account(
        id=AccountId(_uuid(row["id"])),
        name=row["name"],
        plan_slug=row["plan_slug"],
        billing_state=BillingState(row["billing_state"]),
        created_at=row["created_at"],
        bootstrapped_for=UserId(bootstrapped_for) if bootstrapped_for else None,
        pending_share_target=row.get("pending_share_target"),
        pending_invitation_id=(
            InvitationId(pending_invitation_id) if pending_invitation_id else None
        ),
    )


def account_to_dict(account: Account) -> Dict[str, Any]:
    """Convert Account domain model to database dict."""
    return {
        "id": account.id,
        "name": account.name,
        "plan_slug": account.plan_slug,
        "billing_state": account.billing_state.value,
        "created_at": account.created_at,
        "bootstrapped_for": account.bootstrapped_for,
        "pending_share_target": account.pending_share_target,
        "pending_invitation_id": account.pending_invitation_id,
    }


def row_to_membership(row: Dict[str, Any]) -> Membership:
    """Convert database row to Membership domain model."""
    return Membership(
        account_id=AccountId(_uuid(row["account_id"])),
        user_id=UserId(_uuid(row["user_id"])),
        role=MemberRole(row["role"]),
        joined_at=row["joined_at"],
    )


def membership_to_dict(membership: Membership) -> Dict[str, Any]:
    """Convert Membership domain model to database dict."""
    return {
        "account_id": membership.account_id,
        "user_id": membership.user_id,
        "role": membership.role.value,
        "joined_at": membership.joined_at,
    }


def row_to_invitation(row: Dict[str, Any]) -> Invitation:
    """Convert database row to Invitation domain model.

    The stored target is already normalized, so it is rebuilt directly
    rather than parsed again.
    """
    return Invitation(
        id=InvitationId(_uuid(row["id"])),
        account_id=AccountId(_uuid(row["account_id"])),
        inviter_id=UserId(_uuid(row["inviter_id"])),
        target=InvitationTarget(
            kind=TargetKind(row["target_kind"]), value=row["target"]
        ),
        created_at=row["created_at"],
        expires_at=row["expires_at"],
        accepted_at=row.get("accepted_at"),
    )


def invitation_to_dict(invitation: Invitation) -> Dict[str, Any]:
    """Convert Invitation domain model to database dict."""
    return {
        "id": invitation.id,
        "account_id": invitation.account_id,
        "inviter_id": invitation.inviter_id,
        "target_kind": invitation.target.kind.value,
        "target": invitation.target.value,
        "created_at": invitation.created_at,
        "expires_at": invitation.expires_at,
        "accepted_at": invitation.accepted_at,
    }
