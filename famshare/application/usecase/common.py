"""Response items shared by several use cases."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from famshare.domain.model import Account, Invitation, User
from famshare.domain.value import BillingState, InvitationStatus, TargetKind


class UserItem(BaseModel):
    """Signed-in user in responses."""

    user_id: UUID
    email: str | None = None
    phone: str | None = None
    display_name: str

    @classmethod
    def from_user(cls, user: User) -> "UserItem":
        return cls(
            user_id=user.id,
            email=user.email,
            phone=user.phone,
            display_name=user.name_for_display,
        )


class AccountItem(BaseModel):
    """Account in responses."""

    account_id: UUID
    name: str
    plan_slug: str
    billing_state: BillingState
    pending_share_target: str | None = None

    @classmethod
    def from_account(cls, account: Account) -> "AccountItem":
        return cls(
            account_id=account.id,
            name=account.name,
            plan_slug=account.plan_slug,
            billing_state=account.billing_state,
            pending_share_target=account.pending_share_target,
        )


class InvitationItem(BaseModel):
    """Invitation in responses."""

    invitation_id: UUID
    account_id: UUID
    inviter_id: UUID
    target: str
    target_kind: TargetKind
    status: InvitationStatus
    created_at: datetime
    expires_at: datetime
    accepted_at: datetime | None = None

    @classmethod
    def from_invitation(
        cls, invitation: Invitation, status: InvitationStatus
    ) -> "InvitationItem":
        return cls(
            invitation_id=invitation.id,
            account_id=invitation.account_id,
            inviter_id=invitation.inviter_id,
            target=invitation.target.value,
            target_kind=invitation.target.kind,
            status=status,
            created_at=invitation.created_at,
            expires_at=invitation.expires_at,
            accepted_at=invitation.accepted_at,
        )
