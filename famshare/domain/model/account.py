"""Account entity.

An account is one shared family budget that several users can belong to.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from famshare.domain.model.common import DomainModel, utc_now
from famshare.domain.value import AccountId, BillingState, InvitationId, UserId


class Account(DomainModel):
    """Shared budget context.

    Business rules:
    - Never deleted by this core
    - At most one account is auto-created per user (tracked by bootstrapped_for)
    - pending_share_target/pending_invitation_id mirror the latest open invitation
    """

    id: AccountId
    name: str
    plan_slug: str = "free"
    billing_state: BillingState = BillingState.TRIAL
    created_at: datetime = Field(default_factory=utc_now)
    bootstrapped_for: Optional[UserId] = None
    pending_share_target: Optional[str] = None
    pending_invitation_id: Optional[InvitationId] = None
