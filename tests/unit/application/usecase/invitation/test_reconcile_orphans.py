"""Unit tests for ReconcileOrphansUseCase."""

import pytest

from famshare.application.usecase.invitation import (
    ReconcileOrphansRequest,
    ReconcileOrphansUseCase,
)
from famshare.domain.value import InvitationTarget
from tests.helpers import make_user


@pytest.mark.asyncio
async def test_sweep_removes_invitations_of_deleted_accounts(stack):
    admin = make_user()
    account = await stack.create_account(admin)
    result = await stack.invitation_service.create_invitation(
        account.id, admin, InvitationTarget.parse("guest@example.com")
    )
    stack.accounts.remove(account.id)
    use_case = ReconcileOrphansUseCase(stack.invitation_service)

    response = await use_case.execute(ReconcileOrphansRequest(batch_size=10))

    assert response.removed == 1
    assert await stack.invitations.find_by_id(result.invitation.id) is None
    assert (await use_case.execute(ReconcileOrphansRequest())).removed == 0
