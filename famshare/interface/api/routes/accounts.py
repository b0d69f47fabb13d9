"""Account routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter

from famshare.application.usecase.account import (
    ListMembersRequest,
    ListMembersResponse,
    ListMembersUseCase,
    RemoveMemberRequest,
    RemoveMemberResponse,
    RemoveMemberUseCase,
    SwitchActiveAccountRequest,
    SwitchActiveAccountResponse,
    SwitchActiveAccountUseCase,
)
from famshare.application.usecase.invitation import (
    ListSentInvitationsRequest,
    ListSentInvitationsResponse,
    ListSentInvitationsUseCase,
    RevokeInvitationRequest,
    RevokeInvitationResponse,
    RevokeInvitationUseCase,
)

router = APIRouter(prefix="/accounts", tags=["accounts"], route_class=DishkaRoute)


@router.put("/active", response_model=SwitchActiveAccountResponse)
async def switch_active_account(
    request: SwitchActiveAccountRequest,
    switch_active_account_use_case: FromDishka[SwitchActiveAccountUseCase],
) -> SwitchActiveAccountResponse:
    """Make one of the user's accounts the active one.

    Args:
        request: Account to activate
        switch_active_account_use_case: Switch active account use case from DI

    Returns:
        The active account and whether it changed
    """
    return await switch_active_account_use_case.execute(request)


@router.get("/{account_id}/invitations", response_model=ListSentInvitationsResponse)
async def list_sent_invitations(
    account_id: UUID,
    list_sent_invitations_use_case: FromDishka[ListSentInvitationsUseCase],
) -> ListSentInvitationsResponse:
    """List an account's invitations with their status (admins only)."""
    return await list_sent_invitations_use_case.execute(
        ListSentInvitationsRequest(account_id=account_id)
    )


@router.delete("/{account_id}/invitations", response_model=RevokeInvitationResponse)
async def revoke_all_invitations(
    account_id: UUID,
    revoke_invitation_use_case: FromDishka[RevokeInvitationUseCase],
) -> RevokeInvitationResponse:
    """Revoke every open invitation of an account.

    Revoking when nothing is open succeeds with revoked=0.
    """
    return await revoke_invitation_use_case.execute(
        RevokeInvitationRequest(account_id=account_id)
    )


@router.delete(
    "/{account_id}/invitations/{invitation_id}",
    response_model=RevokeInvitationResponse,
)
async def revoke_invitation(
    account_id: UUID,
    invitation_id: UUID,
    revoke_invitation_use_case: FromDishka[RevokeInvitationUseCase],
) -> RevokeInvitationResponse:
    """Revoke one open invitation of an account."""
    return await revoke_invitation_use_case.execute(
        RevokeInvitationRequest(account_id=account_id, invitation_id=invitation_id)
    )


@router.get("/{account_id}/members", response_model=ListMembersResponse)
async def list_members(
    account_id: UUID,
    list_members_use_case: FromDishka[ListMembersUseCase],
) -> ListMembersResponse:
    """List who shares an account, admins first.

    Only members of the account may see it.
    """
    return await list_members_use_case.execute(
        ListMembersRequest(account_id=account_id)
    )


@router.delete("/{account_id}/members/{user_id}", response_model=RemoveMemberResponse)
async def remove_member(
    account_id: UUID,
    user_id: UUID,
    remove_member_use_case: FromDishka[RemoveMemberUseCase],
) -> RemoveMemberResponse:
    """Remove a member from an account, or leave it when user_id is yourself."""
    return await remove_member_use_case.execute(
        RemoveMemberRequest(account_id=account_id, user_id=user_id)
    )
