"""Account use cases."""

from famshare.application.usecase.account.list_members import (
    ListMembersRequest,
    ListMembersResponse,
    ListMembersUseCase,
    MemberItem,
)
from famshare.application.usecase.account.remove_member import (
    RemoveMemberRequest,
    RemoveMemberResponse,
    RemoveMemberUseCase,
)
from famshare.application.usecase.account.switch_active_account import (
    SwitchActiveAccountRequest,
    SwitchActiveAccountResponse,
    SwitchActiveAccountUseCase,
)

__all__ = [
    "ListMembersRequest",
    "ListMembersResponse",
    "ListMembersUseCase",
    "MemberItem",
    "RemoveMemberRequest",
    "RemoveMemberResponse",
    "RemoveMemberUseCase",
    "SwitchActiveAccountRequest",
    "SwitchActiveAccountResponse",
    "SwitchActiveAccountUseCase",
]
