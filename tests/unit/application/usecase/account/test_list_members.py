"""Unit tests for ListMembersUseCase."""

import pytest

from famshare.adapter.identity import InMemoryIdentityProvider
from famshare.application.usecase.account import (
    ListMembersRequest,
    ListMembersUseCase,
)
from famshare.domain.error import NotAuthenticatedError, NotAuthorizedError
from famshare.domain.value import MemberRole
from tests.helpers import make_user


@pytest.mark.asyncio
async def test_member_sees_everyone_admins_first(stack):
    # Arrange
    admin = make_user(email="mom@example.com")
    user = make_user()
    family = await stack.create_account(admin, "Family")
    await stack.join(family, user)
    session = stack.open_session(InMemoryIdentityProvider(user))

    # Act
    response = await ListMembersUseCase(session, stack.membership_service).execute(
        ListMembersRequest(account_id=family.id)
    )

    # Assert
    assert [(m.user_id, m.role, m.is_you) for m in response.members] == [
        (admin.id, MemberRole.ADMIN, False),
        (user.id, MemberRole.MEMBER, True),
    ]


@pytest.mark.asyncio
async def test_outsider_is_refused(stack):
    family = await stack.create_account(make_user(email="mom@example.com"))
    session = stack.open_session(InMemoryIdentityProvider(make_user()))

    with pytest.raises(NotAuthorizedError):
        await ListMembersUseCase(session, stack.membership_service).execute(
            ListMembersRequest(account_id=family.id)
        )


@pytest.mark.asyncio
async def test_requires_sign_in(stack):
    family = await stack.create_account(make_user(email="mom@example.com"))
    session = stack.open_session(InMemoryIdentityProvider())

    with pytest.raises(NotAuthenticatedError):
        await ListMembersUseCase(session, stack.membership_service).execute(
            ListMembersRequest(account_id=family.id)
        )
