"""Unit tests for OrphanSweepScheduler."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from famshare.application.task import OrphanSweepScheduler
from famshare.application.usecase.invitation import (
    ReconcileOrphansResponse,
    ReconcileOrphansUseCase,
)
from famshare.domain.error import StoreUnavailableError
from famshare.domain.value import InvitationTarget
from tests.helpers import make_user


class TestOrphanSweepScheduler:
    @pytest.mark.asyncio
    async def test_run_once_reports_removed_count(self, stack):
        admin = make_user()
        account = await stack.create_account(admin)
        await stack.invitation_service.create_invitation(
            account.id, admin, InvitationTarget.parse("guest@example.com")
        )
        stack.accounts.remove(account.id)
        scheduler = OrphanSweepScheduler(
            ReconcileOrphansUseCase(stack.invitation_service),
            interval_seconds=3600,
            batch_size=5,
        )

        assert await scheduler.run_once() == 1

    @pytest.mark.asyncio
    async def test_loop_survives_unavailable_store(self):
        # Arrange
        use_case = AsyncMock(spec=ReconcileOrphansUseCase)
        use_case.execute.side_effect = [
            StoreUnavailableError("down"),
            ReconcileOrphansResponse(removed=0),
            ReconcileOrphansResponse(removed=0),
        ]
        scheduler = OrphanSweepScheduler(use_case, interval_seconds=0)

        async def swept_twice():
            while use_case.execute.await_count < 2:
                await asyncio.sleep(0)

        # Act
        await scheduler.start()
        await asyncio.wait_for(swept_twice(), timeout=1)
        await scheduler.stop()

        # Assert
        assert not scheduler.running
        assert use_case.execute.await_count >= 2

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self):
        use_case = AsyncMock(spec=ReconcileOrphansUseCase)
        use_case.execute.return_value = ReconcileOrphansResponse(removed=0)
        scheduler = OrphanSweepScheduler(use_case, interval_seconds=3600)

        await scheduler.start()
        await scheduler.start()
        assert scheduler.running

        await scheduler.stop()
        assert not scheduler.running
