"""Periodic orphan invitation sweep inside the API process.

Deployments with an external scheduler run scripts/reconcile_orphans.py
instead and leave this disabled.
"""

import asyncio
from typing import Optional

import logfire

from famshare.application.usecase.invitation import (
    ReconcileOrphansRequest,
    ReconcileOrphansUseCase,
)
from famshare.domain.error import RetryableError


class OrphanSweepScheduler:
    """Runs the orphan sweep every interval until stopped."""

    def __init__(
        self,
        use_case: ReconcileOrphansUseCase,
        interval_seconds: float,
        batch_size: Optional[int] = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            use_case: Reconcile orphans use case
            interval_seconds: Pause between sweeps
            batch_size: Page size override for each sweep
        """
        self.use_case = use_case
        self.interval = interval_seconds
        self.batch_size = batch_size
        self._task: Optional[asyncio.Task] = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the background sweep loop."""
        if self._running:
            return

        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        logfire.info("Orphan sweep scheduler started", interval=self.interval)

    async def stop(self) -> None:
        """Stop the loop, cancelling a sweep in progress."""
        self._running = False
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        logfire.info("Orphan sweep scheduler stopped")

    async def run_once(self) -> int:
        """Run one sweep and return how many invitations were removed."""
        response = await self.use_case.execute(
            ReconcileOrphansRequest(batch_size=self.batch_size)
        )
        return response.removed

    async def _run_loop(self) -> None:
        while self._running:
            try:
                await self.run_once()
            except RetryableError as e:
                logfire.warn("Orphan sweep skipped, store unavailable", error=str(e))
            except Exception as e:
                logfire.error(
                    "Orphan sweep failed", error=str(e), error_type=type(e).__name__
                )

            await asyncio.sleep(self.interval)
