#!/usr/bin/env python3
"""Delete pending invitations whose account no longer exists.

Meant for a cron trigger. Safe to run concurrently with the API and to
interrupt: every page is handled in its own short transactions.
"""

import asyncio
import sys

import logfire

from famshare.application.usecase.invitation import (
    ReconcileOrphansRequest,
    ReconcileOrphansUseCase,
)
from famshare.config import Settings
from famshare.util.di.container import create_container
from famshare.util.logging import setup_logging
from famshare.util.observability import configure_logfire


async def run(batch_size: int | None = None) -> int:
    """Run one sweep with the production container."""
    container = create_container()
    try:
        use_case = await container.get(ReconcileOrphansUseCase)
        response = await use_case.execute(ReconcileOrphansRequest(batch_size=batch_size))
        return response.removed
    finally:
        await container.close()


def main() -> int:
    """Run the sweep and log any errors to Logfire."""
    settings = Settings()
    setup_logging(settings)
    configure_logfire(settings)

    batch_size = int(sys.argv[1]) if len(sys.argv) > 1 else None
    try:
        removed = asyncio.run(run(batch_size))
        logfire.info("Orphan reconciliation completed", removed=removed)
        return 0

    except Exception as e:
        logfire.error(
            "Orphan reconciliation failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise


if __name__ == "__main__":
    sys.exit(main())
