"""Reconcile orphaned invitations use case."""

import logfire
from pydantic import BaseModel, Field

from famshare.application.usecase.base import BaseUseCase
from famshare.domain.service import InvitationService


class ReconcileOrphansRequest(BaseModel):
    """Reconcile orphans request."""

    batch_size: int | None = Field(default=None, ge=1, le=1000)


class ReconcileOrphansResponse(BaseModel):
    """Reconcile orphans response."""

    removed: int


class ReconcileOrphansUseCase(BaseUseCase):
    """Use case for the periodic orphaned invitation sweep."""

    def __init__(self, invitation_service: InvitationService) -> None:
        self.invitation_service = invitation_service

    async def execute(self, request: ReconcileOrphansRequest) -> ReconcileOrphansResponse:
        with logfire.span("reconcile_orphans.execute"):
            removed = await self.invitation_service.reconcile_orphans(
                request.batch_size
            )
            return ReconcileOrphansResponse(removed=removed)
