"""Invitation use cases."""

from famshare.application.usecase.invitation.accept_invitation import (
    AcceptInvitationRequest,
    AcceptInvitationResponse,
    AcceptInvitationUseCase,
    AcceptPendingResponse,
    FailedAcceptance,
)
from famshare.application.usecase.invitation.create_invitation import (
    CreateInvitationRequest,
    CreateInvitationResponse,
    CreateInvitationUseCase,
)
from famshare.application.usecase.invitation.list_pending_invitations import (
    ListPendingInvitationsRequest,
    ListPendingInvitationsResponse,
    ListPendingInvitationsUseCase,
)
from famshare.application.usecase.invitation.list_sent_invitations import (
    ListSentInvitationsRequest,
    ListSentInvitationsResponse,
    ListSentInvitationsUseCase,
)
from famshare.application.usecase.invitation.reconcile_orphans import (
    ReconcileOrphansRequest,
    ReconcileOrphansResponse,
    ReconcileOrphansUseCase,
)
from famshare.application.usecase.invitation.revoke_invitation import (
    RevokeInvitationRequest,
    RevokeInvitationResponse,
    RevokeInvitationUseCase,
)

__all__ = [
    "AcceptInvitationRequest",
    "AcceptInvitationResponse",
    "AcceptInvitationUseCase",
    "AcceptPendingResponse",
    "CreateInvitationRequest",
    "CreateInvitationResponse",
    "CreateInvitationUseCase",
    "FailedAcceptance",
    "ListPendingInvitationsRequest",
    "ListPendingInvitationsResponse",
    "ListPendingInvitationsUseCase",
    "ListSentInvitationsRequest",
    "ListSentInvitationsResponse",
    "ListSentInvitationsUseCase",
    "ReconcileOrphansRequest",
    "ReconcileOrphansResponse",
    "ReconcileOrphansUseCase",
    "RevokeInvitationRequest",
    "RevokeInvitationResponse",
    "RevokeInvitationUseCase",
]
