"""Application layer DI providers."""

from dishka import Scope, provide
from fastapi import Request

from famshare.application.session import (
    ClientSession,
    SessionFactory,
    SessionRegistry,
    extract_bearer_token,
)
from famshare.application.task import OrphanSweepScheduler
from famshare.application.usecase.account import (
    ListMembersUseCase,
    RemoveMemberUseCase,
    SwitchActiveAccountUseCase,
)
from famshare.application.usecase.identity import (
    HandleSessionEventUseCase,
    ResolveIdentityUseCase,
)
from famshare.application.usecase.invitation import (
    AcceptInvitationUseCase,
    CreateInvitationUseCase,
    ListPendingInvitationsUseCase,
    ListSentInvitationsUseCase,
    ReconcileOrphansUseCase,
    RevokeInvitationUseCase,
)
from famshare.config import InvitationSettings, SessionSettings
from famshare.domain.service import (
    IdentityProviderFactory,
    InvitationService,
    MembershipService,
)
from famshare.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Sessions
    @provide(scope=Scope.APP)
    def get_session_factory(
        self,
        membership_service: MembershipService,
        invitation_service: InvitationService,
        settings: SessionSettings,
    ) -> SessionFactory:
        """Provide client session factory."""
        return SessionFactory(
            membership_service=membership_service,
            invitation_service=invitation_service,
            settings=settings,
        )

    @provide(scope=Scope.APP)
    def get_session_registry(
        self,
        session_factory: SessionFactory,
        identity_provider_factory: IdentityProviderFactory,
        settings: SessionSettings,
    ) -> SessionRegistry:
        """Provide the process-wide client session registry."""
        return SessionRegistry(
            session_factory=session_factory,
            identity_provider_factory=identity_provider_factory,
            max_sessions=settings.max_sessions,
        )

    @provide(scope=Scope.REQUEST)
    def get_client_session(
        self, request: Request, registry: SessionRegistry
    ) -> ClientSession:
        """Provide the session of the request's bearer token.

        Requests without a token get the anonymous session.
        """
        token = extract_bearer_token(request.headers.get("Authorization"))
        return registry.get(token)

    @provide(scope=Scope.APP)
    def get_orphan_sweep_scheduler(
        self, use_case: ReconcileOrphansUseCase, settings: InvitationSettings
    ) -> OrphanSweepScheduler:
        """Provide the in-process orphan sweep scheduler."""
        return OrphanSweepScheduler(
            use_case=use_case,
            interval_seconds=settings.reconcile_interval_seconds,
            batch_size=settings.reconcile_batch_size,
        )

    # Identity use cases
    @provide(scope=Scope.REQUEST)
    def get_resolve_identity_use_case(
        self, session: ClientSession
    ) -> ResolveIdentityUseCase:
        """Provide resolve identity use case."""
        return ResolveIdentityUseCase(session=session)

    @provide(scope=Scope.REQUEST)
    def get_handle_session_event_use_case(
        self, registry: SessionRegistry
    ) -> HandleSessionEventUseCase:
        """Provide handle session event use case."""
        return HandleSessionEventUseCase(registry=registry)

    # Account use cases
    @provide(scope=Scope.REQUEST)
    def get_switch_active_account_use_case(
        self, session: ClientSession, membership_service: MembershipService
    ) -> SwitchActiveAccountUseCase:
        """Provide switch active account use case."""
        return SwitchActiveAccountUseCase(
            session=session, membership_service=membership_service
        )

    @provide(scope=Scope.REQUEST)
    def get_list_members_use_case(
        self, session: ClientSession, membership_service: MembershipService
    ) -> ListMembersUseCase:
        """Provide list members use case."""
        return ListMembersUseCase(
            session=session, membership_service=membership_service
        )

    @provide(scope=Scope.REQUEST)
    def get_remove_member_use_case(
        self, session: ClientSession, membership_service: MembershipService
    ) -> RemoveMemberUseCase:
        """Provide remove member use case."""
        return RemoveMemberUseCase(
            session=session, membership_service=membership_service
        )

    # Invitation use cases
    @provide(scope=Scope.REQUEST)
    def get_create_invitation_use_case(
        self, session: ClientSession, invitation_service: InvitationService
    ) -> CreateInvitationUseCase:
        """Provide create invitation use case."""
        return CreateInvitationUseCase(
            session=session, invitation_service=invitation_service
        )

    @provide(scope=Scope.REQUEST)
    def get_accept_invitation_use_case(
        self,
        session: ClientSession,
        invitation_service: InvitationService,
        membership_service: MembershipService,
    ) -> AcceptInvitationUseCase:
        """Provide accept invitation use case."""
        return AcceptInvitationUseCase(
            session=session,
            invitation_service=invitation_service,
            membership_service=membership_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_revoke_invitation_use_case(
        self, session: ClientSession, invitation_service: InvitationService
    ) -> RevokeInvitationUseCase:
        """Provide revoke invitation use case."""
        return RevokeInvitationUseCase(
            session=session, invitation_service=invitation_service
        )

    @provide(scope=Scope.REQUEST)
    def get_list_pending_invitations_use_case(
        self, session: ClientSession, invitation_service: InvitationService
    ) -> ListPendingInvitationsUseCase:
        """Provide list pending invitations use case."""
        return ListPendingInvitationsUseCase(
            session=session, invitation_service=invitation_service
        )

    @provide(scope=Scope.REQUEST)
    def get_list_sent_invitations_use_case(
        self, session: ClientSession, invitation_service: InvitationService
    ) -> ListSentInvitationsUseCase:
        """Provide list sent invitations use case."""
        return ListSentInvitationsUseCase(
            session=session, invitation_service=invitation_service
        )

    @provide(scope=Scope.APP)
    def get_reconcile_orphans_use_case(
        self, invitation_service: InvitationService
    ) -> ReconcileOrphansUseCase:
        """Provide reconcile orphans use case."""
        return ReconcileOrphansUseCase(invitation_service=invitation_service)
