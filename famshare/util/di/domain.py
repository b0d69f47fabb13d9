"""Domain layer DI providers."""

from dishka import Scope, provide

from famshare.config import InvitationSettings
from famshare.domain.repository import (
    AccountRepository,
    InvitationRepository,
    MembershipRepository,
    ProfileRepository,
)
from famshare.domain.service import (
    InvitationService,
    MembershipService,
    NotificationDispatcher,
)
from famshare.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are APP-scoped: repositories open their own short
    transaction per call, and client sessions hold on to the services
    across requests.
    """

    scope = Scope.APP

    @provide
    def get_membership_service(
        self,
        account_repository: AccountRepository,
        membership_repository: MembershipRepository,
        profile_repository: ProfileRepository,
    ) -> MembershipService:
        """Provide membership domain service."""
        return MembershipService(
            account_repository=account_repository,
            membership_repository=membership_repository,
            profile_repository=profile_repository,
        )

    @provide
    def get_invitation_service(
        self,
        invitation_repository: InvitationRepository,
        account_repository: AccountRepository,
        membership_repository: MembershipRepository,
        dispatcher: NotificationDispatcher,
        settings: InvitationSettings,
    ) -> InvitationService:
        """Provide invitation domain service."""
        return InvitationService(
            invitation_repository=invitation_repository,
            account_repository=account_repository,
            membership_repository=membership_repository,
            dispatcher=dispatcher,
            settings=settings,
        )
