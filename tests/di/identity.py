"""Mock identity providers for testing."""

from dishka import Scope, provide

from famshare.adapter.identity import InMemoryIdentityDirectory
from famshare.domain.service import IdentityProviderFactory
from famshare.util.di.infrastructure.identity import IdentityServiceProvider


class MockIdentityServiceProvider(IdentityServiceProvider):
    """Mock identity provider: tokens are registered by the test."""

    __is_mock__ = True

    scope = Scope.APP

    @provide
    def get_identity_directory(self) -> InMemoryIdentityDirectory:
        return InMemoryIdentityDirectory()

    @provide
    def get_identity_provider_factory(
        self, directory: InMemoryIdentityDirectory
    ) -> IdentityProviderFactory:
        """Provide the in-memory identity directory as the factory."""
        return directory
