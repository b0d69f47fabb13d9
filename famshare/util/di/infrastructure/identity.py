"""Identity provider infrastructure providers."""

from dishka import Scope, provide

from famshare.adapter.identity import HttpIdentityProviderFactory
from famshare.config import Settings
from famshare.domain.service import IdentityProviderFactory
from famshare.util.di.base import ProviderBase
from famshare.util.error import ConfigurationError


class IdentityServiceProvider(ProviderBase):
    """Identity component base."""

    __mock_component__ = "identity"


class ProdIdentityServiceProvider(IdentityServiceProvider):
    """Production identity provider backed by the external auth service."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_identity_provider_factory(
        self, settings: Settings
    ) -> IdentityProviderFactory:
        """Provide the factory creating one identity provider per access token.

        Raises:
            ConfigurationError: If the auth service key is not configured outside
                development
        """
        if (
            settings.environment in ("staging", "production")
            and settings.identity.api_key == "CHANGE_ME_IN_PRODUCTION"
        ):
            raise ConfigurationError("IDENTITY__API_KEY must be configured")

        return HttpIdentityProviderFactory(settings=settings.identity)
