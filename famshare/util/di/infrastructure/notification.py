"""Notification infrastructure providers."""

from dishka import Scope, provide

from famshare.adapter.notification import HttpNotificationDispatcher
from famshare.config import Settings
from famshare.domain.service import NotificationDispatcher
from famshare.util.di.base import ProviderBase


class NotificationProvider(ProviderBase):
    """Notification component base."""

    __mock_component__ = "notification"


class ProdNotificationProvider(NotificationProvider):
    """Production notification provider posting to the delivery functions."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_notification_dispatcher(self, settings: Settings) -> NotificationDispatcher:
        """Provide the invitation message dispatcher."""
        return HttpNotificationDispatcher(
            settings=settings.notifications,
            invitation_base_url=settings.invitation_base_url,
        )
