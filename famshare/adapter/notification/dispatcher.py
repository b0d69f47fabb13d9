"""Invitation message delivery.

Emails and text messages are rendered and sent by two hosted functions;
this adapter only hands them the invitation details.
"""

from dataclasses import dataclass
from typing import Optional

import httpx
import logfire

from famshare.adapter.error import ProviderError
from famshare.config import NotificationSettings
from famshare.domain.error import DispatchFailedError
from famshare.domain.service import NotificationDispatcher
from famshare.domain.value import InvitationId, InvitationTarget, TargetKind


class HttpNotificationDispatcher(NotificationDispatcher):
    """Posts invitation messages to the email or SMS function."""

    def __init__(
        self,
        settings: NotificationSettings,
        invitation_base_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize dispatcher.

        Args:
            settings: Endpoints, key and timeout
            invitation_base_url: Links are {invitation_base_url}/{invitation_id}
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.settings = settings
        self.invitation_base_url = invitation_base_url.rstrip("/")
        self._transport = transport

    async def send(
        self,
        target: InvitationTarget,
        invitation_id: InvitationId,
        account_name: str,
        inviter_name: str,
    ) -> None:
        """Send one invitation message.

        Raises:
            DispatchFailedError: If the function could not be reached or refused
        """
        with logfire.span(
            "notification_dispatcher.send",
            invitation_id=str(invitation_id),
            target_kind=target.kind.value,
        ):
            try:
                await self._post(target, invitation_id, account_name, inviter_name)
            except ProviderError as e:
                raise DispatchFailedError(str(e)) from e

    async def _post(
        self,
        target: InvitationTarget,
        invitation_id: InvitationId,
        account_name: str,
        inviter_name: str,
    ) -> None:
        if target.kind == TargetKind.EMAIL:
            endpoint = self.settings.email_endpoint
            payload = {"email": target.value}
        else:
            endpoint = self.settings.sms_endpoint
            payload = {"phone": target.value}
        payload.update(
            {
                "invitation_id": str(invitation_id),
                "invitation_url": f"{self.invitation_base_url}/{invitation_id}",
                "account_name": account_name,
                "inviter_name": inviter_name,
            }
        )

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(
                    endpoint,
                    json=payload,
                    headers={"Authorization": f"Bearer {self.settings.api_key}"},
                    timeout=self.settings.timeout_seconds,
                )
        except httpx.HTTPError as e:
            logfire.error("Invitation dispatch HTTP error", error=str(e))
            raise ProviderError(f"HTTP error sending invitation: {e}") from e

        if response.status_code >= 400:
            logfire.error(
                "Invitation dispatch rejected",
                status_code=response.status_code,
                error=response.text,
            )
            raise ProviderError(f"Invitation dispatch failed: {response.status_code}")

        logfire.info("Invitation message sent", invitation_id=str(invitation_id))


@dataclass
class SentInvitation:
    target: InvitationTarget
    invitation_id: InvitationId
    account_name: str
    inviter_name: str


class RecordingNotificationDispatcher(NotificationDispatcher):
    """Dispatcher for tests: records messages, can be told to fail."""

    def __init__(self) -> None:
        self.sent: list[SentInvitation] = []
        self.fail = False

    async def send(
        self,
        target: InvitationTarget,
        invitation_id: InvitationId,
        account_name: str,
        inviter_name: str,
    ) -> None:
        if self.fail:
            raise DispatchFailedError("Dispatch disabled for this test")
        self.sent.append(
            SentInvitation(target, invitation_id, account_name, inviter_name)
        )
