"""Notification dispatcher boundary for invitation messages."""

from famshare.domain.value import InvitationId, InvitationTarget


class NotificationDispatcher:
    """Sends invitation messages by email or SMS.

    Delivery is best-effort: implementations raise DispatchFailedError and
    callers treat it as a warning.
    """

    async def send(
        self,
        target: InvitationTarget,
        invitation_id: InvitationId,
        account_name: str,
        inviter_name: str,
    ) -> None:
        """Send one invitation message.

        Args:
            target: Email address or phone number
            invitation_id: Invitation the message links to
            account_name: Name of the shared account
            inviter_name: Who is inviting

        Raises:
            DispatchFailedError: If the message could not be handed off
        """
        raise NotImplementedError
