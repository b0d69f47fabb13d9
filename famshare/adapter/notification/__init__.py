"""Invitation notification adapter."""

from .dispatcher import (
    HttpNotificationDispatcher,
    RecordingNotificationDispatcher,
    SentInvitation,
)

__all__ = [
    "HttpNotificationDispatcher",
    "RecordingNotificationDispatcher",
    "SentInvitation",
]
