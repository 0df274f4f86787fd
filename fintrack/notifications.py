"""
Notification queue.

Session and mutation code push messages here, the UI drains them once
per render. A failed action always produces exactly one error message,
using the backend's own text when it sent one.
"""

from typing import Optional

from fintrack.models.notification import Notification, NotificationLevel
from fintrack.services.gateway.interface import TransportError, ValidationError


class Notifier:
    """Collects user-facing notifications until the UI picks them up."""

    def __init__(self):
        self._pending: list[Notification] = []

    @property
    def pending(self) -> list[Notification]:
        return list(self._pending)

    def notify(self, level: NotificationLevel, title: str, message: str) -> Notification:
        notification = Notification(level=level, title=title, message=message)
        self._pending.append(notification)
        return notification

    def success(self, title: str, message: str) -> Notification:
        return self.notify(NotificationLevel.SUCCESS, title, message)

    def info(self, title: str, message: str) -> Notification:
        return self.notify(NotificationLevel.INFO, title, message)

    def error(self, title: str, message: str) -> Notification:
        return self.notify(NotificationLevel.ERROR, title, message)

    def failure(
        self,
        error: Exception,
        default_message: str,
        title: str = "Error",
    ) -> Notification:
        """
        Report a failed action, preferring the server's message.

        Input the user got wrong is reported with its own text, since it
        already says what to fix.
        """
        if isinstance(error, ValidationError) and not isinstance(error, TransportError):
            return self.error(title, str(error))
        server_message: Optional[str] = getattr(error, "server_message", None)
        return self.error(title, server_message or default_message)

    def drain(self) -> list[Notification]:
        """Return and forget everything queued so far."""
        drained, self._pending = self._pending, []
        return drained
