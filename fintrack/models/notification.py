"""
User-facing notifications.

The UI decides how to show these (toast, banner). The core only
produces them.
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Notification(BaseModel):
    """A single message for the user."""

    level: NotificationLevel
    title: str = Field(..., max_length=100)
    message: str = Field(..., max_length=500)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @property
    def is_error(self) -> bool:
        return self.level == NotificationLevel.ERROR
