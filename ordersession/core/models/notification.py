"""
Notification model: named events surfaced to the presentation layer (toasts).
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class Severity(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Notification(BaseModel):
    """
    A named event with a severity, e.g. a failed save.

    Attributes:
        event: Event name the UI listens for ("toast")
        message: Message key or text
        severity: How the UI should style the notification
        created_at: When the notification was raised
    """

    event: str = "toast"
    message: str
    severity: Severity = Severity.INFO
    created_at: datetime = Field(default_factory=datetime.utcnow)
