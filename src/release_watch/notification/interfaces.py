"""Interface definitions for notifications."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class NotificationResult:
    """Outcome of one delivery attempt."""
    ok: bool
    status: Optional[int] = None
    error: Optional[str] = None


class NotifierInterface:
    """Interface for the notification sink."""

    async def send(self, message: str) -> NotificationResult:
        """Deliver one message. Raises DeliveryError if not accepted."""
        raise NotImplementedError
