"""Slack incoming-webhook notifier."""

from typing import Optional

import httpx
import structlog

from .interfaces import NotificationResult, NotifierInterface
from ..config.settings import settings
from ..errors import DeliveryError

logger = structlog.get_logger()


class SlackWebhookNotifier(NotifierInterface):
    """POST a text message to a Slack incoming webhook.

    Any non-2xx response or transport error raises DeliveryError. There is
    no retry here; callers decide whether a failed delivery matters.
    """

    def __init__(
        self,
        webhook_url: str,
        timeout_seconds: float = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        if not webhook_url:
            raise ValueError("webhook_url is required")
        self.webhook_url = webhook_url
        self.timeout_seconds = timeout_seconds or settings.notify_timeout_seconds
        self._client = client

    async def send(self, message: str) -> NotificationResult:
        """Send the message as {"text": message}."""
        try:
            if self._client is not None:
                response = await self._post(self._client, message)
            else:
                async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                    response = await self._post(client, message)
        except httpx.HTTPError as e:
            logger.error("notification_transport_error", error=str(e))
            raise DeliveryError(cause=str(e) or type(e).__name__) from e

        if not response.is_success:
            logger.error("notification_rejected", status=response.status_code)
            raise DeliveryError(status=response.status_code, cause=response.reason_phrase)

        logger.info("notification_sent", status=response.status_code, chars=len(message))
        return NotificationResult(ok=True, status=response.status_code)

    async def _post(self, client: httpx.AsyncClient, message: str) -> httpx.Response:
        return await client.post(
            self.webhook_url,
            json={"text": message},
            headers={"Content-Type": "application/json"},
        )


class NullNotifier(NotifierInterface):
    """Used when no webhook is configured: logs the message and moves on."""

    async def send(self, message: str) -> NotificationResult:
        logger.warning("notification_skipped", reason="no_webhook_configured", chars=len(message))
        return NotificationResult(ok=False, error="webhook not configured")


def build_notifier(webhook_url: Optional[str], timeout_seconds: float = None) -> NotifierInterface:
    """Return a Slack notifier, or a NullNotifier when no URL is given."""
    if not webhook_url:
        return NullNotifier()
    return SlackWebhookNotifier(webhook_url, timeout_seconds=timeout_seconds)
