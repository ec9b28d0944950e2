"""Notifications - Slack webhook delivery and message formatting."""

from .interfaces import NotificationResult, NotifierInterface
from .slack import SlackWebhookNotifier, NullNotifier, build_notifier
from .formatting import format_new_entries, format_failure

__all__ = [
    "NotificationResult", "NotifierInterface",
    "SlackWebhookNotifier", "NullNotifier", "build_notifier",
    "format_new_entries", "format_failure",
]
