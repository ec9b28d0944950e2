"""Error types raised by the release watch pipeline."""

from typing import Optional


class ReleaseWatchError(Exception):
    """Base class for all pipeline errors."""


class FetchError(ReleaseWatchError):
    """The feed could not be retrieved or its body could not be decoded."""

    def __init__(self, url: str, status: Optional[int] = None, cause: str = ""):
        self.url = url
        self.status = status
        self.cause = cause
        detail = f"HTTP {status}" if status is not None else cause
        if status is not None and cause:
            detail = f"{detail}: {cause}"
        super().__init__(f"Failed to fetch {url} ({detail})")


class StorageError(ReleaseWatchError):
    """The persistence layer rejected a write."""


class DeliveryError(ReleaseWatchError):
    """The notification sink did not accept the message."""

    def __init__(self, status: Optional[int] = None, cause: str = ""):
        self.status = status
        self.cause = cause
        if status is not None:
            message = f"Notification delivery failed: HTTP {status} {cause}".rstrip()
        else:
            message = f"Notification delivery failed: {cause}"
        super().__init__(message)


class RunInProgressError(ReleaseWatchError):
    """A run was requested while another run is still executing."""
