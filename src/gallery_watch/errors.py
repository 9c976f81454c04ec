from __future__ import annotations

from typing import Optional


class GalleryWatchError(Exception):
    """Base class for errors that fail a watch run."""


class ConfigError(GalleryWatchError):
    """Required configuration is missing."""


class NotificationError(GalleryWatchError):
    """The SMS API answered with a non-success status."""

    def __init__(self, body: str, status_code: Optional[int] = None) -> None:
        super().__init__(f"Failed to send SMS: {body}")
        self.body = body
        self.status_code = status_code
