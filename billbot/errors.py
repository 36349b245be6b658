"""Error taxonomy for collaborator failures."""

from __future__ import annotations


class BillBotError(Exception):
    """Base class for errors raised while handling an event."""


class IngestError(BillBotError):
    """Image could not be moved from LINE into storage."""

    def __init__(self, image_id: str, reason: str) -> None:
        super().__init__(f"{reason} (image {image_id})")
        self.image_id = image_id


class ImageFetchError(IngestError):
    pass


class UploadError(IngestError):
    pass


class MessageDeliveryError(BillBotError):
    """Push message to a LINE user failed."""

    def __init__(self, user_id: str, reason: str) -> None:
        super().__init__(f"{reason} (user {user_id})")
        self.user_id = user_id


class ContentTooLargeError(ValueError):
    """Message content exceeded the configured download limit."""

    def __init__(self, message_id: str, limit: int) -> None:
        super().__init__(f"content of message {message_id} exceeds {limit} bytes")
        self.message_id = message_id
        self.limit = limit
