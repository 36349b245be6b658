"""Image ingest — LINE content → Cloudinary → form link to the user."""

from __future__ import annotations

import logging

import httpx

from billbot.config import BotConfig
from billbot.connectors.cloudinary import CloudinaryConnector
from billbot.connectors.line import LineConnector
from billbot.errors import ContentTooLargeError, ImageFetchError, UploadError
from billbot.messages.formatter import upload_success_message
from billbot.messages.models import UploadResult
from billbot.messenger import Messenger

logger = logging.getLogger(__name__)


class ImageIngestPipeline:
    """Stores a bill image, then tells the user where to categorize it.

    The user is only messaged once the upload has settled successfully, so the
    link always points at a retrievable image. The image id doubles as the
    storage public id; re-ingesting the same message overwrites one object.
    """

    def __init__(
        self,
        line: LineConnector,
        storage: CloudinaryConnector,
        messenger: Messenger,
        config: BotConfig,
    ) -> None:
        self._line = line
        self._storage = storage
        self._messenger = messenger
        self._config = config

    async def ingest(self, image_id: str, user_id: str) -> UploadResult:
        try:
            content = await self._line.get_message_content(image_id)
        except (httpx.HTTPError, ContentTooLargeError) as exc:
            raise ImageFetchError(image_id, f"fetch failed: {exc}") from exc
        logger.info("Fetched image %s (%d bytes)", image_id, len(content))

        try:
            upload = await self._storage.upload(content, public_id=image_id)
        except (httpx.HTTPError, ValueError) as exc:
            raise UploadError(image_id, f"upload failed: {exc}") from exc
        logger.info("Uploaded image %s to %s", upload.public_id, upload.secure_url)

        message = upload_success_message(
            self._config.upload_success_text, self._config.bill_form_url, image_id, upload
        )
        await self._messenger.push(user_id, [message])
        return upload
