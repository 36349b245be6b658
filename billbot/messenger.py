"""Outbound messenger — push messages to a LINE user."""

from __future__ import annotations

import logging

import httpx

from billbot.connectors.line import LineConnector
from billbot.errors import MessageDeliveryError
from billbot.messages.models import FlexMessage, TextMessage, to_wire

logger = logging.getLogger(__name__)

MAX_MESSAGES_PER_PUSH = 5


class Messenger:
    def __init__(self, line: LineConnector) -> None:
        self._line = line

    async def push(self, user_id: str, messages: list[TextMessage | FlexMessage]) -> dict:
        if not 1 <= len(messages) <= MAX_MESSAGES_PER_PUSH:
            raise ValueError(f"push accepts 1-{MAX_MESSAGES_PER_PUSH} messages, got {len(messages)}")
        try:
            return await self._line.push_message(user_id, [to_wire(m) for m in messages])
        except httpx.HTTPError as exc:
            logger.error("Push to %s failed: %s", user_id, exc)
            raise MessageDeliveryError(user_id, str(exc) or type(exc).__name__) from exc
