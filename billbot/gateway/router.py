"""Event router — dispatch each webhook event to a reply, an echo or an ingest."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from billbot.config import BotConfig
from billbot.errors import IngestError, MessageDeliveryError
from billbot.ingest import ImageIngestPipeline
from billbot.messages.formatter import payment_request_message
from billbot.messages.models import (
    ImageContent,
    MessageEvent,
    TextContent,
    TextMessage,
    UnsupportedContent,
    UnsupportedEvent,
    parse_event,
)
from billbot.messenger import Messenger
from billbot.observability.metrics import MetricsCollector
from billbot.types import EventOutcome

logger = logging.getLogger(__name__)


@dataclass
class DispatchReport:
    outcomes: list[EventOutcome] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return self.outcomes.count(EventOutcome.FAILED)


class EventRouter:
    """Processes a batch sequentially; one event's failure never stops the rest."""

    def __init__(
        self,
        messenger: Messenger,
        pipeline: ImageIngestPipeline,
        config: BotConfig,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self._messenger = messenger
        self._pipeline = pipeline
        self._config = config
        self._metrics = metrics or MetricsCollector()

    async def dispatch(self, events: list[Any]) -> DispatchReport:
        report = DispatchReport()
        for index, raw in enumerate(events):
            outcome, error = await self._handle_isolated(index, raw)
            self._metrics.record_event(outcome, error)
            report.outcomes.append(outcome)
        if report.failed:
            logger.warning("Batch finished with %d/%d failed events", report.failed, len(events))
        return report

    async def _handle_isolated(self, index: int, raw: Any) -> tuple[EventOutcome, str]:
        try:
            event = parse_event(raw)
        except ValidationError as exc:
            logger.error("Skipping malformed event #%d: %s", index, exc)
            return EventOutcome.SKIPPED, ""

        try:
            return await self.handle(event), ""
        except IngestError as exc:
            logger.error("Event #%d: image ingest failed: %s", index, exc)
            return EventOutcome.FAILED, type(exc).__name__
        except MessageDeliveryError as exc:
            logger.error("Event #%d: message delivery failed: %s", index, exc)
            return EventOutcome.FAILED, type(exc).__name__
        except Exception as exc:
            logger.exception("Event #%d: unexpected error", index)
            return EventOutcome.FAILED, type(exc).__name__

    async def handle(self, event: MessageEvent | UnsupportedEvent) -> EventOutcome:
        if isinstance(event, UnsupportedEvent):
            logger.debug("Ignoring %s event", event.type)
            return EventOutcome.SKIPPED

        user_id = event.source.user_id
        if event.source.group_id:
            logger.info("Message from group %s", event.source.group_id)
        if not user_id:
            logger.error("User ID is missing in event: %s", event.model_dump(by_alias=True))
            return EventOutcome.SKIPPED

        message = event.message
        if isinstance(message, TextContent):
            return await self._handle_text(user_id, message.text)
        if isinstance(message, ImageContent):
            await self._pipeline.ingest(message.id, user_id)
            return EventOutcome.INGESTED
        if isinstance(message, UnsupportedContent):
            logger.debug("Ignoring %s message from %s", message.type, user_id)
            return EventOutcome.SKIPPED
        raise TypeError(f"unhandled message content {type(message).__name__}")

    async def _handle_text(self, user_id: str, text: str) -> EventOutcome:
        if text.casefold() == self._config.trigger_phrase.casefold():
            flex = payment_request_message(
                self._config.payment_request_title,
                self._config.payment_request_label,
                self._config.payment_request_url,
            )
            await self._messenger.push(user_id, [flex])
            return EventOutcome.REPLIED

        await self._messenger.push(user_id, [TextMessage(text=text)])
        return EventOutcome.ECHOED
