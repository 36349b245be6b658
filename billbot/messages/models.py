"""Core message types flowing through the webhook.

Inbound events arrive in LINE's camelCase wire format; fields are exposed in
snake_case and aliased back for parsing and serialization.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, TypeAdapter

from billbot.types import EventType, MessageType


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# -- Inbound --


class EventSource(_WireModel):
    type: str = "user"
    user_id: str | None = Field(default=None, alias="userId")
    group_id: str | None = Field(default=None, alias="groupId")
    room_id: str | None = Field(default=None, alias="roomId")


class TextContent(_WireModel):
    type: Literal["text"] = "text"
    id: str = ""
    text: str


class ImageContent(_WireModel):
    type: Literal["image"] = "image"
    id: str


class UnsupportedContent(_WireModel):
    type: str
    id: str = ""


def _message_kind(value: Any) -> str:
    kind = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    if kind in (MessageType.TEXT.value, MessageType.IMAGE.value):
        return kind
    return "unsupported"


MessageContent = Annotated[
    Union[
        Annotated[TextContent, Tag(MessageType.TEXT.value)],
        Annotated[ImageContent, Tag(MessageType.IMAGE.value)],
        Annotated[UnsupportedContent, Tag("unsupported")],
    ],
    Discriminator(_message_kind),
]


class MessageEvent(_WireModel):
    type: Literal["message"] = "message"
    source: EventSource = Field(default_factory=EventSource)
    message: MessageContent
    reply_token: str = Field(default="", alias="replyToken")
    timestamp: int = 0
    webhook_event_id: str = Field(default="", alias="webhookEventId")


class UnsupportedEvent(_WireModel):
    type: str
    source: EventSource = Field(default_factory=EventSource)
    timestamp: int = 0


def _event_kind(value: Any) -> str:
    kind = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    return EventType.MESSAGE.value if kind == EventType.MESSAGE.value else "unsupported"


InboundEvent = Annotated[
    Union[
        Annotated[MessageEvent, Tag(EventType.MESSAGE.value)],
        Annotated[UnsupportedEvent, Tag("unsupported")],
    ],
    Discriminator(_event_kind),
]

_event_adapter: TypeAdapter[InboundEvent] = TypeAdapter(InboundEvent)


def parse_event(raw: Any) -> MessageEvent | UnsupportedEvent:
    """Validate one raw webhook event. Raises pydantic.ValidationError."""
    return _event_adapter.validate_python(raw)


# -- Outbound --


class UriAction(_WireModel):
    type: Literal["uri"] = "uri"
    label: str
    uri: str


class FlexText(_WireModel):
    type: Literal["text"] = "text"
    text: str
    weight: str | None = None
    size: str | None = None
    wrap: bool | None = None


class FlexButton(_WireModel):
    type: Literal["button"] = "button"
    action: UriAction
    style: str | None = None


class FlexBox(_WireModel):
    type: Literal["box"] = "box"
    layout: Literal["vertical", "horizontal", "baseline"] = "vertical"
    contents: list[FlexText | FlexButton] = Field(default_factory=list)


class FlexBubble(_WireModel):
    type: Literal["bubble"] = "bubble"
    body: FlexBox | None = None
    footer: FlexBox | None = None


class TextMessage(_WireModel):
    type: Literal["text"] = "text"
    text: str


class FlexMessage(_WireModel):
    type: Literal["flex"] = "flex"
    alt_text: str = Field(alias="altText")
    contents: FlexBubble


OutboundMessage = Annotated[Union[TextMessage, FlexMessage], Field(discriminator="type")]


def to_wire(message: TextMessage | FlexMessage) -> dict:
    """Serialize an outbound message as the Messaging API expects it."""
    return message.model_dump(by_alias=True, exclude_none=True)


# -- Storage --


class UploadResult(_WireModel):
    public_id: str
    secure_url: str
