"""Shared enums and type aliases."""

from enum import Enum


class EventType(str, Enum):
    MESSAGE = "message"


class MessageType(str, Enum):
    TEXT = "text"
    IMAGE = "image"


class EventOutcome(str, Enum):
    REPLIED = "replied"
    ECHOED = "echoed"
    INGESTED = "ingested"
    SKIPPED = "skipped"
    FAILED = "failed"


class BillCategory(str, Enum):
    FOOD = "food"
    ELECTRICITY = "electricity"
    OTHER = "other"
