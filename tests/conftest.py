"""Shared fixtures: in-memory LINE and Cloudinary collaborators."""

from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from billbot.app import create_app
from billbot.config import BotConfig
from billbot.messages.models import UploadResult

TRIGGER = "อับดุลเอ้ย"


class FakeLine:
    def __init__(self) -> None:
        self.pushed: list[tuple[str, list[dict]]] = []
        self.fetched: list[str] = []
        self.images: dict[str, bytes] = {}
        self.fail_push_for: set[str] = set()

    async def push_message(self, to: str, messages: list[dict]) -> dict:
        if to in self.fail_push_for:
            raise httpx.ConnectError("push refused")
        self.pushed.append((to, messages))
        return {}

    async def get_message_content(self, message_id: str) -> bytes:
        self.fetched.append(message_id)
        if message_id not in self.images:
            raise httpx.ConnectError("content unavailable")
        return self.images[message_id]

    async def connect(self) -> None:
        pass

    async def disconnect(self) -> None:
        pass

    async def health_check(self) -> dict:
        return {"status": "healthy"}

    def name(self) -> str:
        return "line"


class FakeStorage:
    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.uploads: list[str] = []
        self.fail = False

    async def upload(self, data: bytes, public_id: str, filename: str = "") -> UploadResult:
        self.uploads.append(public_id)
        if self.fail:
            raise httpx.ConnectError("storage down")
        self.objects[public_id] = data
        return UploadResult(
            public_id=public_id,
            secure_url=f"https://res.cloudinary.com/demo/image/upload/{public_id}.jpg",
        )

    async def connect(self) -> None:
        pass

    async def disconnect(self) -> None:
        pass

    async def health_check(self) -> dict:
        return {"status": "healthy"}

    def name(self) -> str:
        return "cloudinary"


@pytest.fixture
def config() -> BotConfig:
    return BotConfig(
        line_channel_access_token="token",
        line_channel_secret="",
        cloudinary_cloud_name="demo",
        cloudinary_upload_preset="bills",
        trigger_phrase=TRIGGER,
        payment_request_url="https://bills.example.com/request",
        bill_form_url="https://bills.example.com/bill-form",
        members={"user1": "Alice", "user2": "Bob"},
    )


@pytest.fixture
def line() -> FakeLine:
    return FakeLine()


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def client(config, line, storage) -> TestClient:
    return TestClient(create_app(config, line=line, storage=storage))


def text_event(text: str, user_id: str | None = "U1") -> dict:
    source = {"type": "user"}
    if user_id:
        source["userId"] = user_id
    return {"type": "message", "source": source, "message": {"type": "text", "id": "m1", "text": text}}


def image_event(image_id: str, user_id: str = "U2") -> dict:
    return {"type": "message", "source": {"type": "user", "userId": user_id}, "message": {"type": "image", "id": image_id}}
