"""LINE Messaging API connector — push messages and message content."""

from __future__ import annotations

import httpx

from billbot.connectors.base import ServiceConnector
from billbot.errors import ContentTooLargeError


class LineConnector(ServiceConnector):
    def __init__(
        self,
        access_token: str,
        api_url: str = "https://api.line.me",
        data_api_url: str = "https://api-data.line.me",
        timeout: float = 15.0,
        client: httpx.AsyncClient | None = None,
        data_client: httpx.AsyncClient | None = None,
        content_deadline: float | None = 60.0,
        max_content_bytes: int = 20 * 1024 * 1024,
    ) -> None:
        super().__init__(api_url, timeout, client, deadline=content_deadline)
        self._max_content_bytes = max_content_bytes
        self._token = access_token
        self._data_url = data_api_url.rstrip("/")
        self._data_client = data_client

    async def disconnect(self) -> None:
        await super().disconnect()
        if self._data_client:
            await self._data_client.aclose()
            self._data_client = None

    def _get_data_client(self) -> httpx.AsyncClient:
        if not self._data_client:
            self._data_client = httpx.AsyncClient(base_url=self._data_url, timeout=self._timeout)
        return self._data_client

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self._token}"}

    async def push_message(self, to: str, messages: list[dict]) -> dict:
        return await self._within_deadline(self._push(to, messages))

    async def _push(self, to: str, messages: list[dict]) -> dict:
        client = self._get_client()
        resp = await client.post(
            "/v2/bot/message/push",
            json={"to": to, "messages": messages},
            headers=self._headers(),
        )
        resp.raise_for_status()
        return resp.json() if resp.content else {}

    async def get_message_content(self, message_id: str) -> bytes:
        """Download the content of an image/video/audio/file message."""
        return await self._within_deadline(self._download(message_id))

    async def _download(self, message_id: str) -> bytes:
        client = self._get_data_client()
        buffer = bytearray()
        async with client.stream(
            "GET", f"/v2/bot/message/{message_id}/content", headers=self._headers()
        ) as resp:
            resp.raise_for_status()
            async for chunk in resp.aiter_bytes():
                buffer.extend(chunk)
                if len(buffer) > self._max_content_bytes:
                    raise ContentTooLargeError(message_id, self._max_content_bytes)
        return bytes(buffer)

    async def health_check(self) -> dict:
        if not self._token:
            return {"status": "disabled"}
        try:
            client = self._get_client()
            resp = await client.get("/v2/bot/info", headers=self._headers())
            if resp.is_success:
                return {"status": "healthy", "bot": resp.json().get("basicId", "")}
            return {"status": "unhealthy", "code": resp.status_code}
        except httpx.HTTPError as e:
            return {"status": "unhealthy", "error": str(e)}

    def name(self) -> str:
        return "line"
