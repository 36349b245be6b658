"""Collaborator connector abstraction — one httpx client per remote API."""

from __future__ import annotations

import abc
import asyncio

import httpx


class ServiceConnector(abc.ABC):
    def __init__(
        self,
        base_url: str,
        timeout: float,
        client: httpx.AsyncClient | None = None,
        deadline: float | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._deadline = deadline
        self._client = client

    async def connect(self) -> None:
        self._get_client()

    async def disconnect(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if not self._client:
            self._client = httpx.AsyncClient(base_url=self._base_url, timeout=self._timeout)
        return self._client

    async def _within_deadline(self, call):
        """Await ``call`` with a cap on the whole exchange, not just each read."""
        if not self._deadline:
            return await call
        try:
            return await asyncio.wait_for(call, self._deadline)
        except asyncio.TimeoutError as exc:
            raise httpx.TimeoutException(
                f"{self.name()} call exceeded its {self._deadline:g}s deadline"
            ) from exc

    @abc.abstractmethod
    async def health_check(self) -> dict:
        """Return health status."""

    @abc.abstractmethod
    def name(self) -> str:
        """Connector identifier."""
