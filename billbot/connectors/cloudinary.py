"""Cloudinary connector — image uploads addressed by public id."""

from __future__ import annotations

import hashlib
import time

import httpx

from billbot.connectors.base import ServiceConnector
from billbot.messages.models import UploadResult


def sign_params(params: dict[str, str], api_secret: str) -> str:
    """Cloudinary request signature: SHA-1 over sorted ``k=v`` pairs plus the secret."""
    payload = "&".join(f"{k}={params[k]}" for k in sorted(params))
    return hashlib.sha1((payload + api_secret).encode("utf-8")).hexdigest()


class CloudinaryConnector(ServiceConnector):
    """Uploads images to a Cloudinary cloud.

    Without API credentials the upload is unsigned and relies on the upload
    preset. With credentials it is signed and sends ``overwrite=true`` so a
    repeated public id replaces the stored object.
    """

    def __init__(
        self,
        cloud_name: str,
        upload_preset: str = "",
        api_key: str = "",
        api_secret: str = "",
        api_url: str = "https://api.cloudinary.com",
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
        upload_deadline: float | None = 120.0,
    ) -> None:
        super().__init__(api_url, timeout, client, deadline=upload_deadline)
        self._cloud_name = cloud_name
        self._upload_preset = upload_preset
        self._api_key = api_key
        self._api_secret = api_secret

    @property
    def signed(self) -> bool:
        return bool(self._api_key and self._api_secret)

    def _upload_params(self, public_id: str) -> dict[str, str]:
        params: dict[str, str] = {"public_id": public_id}
        if self._upload_preset:
            params["upload_preset"] = self._upload_preset
        if self.signed:
            params["overwrite"] = "true"
            params["timestamp"] = str(int(time.time()))
            params["signature"] = sign_params(params, self._api_secret)
            params["api_key"] = self._api_key
        return params

    async def upload(self, data: bytes, public_id: str, filename: str = "") -> UploadResult:
        return await self._within_deadline(self._post_upload(data, public_id, filename))

    async def _post_upload(self, data: bytes, public_id: str, filename: str) -> UploadResult:
        client = self._get_client()
        resp = await client.post(
            f"/v1_1/{self._cloud_name}/image/upload",
            data=self._upload_params(public_id),
            files={"file": (filename or f"{public_id}.jpg", data, "application/octet-stream")},
        )
        resp.raise_for_status()
        return UploadResult.model_validate(resp.json())

    async def health_check(self) -> dict:
        if not self._cloud_name:
            return {"status": "disabled"}
        if not self.signed:
            return {"status": "unchecked", "mode": "unsigned"}
        try:
            client = self._get_client()
            resp = await client.get(
                f"/v1_1/{self._cloud_name}/ping", auth=(self._api_key, self._api_secret)
            )
            return {"status": "healthy" if resp.is_success else "unhealthy", "code": resp.status_code}
        except httpx.HTTPError as e:
            return {"status": "unhealthy", "error": str(e)}

    def name(self) -> str:
        return "cloudinary"
