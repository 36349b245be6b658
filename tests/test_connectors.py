"""Test LINE and Cloudinary connectors against httpx.MockTransport."""

import asyncio
import json

import httpx
import pytest

from billbot.connectors.cloudinary import CloudinaryConnector, sign_params
from billbot.connectors.line import LineConnector
from billbot.errors import ContentTooLargeError, MessageDeliveryError
from billbot.messages.models import TextMessage
from billbot.messenger import Messenger


def _client(handler, base_url):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=base_url)


def test_push_message_posts_to_push_endpoint():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"sentMessages": [{"id": "1"}]})

    line = LineConnector("tok", client=_client(handler, "https://api.line.me"))
    asyncio.run(line.push_message("U1", [{"type": "text", "text": "hi"}]))
    assert seen == {
        "path": "/v2/bot/message/push",
        "auth": "Bearer tok",
        "body": {"to": "U1", "messages": [{"type": "text", "text": "hi"}]},
    }


def test_get_message_content_drains_stream():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v2/bot/message/IMG1/content"
        return httpx.Response(200, content=b"\xff\xd8" + b"x" * 10_000)

    line = LineConnector("tok", data_client=_client(handler, "https://api-data.line.me"))
    data = asyncio.run(line.get_message_content("IMG1"))
    assert data.startswith(b"\xff\xd8") and len(data) == 10_002


def test_messenger_wraps_http_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"message": "The property, 'to', in the request body is invalid"})

    messenger = Messenger(LineConnector("tok", client=_client(handler, "https://api.line.me")))
    with pytest.raises(MessageDeliveryError) as info:
        asyncio.run(messenger.push("bad", [TextMessage(text="hi")]))
    assert info.value.user_id == "bad"
    assert isinstance(info.value.__cause__, httpx.HTTPStatusError)


def test_unsigned_upload_uses_preset_and_public_id():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = request.content
        return httpx.Response(200, json={
            "public_id": "IMG1",
            "secure_url": "https://res.cloudinary.com/demo/image/upload/v1/IMG1.jpg",
            "bytes": 4,
        })

    storage = CloudinaryConnector("demo", upload_preset="bills",
                                  client=_client(handler, "https://api.cloudinary.com"))
    result = asyncio.run(storage.upload(b"data", public_id="IMG1"))
    assert seen["path"] == "/v1_1/demo/image/upload"
    assert b'name="public_id"\r\n\r\nIMG1' in seen["body"]
    assert b'name="upload_preset"\r\n\r\nbills' in seen["body"]
    assert b"signature" not in seen["body"]
    assert result.public_id == "IMG1"
    assert result.secure_url.endswith("IMG1.jpg")


def test_signed_upload_overwrites():
    storage = CloudinaryConnector("demo", upload_preset="bills", api_key="k", api_secret="s")
    params = storage._upload_params("IMG1")
    assert params["overwrite"] == "true"
    assert params["api_key"] == "k"
    unsigned = {k: v for k, v in params.items() if k not in ("signature", "api_key")}
    assert params["signature"] == sign_params(unsigned, "s")


def test_sign_params_sorts_keys():
    # Example from Cloudinary's signature documentation
    params = {"timestamp": "1315060510", "public_id": "sample_image", "eager": "w_400,h_300,c_pad|w_260,h_200,c_crop"}
    assert sign_params(params, "abcd") == "bfd09f95f331f558cbd1320e67aa8d488770583e"


def test_health_reports_disabled_when_unconfigured():
    assert asyncio.run(LineConnector("").health_check()) == {"status": "disabled"}
    assert asyncio.run(CloudinaryConnector("").health_check()) == {"status": "disabled"}


def test_oversized_content_is_refused():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"x" * 2048)

    line = LineConnector("tok", data_client=_client(handler, "https://api-data.line.me"), max_content_bytes=1024)
    with pytest.raises(ContentTooLargeError) as info:
        asyncio.run(line.get_message_content("IMG1"))
    assert info.value.message_id == "IMG1"


def test_content_download_has_overall_deadline():
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return httpx.Response(200, content=b"late")

    line = LineConnector("tok", data_client=_client(handler, "https://api-data.line.me"), content_deadline=0.05)
    with pytest.raises(httpx.TimeoutException, match="deadline"):
        asyncio.run(line.get_message_content("IMG1"))


def test_upload_has_overall_deadline():
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return httpx.Response(200, json={"public_id": "IMG1", "secure_url": "https://x/IMG1.jpg"})

    storage = CloudinaryConnector("demo", upload_preset="bills", upload_deadline=0.05,
                                  client=_client(handler, "https://api.cloudinary.com"))
    with pytest.raises(httpx.TimeoutException):
        asyncio.run(storage.upload(b"data", public_id="IMG1"))
