"""LINE webhook receiver.

The body is read as raw bytes rather than through a Pydantic request model:
the signature covers the exact bytes LINE sent.
"""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from billbot.gateway.auth import validate_signature

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhook"])

SIGNATURE_HEADER = "X-Line-Signature"


class MalformedWebhookError(ValueError):
    pass


def parse_events(body: bytes) -> list:
    payload = json.loads(body)
    if not isinstance(payload, dict):
        raise MalformedWebhookError("Webhook body must be a JSON object")
    events = payload.get("events")
    if not isinstance(events, list):
        raise MalformedWebhookError("Webhook body has no 'events' list")
    return events


@router.api_route("/webhook", methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"])
async def webhook(request: Request) -> JSONResponse:
    if request.method != "POST":
        return JSONResponse({"error": "Method Not Allowed"}, status_code=405, headers={"Allow": "POST"})

    body = await request.body()
    state = request.app.state
    secret: str = state.config.line_channel_secret
    if secret and not validate_signature(body, secret, request.headers.get(SIGNATURE_HEADER, "")):
        logger.warning("Rejected webhook with invalid signature")
        return JSONResponse({"error": "Invalid signature"}, status_code=401)

    state.metrics.record_webhook()
    try:
        events = parse_events(body)
        await state.event_router.dispatch(events)
    except Exception as exc:
        logger.exception("Error processing webhook")
        return JSONResponse({"error": str(exc) or "Internal Server Error"}, status_code=500)

    return JSONResponse({"success": True})
