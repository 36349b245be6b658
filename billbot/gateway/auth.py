"""Webhook authentication — LINE request signature validation."""

from __future__ import annotations

import base64
import hashlib
import hmac


def compute_signature(body: bytes, channel_secret: str) -> str:
    """Base64 HMAC-SHA256 of the raw body, as sent in ``X-Line-Signature``."""
    digest = hmac.new(channel_secret.encode("utf-8"), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def validate_signature(body: bytes, channel_secret: str, provided: str) -> bool:
    """Constant-time signature comparison."""
    if not provided:
        return False
    return hmac.compare_digest(compute_signature(body, channel_secret).encode(), provided.encode())
