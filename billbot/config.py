"""Configuration loading from YAML + environment variables."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings


class BotConfig(BaseSettings):
    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    # LINE Messaging API (from env)
    line_channel_access_token: str = ""
    line_channel_secret: str = ""
    line_api_url: str = "https://api.line.me"
    line_data_api_url: str = "https://api-data.line.me"
    line_timeout_seconds: float = 15.0
    line_content_deadline_seconds: float = 60.0
    line_max_content_bytes: int = 20 * 1024 * 1024

    # Cloudinary
    cloudinary_cloud_name: str = ""
    cloudinary_upload_preset: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    cloudinary_api_url: str = "https://api.cloudinary.com"
    cloudinary_timeout_seconds: float = 60.0
    cloudinary_upload_deadline_seconds: float = 120.0

    # Bot behaviour
    trigger_phrase: str = "อับดุลเอ้ย"
    payment_request_label: str = "เรียกเก็บเงิน"
    payment_request_title: str = "ต้องการเรียกเก็บเงิน?"
    payment_request_url: str = "https://your-domain.com/bill-form"
    bill_form_url: str = "https://your-domain.com/bill-form"
    upload_success_text: str = "อัพโหลดบิลสำเร็จ! โปรดระบุหมวดหมู่และผู้ที่ต้องการเรียกเก็บเงินได้ที่: "

    # Bill form
    members: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_yaml(cls, path: str | Path = "billbot.yaml") -> BotConfig:
        """Load config from YAML file, with env vars filling anything the file omits."""
        yaml_path = Path(path)
        yaml_data: dict[str, Any] = {}

        if yaml_path.exists():
            with yaml_path.open("r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
            yaml_data = _flatten_yaml(raw.get("billbot", {}))

        return cls(**yaml_data)


def _flatten_yaml(data: dict, prefix: str = "") -> dict:
    """Flatten nested YAML into flat key-value pairs for Pydantic."""
    flat: dict[str, Any] = {}
    for key, value in data.items():
        full_key = f"{prefix}_{key}" if prefix else key
        if isinstance(value, dict) and key != "members":
            flat.update(_flatten_yaml(value, full_key))
        else:
            flat[full_key] = value
    return flat
