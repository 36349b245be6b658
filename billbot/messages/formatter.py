"""Build the outbound messages the bot sends."""

from __future__ import annotations

from urllib.parse import quote, urlencode

from billbot.messages.models import (
    FlexBox,
    FlexBubble,
    FlexButton,
    FlexMessage,
    FlexText,
    TextMessage,
    UploadResult,
    UriAction,
)


def payment_request_message(title: str, label: str, uri: str) -> FlexMessage:
    """Bubble asking whether to request payment, with a button linking to ``uri``."""
    return FlexMessage(
        alt_text=label,
        contents=FlexBubble(
            body=FlexBox(
                layout="vertical",
                contents=[FlexText(text=title, weight="bold", size="xl")],
            ),
            footer=FlexBox(
                layout="horizontal",
                contents=[FlexButton(style="primary", action=UriAction(label=label, uri=uri))],
            ),
        ),
    )


def bill_form_link(form_url: str, image_id: str, image_url: str) -> str:
    # ":" and "/" stay readable so the stored URL is visible in the link
    query = urlencode({"imageId": image_id, "imageUrl": image_url}, quote_via=quote, safe=":/")
    separator = "&" if "?" in form_url else "?"
    return f"{form_url}{separator}{query}"


def upload_success_message(prefix: str, form_url: str, image_id: str, upload: UploadResult) -> TextMessage:
    return TextMessage(text=prefix + bill_form_link(form_url, image_id, upload.secure_url))
