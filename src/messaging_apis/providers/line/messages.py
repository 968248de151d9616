"""Message object builders for the LINE Messaging API.

Each builder returns a plain ``dict`` in LINE's wire format (camelCase keys)
that can be passed to ``reply``, ``push``, ``multicast`` or ``broadcast``.

Common options accepted by every builder:
- ``quick_reply``: quick reply object, ``{"items": [...]}``
- ``sender``: sender override, ``{"name": ..., "iconUrl": ...}``
"""

from __future__ import annotations

from typing import Any

from ..common.utils import omit_none

Message = dict[str, Any]


def _with_options(
    message: Message,
    quick_reply: dict[str, Any] | None = None,
    sender: dict[str, Any] | None = None,
) -> Message:
    return {**message, **omit_none({"quickReply": quick_reply, "sender": sender})}


def create_text(
    text: str,
    *,
    emojis: list[dict[str, Any]] | None = None,
    quick_reply: dict[str, Any] | None = None,
    sender: dict[str, Any] | None = None,
) -> Message:
    return _with_options(
        omit_none({"type": "text", "text": text, "emojis": emojis}), quick_reply, sender
    )


def create_image(
    original_content_url: str,
    preview_image_url: str | None = None,
    *,
    quick_reply: dict[str, Any] | None = None,
    sender: dict[str, Any] | None = None,
) -> Message:
    """Image message; the preview defaults to the original image."""
    return _with_options(
        {
            "type": "image",
            "originalContentUrl": original_content_url,
            "previewImageUrl": preview_image_url or original_content_url,
        },
        quick_reply,
        sender,
    )


def create_video(
    original_content_url: str,
    preview_image_url: str,
    *,
    tracking_id: str | None = None,
    quick_reply: dict[str, Any] | None = None,
    sender: dict[str, Any] | None = None,
) -> Message:
    return _with_options(
        omit_none(
            {
                "type": "video",
                "originalContentUrl": original_content_url,
                "previewImageUrl": preview_image_url,
                "trackingId": tracking_id,
            }
        ),
        quick_reply,
        sender,
    )


def create_audio(
    original_content_url: str,
    duration: int,
    *,
    quick_reply: dict[str, Any] | None = None,
    sender: dict[str, Any] | None = None,
) -> Message:
    """Audio message; ``duration`` is in milliseconds."""
    return _with_options(
        {"type": "audio", "originalContentUrl": original_content_url, "duration": duration},
        quick_reply,
        sender,
    )


def create_location(
    title: str,
    address: str,
    latitude: float,
    longitude: float,
    *,
    quick_reply: dict[str, Any] | None = None,
    sender: dict[str, Any] | None = None,
) -> Message:
    return _with_options(
        {
            "type": "location",
            "title": title,
            "address": address,
            "latitude": latitude,
            "longitude": longitude,
        },
        quick_reply,
        sender,
    )


def create_sticker(
    package_id: str,
    sticker_id: str,
    *,
    quick_reply: dict[str, Any] | None = None,
    sender: dict[str, Any] | None = None,
) -> Message:
    return _with_options(
        {"type": "sticker", "packageId": package_id, "stickerId": sticker_id},
        quick_reply,
        sender,
    )


def create_imagemap(
    alt_text: str,
    base_url: str,
    base_size: dict[str, int],
    actions: list[dict[str, Any]],
    *,
    video: dict[str, Any] | None = None,
    quick_reply: dict[str, Any] | None = None,
    sender: dict[str, Any] | None = None,
) -> Message:
    return _with_options(
        omit_none(
            {
                "type": "imagemap",
                "baseUrl": base_url,
                "altText": alt_text,
                "baseSize": base_size,
                "video": video,
                "actions": actions,
            }
        ),
        quick_reply,
        sender,
    )


def create_template(
    alt_text: str,
    template: dict[str, Any],
    *,
    quick_reply: dict[str, Any] | None = None,
    sender: dict[str, Any] | None = None,
) -> Message:
    return _with_options(
        {"type": "template", "altText": alt_text, "template": template},
        quick_reply,
        sender,
    )


def create_button_template(
    alt_text: str,
    text: str,
    actions: list[dict[str, Any]],
    *,
    title: str | None = None,
    thumbnail_image_url: str | None = None,
    image_aspect_ratio: str | None = None,
    image_size: str | None = None,
    image_background_color: str | None = None,
    default_action: dict[str, Any] | None = None,
    quick_reply: dict[str, Any] | None = None,
    sender: dict[str, Any] | None = None,
) -> Message:
    template = omit_none(
        {
            "type": "buttons",
            "thumbnailImageUrl": thumbnail_image_url,
            "imageAspectRatio": image_aspect_ratio,
            "imageSize": image_size,
            "imageBackgroundColor": image_background_color,
            "title": title,
            "text": text,
            "defaultAction": default_action,
            "actions": actions,
        }
    )
    return create_template(alt_text, template, quick_reply=quick_reply, sender=sender)


def create_confirm_template(
    alt_text: str,
    text: str,
    actions: list[dict[str, Any]],
    *,
    quick_reply: dict[str, Any] | None = None,
    sender: dict[str, Any] | None = None,
) -> Message:
    template = {"type": "confirm", "text": text, "actions": actions}
    return create_template(alt_text, template, quick_reply=quick_reply, sender=sender)


def create_carousel_template(
    alt_text: str,
    columns: list[dict[str, Any]],
    *,
    image_aspect_ratio: str | None = None,
    image_size: str | None = None,
    quick_reply: dict[str, Any] | None = None,
    sender: dict[str, Any] | None = None,
) -> Message:
    template = omit_none(
        {
            "type": "carousel",
            "columns": columns,
            "imageAspectRatio": image_aspect_ratio,
            "imageSize": image_size,
        }
    )
    return create_template(alt_text, template, quick_reply=quick_reply, sender=sender)


def create_image_carousel_template(
    alt_text: str,
    columns: list[dict[str, Any]],
    *,
    quick_reply: dict[str, Any] | None = None,
    sender: dict[str, Any] | None = None,
) -> Message:
    template = {"type": "image_carousel", "columns": columns}
    return create_template(alt_text, template, quick_reply=quick_reply, sender=sender)


def create_flex(
    alt_text: str,
    contents: dict[str, Any],
    *,
    quick_reply: dict[str, Any] | None = None,
    sender: dict[str, Any] | None = None,
) -> Message:
    return _with_options(
        {"type": "flex", "altText": alt_text, "contents": contents},
        quick_reply,
        sender,
    )
