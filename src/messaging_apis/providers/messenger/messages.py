"""Message object builders for the Messenger Platform.

Builders return snake_case dicts. Request bodies are snake-cased deep by the
client, so camelCase keys inside caller-supplied payloads are accepted too.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from ..common.utils import omit_none

Message = dict[str, Any]
MediaPayload = str | Mapping[str, Any]


def _media_payload(media: MediaPayload) -> dict[str, Any]:
    # A bare string is a URL; mappings carry attachment_id or url/is_reusable.
    if isinstance(media, str):
        return {"url": media}
    return dict(media)


def create_message(
    message: Mapping[str, Any],
    *,
    quick_replies: Sequence[Mapping[str, Any]] | None = None,
) -> Message:
    """Return ``message`` with quick replies attached when given."""
    if quick_replies:
        return {**message, "quick_replies": list(quick_replies)}
    return dict(message)


def create_text(
    text: str, *, quick_replies: Sequence[Mapping[str, Any]] | None = None
) -> Message:
    return create_message({"text": text}, quick_replies=quick_replies)


def create_attachment(
    attachment: Mapping[str, Any],
    *,
    quick_replies: Sequence[Mapping[str, Any]] | None = None,
) -> Message:
    return create_message({"attachment": dict(attachment)}, quick_replies=quick_replies)


def _create_media(
    media_type: str,
    media: MediaPayload,
    quick_replies: Sequence[Mapping[str, Any]] | None,
) -> Message:
    return create_attachment(
        {"type": media_type, "payload": _media_payload(media)}, quick_replies=quick_replies
    )


def create_image(
    image: MediaPayload, *, quick_replies: Sequence[Mapping[str, Any]] | None = None
) -> Message:
    return _create_media("image", image, quick_replies)


def create_audio(
    audio: MediaPayload, *, quick_replies: Sequence[Mapping[str, Any]] | None = None
) -> Message:
    return _create_media("audio", audio, quick_replies)


def create_video(
    video: MediaPayload, *, quick_replies: Sequence[Mapping[str, Any]] | None = None
) -> Message:
    return _create_media("video", video, quick_replies)


def create_file(
    file: MediaPayload, *, quick_replies: Sequence[Mapping[str, Any]] | None = None
) -> Message:
    return _create_media("file", file, quick_replies)


def create_template(
    payload: Mapping[str, Any],
    *,
    quick_replies: Sequence[Mapping[str, Any]] | None = None,
) -> Message:
    return create_attachment(
        {"type": "template", "payload": dict(payload)}, quick_replies=quick_replies
    )


def create_generic_template(
    elements: Sequence[Mapping[str, Any]],
    *,
    image_aspect_ratio: str = "horizontal",
    sharable: bool | None = None,
    quick_replies: Sequence[Mapping[str, Any]] | None = None,
) -> Message:
    payload = omit_none(
        {
            "template_type": "generic",
            "elements": list(elements),
            "image_aspect_ratio": image_aspect_ratio,
            "sharable": sharable,
        }
    )
    return create_template(payload, quick_replies=quick_replies)


def create_button_template(
    text: str,
    buttons: Sequence[Mapping[str, Any]],
    *,
    sharable: bool | None = None,
    quick_replies: Sequence[Mapping[str, Any]] | None = None,
) -> Message:
    payload = omit_none(
        {
            "template_type": "button",
            "text": text,
            "buttons": list(buttons),
            "sharable": sharable,
        }
    )
    return create_template(payload, quick_replies=quick_replies)
