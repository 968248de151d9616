"""Batch item builders for the Messenger Platform.

Each builder returns a :class:`~..common.models.BatchRequest` for
``MessengerClient.send_batch`` or :class:`~.queue.MessengerBatchQueue`.

Options are keyword arguments in snake_case or camelCase. The batch options
``name``, ``depends_on`` and ``omit_response_on_success`` are lifted onto the
item; everything else lands in the request body.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import urlencode

from ..common.models import BatchRequest
from ..common.utils import omit_none, pick_keys, resolve_aliases, without_keys
from .messages import (
    MediaPayload,
    create_attachment,
    create_audio,
    create_file,
    create_image,
    create_message,
    create_template,
    create_text,
    create_video,
)

BATCH_OPTIONS = ("name", "depends_on", "omit_response_on_success")
USER_PROFILE_FIELDS = ("id", "name", "first_name", "last_name", "profile_pic")

Recipient = str | Mapping[str, Any]


def to_recipient(psid_or_recipient: Recipient) -> dict[str, Any]:
    """Wrap a bare PSID into ``{"id": psid}``."""
    if isinstance(psid_or_recipient, str):
        return {"id": psid_or_recipient}
    return dict(psid_or_recipient)


def messaging_type_of(options: Mapping[str, Any]) -> str:
    """``UPDATE`` unless a message tag is given, then ``MESSAGE_TAG``."""
    if options.get("messaging_type"):
        return options["messaging_type"]
    return "MESSAGE_TAG" if options.get("tag") else "UPDATE"


def _batch_options(options: Mapping[str, Any]) -> dict[str, Any]:
    return resolve_aliases(pick_keys(options, BATCH_OPTIONS))


def _with_token(relative_url: str, access_token: str | None) -> str:
    if not access_token:
        return relative_url
    separator = "&" if "?" in relative_url else "?"
    return f"{relative_url}{separator}{urlencode({'access_token': access_token})}"


def send_request(body: Mapping[str, Any], **options: Any) -> BatchRequest:
    return BatchRequest("POST", "me/messages", body=dict(body), **_batch_options(options))


def send_message(
    psid_or_recipient: Recipient, message: Mapping[str, Any], **options: Any
) -> BatchRequest:
    """Build a ``me/messages`` item.

    Args:
        psid_or_recipient: PSID string or a recipient object.
        message: Message object (see :mod:`.messages`).
        **options: ``messaging_type``, ``tag``, ``quick_replies``,
            ``persona_id``, ``access_token`` and the batch options.
    """
    resolved = resolve_aliases(options)
    body = {
        "messaging_type": messaging_type_of(resolved),
        "recipient": to_recipient(psid_or_recipient),
        "message": create_message(message, quick_replies=resolved.get("quick_replies")),
        **without_keys(resolved, (*BATCH_OPTIONS, "quick_replies", "messaging_type")),
    }
    return send_request(body, **_batch_options(resolved))


def send_text(psid_or_recipient: Recipient, text: str, **options: Any) -> BatchRequest:
    return send_message(psid_or_recipient, create_text(text), **options)


def send_attachment(
    psid_or_recipient: Recipient, attachment: Mapping[str, Any], **options: Any
) -> BatchRequest:
    return send_message(psid_or_recipient, create_attachment(attachment), **options)


def send_image(psid_or_recipient: Recipient, image: MediaPayload, **options: Any) -> BatchRequest:
    return send_message(psid_or_recipient, create_image(image), **options)


def send_audio(psid_or_recipient: Recipient, audio: MediaPayload, **options: Any) -> BatchRequest:
    return send_message(psid_or_recipient, create_audio(audio), **options)


def send_video(psid_or_recipient: Recipient, video: MediaPayload, **options: Any) -> BatchRequest:
    return send_message(psid_or_recipient, create_video(video), **options)


def send_file(psid_or_recipient: Recipient, file: MediaPayload, **options: Any) -> BatchRequest:
    return send_message(psid_or_recipient, create_file(file), **options)


def send_template(
    psid_or_recipient: Recipient, payload: Mapping[str, Any], **options: Any
) -> BatchRequest:
    return send_message(psid_or_recipient, create_template(payload), **options)


def send_sender_action(
    psid_or_recipient: Recipient, sender_action: str, **options: Any
) -> BatchRequest:
    resolved = resolve_aliases(options)
    body = {
        "recipient": to_recipient(psid_or_recipient),
        "sender_action": sender_action,
        **without_keys(resolved, BATCH_OPTIONS),
    }
    return send_request(body, **_batch_options(resolved))


def typing_on(psid_or_recipient: Recipient, **options: Any) -> BatchRequest:
    return send_sender_action(psid_or_recipient, "typing_on", **options)


def typing_off(psid_or_recipient: Recipient, **options: Any) -> BatchRequest:
    return send_sender_action(psid_or_recipient, "typing_off", **options)


def mark_seen(psid_or_recipient: Recipient, **options: Any) -> BatchRequest:
    return send_sender_action(psid_or_recipient, "mark_seen", **options)


def get_user_profile(
    user_id: str,
    *,
    fields: Sequence[str] = USER_PROFILE_FIELDS,
    access_token: str | None = None,
    **options: Any,
) -> BatchRequest:
    query = urlencode({"fields": ",".join(fields)})
    relative_url = _with_token(f"{user_id}?{query}", access_token)
    return BatchRequest("GET", relative_url, **_batch_options(options))


def pass_thread_control(
    recipient_id: str,
    target_app_id: int | str,
    metadata: str | None = None,
    **options: Any,
) -> BatchRequest:
    resolved = resolve_aliases(options)
    body = omit_none(
        {
            "recipient": {"id": recipient_id},
            "target_app_id": target_app_id,
            "metadata": metadata,
            **without_keys(resolved, BATCH_OPTIONS),
        }
    )
    return BatchRequest(
        "POST", "me/pass_thread_control", body=body, **_batch_options(resolved)
    )


def take_thread_control(
    recipient_id: str, metadata: str | None = None, **options: Any
) -> BatchRequest:
    resolved = resolve_aliases(options)
    body = omit_none(
        {
            "recipient": {"id": recipient_id},
            "metadata": metadata,
            **without_keys(resolved, BATCH_OPTIONS),
        }
    )
    return BatchRequest(
        "POST", "me/take_thread_control", body=body, **_batch_options(resolved)
    )


def associate_label(user_id: str, label_id: int | str, **options: Any) -> BatchRequest:
    resolved = resolve_aliases(options)
    body = {"user": user_id, **without_keys(resolved, BATCH_OPTIONS)}
    return BatchRequest("POST", f"{label_id}/label", body=body, **_batch_options(resolved))


def dissociate_label(user_id: str, label_id: int | str, **options: Any) -> BatchRequest:
    resolved = resolve_aliases(options)
    body = {"user": user_id, **without_keys(resolved, BATCH_OPTIONS)}
    return BatchRequest("DELETE", f"{label_id}/label", body=body, **_batch_options(resolved))
