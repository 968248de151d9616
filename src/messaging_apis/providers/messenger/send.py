"""Send API operations for Messenger.

This module provides:
- Text, attachment, media and template messages
- Sender actions (typing indicators, mark seen)
- Attachment upload for reuse
- Batch submission
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from ...core.logger import get_logger
from ..common.case import snakecase_keys_deep
from ..common.models import BatchRequest, FileUpload
from ..common.pipeline import RequestPipeline
from ..common.utils import resolve_aliases, without_keys
from .batch import Recipient, messaging_type_of, to_recipient
from .messages import (
    MediaPayload,
    create_attachment,
    create_audio,
    create_button_template,
    create_file,
    create_generic_template,
    create_image,
    create_message,
    create_template,
    create_text,
    create_video,
)

logger = get_logger("messenger.send")

MAX_BATCH_SIZE = 50

_MEDIA_BUILDERS = {
    "image": create_image,
    "audio": create_audio,
    "video": create_video,
    "file": create_file,
}


class MessengerSendMixin:
    """Mixin providing the Send API for the Messenger client.

    This mixin should be used with a class that has:
    - self._api: RequestPipeline bound to the Graph API
    """

    # API endpoints
    MESSAGES_URL = "me/messages"
    MESSAGE_ATTACHMENTS_URL = "me/message_attachments"

    _api: RequestPipeline

    async def send_raw_body(
        self, body: Mapping[str, Any], *, access_token: str | None = None
    ) -> dict[str, Any]:
        """Send a ``me/messages`` body as-is.

        Returns:
            ``{"recipientId": ..., "messageId": ...}``
        """
        return await self._api.execute(
            "POST", self.MESSAGES_URL, body=body, params={"access_token": access_token}
        )

    def _message_body(
        self, recipient: Recipient, message: Mapping[str, Any], options: dict[str, Any]
    ) -> dict[str, Any]:
        return {
            "messaging_type": messaging_type_of(options),
            "recipient": to_recipient(recipient),
            "message": create_message(message, quick_replies=options.get("quick_replies")),
            **without_keys(options, ("quick_replies", "messaging_type")),
        }

    async def send_message(
        self, recipient: Recipient, message: Mapping[str, Any], **options: Any
    ) -> dict[str, Any]:
        """Send a message object to a user.

        Args:
            recipient: PSID string or a recipient object
                (``{"id": ...}``, ``{"user_ref": ...}``, ...).
            message: Message object (see :mod:`.messages`).
            **options: ``messaging_type``, ``tag``, ``quick_replies``,
                ``persona_id``, ``notification_type`` and ``access_token``.
                ``messaging_type`` defaults to ``UPDATE``, or ``MESSAGE_TAG``
                when a ``tag`` is given.

        Raises:
            ValueError: If an option is given in both snake and camel case.
            MessagingAPIError: If the API call fails.
        """
        resolved = resolve_aliases(options)
        access_token = resolved.pop("access_token", None)
        return await self.send_raw_body(
            self._message_body(recipient, message, resolved), access_token=access_token
        )

    async def send_text(self, recipient: Recipient, text: str, **options: Any) -> dict[str, Any]:
        return await self.send_message(recipient, create_text(text), **options)

    async def send_attachment(
        self, recipient: Recipient, attachment: Mapping[str, Any], **options: Any
    ) -> dict[str, Any]:
        return await self.send_message(recipient, create_attachment(attachment), **options)

    async def _send_media(
        self,
        recipient: Recipient,
        media_type: str,
        media: MediaPayload | FileUpload,
        options: dict[str, Any],
    ) -> dict[str, Any]:
        if not isinstance(media, FileUpload):
            return await self.send_message(recipient, _MEDIA_BUILDERS[media_type](media), **options)

        resolved = resolve_aliases(options)
        access_token = resolved.pop("access_token", None)
        message = {"attachment": {"type": media_type, "payload": {}}}
        fields = snakecase_keys_deep(self._message_body(recipient, message, resolved))
        logger.debug("Uploading %s %s with message", media_type, media.name)
        return await self._api.execute(
            "POST",
            self.MESSAGES_URL,
            body=fields,
            params={"access_token": access_token},
            files={"filedata": media},
        )

    async def send_image(
        self, recipient: Recipient, image: MediaPayload | FileUpload, **options: Any
    ) -> dict[str, Any]:
        """Send an image by URL, attachment payload or uploaded file."""
        return await self._send_media(recipient, "image", image, options)

    async def send_audio(
        self, recipient: Recipient, audio: MediaPayload | FileUpload, **options: Any
    ) -> dict[str, Any]:
        return await self._send_media(recipient, "audio", audio, options)

    async def send_video(
        self, recipient: Recipient, video: MediaPayload | FileUpload, **options: Any
    ) -> dict[str, Any]:
        return await self._send_media(recipient, "video", video, options)

    async def send_file(
        self, recipient: Recipient, file: MediaPayload | FileUpload, **options: Any
    ) -> dict[str, Any]:
        return await self._send_media(recipient, "file", file, options)

    async def send_template(
        self, recipient: Recipient, payload: Mapping[str, Any], **options: Any
    ) -> dict[str, Any]:
        return await self.send_message(recipient, create_template(payload), **options)

    async def send_generic_template(
        self,
        recipient: Recipient,
        elements: Sequence[Mapping[str, Any]],
        *,
        image_aspect_ratio: str = "horizontal",
        **options: Any,
    ) -> dict[str, Any]:
        return await self.send_message(
            recipient,
            create_generic_template(elements, image_aspect_ratio=image_aspect_ratio),
            **options,
        )

    async def send_button_template(
        self,
        recipient: Recipient,
        text: str,
        buttons: Sequence[Mapping[str, Any]],
        **options: Any,
    ) -> dict[str, Any]:
        return await self.send_message(recipient, create_button_template(text, buttons), **options)

    # Sender actions

    async def send_sender_action(
        self, recipient: Recipient, sender_action: str, **options: Any
    ) -> dict[str, Any]:
        resolved = resolve_aliases(options)
        access_token = resolved.pop("access_token", None)
        body = {
            "recipient": to_recipient(recipient),
            "sender_action": sender_action,
            **resolved,
        }
        return await self.send_raw_body(body, access_token=access_token)

    async def typing_on(self, recipient: Recipient, **options: Any) -> dict[str, Any]:
        return await self.send_sender_action(recipient, "typing_on", **options)

    async def typing_off(self, recipient: Recipient, **options: Any) -> dict[str, Any]:
        return await self.send_sender_action(recipient, "typing_off", **options)

    async def mark_seen(self, recipient: Recipient, **options: Any) -> dict[str, Any]:
        return await self.send_sender_action(recipient, "mark_seen", **options)

    # Attachment upload

    async def upload_attachment(
        self,
        attachment_type: str,
        attachment: str | FileUpload,
        *,
        is_reusable: bool = True,
        access_token: str | None = None,
    ) -> dict[str, Any]:
        """Upload an attachment so it can be sent again by ``attachment_id``.

        Args:
            attachment_type: ``image``, ``audio``, ``video`` or ``file``.
            attachment: A public URL or a :class:`FileUpload`.
            is_reusable: Keep the attachment for later sends.
            access_token: Override the page access token.

        Returns:
            ``{"attachmentId": ...}``
        """
        if isinstance(attachment, FileUpload):
            payload: dict[str, Any] = {"is_reusable": is_reusable}
            files: dict[str, Any] | None = {"filedata": attachment}
        else:
            payload = {"url": attachment, "is_reusable": is_reusable}
            files = None
        body = {"message": {"attachment": {"type": attachment_type, "payload": payload}}}
        return await self._api.execute(
            "POST",
            self.MESSAGE_ATTACHMENTS_URL,
            body=body,
            params={"access_token": access_token},
            files=files,
        )

    # Batch

    async def send_batch(
        self, batch: Sequence[BatchRequest], *, include_headers: bool = True
    ) -> list[Any]:
        """Submit up to 50 requests in one Graph API batch.

        Args:
            batch: Items built with :mod:`.batch`.
            include_headers: Ask the vendor to include per-item headers.

        Returns:
            One slot per item, in order: the camelCased body, None when the
            vendor omitted the response, or a returned ``BatchRequestError``.

        Raises:
            ValueError: If more than 50 items are given.
            MessagingAPIError: If the batch request itself fails.
        """
        return await self._api.execute_batch(
            batch, include_headers=include_headers, max_size=MAX_BATCH_SIZE
        )
