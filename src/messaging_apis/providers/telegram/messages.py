"""Message operations for the Telegram Bot API.

This module provides:
- Sending text, media, locations, contacts and polls
- Forwarding, editing and deleting messages
- Chat actions (typing indicators)

File upload options (``thumb``) are dropped: every call here is sent as JSON,
so media is referenced by ``file_id`` or URL.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from ...core.logger import get_logger

logger = get_logger("telegram.messages")

ChatId = int | str


class TelegramMessageMixin:
    """Mixin providing message operations for the Telegram client.

    This mixin should be used with a class that has:
    - self._call(method, body, options, drop=()) -> Any
    """

    async def _call(
        self,
        method: str,
        body: Mapping[str, Any] | None = None,
        options: Mapping[str, Any] | None = None,
        drop: Sequence[str] = (),
    ) -> Any:
        """Call a Bot API method. To be implemented by main class."""
        raise NotImplementedError

    async def send_message(self, chat_id: ChatId, text: str, **options: Any) -> dict[str, Any]:
        """Send a text message.

        Args:
            chat_id: Chat ID or ``@channelusername``.
            text: Message text.
            **options: ``parse_mode``, ``disable_web_page_preview``,
                ``disable_notification``, ``reply_to_message_id``,
                ``reply_markup`` (snake_case or camelCase).

        Returns:
            The sent message, camelCased.

        Raises:
            ValueError: If an option is given in both snake and camel case.
            MessagingAPIError: If the API call fails.
        """
        return await self._call("sendMessage", {"chat_id": chat_id, "text": text}, options)

    async def forward_message(
        self, chat_id: ChatId, from_chat_id: ChatId, message_id: int, **options: Any
    ) -> dict[str, Any]:
        return await self._call(
            "forwardMessage",
            {"chat_id": chat_id, "from_chat_id": from_chat_id, "message_id": message_id},
            options,
        )

    async def send_photo(self, chat_id: ChatId, photo: str, **options: Any) -> dict[str, Any]:
        return await self._call("sendPhoto", {"chat_id": chat_id, "photo": photo}, options)

    async def send_audio(self, chat_id: ChatId, audio: str, **options: Any) -> dict[str, Any]:
        return await self._call(
            "sendAudio", {"chat_id": chat_id, "audio": audio}, options, drop=("thumb",)
        )

    async def send_document(
        self, chat_id: ChatId, document: str, **options: Any
    ) -> dict[str, Any]:
        return await self._call(
            "sendDocument", {"chat_id": chat_id, "document": document}, options, drop=("thumb",)
        )

    async def send_video(self, chat_id: ChatId, video: str, **options: Any) -> dict[str, Any]:
        return await self._call(
            "sendVideo", {"chat_id": chat_id, "video": video}, options, drop=("thumb",)
        )

    async def send_animation(
        self, chat_id: ChatId, animation: str, **options: Any
    ) -> dict[str, Any]:
        return await self._call(
            "sendAnimation",
            {"chat_id": chat_id, "animation": animation},
            options,
            drop=("thumb",),
        )

    async def send_voice(self, chat_id: ChatId, voice: str, **options: Any) -> dict[str, Any]:
        return await self._call("sendVoice", {"chat_id": chat_id, "voice": voice}, options)

    async def send_video_note(
        self, chat_id: ChatId, video_note: str, **options: Any
    ) -> dict[str, Any]:
        return await self._call(
            "sendVideoNote",
            {"chat_id": chat_id, "video_note": video_note},
            options,
            drop=("thumb",),
        )

    async def send_media_group(
        self, chat_id: ChatId, media: Sequence[Mapping[str, Any]], **options: Any
    ) -> list[dict[str, Any]]:
        """Send two to ten photos or videos as an album."""
        return await self._call(
            "sendMediaGroup", {"chat_id": chat_id, "media": list(media)}, options
        )

    async def send_sticker(self, chat_id: ChatId, sticker: str, **options: Any) -> dict[str, Any]:
        return await self._call("sendSticker", {"chat_id": chat_id, "sticker": sticker}, options)

    async def send_location(
        self, chat_id: ChatId, latitude: float, longitude: float, **options: Any
    ) -> dict[str, Any]:
        return await self._call(
            "sendLocation",
            {"chat_id": chat_id, "latitude": latitude, "longitude": longitude},
            options,
        )

    async def send_venue(
        self,
        chat_id: ChatId,
        latitude: float,
        longitude: float,
        title: str,
        address: str,
        **options: Any,
    ) -> dict[str, Any]:
        return await self._call(
            "sendVenue",
            {
                "chat_id": chat_id,
                "latitude": latitude,
                "longitude": longitude,
                "title": title,
                "address": address,
            },
            options,
        )

    async def send_contact(
        self, chat_id: ChatId, phone_number: str, first_name: str, **options: Any
    ) -> dict[str, Any]:
        return await self._call(
            "sendContact",
            {"chat_id": chat_id, "phone_number": phone_number, "first_name": first_name},
            options,
        )

    async def send_poll(
        self, chat_id: ChatId, question: str, answers: Sequence[str], **options: Any
    ) -> dict[str, Any]:
        """Send a poll; ``answers`` is sent as the poll's ``options`` list."""
        return await self._call(
            "sendPoll",
            {"chat_id": chat_id, "question": question, "options": list(answers)},
            options,
        )

    async def send_chat_action(self, chat_id: ChatId, action: str) -> bool:
        """Show ``typing``, ``upload_photo``, ... in the chat for a few seconds."""
        return await self._call("sendChatAction", {"chat_id": chat_id, "action": action})

    async def edit_message_text(self, text: str, **options: Any) -> dict[str, Any] | bool:
        """Edit a message's text.

        Identify the message with ``chat_id`` plus ``message_id``, or with
        ``inline_message_id``. Returns True for inline messages.
        """
        return await self._call("editMessageText", {"text": text}, options)

    async def edit_message_caption(self, caption: str, **options: Any) -> dict[str, Any] | bool:
        return await self._call("editMessageCaption", {"caption": caption}, options)

    async def edit_message_reply_markup(
        self, reply_markup: Mapping[str, Any], **options: Any
    ) -> dict[str, Any] | bool:
        return await self._call(
            "editMessageReplyMarkup", {"reply_markup": dict(reply_markup)}, options
        )

    async def delete_message(self, chat_id: ChatId, message_id: int) -> bool:
        return await self._call("deleteMessage", {"chat_id": chat_id, "message_id": message_id})
