"""Message sending operations for LINE.

This module provides the four delivery modes of the Messaging API:
- Reply to an event with its reply token
- Push to one user, group or room
- Multicast to several users
- Broadcast to every follower

Reply, push and multicast each come with one shorthand per message type
(``reply_text``, ``push_sticker``, ``multicast_imagemap`` ...) built on the
helpers in :mod:`.messages`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from ...core.logger import get_logger
from ..common.pipeline import RequestPipeline
from ..common.utils import omit_none
from .messages import (
    create_audio,
    create_button_template,
    create_carousel_template,
    create_confirm_template,
    create_flex,
    create_image,
    create_image_carousel_template,
    create_imagemap,
    create_location,
    create_sticker,
    create_template,
    create_text,
    create_video,
)

logger = get_logger("line.messaging")

Messages = Mapping[str, Any] | Sequence[Mapping[str, Any]]


def _as_list(messages: Messages) -> list[Mapping[str, Any]]:
    if isinstance(messages, Mapping):
        return [messages]
    return list(messages)


class LineMessagingMixin:
    """Mixin providing message delivery for the LINE client.

    This mixin should be used with a class that has:
    - self._api: RequestPipeline bound to the API origin
    """

    # API endpoints
    REPLY_URL = "/v2/bot/message/reply"
    PUSH_URL = "/v2/bot/message/push"
    MULTICAST_URL = "/v2/bot/message/multicast"
    BROADCAST_URL = "/v2/bot/message/broadcast"

    _api: RequestPipeline

    # Reply

    async def reply_raw_body(self, body: Mapping[str, Any]) -> Any:
        """Send a reply request body as-is."""
        return await self._api.execute("POST", self.REPLY_URL, body=body)

    async def reply(
        self,
        reply_token: str,
        messages: Messages,
        *,
        notification_disabled: bool | None = None,
    ) -> Any:
        """Reply to an event.

        Args:
            reply_token: Token received with the webhook event.
            messages: One message object or a list of them (up to five).
            notification_disabled: Deliver silently when True.

        Returns:
            The vendor response body (an empty object on success).

        Raises:
            MessagingAPIError: If the API call fails.
        """
        return await self.reply_raw_body(
            omit_none(
                {
                    "replyToken": reply_token,
                    "messages": _as_list(messages),
                    "notificationDisabled": notification_disabled,
                }
            )
        )

    async def reply_text(self, reply_token: str, text: str, **options: Any) -> Any:
        return await self.reply(reply_token, create_text(text, **options))

    async def reply_image(
        self,
        reply_token: str,
        original_content_url: str,
        preview_image_url: str | None = None,
        **options: Any,
    ) -> Any:
        return await self.reply(
            reply_token, create_image(original_content_url, preview_image_url, **options)
        )

    async def reply_video(
        self,
        reply_token: str,
        original_content_url: str,
        preview_image_url: str,
        **options: Any,
    ) -> Any:
        return await self.reply(
            reply_token, create_video(original_content_url, preview_image_url, **options)
        )

    async def reply_audio(
        self,
        reply_token: str,
        original_content_url: str,
        duration: int,
        **options: Any,
    ) -> Any:
        return await self.reply(
            reply_token, create_audio(original_content_url, duration, **options)
        )

    async def reply_location(
        self,
        reply_token: str,
        title: str,
        address: str,
        latitude: float,
        longitude: float,
        **options: Any,
    ) -> Any:
        return await self.reply(
            reply_token, create_location(title, address, latitude, longitude, **options)
        )

    async def reply_sticker(
        self, reply_token: str, package_id: str, sticker_id: str, **options: Any
    ) -> Any:
        return await self.reply(reply_token, create_sticker(package_id, sticker_id, **options))

    async def reply_imagemap(
        self,
        reply_token: str,
        alt_text: str,
        base_url: str,
        base_size: dict[str, int],
        actions: list[dict[str, Any]],
        **options: Any,
    ) -> Any:
        return await self.reply(
            reply_token, create_imagemap(alt_text, base_url, base_size, actions, **options)
        )

    async def reply_flex(
        self, reply_token: str, alt_text: str, contents: Mapping[str, Any], **options: Any
    ) -> Any:
        return await self.reply(reply_token, create_flex(alt_text, dict(contents), **options))

    async def reply_template(
        self, reply_token: str, alt_text: str, template: Mapping[str, Any], **options: Any
    ) -> Any:
        return await self.reply(
            reply_token, create_template(alt_text, dict(template), **options)
        )

    async def reply_button_template(
        self,
        reply_token: str,
        alt_text: str,
        text: str,
        actions: list[dict[str, Any]],
        **options: Any,
    ) -> Any:
        return await self.reply(
            reply_token, create_button_template(alt_text, text, actions, **options)
        )

    async def reply_confirm_template(
        self,
        reply_token: str,
        alt_text: str,
        text: str,
        actions: list[dict[str, Any]],
        **options: Any,
    ) -> Any:
        return await self.reply(
            reply_token, create_confirm_template(alt_text, text, actions, **options)
        )

    async def reply_carousel_template(
        self, reply_token: str, alt_text: str, columns: list[dict[str, Any]], **options: Any
    ) -> Any:
        return await self.reply(
            reply_token, create_carousel_template(alt_text, columns, **options)
        )

    async def reply_image_carousel_template(
        self, reply_token: str, alt_text: str, columns: list[dict[str, Any]], **options: Any
    ) -> Any:
        return await self.reply(
            reply_token, create_image_carousel_template(alt_text, columns, **options)
        )

    # Push

    async def push_raw_body(self, body: Mapping[str, Any]) -> Any:
        """Send a push request body as-is."""
        return await self._api.execute("POST", self.PUSH_URL, body=body)

    async def push(
        self,
        to: str,
        messages: Messages,
        *,
        notification_disabled: bool | None = None,
    ) -> Any:
        """Push messages to a user, group or room ID."""
        return await self.push_raw_body(
            omit_none(
                {
                    "to": to,
                    "messages": _as_list(messages),
                    "notificationDisabled": notification_disabled,
                }
            )
        )

    async def push_text(self, to: str, text: str, **options: Any) -> Any:
        return await self.push(to, create_text(text, **options))

    async def push_image(
        self,
        to: str,
        original_content_url: str,
        preview_image_url: str | None = None,
        **options: Any,
    ) -> Any:
        return await self.push(to, create_image(original_content_url, preview_image_url, **options))

    async def push_video(
        self, to: str, original_content_url: str, preview_image_url: str, **options: Any
    ) -> Any:
        return await self.push(to, create_video(original_content_url, preview_image_url, **options))

    async def push_audio(
        self, to: str, original_content_url: str, duration: int, **options: Any
    ) -> Any:
        return await self.push(to, create_audio(original_content_url, duration, **options))

    async def push_location(
        self,
        to: str,
        title: str,
        address: str,
        latitude: float,
        longitude: float,
        **options: Any,
    ) -> Any:
        return await self.push(to, create_location(title, address, latitude, longitude, **options))

    async def push_sticker(self, to: str, package_id: str, sticker_id: str, **options: Any) -> Any:
        return await self.push(to, create_sticker(package_id, sticker_id, **options))

    async def push_imagemap(
        self,
        to: str,
        alt_text: str,
        base_url: str,
        base_size: dict[str, int],
        actions: list[dict[str, Any]],
        **options: Any,
    ) -> Any:
        return await self.push(
            to, create_imagemap(alt_text, base_url, base_size, actions, **options)
        )

    async def push_flex(
        self, to: str, alt_text: str, contents: Mapping[str, Any], **options: Any
    ) -> Any:
        return await self.push(to, create_flex(alt_text, dict(contents), **options))

    async def push_template(
        self, to: str, alt_text: str, template: Mapping[str, Any], **options: Any
    ) -> Any:
        return await self.push(to, create_template(alt_text, dict(template), **options))

    async def push_button_template(
        self, to: str, alt_text: str, text: str, actions: list[dict[str, Any]], **options: Any
    ) -> Any:
        return await self.push(to, create_button_template(alt_text, text, actions, **options))

    async def push_confirm_template(
        self, to: str, alt_text: str, text: str, actions: list[dict[str, Any]], **options: Any
    ) -> Any:
        return await self.push(to, create_confirm_template(alt_text, text, actions, **options))

    async def push_carousel_template(
        self, to: str, alt_text: str, columns: list[dict[str, Any]], **options: Any
    ) -> Any:
        return await self.push(to, create_carousel_template(alt_text, columns, **options))

    async def push_image_carousel_template(
        self, to: str, alt_text: str, columns: list[dict[str, Any]], **options: Any
    ) -> Any:
        return await self.push(to, create_image_carousel_template(alt_text, columns, **options))

    # Multicast

    async def multicast_raw_body(self, body: Mapping[str, Any]) -> Any:
        """Send a multicast request body as-is."""
        return await self._api.execute("POST", self.MULTICAST_URL, body=body)

    async def multicast(
        self,
        to: Sequence[str],
        messages: Messages,
        *,
        notification_disabled: bool | None = None,
    ) -> Any:
        """Send the same messages to several user IDs at once."""
        return await self.multicast_raw_body(
            omit_none(
                {
                    "to": list(to),
                    "messages": _as_list(messages),
                    "notificationDisabled": notification_disabled,
                }
            )
        )

    async def multicast_text(self, to: Sequence[str], text: str, **options: Any) -> Any:
        return await self.multicast(to, create_text(text, **options))

    async def multicast_image(
        self,
        to: Sequence[str],
        original_content_url: str,
        preview_image_url: str | None = None,
        **options: Any,
    ) -> Any:
        return await self.multicast(
            to, create_image(original_content_url, preview_image_url, **options)
        )

    async def multicast_video(
        self,
        to: Sequence[str],
        original_content_url: str,
        preview_image_url: str,
        **options: Any,
    ) -> Any:
        return await self.multicast(
            to, create_video(original_content_url, preview_image_url, **options)
        )

    async def multicast_audio(
        self, to: Sequence[str], original_content_url: str, duration: int, **options: Any
    ) -> Any:
        return await self.multicast(to, create_audio(original_content_url, duration, **options))

    async def multicast_location(
        self,
        to: Sequence[str],
        title: str,
        address: str,
        latitude: float,
        longitude: float,
        **options: Any,
    ) -> Any:
        return await self.multicast(
            to, create_location(title, address, latitude, longitude, **options)
        )

    async def multicast_sticker(
        self, to: Sequence[str], package_id: str, sticker_id: str, **options: Any
    ) -> Any:
        return await self.multicast(to, create_sticker(package_id, sticker_id, **options))

    async def multicast_imagemap(
        self,
        to: Sequence[str],
        alt_text: str,
        base_url: str,
        base_size: dict[str, int],
        actions: list[dict[str, Any]],
        **options: Any,
    ) -> Any:
        return await self.multicast(
            to, create_imagemap(alt_text, base_url, base_size, actions, **options)
        )

    async def multicast_flex(
        self, to: Sequence[str], alt_text: str, contents: Mapping[str, Any], **options: Any
    ) -> Any:
        return await self.multicast(to, create_flex(alt_text, dict(contents), **options))

    async def multicast_template(
        self, to: Sequence[str], alt_text: str, template: Mapping[str, Any], **options: Any
    ) -> Any:
        return await self.multicast(to, create_template(alt_text, dict(template), **options))

    async def multicast_button_template(
        self,
        to: Sequence[str],
        alt_text: str,
        text: str,
        actions: list[dict[str, Any]],
        **options: Any,
    ) -> Any:
        return await self.multicast(
            to, create_button_template(alt_text, text, actions, **options)
        )

    async def multicast_confirm_template(
        self,
        to: Sequence[str],
        alt_text: str,
        text: str,
        actions: list[dict[str, Any]],
        **options: Any,
    ) -> Any:
        return await self.multicast(
            to, create_confirm_template(alt_text, text, actions, **options)
        )

    async def multicast_carousel_template(
        self, to: Sequence[str], alt_text: str, columns: list[dict[str, Any]], **options: Any
    ) -> Any:
        return await self.multicast(to, create_carousel_template(alt_text, columns, **options))

    async def multicast_image_carousel_template(
        self, to: Sequence[str], alt_text: str, columns: list[dict[str, Any]], **options: Any
    ) -> Any:
        return await self.multicast(
            to, create_image_carousel_template(alt_text, columns, **options)
        )

    # Broadcast

    async def broadcast(
        self,
        messages: Messages,
        *,
        notification_disabled: bool | None = None,
    ) -> Any:
        """Send messages to every user who added the bot as a friend."""
        logger.debug("Broadcasting %d message(s)", len(_as_list(messages)))
        return await self._api.execute(
            "POST",
            self.BROADCAST_URL,
            body=omit_none(
                {
                    "messages": _as_list(messages),
                    "notificationDisabled": notification_disabled,
                }
            ),
        )
