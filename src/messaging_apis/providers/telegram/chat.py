"""Chat administration operations for the Telegram Bot API.

This module provides:
- Member moderation (kick, unban, restrict, promote)
- Chat settings (title, description, pinned message, invite link)
- Chat and member queries
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from ...core.logger import get_logger
from .messages import ChatId

logger = get_logger("telegram.chat")


class TelegramChatMixin:
    """Mixin providing chat administration for the Telegram client.

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

    async def kick_chat_member(self, chat_id: ChatId, user_id: int, **options: Any) -> bool:
        """Ban a user; ``until_date`` (or ``untilDate``) limits the ban."""
        logger.info("Kicking user %s from chat %s", user_id, chat_id)
        return await self._call(
            "kickChatMember", {"chat_id": chat_id, "user_id": user_id}, options
        )

    async def unban_chat_member(self, chat_id: ChatId, user_id: int) -> bool:
        return await self._call("unbanChatMember", {"chat_id": chat_id, "user_id": user_id})

    async def restrict_chat_member(
        self,
        chat_id: ChatId,
        user_id: int,
        permissions: Mapping[str, Any],
        **options: Any,
    ) -> bool:
        return await self._call(
            "restrictChatMember",
            {"chat_id": chat_id, "user_id": user_id, "permissions": dict(permissions)},
            options,
        )

    async def promote_chat_member(self, chat_id: ChatId, user_id: int, **options: Any) -> bool:
        """Grant admin rights such as ``can_pin_messages`` (snake or camel case)."""
        return await self._call(
            "promoteChatMember", {"chat_id": chat_id, "user_id": user_id}, options
        )

    async def export_chat_invite_link(self, chat_id: ChatId) -> str:
        return await self._call("exportChatInviteLink", {"chat_id": chat_id})

    async def set_chat_title(self, chat_id: ChatId, title: str) -> bool:
        return await self._call("setChatTitle", {"chat_id": chat_id, "title": title})

    async def set_chat_description(self, chat_id: ChatId, description: str) -> bool:
        return await self._call(
            "setChatDescription", {"chat_id": chat_id, "description": description}
        )

    async def pin_chat_message(self, chat_id: ChatId, message_id: int, **options: Any) -> bool:
        return await self._call(
            "pinChatMessage", {"chat_id": chat_id, "message_id": message_id}, options
        )

    async def unpin_chat_message(self, chat_id: ChatId) -> bool:
        return await self._call("unpinChatMessage", {"chat_id": chat_id})

    async def leave_chat(self, chat_id: ChatId) -> bool:
        return await self._call("leaveChat", {"chat_id": chat_id})

    async def get_chat(self, chat_id: ChatId) -> dict[str, Any]:
        return await self._call("getChat", {"chat_id": chat_id})

    async def get_chat_administrators(self, chat_id: ChatId) -> list[dict[str, Any]]:
        return await self._call("getChatAdministrators", {"chat_id": chat_id})

    async def get_chat_members_count(self, chat_id: ChatId) -> int:
        return await self._call("getChatMembersCount", {"chat_id": chat_id})

    async def get_chat_member(self, chat_id: ChatId, user_id: int) -> dict[str, Any]:
        return await self._call("getChatMember", {"chat_id": chat_id, "user_id": user_id})
