"""Method groups exposed as ``client.chat`` and ``client.views``.

Each group maps Python methods onto Slack Web API methods of the same family
(``chat.postMessage``, ``views.open``, ...). Options are keyword arguments in
snake_case; camelCase spellings are accepted as well.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ..common.utils import omit_none, resolve_aliases

if TYPE_CHECKING:
    from .client import SlackOAuthClient


class _MethodGroup:
    def __init__(self, client: SlackOAuthClient):
        self._client = client

    async def _call(self, method: str, body: Mapping[str, Any]) -> dict[str, Any]:
        return await self._client.call_method(method, omit_none(resolve_aliases(body)))


class SlackScheduledMessagesAPI(_MethodGroup):
    async def list(self, **options: Any) -> dict[str, Any]:
        """List scheduled messages (``chat.scheduledMessages.list``)."""
        return await self._call("chat.scheduledMessages.list", options)


class SlackChatAPI(_MethodGroup):
    """``chat.*`` methods."""

    def __init__(self, client: SlackOAuthClient):
        super().__init__(client)
        self.scheduled_messages = SlackScheduledMessagesAPI(client)

    async def post_message(
        self,
        *,
        channel: str,
        text: str | None = None,
        attachments: Any = None,
        blocks: Any = None,
        **options: Any,
    ) -> dict[str, Any]:
        """Post a message to a channel.

        ``attachments`` and ``blocks`` may be lists or already-encoded JSON
        strings.
        """
        return await self._call(
            "chat.postMessage",
            {
                "channel": channel,
                "text": text,
                "attachments": attachments,
                "blocks": blocks,
                **options,
            },
        )

    async def post_ephemeral(
        self,
        *,
        channel: str,
        user: str,
        text: str | None = None,
        attachments: Any = None,
        blocks: Any = None,
        **options: Any,
    ) -> dict[str, Any]:
        return await self._call(
            "chat.postEphemeral",
            {
                "channel": channel,
                "user": user,
                "text": text,
                "attachments": attachments,
                "blocks": blocks,
                **options,
            },
        )

    async def update(self, *, channel: str, ts: str, **options: Any) -> dict[str, Any]:
        return await self._call("chat.update", {"channel": channel, "ts": ts, **options})

    async def delete(self, *, channel: str, ts: str, **options: Any) -> dict[str, Any]:
        return await self._call("chat.delete", {"channel": channel, "ts": ts, **options})

    async def me_message(self, *, channel: str, text: str) -> dict[str, Any]:
        return await self._call("chat.meMessage", {"channel": channel, "text": text})

    async def get_permalink(self, *, channel: str, message_ts: str) -> dict[str, Any]:
        return await self._call(
            "chat.getPermalink", {"channel": channel, "message_ts": message_ts}
        )

    async def schedule_message(
        self, *, channel: str, post_at: int | str, **options: Any
    ) -> dict[str, Any]:
        return await self._call(
            "chat.scheduleMessage", {"channel": channel, "post_at": post_at, **options}
        )

    async def delete_scheduled_message(
        self, *, channel: str, scheduled_message_id: str, **options: Any
    ) -> dict[str, Any]:
        return await self._call(
            "chat.deleteScheduledMessage",
            {"channel": channel, "scheduled_message_id": scheduled_message_id, **options},
        )


class SlackViewsAPI(_MethodGroup):
    """``views.*`` methods for modals and App Home."""

    async def open(self, *, trigger_id: str, view: Any) -> dict[str, Any]:
        return await self._call("views.open", {"trigger_id": trigger_id, "view": view})

    async def publish(self, *, user_id: str, view: Any, **options: Any) -> dict[str, Any]:
        return await self._call("views.publish", {"user_id": user_id, "view": view, **options})

    async def push(self, *, trigger_id: str, view: Any) -> dict[str, Any]:
        return await self._call("views.push", {"trigger_id": trigger_id, "view": view})

    async def update(
        self,
        *,
        view: Any,
        view_id: str | None = None,
        external_id: str | None = None,
        **options: Any,
    ) -> dict[str, Any]:
        """Update a view by ``view_id`` or ``external_id``."""
        if not view_id and not external_id:
            raise ValueError("Either view_id or external_id is required")
        return await self._call(
            "views.update",
            {"view": view, "view_id": view_id, "external_id": external_id, **options},
        )
