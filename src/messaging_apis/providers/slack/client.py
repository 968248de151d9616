"""Slack Web API client.

This module provides SlackOAuthClient. Every Web API method is a POST with a
form-urlencoded body carrying the OAuth ``token`` field; nested values such as
``attachments``, ``blocks`` and ``view`` are snake-cased and sent as JSON
strings. Responses are camelCased, and ``ok: false`` is raised as an error.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import httpx

from ...core.logger import get_logger
from ..common.base import BaseAPIClient
from ..common.case import CaseStyle
from ..common.models import RequestDescriptor
from ..common.pagination import Page, fetch_all
from ..common.pipeline import RequestHook, RequestPipeline
from ..common.utils import create_error_adapter, omit_none, resolve_aliases
from .namespaces import SlackChatAPI, SlackViewsAPI

if TYPE_CHECKING:
    from ...core.config import SlackConfig

logger = get_logger("slack")


def _describe_error(body: Any) -> str | None:
    if isinstance(body, dict) and body.get("ok") is False:
        return str(body.get("error", ""))
    return None


slack_error_adapter = create_error_adapter("Slack", _describe_error)


def _next_cursor(body: Mapping[str, Any]) -> str | None:
    return (body.get("response_metadata") or {}).get("next_cursor")


class SlackOAuthClient(BaseAPIClient):
    """Slack Web API client authenticated with a bot or user OAuth token.

    Method families are grouped the way Slack names them:

    - ``client.chat``: ``post_message``, ``update``, ``schedule_message``, ...
    - ``client.views``: ``open``, ``publish``, ``push``, ``update``

    Example:
        ```python
        async with SlackOAuthClient(access_token="xoxb-...") as slack:
            await slack.post_message("C123", "Hello!")
            users = await slack.get_all_user_list()
        ```
    """

    vendor = "Slack"

    # API base URL
    BASE_URL = "https://slack.com"

    def __init__(
        self,
        *,
        access_token: str,
        origin: str | None = None,
        timeout: float = 30.0,
        on_request: RequestHook | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(on_request)
        self.access_token = access_token
        self._api = self._register_pipeline(
            RequestPipeline(
                self.vendor,
                f"{origin or self.BASE_URL}/api/",
                request_case=CaseStyle.SNAKE,
                response_case=CaseStyle.CAMEL,
                request_exclude=("metadata",),
                error_adapter=slack_error_adapter,
                auth=self._authenticate,
                on_request=on_request,
                body_format="form",
                timeout=timeout,
                transport=transport,
            )
        )
        self.chat = SlackChatAPI(self)
        self.views = SlackViewsAPI(self)

    @classmethod
    def from_config(
        cls,
        config: SlackConfig,
        *,
        on_request: RequestHook | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> SlackOAuthClient:
        return cls(
            access_token=config.access_token,
            origin=config.origin,
            timeout=config.timeout,
            on_request=on_request,
            transport=transport,
        )

    async def _authenticate(self, request: RequestDescriptor) -> RequestDescriptor:
        """Put the OAuth token into the form body unless the call carries its own."""
        body = dict(request.body or {})
        body["token"] = body.get("token") or self.access_token
        return request.with_body(body)

    async def call_method(
        self,
        method: str,
        body: Mapping[str, Any] | None = None,
        *,
        unwrap: Any = None,
    ) -> Any:
        """Call any Web API method by name, e.g. ``"reactions.add"``.

        Raises:
            MessagingAPIError: If the HTTP call fails or Slack answers
                ``ok: false``.
        """
        return await self._api.execute("POST", method, body=dict(body or {}), unwrap=unwrap)

    # Shorthands

    async def post_message(
        self, channel: str, message: str | Mapping[str, Any], **options: Any
    ) -> dict[str, Any]:
        """Post a text or a message object (``text``, ``attachments``, ``blocks``)."""
        content = {"text": message} if isinstance(message, str) else dict(message)
        return await self.chat.post_message(channel=channel, **{**content, **options})

    async def post_ephemeral(
        self, channel: str, user: str, message: str | Mapping[str, Any], **options: Any
    ) -> dict[str, Any]:
        content = {"text": message} if isinstance(message, str) else dict(message)
        return await self.chat.post_ephemeral(channel=channel, user=user, **{**content, **options})

    # Users

    async def get_user_list(self, cursor: str | None = None, **options: Any) -> dict[str, Any]:
        """Get one page of workspace members.

        Returns:
            ``{"members": [...], "next": cursor}``; ``next`` is empty or None
            on the last page.
        """
        return await self.call_method(
            "users.list",
            omit_none({"cursor": cursor, **resolve_aliases(options)}),
            unwrap=lambda body: {"members": body["members"], "next": _next_cursor(body)},
        )

    async def get_all_user_list(self, **options: Any) -> list[dict[str, Any]]:
        async def fetch_page(cursor: str | None) -> Page[dict[str, Any]]:
            data = await self.get_user_list(cursor, **options)
            return Page(data["members"], data["next"])

        return await fetch_all(fetch_page)

    async def get_user_info(self, user_id: str, **options: Any) -> dict[str, Any]:
        return await self.call_method(
            "users.info",
            {"user": user_id, **resolve_aliases(options)},
            unwrap=lambda body: body["user"],
        )

    # Conversations

    async def get_conversation_info(self, channel: str, **options: Any) -> dict[str, Any]:
        return await self.call_method(
            "conversations.info",
            {"channel": channel, **resolve_aliases(options)},
            unwrap=lambda body: body["channel"],
        )

    async def get_conversation_members(
        self, channel: str, cursor: str | None = None, **options: Any
    ) -> dict[str, Any]:
        """Get one page of member IDs: ``{"members": [...], "next": cursor}``."""
        return await self.call_method(
            "conversations.members",
            omit_none({"channel": channel, "cursor": cursor, **resolve_aliases(options)}),
            unwrap=lambda body: {"members": body["members"], "next": _next_cursor(body)},
        )

    async def get_all_conversation_members(self, channel: str, **options: Any) -> list[str]:
        async def fetch_page(cursor: str | None) -> Page[str]:
            data = await self.get_conversation_members(channel, cursor, **options)
            return Page(data["members"], data["next"])

        return await fetch_all(fetch_page)

    async def get_conversation_list(
        self, cursor: str | None = None, **options: Any
    ) -> dict[str, Any]:
        """Get one page of channels: ``{"channels": [...], "next": cursor}``."""
        return await self.call_method(
            "conversations.list",
            omit_none({"cursor": cursor, **resolve_aliases(options)}),
            unwrap=lambda body: {"channels": body["channels"], "next": _next_cursor(body)},
        )

    async def get_all_conversation_list(self, **options: Any) -> list[dict[str, Any]]:
        async def fetch_page(cursor: str | None) -> Page[dict[str, Any]]:
            data = await self.get_conversation_list(cursor, **options)
            return Page(data["channels"], data["next"])

        return await fetch_all(fetch_page)
