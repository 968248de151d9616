"""Telegram Bot API client.

This module provides the main TelegramClient class that combines all Bot API
functionality through mixins. Every method is a JSON POST to
``/bot<token>/<method>``; options may be passed in snake_case or camelCase,
and results are returned camelCased.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

import httpx

from ...core.logger import get_logger
from ..common.base import BaseAPIClient
from ..common.case import CaseStyle
from ..common.pipeline import RequestHook, RequestPipeline
from ..common.utils import create_error_adapter, omit_none, resolve_aliases, without_keys
from .chat import TelegramChatMixin
from .messages import TelegramMessageMixin

if TYPE_CHECKING:
    from ...core.config import TelegramConfig

logger = get_logger("telegram")


def _describe_error(body: Any) -> str | None:
    if isinstance(body, dict) and body.get("ok") is False:
        return f"{body.get('error_code')} {body.get('description')}"
    return None


telegram_error_adapter = create_error_adapter("Telegram", _describe_error)


def _result(body: Any) -> Any:
    return body["result"]


class TelegramClient(
    TelegramMessageMixin,
    TelegramChatMixin,
    BaseAPIClient,
):
    """Telegram Bot API client.

    Provides access to:
    - Updates and webhook management
    - Sending, forwarding and editing messages
    - Files and profile photos
    - Chat administration
    - Callback and inline query answers

    Example:
        ```python
        async with TelegramClient(access_token="123456:ABC") as bot:
            me = await bot.get_me()
            await bot.send_message(427770117, "Hello!", disable_notification=True)
        ```
    """

    vendor = "Telegram"

    # API base URL
    BASE_URL = "https://api.telegram.org"

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
        self.origin = origin or self.BASE_URL
        self._api = self._register_pipeline(
            RequestPipeline(
                self.vendor,
                f"{self.origin}/bot{access_token}/",
                request_case=CaseStyle.SNAKE,
                response_case=CaseStyle.CAMEL,
                error_adapter=telegram_error_adapter,
                on_request=on_request,
                timeout=timeout,
                transport=transport,
            )
        )

    @classmethod
    def from_config(
        cls,
        config: TelegramConfig,
        *,
        on_request: RequestHook | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> TelegramClient:
        return cls(
            access_token=config.access_token,
            origin=config.origin,
            timeout=config.timeout,
            on_request=on_request,
            transport=transport,
        )

    async def _call(
        self,
        method: str,
        body: Mapping[str, Any] | None = None,
        options: Mapping[str, Any] | None = None,
        drop: Sequence[str] = (),
    ) -> Any:
        """POST ``body`` merged with ``options`` and return the unwrapped result.

        Raises:
            ValueError: If an option is given in both snake and camel case.
            MessagingAPIError: If the HTTP call fails or Telegram answers
                ``ok: false``.
        """
        resolved = without_keys(resolve_aliases(options), drop)
        payload = omit_none({**(body or {}), **resolved})
        return await self._api.execute("POST", method, body=payload, unwrap=_result)

    # Updates and webhook

    async def get_updates(self, **options: Any) -> list[dict[str, Any]]:
        """Long-poll for updates (``offset``, ``limit``, ``timeout``, ``allowed_updates``)."""
        return await self._call("getUpdates", options=options)

    async def get_webhook_info(self) -> dict[str, Any]:
        return await self._call("getWebhookInfo")

    async def set_webhook(self, url: str, **options: Any) -> bool:
        """Set the webhook URL; a ``certificate`` upload option is ignored."""
        logger.info("Setting Telegram webhook to %s", url)
        return await self._call("setWebhook", {"url": url}, options, drop=("certificate",))

    async def delete_webhook(self) -> bool:
        return await self._call("deleteWebhook")

    async def get_me(self) -> dict[str, Any]:
        return await self._call("getMe")

    # Files

    async def get_user_profile_photos(self, user_id: int, **options: Any) -> dict[str, Any]:
        return await self._call("getUserProfilePhotos", {"user_id": user_id}, options)

    async def get_file(self, file_id: str) -> dict[str, Any]:
        return await self._call("getFile", {"file_id": file_id})

    async def get_file_link(self, file_id: str) -> str:
        """Return the download URL of a file (valid for at least one hour)."""
        file = await self.get_file(file_id)
        return f"{self.origin}/file/bot{self.access_token}/{file['filePath']}"

    # Stickers

    async def get_sticker_set(self, name: str) -> dict[str, Any]:
        return await self._call("getStickerSet", {"name": name})

    # Queries

    async def answer_callback_query(self, callback_query_id: str, **options: Any) -> bool:
        return await self._call(
            "answerCallbackQuery", {"callback_query_id": callback_query_id}, options
        )

    async def answer_inline_query(
        self,
        inline_query_id: str,
        results: Sequence[Mapping[str, Any]],
        **options: Any,
    ) -> bool:
        return await self._call(
            "answerInlineQuery",
            {"inline_query_id": inline_query_id, "results": list(results)},
            options,
        )
