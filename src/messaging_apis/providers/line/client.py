"""LINE Messaging API client.

This module provides the main LineClient class that combines all LINE API
functionality through mixins. LINE speaks camelCase natively, so bodies are
sent and returned without key conversion.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import httpx

from ...core.logger import get_logger
from ..common.base import BaseAPIClient
from ..common.pipeline import RequestHook, RequestPipeline
from ..common.utils import create_error_adapter
from .messaging import LineMessagingMixin
from .profile import LineProfileMixin
from .rich_menu import LineRichMenuMixin

if TYPE_CHECKING:
    from ...core.config import LineConfig

logger = get_logger("line")


def _describe_error(body: Any) -> str | None:
    if not isinstance(body, dict) or "message" not in body:
        return None
    message = str(body["message"])
    for detail in body.get("details") or []:
        message += f"\n- {detail.get('property')}: {detail.get('message')}"
    return message


line_error_adapter = create_error_adapter("LINE", _describe_error, status_only=True)


class LineClient(
    LineMessagingMixin,
    LineProfileMixin,
    LineRichMenuMixin,
    BaseAPIClient,
):
    """LINE Messaging API client.

    Provides access to:
    - Reply, push, multicast and broadcast messaging
    - Profiles, group/room membership and followers
    - Rich menus and LIFF apps
    - Bot info, webhook endpoint settings and message quota
    - Message content download

    Example:
        ```python
        async with LineClient(access_token="xxx") as line:
            await line.push_text("U123", "Hello!")
            profile = await line.get_user_profile("U123")
        ```
    """

    vendor = "LINE"

    # API base URLs
    BASE_URL = "https://api.line.me"
    DATA_BASE_URL = "https://api-data.line.me"

    # API endpoints
    BOT_INFO_URL = "/v2/bot/info"
    WEBHOOK_ENDPOINT_URL = "/v2/bot/channel/webhook/endpoint"
    WEBHOOK_TEST_URL = "/v2/bot/channel/webhook/test"
    MESSAGE_CONTENT_URL = "/v2/bot/message/{message_id}/content"
    QUOTA_URL = "/v2/bot/message/quota"
    QUOTA_CONSUMPTION_URL = "/v2/bot/message/quota/consumption"
    LIFF_APPS_URL = "/liff/v1/apps"
    LIFF_APP_URL = "/liff/v1/apps/{liff_id}"

    def __init__(
        self,
        *,
        access_token: str,
        channel_secret: str | None = None,
        origin: str | None = None,
        data_origin: str | None = None,
        timeout: float = 30.0,
        on_request: RequestHook | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize LINE client.

        Args:
            access_token: Channel access token.
            channel_secret: Channel secret, kept for webhook signature checks.
            origin: Override API origin (for testing or proxies).
            data_origin: Override the data origin used for binary content.
            timeout: HTTP request timeout in seconds.
            on_request: Hook called with every outgoing request.
            transport: Optional httpx transport.
        """
        super().__init__(on_request)
        self.access_token = access_token
        self.channel_secret = channel_secret

        headers = {"Authorization": f"Bearer {access_token}"}
        self._api = self._register_pipeline(
            RequestPipeline(
                self.vendor,
                origin or self.BASE_URL,
                headers=headers,
                error_adapter=line_error_adapter,
                on_request=on_request,
                timeout=timeout,
                transport=transport,
            )
        )
        self._data_api = self._register_pipeline(
            RequestPipeline(
                self.vendor,
                data_origin or self.DATA_BASE_URL,
                headers=headers,
                error_adapter=line_error_adapter,
                on_request=on_request,
                timeout=timeout,
                transport=transport,
            )
        )

    @classmethod
    def from_config(
        cls,
        config: LineConfig,
        *,
        on_request: RequestHook | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> LineClient:
        return cls(
            access_token=config.access_token,
            channel_secret=config.channel_secret,
            origin=config.origin,
            data_origin=config.data_origin,
            timeout=config.timeout,
            on_request=on_request,
            transport=transport,
        )

    # Bot info and webhook settings

    async def get_bot_info(self) -> dict[str, Any]:
        return await self._api.execute("GET", self.BOT_INFO_URL)

    async def get_webhook_endpoint_info(self) -> dict[str, Any]:
        return await self._api.execute("GET", self.WEBHOOK_ENDPOINT_URL)

    async def set_webhook_endpoint_url(self, endpoint: str) -> Any:
        logger.info("Setting LINE webhook endpoint to %s", endpoint)
        return await self._api.execute(
            "PUT", self.WEBHOOK_ENDPOINT_URL, body={"endpoint": endpoint}
        )

    async def test_webhook_endpoint(self, endpoint: str | None = None) -> dict[str, Any]:
        """Ask LINE to send a test event to the webhook endpoint.

        Args:
            endpoint: Endpoint to test; the configured one when omitted.
        """
        body = {"endpoint": endpoint} if endpoint else None
        return await self._api.execute("POST", self.WEBHOOK_TEST_URL, body=body)

    # Content

    async def get_message_content(self, message_id: str) -> bytes:
        """Download the binary content (image, video, audio, file) of a message."""
        return await self._data_api.execute(
            "GET", self.MESSAGE_CONTENT_URL.format(message_id=message_id), raw=True
        )

    # Quota

    async def get_target_limit_for_additional_messages(self) -> dict[str, Any]:
        return await self._api.execute("GET", self.QUOTA_URL)

    async def get_number_of_messages_sent_this_month(self) -> dict[str, Any]:
        return await self._api.execute("GET", self.QUOTA_CONSUMPTION_URL)

    # LIFF

    async def get_liff_app_list(self) -> list[dict[str, Any]]:
        return await self._api.execute(
            "GET", self.LIFF_APPS_URL, unwrap=lambda body: body["apps"]
        )

    async def create_liff_app(self, view: Mapping[str, Any]) -> str:
        """Register a LIFF app and return its ``liffId``."""
        return await self._api.execute(
            "POST", self.LIFF_APPS_URL, body=view, unwrap=lambda body: body["liffId"]
        )

    async def update_liff_app(self, liff_id: str, view: Mapping[str, Any]) -> Any:
        return await self._api.execute(
            "PUT", self.LIFF_APP_URL.format(liff_id=liff_id), body=view
        )

    async def delete_liff_app(self, liff_id: str) -> Any:
        return await self._api.execute("DELETE", self.LIFF_APP_URL.format(liff_id=liff_id))
