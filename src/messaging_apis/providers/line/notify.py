"""LINE Notify client.

LINE Notify is a separate OAuth service: a user authorizes the service once
through :meth:`LineNotify.get_auth_link`, the redirect carries a ``code`` that
:meth:`LineNotify.get_token` exchanges for a personal access token, and every
notification is then sent with that token.

Two origins are involved:
- ``notify-bot.line.me`` for the OAuth flow
- ``notify-api.line.me`` for notify, status and revoke calls
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

import httpx

from ...core.logger import get_logger
from ..common.base import BaseAPIClient
from ..common.pipeline import RequestHook, RequestPipeline
from ..common.utils import create_error_adapter, omit_none

if TYPE_CHECKING:
    from ...core.config import LineNotifyConfig

logger = get_logger("line.notify")


def _describe_error(body: Any) -> str | None:
    if isinstance(body, dict) and "message" in body:
        return str(body["message"])
    return None


line_notify_error_adapter = create_error_adapter("LINE Notify", _describe_error, status_only=True)


class LineNotify(BaseAPIClient):
    """LINE Notify OAuth and notification client.

    Example:
        ```python
        async with LineNotify(
            client_id="...", client_secret="...", redirect_uri="https://example.com/cb"
        ) as notify:
            link = notify.get_auth_link("state")
            token = await notify.get_token(code)
            await notify.send_notify(token, "Build finished")
        ```
    """

    vendor = "LINE Notify"

    # API base URLs
    BASE_URL = "https://notify-bot.line.me"
    API_BASE_URL = "https://notify-api.line.me"

    # API endpoints
    AUTHORIZE_URL = "/oauth/authorize"
    TOKEN_URL = "/oauth/token"
    NOTIFY_URL = "/api/notify"
    STATUS_URL = "/api/status"
    REVOKE_URL = "/api/revoke"

    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        origin: str | None = None,
        api_origin: str | None = None,
        timeout: float = 30.0,
        on_request: RequestHook | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(on_request)
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.origin = origin or self.BASE_URL

        self._bot = self._register_pipeline(
            RequestPipeline(
                self.vendor,
                self.origin,
                error_adapter=line_notify_error_adapter,
                on_request=on_request,
                body_format="form",
                timeout=timeout,
                transport=transport,
            )
        )
        self._api = self._register_pipeline(
            RequestPipeline(
                self.vendor,
                api_origin or self.API_BASE_URL,
                error_adapter=line_notify_error_adapter,
                on_request=on_request,
                body_format="form",
                timeout=timeout,
                transport=transport,
            )
        )

    @classmethod
    def from_config(
        cls,
        config: LineNotifyConfig,
        *,
        on_request: RequestHook | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> LineNotify:
        return cls(
            client_id=config.client_id,
            client_secret=config.client_secret,
            redirect_uri=config.redirect_uri,
            origin=config.origin,
            api_origin=config.api_origin,
            timeout=config.timeout,
            on_request=on_request,
            transport=transport,
        )

    @staticmethod
    def _bearer(access_token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {access_token}"}

    def get_auth_link(self, state: str) -> str:
        """Build the URL the user opens to authorize this service."""
        query = urlencode(
            {
                "response_type": "code",
                "client_id": self.client_id,
                "redirect_uri": self.redirect_uri,
                "scope": "notify",
                "state": state,
            }
        )
        return f"{self.origin}{self.AUTHORIZE_URL}?{query}"

    async def get_token(self, code: str) -> str:
        """Exchange an authorization ``code`` for a personal access token."""
        return await self._bot.execute(
            "POST",
            self.TOKEN_URL,
            body={
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self.redirect_uri,
                "client_id": self.client_id,
                "client_secret": self.client_secret,
            },
            unwrap=lambda body: body["access_token"],
        )

    async def get_status(self, access_token: str) -> dict[str, Any]:
        """Check a token: ``{"status", "message", "targetType", "target"}``."""
        return await self._api.execute(
            "GET", self.STATUS_URL, headers=self._bearer(access_token)
        )

    async def send_notify(
        self,
        access_token: str,
        message: str,
        *,
        image_thumbnail: str | None = None,
        image_fullsize: str | None = None,
        sticker_package_id: int | None = None,
        sticker_id: int | None = None,
        notification_disabled: bool | None = None,
    ) -> dict[str, Any]:
        """Send a notification to the user or group the token belongs to."""
        body = omit_none(
            {
                "message": message,
                "imageThumbnail": image_thumbnail,
                "imageFullsize": image_fullsize,
                "stickerPackageId": sticker_package_id,
                "stickerId": sticker_id,
                "notificationDisabled": notification_disabled,
            }
        )
        return await self._api.execute(
            "POST", self.NOTIFY_URL, body=body, headers=self._bearer(access_token)
        )

    async def revoke_token(self, access_token: str) -> dict[str, Any]:
        logger.info("Revoking a LINE Notify token")
        return await self._api.execute(
            "POST", self.REVOKE_URL, headers=self._bearer(access_token)
        )
