"""WeChat Official Account client.

This module provides WechatClient for the customer service message API.
Every call carries an ``access_token`` query parameter; the token is fetched
lazily from the app credentials and refreshed once it is about to expire.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Literal

import httpx

from ...core.logger import get_logger
from ..common.base import BaseAPIClient
from ..common.case import CaseStyle, camelcase_keys_deep
from ..common.models import FileUpload, RequestDescriptor, TokenInfo
from ..common.pipeline import RequestHook, RequestPipeline
from ..common.utils import create_error_adapter

if TYPE_CHECKING:
    from ...core.config import WechatConfig

logger = get_logger("wechat")

MediaType = Literal["image", "voice", "video", "thumb"]


def _describe_error(body: Any) -> str | None:
    if isinstance(body, dict) and body.get("errcode", 0) != 0:
        return f"{body.get('errcode')} {body.get('errmsg')}"
    return None


wechat_error_adapter = create_error_adapter("WeChat", _describe_error)


class WechatClient(BaseAPIClient):
    """WeChat Official Account customer service client.

    The access token is kept in a :class:`TokenInfo` on the instance and
    refreshed before any call made within 60 seconds of its expiry.
    Concurrent calls may refresh it twice; both refreshes yield a valid token.

    Example:
        ```python
        async with WechatClient(app_id="wx...", app_secret="...") as wechat:
            await wechat.send_text(open_id, "Hello!")
        ```
    """

    vendor = "WeChat"

    # API base URL
    BASE_URL = "https://api.weixin.qq.com"

    # API endpoints
    TOKEN_URL = "token"
    MEDIA_UPLOAD_URL = "media/upload"
    MEDIA_GET_URL = "media/get"
    CUSTOM_SEND_URL = "message/custom/send"
    CUSTOM_TYPING_URL = "message/custom/typing"

    def __init__(
        self,
        *,
        app_id: str,
        app_secret: str,
        origin: str | None = None,
        timeout: float = 30.0,
        on_request: RequestHook | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(on_request)
        self.app_id = app_id
        self.app_secret = app_secret
        self._token: TokenInfo | None = None
        self._api = self._register_pipeline(
            RequestPipeline(
                self.vendor,
                f"{origin or self.BASE_URL}/cgi-bin/",
                request_case=CaseStyle.SNAKE,
                response_case=CaseStyle.CAMEL,
                error_adapter=wechat_error_adapter,
                auth=self._authenticate,
                on_request=on_request,
                timeout=timeout,
                transport=transport,
            )
        )

    @classmethod
    def from_config(
        cls,
        config: WechatConfig,
        *,
        on_request: RequestHook | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> WechatClient:
        return cls(
            app_id=config.app_id,
            app_secret=config.app_secret,
            origin=config.origin,
            timeout=config.timeout,
            on_request=on_request,
            transport=transport,
        )

    async def _authenticate(self, request: RequestDescriptor) -> RequestDescriptor:
        if self._token is None or self._token.is_expired():
            await self.get_access_token()
        if self._token is None:
            raise RuntimeError("WeChat access token is not available")
        return request.with_params({"access_token": self._token.token})

    async def get_access_token(self) -> dict[str, Any]:
        """Fetch a fresh access token and keep it for later calls.

        Returns:
            ``{"accessToken": ..., "expiresIn": ...}``

        Raises:
            MessagingAPIError: If the credentials are rejected.
        """
        data = await self._api.execute(
            "GET",
            self.TOKEN_URL,
            params={
                "grant_type": "client_credential",
                "appid": self.app_id,
                "secret": self.app_secret,
            },
            authenticate=False,
        )
        self._token = TokenInfo.from_lifetime(data["accessToken"], data["expiresIn"])
        logger.debug("WeChat access token refreshed, expires in %ss", data["expiresIn"])
        return data

    # Media

    async def upload_media(self, media_type: MediaType, media: FileUpload) -> dict[str, Any]:
        """Upload temporary media (kept by WeChat for three days).

        Returns:
            ``{"type": ..., "mediaId": ..., "createdAt": ...}``
        """
        return await self._api.execute(
            "POST",
            self.MEDIA_UPLOAD_URL,
            params={"type": media_type},
            files={"media": media},
        )

    async def get_media(self, media_id: str) -> bytes | dict[str, Any]:
        """Download temporary media.

        Returns:
            The media bytes, or ``{"videoUrl": ...}`` for video media.
        """
        content = await self._api.execute(
            "GET", self.MEDIA_GET_URL, params={"media_id": media_id}, raw=True
        )
        if not content.startswith(b"{"):
            return content
        # Video media comes back as a JSON link; JSON errors were raised by the pipeline
        return camelcase_keys_deep(json.loads(content))

    # Customer service messages

    async def send_raw_body(self, body: Mapping[str, Any]) -> dict[str, Any]:
        return await self._api.execute("POST", self.CUSTOM_SEND_URL, body=body)

    async def _send(
        self, user_id: str, msg_type: str, content: Mapping[str, Any], options: Mapping[str, Any]
    ) -> dict[str, Any]:
        return await self.send_raw_body(
            {"touser": user_id, "msgtype": msg_type, msg_type: dict(content), **options}
        )

    async def send_text(self, user_id: str, text: str, **options: Any) -> dict[str, Any]:
        """Send a text message.

        Args:
            user_id: Recipient OpenID.
            text: Message text.
            **options: e.g. ``customservice={"kf_account": ...}``.
        """
        return await self._send(user_id, "text", {"content": text}, options)

    async def send_image(self, user_id: str, media_id: str, **options: Any) -> dict[str, Any]:
        return await self._send(user_id, "image", {"media_id": media_id}, options)

    async def send_voice(self, user_id: str, media_id: str, **options: Any) -> dict[str, Any]:
        return await self._send(user_id, "voice", {"media_id": media_id}, options)

    async def send_video(
        self, user_id: str, video: Mapping[str, Any], **options: Any
    ) -> dict[str, Any]:
        """Send a video: ``media_id``, ``thumb_media_id``, ``title``, ``description``."""
        return await self._send(user_id, "video", video, options)

    async def send_music(
        self, user_id: str, music: Mapping[str, Any], **options: Any
    ) -> dict[str, Any]:
        return await self._send(user_id, "music", music, options)

    async def send_news(
        self, user_id: str, news: Mapping[str, Any], **options: Any
    ) -> dict[str, Any]:
        """Send an external article link: ``{"articles": [...]}``."""
        return await self._send(user_id, "news", news, options)

    async def send_mp_news(self, user_id: str, media_id: str, **options: Any) -> dict[str, Any]:
        return await self._send(user_id, "mpnews", {"media_id": media_id}, options)

    async def send_msg_menu(
        self, user_id: str, msg_menu: Mapping[str, Any], **options: Any
    ) -> dict[str, Any]:
        return await self._send(user_id, "msgmenu", msg_menu, options)

    async def send_wx_card(self, user_id: str, card_id: str, **options: Any) -> dict[str, Any]:
        return await self._send(user_id, "wxcard", {"card_id": card_id}, options)

    async def send_mini_program_page(
        self, user_id: str, mini_program_page: Mapping[str, Any], **options: Any
    ) -> dict[str, Any]:
        return await self._send(user_id, "miniprogrampage", mini_program_page, options)

    async def typing(
        self, user_id: str, command: Literal["Typing", "CancelTyping"]
    ) -> dict[str, Any]:
        return await self._api.execute(
            "POST", self.CUSTOM_TYPING_URL, body={"touser": user_id, "command": command}
        )
