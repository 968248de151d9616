"""Viber Public Account (chat API) client.

Requests are snake_cased except ``keyboard`` and ``rich_media`` payloads,
which Viber expects in PascalCase (``ActionType``, ``ButtonsGroupColumns``).
Responses are camelCased; a non-zero ``status`` is raised as an error.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

import httpx

from ...core.logger import get_logger
from ..common.base import BaseAPIClient
from ..common.case import CaseStyle, pascalcase_keys_deep
from ..common.pipeline import RequestHook, RequestPipeline
from ..common.utils import create_error_adapter, omit_none, resolve_aliases

if TYPE_CHECKING:
    from ...core.config import ViberConfig

logger = get_logger("viber")

PASCAL_CASE_FIELDS = ("keyboard", "rich_media")


def _describe_error(body: Any) -> str | None:
    if isinstance(body, dict) and body.get("status", 0) != 0:
        return f"{body.get('status')} {body.get('status_message')}"
    return None


viber_error_adapter = create_error_adapter("Viber", _describe_error)


def to_viber_message(message: Mapping[str, Any]) -> dict[str, Any]:
    """Fold option spellings to snake_case and PascalCase keyboard payloads."""
    resolved = resolve_aliases(message)
    for name in PASCAL_CASE_FIELDS:
        if resolved.get(name) is not None:
            resolved[name] = pascalcase_keys_deep(resolved[name])
    return omit_none(resolved)


class ViberClient(BaseAPIClient):
    """Viber chat API client.

    Args:
        access_token: Viber auth token.
        sender: ``{"name": ..., "avatar": ...}`` shown on every message.
        origin: Override API origin (for testing or proxies).
        timeout: HTTP request timeout in seconds.
        on_request: Hook called with every outgoing request.
        transport: Optional httpx transport.

    Example:
        ```python
        async with ViberClient(access_token="xxx", sender={"name": "Bot"}) as viber:
            await viber.send_text(user_id, "Hello!")
        ```
    """

    vendor = "Viber"

    # API base URL
    BASE_URL = "https://chatapi.viber.com"

    def __init__(
        self,
        *,
        access_token: str,
        sender: Mapping[str, Any] | None = None,
        origin: str | None = None,
        timeout: float = 30.0,
        on_request: RequestHook | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(on_request)
        self.access_token = access_token
        self.sender = dict(sender) if sender else None
        self._api = self._register_pipeline(
            RequestPipeline(
                self.vendor,
                f"{origin or self.BASE_URL}/pa/",
                headers={"X-Viber-Auth-Token": access_token},
                request_case=CaseStyle.SNAKE,
                response_case=CaseStyle.CAMEL,
                request_exclude=PASCAL_CASE_FIELDS,
                error_adapter=viber_error_adapter,
                on_request=on_request,
                timeout=timeout,
                transport=transport,
            )
        )

    @classmethod
    def from_config(
        cls,
        config: ViberConfig,
        *,
        on_request: RequestHook | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> ViberClient:
        return cls(
            access_token=config.access_token,
            sender=config.sender.model_dump(exclude_none=True) if config.sender else None,
            origin=config.origin,
            timeout=config.timeout,
            on_request=on_request,
            transport=transport,
        )

    async def _call(self, method: str, body: Mapping[str, Any] | None = None, **kwargs: Any) -> Any:
        return await self._api.execute("POST", method, body=dict(body or {}), **kwargs)

    # Webhook

    async def set_webhook(
        self,
        url: str,
        event_types: Sequence[str] | None = None,
        *,
        send_name: bool | None = None,
        send_photo: bool | None = None,
    ) -> dict[str, Any]:
        """Register the webhook URL; Viber validates it with a callback."""
        logger.info("Setting Viber webhook to %s", url)
        return await self._call(
            "set_webhook",
            omit_none(
                {
                    "url": url,
                    "event_types": list(event_types) if event_types else None,
                    "send_name": send_name,
                    "send_photo": send_photo,
                }
            ),
        )

    async def remove_webhook(self) -> dict[str, Any]:
        return await self._call("set_webhook", {"url": ""})

    # Messages

    async def send_message(self, receiver: str, message: Mapping[str, Any]) -> dict[str, Any]:
        """Send a message object to one user.

        Returns:
            ``{"status": 0, "statusMessage": "ok", "messageToken": ...}``
        """
        return await self._call(
            "send_message",
            omit_none({"receiver": receiver, "sender": self.sender, **to_viber_message(message)}),
        )

    async def send_text(self, receiver: str, text: str, **options: Any) -> dict[str, Any]:
        return await self.send_message(receiver, {"type": "text", "text": text, **options})

    async def send_picture(
        self, receiver: str, media: str, text: str = "", **options: Any
    ) -> dict[str, Any]:
        return await self.send_message(
            receiver, {"type": "picture", "text": text, "media": media, **options}
        )

    async def send_video(
        self, receiver: str, media: str, size: int, **options: Any
    ) -> dict[str, Any]:
        return await self.send_message(
            receiver, {"type": "video", "media": media, "size": size, **options}
        )

    async def send_file(
        self, receiver: str, media: str, size: int, file_name: str, **options: Any
    ) -> dict[str, Any]:
        return await self.send_message(
            receiver,
            {"type": "file", "media": media, "size": size, "file_name": file_name, **options},
        )

    async def send_contact(
        self, receiver: str, name: str, phone_number: str, **options: Any
    ) -> dict[str, Any]:
        return await self.send_message(
            receiver,
            {
                "type": "contact",
                "contact": {"name": name, "phone_number": phone_number},
                **options,
            },
        )

    async def send_location(
        self, receiver: str, lat: float, lon: float, **options: Any
    ) -> dict[str, Any]:
        return await self.send_message(
            receiver, {"type": "location", "location": {"lat": lat, "lon": lon}, **options}
        )

    async def send_url(self, receiver: str, url: str, **options: Any) -> dict[str, Any]:
        return await self.send_message(receiver, {"type": "url", "media": url, **options})

    async def send_sticker(self, receiver: str, sticker_id: int, **options: Any) -> dict[str, Any]:
        return await self.send_message(
            receiver, {"type": "sticker", "sticker_id": sticker_id, **options}
        )

    async def send_carousel_content(
        self, receiver: str, rich_media: Mapping[str, Any], **options: Any
    ) -> dict[str, Any]:
        """Send a rich media carousel (requires ``min_api_version`` 2)."""
        return await self.send_message(
            receiver,
            {
                "type": "rich_media",
                "min_api_version": 2,
                "rich_media": dict(rich_media),
                **options,
            },
        )

    async def broadcast_message(
        self, broadcast_list: Sequence[str], message: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Send one message to up to 300 subscribed users.

        Returns:
            The envelope with ``failedList`` for receivers that failed.
        """
        return await self._call(
            "broadcast_message",
            omit_none(
                {
                    "broadcast_list": list(broadcast_list),
                    "sender": self.sender,
                    **to_viber_message(message),
                }
            ),
        )

    async def broadcast_text(
        self, broadcast_list: Sequence[str], text: str, **options: Any
    ) -> dict[str, Any]:
        return await self.broadcast_message(
            broadcast_list, {"type": "text", "text": text, **options}
        )

    # Account and users

    async def get_account_info(self) -> dict[str, Any]:
        return await self._call("get_account_info")

    async def get_user_details(self, user_id: str) -> dict[str, Any]:
        return await self._call(
            "get_user_details", {"id": user_id}, unwrap=lambda body: body["user"]
        )

    async def get_online_status(self, ids: Sequence[str]) -> list[dict[str, Any]]:
        return await self._call(
            "get_online", {"ids": list(ids)}, unwrap=lambda body: body["users"]
        )
