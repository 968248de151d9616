"""Slack incoming webhook client.

Posts JSON payloads to an incoming-webhook URL. Slack answers a successful
post with the plain text ``ok``; failures come back as non-2xx responses
with a short text reason such as ``invalid_payload``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

import httpx

from ...core.logger import get_logger
from ..common.base import BaseAPIClient
from ..common.case import CaseStyle
from ..common.pipeline import RequestHook, RequestPipeline
from ..common.utils import create_error_adapter

if TYPE_CHECKING:
    from ...core.config import SlackWebhookConfig

logger = get_logger("slack.webhook")


def _describe_error(body: Any) -> str | None:
    if isinstance(body, str) and body:
        return body
    return None


slack_webhook_error_adapter = create_error_adapter("Slack", _describe_error, status_only=True)


class SlackWebhookClient(BaseAPIClient):
    """Client for one Slack incoming webhook.

    Example:
        ```python
        async with SlackWebhookClient(url="https://hooks.slack.com/services/...") as hook:
            await hook.send_text("Deploy finished")
        ```
    """

    vendor = "Slack"

    def __init__(
        self,
        *,
        url: str,
        timeout: float = 30.0,
        on_request: RequestHook | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not url:
            raise ValueError("Webhook URL cannot be empty")
        super().__init__(on_request)
        self.url = url
        self._api = self._register_pipeline(
            RequestPipeline(
                self.vendor,
                url,
                request_case=CaseStyle.SNAKE,
                error_adapter=slack_webhook_error_adapter,
                on_request=on_request,
                timeout=timeout,
                transport=transport,
            )
        )

    @classmethod
    def from_config(
        cls,
        config: SlackWebhookConfig,
        *,
        on_request: RequestHook | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> SlackWebhookClient:
        return cls(
            url=config.url,
            timeout=config.timeout,
            on_request=on_request,
            transport=transport,
        )

    async def send_raw_body(self, body: Mapping[str, Any]) -> str:
        """Post a webhook payload; returns Slack's ``ok``."""
        # The webhook URL is posted to verbatim; base_url would append a slash.
        return await self._api.execute("POST", self.url, body=body)

    async def send_text(self, text: str) -> str:
        return await self.send_raw_body({"text": text})

    async def send_attachments(self, attachments: Sequence[Mapping[str, Any]]) -> str:
        return await self.send_raw_body({"attachments": list(attachments)})

    async def send_attachment(self, attachment: Mapping[str, Any]) -> str:
        return await self.send_attachments([attachment])
