"""Messenger Platform (Graph API) client.

This module provides the main MessengerClient class that combines all
Messenger API functionality through mixins, together with the request
authentication that attaches the page access token and its
``appsecret_proof``.
"""

from __future__ import annotations

import hashlib
import hmac
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qs, urlencode, urlsplit

import httpx

from ...core.logger import get_logger
from ..common.base import BaseAPIClient
from ..common.case import CaseStyle
from ..common.models import RequestDescriptor
from ..common.pipeline import RequestHook, RequestPipeline
from ..common.utils import create_error_adapter, omit_none
from .batch import USER_PROFILE_FIELDS
from .handover import MessengerHandoverMixin, MessengerLabelMixin
from .send import MessengerSendMixin

if TYPE_CHECKING:
    from ...core.config import MessengerConfig

logger = get_logger("messenger")


def _describe_error(body: Any) -> str | None:
    if not isinstance(body, dict) or not isinstance(body.get("error"), dict):
        return None
    error = body["error"]
    return f"{error.get('code')} {error.get('type')} {error.get('message')}"


messenger_error_adapter = create_error_adapter("Messenger", _describe_error)


def app_secret_proof(app_secret: str, access_token: str) -> str:
    """Return ``HMAC-SHA256(app_secret, access_token)`` as hex."""
    return hmac.new(
        app_secret.encode("utf-8"), access_token.encode("utf-8"), hashlib.sha256
    ).hexdigest()


def _batch_item_token(item: Mapping[str, Any]) -> str | None:
    query = parse_qs(urlsplit(item.get("relative_url", "")).query)
    if query.get("access_token"):
        return query["access_token"][0]
    body = item.get("body")
    if isinstance(body, str):
        fields = parse_qs(body)
        if fields.get("access_token"):
            return fields["access_token"][0]
    return None


class MessengerClient(
    MessengerSendMixin,
    MessengerHandoverMixin,
    MessengerLabelMixin,
    BaseAPIClient,
):
    """Messenger Platform client.

    Provides access to:
    - Send API (messages, templates, sender actions, attachments)
    - Graph API batch requests
    - User and Messenger profiles
    - Handover protocol and custom labels
    - Page info, webhook subscriptions and insights

    Request bodies are snake-cased deep and responses camelCased deep.

    Example:
        ```python
        async with MessengerClient(access_token="xxx", app_secret="yyy") as messenger:
            await messenger.send_text("PSID", "Hello!")
        ```
    """

    vendor = "Messenger"

    # API base URL
    BASE_URL = "https://graph.facebook.com"

    # API endpoints
    PAGE_URL = "me"
    DEBUG_TOKEN_URL = "debug_token"
    SUBSCRIPTIONS_URL = "{app_id}/subscriptions"
    FEATURE_REVIEW_URL = "me/messaging_feature_review"
    MESSENGER_PROFILE_URL = "me/messenger_profile"
    INSIGHTS_URL = "me/insights"

    def __init__(
        self,
        *,
        access_token: str,
        app_id: str | None = None,
        app_secret: str | None = None,
        version: str = "6.0",
        origin: str | None = None,
        skip_app_secret_proof: bool | None = None,
        timeout: float = 30.0,
        on_request: RequestHook | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize Messenger client.

        Args:
            access_token: Page access token.
            app_id: Facebook app ID (subscriptions, token debugging).
            app_secret: Facebook app secret; enables ``appsecret_proof``.
            version: Graph API version, with or without a leading ``v``.
            origin: Override Graph API origin (for testing or proxies).
            skip_app_secret_proof: Never sign requests when True.
            timeout: HTTP request timeout in seconds.
            on_request: Hook called with every outgoing request.
            transport: Optional httpx transport.

        Raises:
            ValueError: If ``skip_app_secret_proof`` is False without an
                ``app_secret``.
        """
        if skip_app_secret_proof is False and not app_secret:
            raise ValueError("Must provide app_secret when skip_app_secret_proof is false")

        super().__init__(on_request)
        self.access_token = access_token
        self.app_id = app_id
        self.app_secret = app_secret
        self.version = version[1:] if version.startswith("v") else version
        self.sign_requests = bool(app_secret) and skip_app_secret_proof is not True

        self._api = self._register_pipeline(
            RequestPipeline(
                self.vendor,
                f"{origin or self.BASE_URL}/v{self.version}/",
                request_case=CaseStyle.SNAKE,
                response_case=CaseStyle.CAMEL,
                error_adapter=messenger_error_adapter,
                auth=self._authenticate,
                on_request=on_request,
                timeout=timeout,
                transport=transport,
            )
        )

    @classmethod
    def from_config(
        cls,
        config: MessengerConfig,
        *,
        on_request: RequestHook | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> MessengerClient:
        return cls(
            access_token=config.access_token,
            app_id=config.app_id,
            app_secret=config.app_secret,
            version=config.version,
            origin=config.origin,
            skip_app_secret_proof=config.skip_app_secret_proof,
            timeout=config.timeout,
            on_request=on_request,
            transport=transport,
        )

    async def _authenticate(self, request: RequestDescriptor) -> RequestDescriptor:
        """Attach ``access_token`` and, when signing, ``appsecret_proof``.

        The proof is computed over the token the request actually carries.
        Batch items carrying their own token get their own proof.
        """
        access_token = request.params.get("access_token") or self.access_token
        request = request.with_params({"access_token": access_token})
        if not self.sign_requests or not self.app_secret:
            return request

        request = request.with_params(
            {"appsecret_proof": app_secret_proof(self.app_secret, access_token)}
        )
        if isinstance(request.body, dict) and isinstance(request.body.get("batch"), list):
            batch = [self._sign_batch_item(item) for item in request.body["batch"]]
            request = request.with_body({**request.body, "batch": batch})
        return request

    def _sign_batch_item(self, item: dict[str, Any]) -> dict[str, Any]:
        access_token = _batch_item_token(item)
        if not access_token or not self.app_secret:
            return item
        proof = urlencode({"appsecret_proof": app_secret_proof(self.app_secret, access_token)})
        separator = "&" if "?" in item["relative_url"] else "?"
        return {**item, "relative_url": f"{item['relative_url']}{separator}{proof}"}

    def _app_access_token(self) -> str:
        if not self.app_id or not self.app_secret:
            raise ValueError("app_id and app_secret are required for app access token calls")
        return f"{self.app_id}|{self.app_secret}"

    # Page and app

    async def get_page_info(self, fields: Sequence[str] | None = None) -> dict[str, Any]:
        params = {"fields": ",".join(fields)} if fields else None
        return await self._api.execute("GET", self.PAGE_URL, params=params)

    async def debug_token(self) -> dict[str, Any]:
        """Inspect the page access token with the app access token."""
        return await self._api.execute(
            "GET",
            self.DEBUG_TOKEN_URL,
            params={"input_token": self.access_token, "access_token": self._app_access_token()},
            unwrap=lambda body: body["data"],
        )

    async def create_subscription(
        self,
        *,
        callback_url: str,
        verify_token: str,
        fields: Sequence[str] = (
            "messages",
            "messaging_postbacks",
            "messaging_optins",
            "messaging_referrals",
            "messaging_handovers",
            "messaging_policy_enforcement",
        ),
        object_type: str = "page",
        include_values: bool | None = None,
        access_token: str | None = None,
    ) -> dict[str, Any]:
        """Subscribe the app's webhook to an object's fields.

        Uses the app access token unless ``access_token`` is given.
        """
        if not self.app_id:
            raise ValueError("app_id is required to create a subscription")
        logger.info("Creating %s subscription for %s", object_type, callback_url)
        return await self._api.execute(
            "POST",
            self.SUBSCRIPTIONS_URL.format(app_id=self.app_id),
            params={"access_token": access_token or self._app_access_token()},
            body=omit_none(
                {
                    "object": object_type,
                    "callback_url": callback_url,
                    "fields": ",".join(fields),
                    "include_values": include_values,
                    "verify_token": verify_token,
                }
            ),
        )

    async def get_subscriptions(self, access_token: str | None = None) -> list[dict[str, Any]]:
        if not self.app_id:
            raise ValueError("app_id is required to list subscriptions")
        return await self._api.execute(
            "GET",
            self.SUBSCRIPTIONS_URL.format(app_id=self.app_id),
            params={"access_token": access_token or self._app_access_token()},
            unwrap=lambda body: body["data"],
        )

    async def get_page_subscription(self, access_token: str | None = None) -> dict[str, Any] | None:
        subscriptions = await self.get_subscriptions(access_token)
        return next((sub for sub in subscriptions if sub.get("object") == "page"), None)

    async def get_messaging_feature_review(self) -> list[dict[str, Any]]:
        return await self._api.execute(
            "GET", self.FEATURE_REVIEW_URL, unwrap=lambda body: body["data"]
        )

    # Profiles

    async def get_user_profile(
        self, user_id: str, fields: Sequence[str] = USER_PROFILE_FIELDS
    ) -> dict[str, Any]:
        return await self._api.execute("GET", user_id, params={"fields": ",".join(fields)})

    async def get_messenger_profile(self, fields: Sequence[str]) -> list[dict[str, Any]]:
        return await self._api.execute(
            "GET",
            self.MESSENGER_PROFILE_URL,
            params={"fields": ",".join(fields)},
            unwrap=lambda body: body["data"],
        )

    async def set_messenger_profile(self, profile: Mapping[str, Any]) -> dict[str, Any]:
        """Set greeting, get started button, persistent menu and similar fields."""
        return await self._api.execute("POST", self.MESSENGER_PROFILE_URL, body=profile)

    async def delete_messenger_profile(self, fields: Sequence[str]) -> dict[str, Any]:
        return await self._api.execute(
            "DELETE", self.MESSENGER_PROFILE_URL, body={"fields": list(fields)}
        )

    # Insights

    async def get_insights(
        self,
        metrics: Sequence[str],
        *,
        period: str = "day",
        since: int | None = None,
        until: int | None = None,
    ) -> list[dict[str, Any]]:
        return await self._api.execute(
            "GET",
            self.INSIGHTS_URL,
            params={
                "metric": ",".join(metrics),
                "period": period,
                "since": since,
                "until": until,
            },
            unwrap=lambda body: body["data"],
        )
