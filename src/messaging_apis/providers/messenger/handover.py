"""Handover protocol and custom label operations for Messenger.

This module provides:
- Passing, taking and requesting thread control between apps
- Thread owner and secondary receiver queries
- Custom labels: create, associate, dissociate and list
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ...core.logger import get_logger
from ..common.pagination import Page, fetch_all
from ..common.pipeline import RequestPipeline
from ..common.utils import omit_none

logger = get_logger("messenger.handover")

PAGE_INBOX_APP_ID = 263902037430900


class MessengerHandoverMixin:
    """Mixin providing the handover protocol for the Messenger client.

    This mixin should be used with a class that has:
    - self._api: RequestPipeline bound to the Graph API
    """

    # API endpoints
    PASS_THREAD_CONTROL_URL = "me/pass_thread_control"
    TAKE_THREAD_CONTROL_URL = "me/take_thread_control"
    REQUEST_THREAD_CONTROL_URL = "me/request_thread_control"
    THREAD_OWNER_URL = "me/thread_owner"
    SECONDARY_RECEIVERS_URL = "me/secondary_receivers"

    _api: RequestPipeline

    async def pass_thread_control(
        self, recipient_id: str, target_app_id: int | str, metadata: str | None = None
    ) -> dict[str, Any]:
        logger.debug("Passing thread %s to app %s", recipient_id, target_app_id)
        return await self._api.execute(
            "POST",
            self.PASS_THREAD_CONTROL_URL,
            body=omit_none(
                {
                    "recipient": {"id": recipient_id},
                    "target_app_id": target_app_id,
                    "metadata": metadata,
                }
            ),
        )

    async def pass_thread_control_to_page_inbox(
        self, recipient_id: str, metadata: str | None = None
    ) -> dict[str, Any]:
        return await self.pass_thread_control(recipient_id, PAGE_INBOX_APP_ID, metadata)

    async def take_thread_control(
        self, recipient_id: str, metadata: str | None = None
    ) -> dict[str, Any]:
        return await self._api.execute(
            "POST",
            self.TAKE_THREAD_CONTROL_URL,
            body=omit_none({"recipient": {"id": recipient_id}, "metadata": metadata}),
        )

    async def request_thread_control(
        self, recipient_id: str, metadata: str | None = None
    ) -> dict[str, Any]:
        return await self._api.execute(
            "POST",
            self.REQUEST_THREAD_CONTROL_URL,
            body=omit_none({"recipient": {"id": recipient_id}, "metadata": metadata}),
        )

    async def get_thread_owner(self, recipient_id: str) -> dict[str, Any]:
        """Get the app currently in control of a thread."""
        return await self._api.execute(
            "GET",
            self.THREAD_OWNER_URL,
            params={"recipient": recipient_id},
            unwrap=lambda body: body["data"][0]["thread_owner"],
        )

    async def get_secondary_receivers(
        self, fields: Sequence[str] = ("id", "name")
    ) -> list[dict[str, Any]]:
        return await self._api.execute(
            "GET",
            self.SECONDARY_RECEIVERS_URL,
            params={"fields": ",".join(fields)},
            unwrap=lambda body: body["data"],
        )


class MessengerLabelMixin:
    """Mixin providing custom labels for the Messenger client.

    This mixin should be used with a class that has:
    - self._api: RequestPipeline bound to the Graph API
    """

    # API endpoints
    LABELS_URL = "me/custom_labels"
    LABEL_URL = "{label_id}"
    LABEL_USER_URL = "{label_id}/label"
    USER_LABELS_URL = "{user_id}/custom_labels"

    _api: RequestPipeline

    async def create_label(self, name: str) -> dict[str, Any]:
        """Create a custom label and return ``{"id": ...}``."""
        return await self._api.execute("POST", self.LABELS_URL, body={"name": name})

    async def associate_label(self, user_id: str, label_id: int | str) -> dict[str, Any]:
        return await self._api.execute(
            "POST", self.LABEL_USER_URL.format(label_id=label_id), body={"user": user_id}
        )

    async def dissociate_label(self, user_id: str, label_id: int | str) -> dict[str, Any]:
        return await self._api.execute(
            "DELETE", self.LABEL_USER_URL.format(label_id=label_id), body={"user": user_id}
        )

    async def get_associated_labels(self, user_id: str) -> dict[str, Any]:
        return await self._api.execute("GET", self.USER_LABELS_URL.format(user_id=user_id))

    async def get_label_details(
        self, label_id: int | str, fields: Sequence[str] = ("name",)
    ) -> dict[str, Any]:
        return await self._api.execute(
            "GET",
            self.LABEL_URL.format(label_id=label_id),
            params={"fields": ",".join(fields)},
        )

    async def delete_label(self, label_id: int | str) -> dict[str, Any]:
        return await self._api.execute("DELETE", self.LABEL_URL.format(label_id=label_id))

    async def get_label_list(
        self, after: str | None = None, fields: Sequence[str] = ("name",)
    ) -> dict[str, Any]:
        """Get one page of custom labels.

        Returns:
            ``{"data": [...], "paging": {"cursors": {...}, "next": ...}}``
        """
        return await self._api.execute(
            "GET",
            self.LABELS_URL,
            params={"fields": ",".join(fields), "after": after},
        )

    async def get_all_labels(self, fields: Sequence[str] = ("name",)) -> list[dict[str, Any]]:
        """Get every custom label, following ``paging.cursors.after``.

        Pagination continues only while the vendor sends a ``paging.next``
        link; the ``after`` cursor alone is present on the last page too.
        """

        async def fetch_page(after: str | None) -> Page[dict[str, Any]]:
            data = await self.get_label_list(after, fields)
            paging = data.get("paging") or {}
            cursor = (paging.get("cursors") or {}).get("after") if paging.get("next") else None
            return Page(data.get("data", []), cursor)

        return await fetch_all(fetch_page)
