"""Profile, group and room operations for LINE.

This module provides:
- User and group member profiles (None when the user cannot be found)
- Group summaries and membership ID lists, one page or all pages
- Follower ID lists
- Leaving groups and rooms
"""

from __future__ import annotations

from typing import Any

from ...core.logger import get_logger
from ..common.models import ResultPolicy
from ..common.pagination import Page, fetch_all
from ..common.pipeline import RequestPipeline

logger = get_logger("line.profile")


class LineProfileMixin:
    """Mixin providing profile and membership queries for the LINE client.

    This mixin should be used with a class that has:
    - self._api: RequestPipeline bound to the API origin
    """

    # API endpoints
    PROFILE_URL = "/v2/bot/profile/{user_id}"
    GROUP_SUMMARY_URL = "/v2/bot/group/{group_id}/summary"
    GROUP_MEMBER_PROFILE_URL = "/v2/bot/group/{group_id}/member/{user_id}"
    GROUP_MEMBER_IDS_URL = "/v2/bot/group/{group_id}/members/ids"
    GROUP_LEAVE_URL = "/v2/bot/group/{group_id}/leave"
    ROOM_MEMBER_PROFILE_URL = "/v2/bot/room/{room_id}/member/{user_id}"
    ROOM_MEMBER_IDS_URL = "/v2/bot/room/{room_id}/members/ids"
    ROOM_LEAVE_URL = "/v2/bot/room/{room_id}/leave"
    FOLLOWERS_IDS_URL = "/v2/bot/followers/ids"

    _api: RequestPipeline

    async def get_user_profile(self, user_id: str) -> dict[str, Any] | None:
        """Get a user's display name, picture and status message.

        Returns:
            The profile, or None when LINE answers 404 (the user blocked the
            bot or never added it).
        """
        return await self._api.execute(
            "GET",
            self.PROFILE_URL.format(user_id=user_id),
            not_found=ResultPolicy.NULL_ON_NOT_FOUND,
        )

    async def get_group_summary(self, group_id: str) -> dict[str, Any]:
        return await self._api.execute("GET", self.GROUP_SUMMARY_URL.format(group_id=group_id))

    async def get_group_member_profile(self, group_id: str, user_id: str) -> dict[str, Any] | None:
        return await self._api.execute(
            "GET",
            self.GROUP_MEMBER_PROFILE_URL.format(group_id=group_id, user_id=user_id),
            not_found=ResultPolicy.NULL_ON_NOT_FOUND,
        )

    async def get_room_member_profile(self, room_id: str, user_id: str) -> dict[str, Any] | None:
        return await self._api.execute(
            "GET",
            self.ROOM_MEMBER_PROFILE_URL.format(room_id=room_id, user_id=user_id),
            not_found=ResultPolicy.NULL_ON_NOT_FOUND,
        )

    async def get_group_member_ids(
        self, group_id: str, start: str | None = None
    ) -> dict[str, Any]:
        """Get one page of member user IDs of a group.

        Returns:
            ``{"memberIds": [...], "next": "..."}``; ``next`` is absent on the
            last page.
        """
        return await self._api.execute(
            "GET",
            self.GROUP_MEMBER_IDS_URL.format(group_id=group_id),
            params={"start": start},
        )

    async def get_all_group_member_ids(self, group_id: str) -> list[str]:
        """Get every member user ID of a group, following continuation tokens."""

        async def fetch_page(start: str | None) -> Page[str]:
            data = await self.get_group_member_ids(group_id, start)
            return Page(data.get("memberIds", []), data.get("next"))

        return await fetch_all(fetch_page)

    async def get_room_member_ids(self, room_id: str, start: str | None = None) -> dict[str, Any]:
        return await self._api.execute(
            "GET",
            self.ROOM_MEMBER_IDS_URL.format(room_id=room_id),
            params={"start": start},
        )

    async def get_all_room_member_ids(self, room_id: str) -> list[str]:
        async def fetch_page(start: str | None) -> Page[str]:
            data = await self.get_room_member_ids(room_id, start)
            return Page(data.get("memberIds", []), data.get("next"))

        return await fetch_all(fetch_page)

    async def get_followers_ids(
        self, limit: int | None = None, start: str | None = None
    ) -> dict[str, Any]:
        """Get one page of follower user IDs.

        Args:
            limit: Maximum number of IDs per page (LINE caps it at 1000).
            start: Continuation token from the previous page.
        """
        return await self._api.execute(
            "GET", self.FOLLOWERS_IDS_URL, params={"limit": limit, "start": start}
        )

    async def get_all_followers_ids(self, limit: int | None = None) -> list[str]:
        async def fetch_page(start: str | None) -> Page[str]:
            data = await self.get_followers_ids(limit, start)
            return Page(data.get("userIds", []), data.get("next"))

        return await fetch_all(fetch_page)

    async def leave_group(self, group_id: str) -> Any:
        logger.info("Leaving group %s", group_id)
        return await self._api.execute("POST", self.GROUP_LEAVE_URL.format(group_id=group_id))

    async def leave_room(self, room_id: str) -> Any:
        logger.info("Leaving room %s", room_id)
        return await self._api.execute("POST", self.ROOM_LEAVE_URL.format(room_id=room_id))
