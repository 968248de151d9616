"""Rich menu operations for LINE.

This module provides:
- Rich menu CRUD
- Linking menus to users and the default menu for all users
- Rich menu image upload and download (data origin)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import IO, Any

from ...core.logger import get_logger
from ..common.models import FileUpload, ResultPolicy
from ..common.pipeline import RequestPipeline

logger = get_logger("line.rich_menu")

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
JPEG_SIGNATURE = b"\xff\xd8\xff"


def detect_image_type(image: bytes) -> str:
    """Return the MIME type of a rich menu image from its leading bytes.

    Raises:
        ValueError: If the image is neither PNG nor JPEG.
    """
    if image.startswith(PNG_SIGNATURE):
        return "image/png"
    if image.startswith(JPEG_SIGNATURE):
        return "image/jpeg"
    raise ValueError("Image must be `image/png` or `image/jpeg`")


class LineRichMenuMixin:
    """Mixin providing rich menu management for the LINE client.

    This mixin should be used with a class that has:
    - self._api: RequestPipeline bound to the API origin
    - self._data_api: RequestPipeline bound to the data origin
    """

    # API endpoints
    RICH_MENU_LIST_URL = "/v2/bot/richmenu/list"
    RICH_MENU_URL = "/v2/bot/richmenu"
    RICH_MENU_ITEM_URL = "/v2/bot/richmenu/{rich_menu_id}"
    RICH_MENU_CONTENT_URL = "/v2/bot/richmenu/{rich_menu_id}/content"
    USER_RICH_MENU_URL = "/v2/bot/user/{user_id}/richmenu"
    USER_RICH_MENU_LINK_URL = "/v2/bot/user/{user_id}/richmenu/{rich_menu_id}"
    DEFAULT_RICH_MENU_URL = "/v2/bot/user/all/richmenu"
    DEFAULT_RICH_MENU_LINK_URL = "/v2/bot/user/all/richmenu/{rich_menu_id}"

    _api: RequestPipeline
    _data_api: RequestPipeline

    async def get_rich_menu_list(self) -> list[dict[str, Any]]:
        return await self._api.execute(
            "GET", self.RICH_MENU_LIST_URL, unwrap=lambda body: body["richmenus"]
        )

    async def get_rich_menu(self, rich_menu_id: str) -> dict[str, Any] | None:
        return await self._api.execute(
            "GET",
            self.RICH_MENU_ITEM_URL.format(rich_menu_id=rich_menu_id),
            not_found=ResultPolicy.NULL_ON_NOT_FOUND,
        )

    async def create_rich_menu(self, rich_menu: Mapping[str, Any]) -> str:
        """Create a rich menu and return its ID."""
        return await self._api.execute(
            "POST",
            self.RICH_MENU_URL,
            body=rich_menu,
            unwrap=lambda body: body["richMenuId"],
        )

    async def delete_rich_menu(self, rich_menu_id: str) -> Any:
        return await self._api.execute(
            "DELETE", self.RICH_MENU_ITEM_URL.format(rich_menu_id=rich_menu_id)
        )

    async def get_linked_rich_menu(self, user_id: str) -> dict[str, Any] | None:
        """Get ``{"richMenuId": ...}`` linked to a user, or None when none is."""
        return await self._api.execute(
            "GET",
            self.USER_RICH_MENU_URL.format(user_id=user_id),
            not_found=ResultPolicy.NULL_ON_NOT_FOUND,
        )

    async def link_rich_menu(self, user_id: str, rich_menu_id: str) -> Any:
        return await self._api.execute(
            "POST",
            self.USER_RICH_MENU_LINK_URL.format(user_id=user_id, rich_menu_id=rich_menu_id),
        )

    async def unlink_rich_menu(self, user_id: str) -> Any:
        return await self._api.execute("DELETE", self.USER_RICH_MENU_URL.format(user_id=user_id))

    async def get_default_rich_menu(self) -> dict[str, Any] | None:
        return await self._api.execute(
            "GET", self.DEFAULT_RICH_MENU_URL, not_found=ResultPolicy.NULL_ON_NOT_FOUND
        )

    async def set_default_rich_menu(self, rich_menu_id: str) -> Any:
        return await self._api.execute(
            "POST", self.DEFAULT_RICH_MENU_LINK_URL.format(rich_menu_id=rich_menu_id)
        )

    async def delete_default_rich_menu(self) -> Any:
        return await self._api.execute("DELETE", self.DEFAULT_RICH_MENU_URL)

    async def upload_rich_menu_image(self, rich_menu_id: str, image: bytes | IO[bytes]) -> Any:
        """Upload the image shown for a rich menu.

        Args:
            rich_menu_id: Rich menu ID.
            image: PNG or JPEG bytes (or a binary stream holding them).

        Raises:
            ValueError: If the image is neither PNG nor JPEG.
            MessagingAPIError: If the API call fails.
        """
        data = image.read() if hasattr(image, "read") else bytes(image)
        content_type = detect_image_type(data)
        logger.debug("Uploading %s image for rich menu %s", content_type, rich_menu_id)
        return await self._data_api.execute(
            "POST",
            self.RICH_MENU_CONTENT_URL.format(rich_menu_id=rich_menu_id),
            body=FileUpload(data, filename=rich_menu_id, content_type=content_type),
        )

    async def download_rich_menu_image(self, rich_menu_id: str) -> bytes | None:
        return await self._data_api.execute(
            "GET",
            self.RICH_MENU_CONTENT_URL.format(rich_menu_id=rich_menu_id),
            raw=True,
            not_found=ResultPolicy.NULL_ON_NOT_FOUND,
        )
