"""Cursor pagination helpers.

A list endpoint is wrapped in a *page fetcher*: an async callable taking the
current continuation token (None for the first page) and returning a
:class:`Page`. The helpers below call it until the vendor stops returning a
token.

The continuation token is opaque and never inspected. There is no cycle
detection: a vendor that keeps returning the same token keeps the loop going.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from ...core.logger import get_logger

T = TypeVar("T")

logger = get_logger("pagination")


@dataclass
class Page(Generic[T]):
    """One page of a paginated collection.

    Attributes:
        items: Items on this page, in vendor order.
        next: Continuation token for the next page; None (or an empty string,
            as Slack sends on its last page) when this is the last page.
    """

    items: Sequence[T] = field(default_factory=list)
    next: Any = None

    @property
    def has_next(self) -> bool:
        return self.next is not None and self.next != ""


PageFetcher = Callable[[Any], Awaitable[Page[T]]]


async def iterate_pages(page_fetcher: PageFetcher[T]) -> AsyncIterator[Page[T]]:
    """Yield pages one by one; each request waits for the previous token."""
    token: Any = None
    count = 0
    while True:
        page = await page_fetcher(token)
        count += 1
        yield page
        if not page.has_next:
            logger.debug("Pagination finished after %d page(s)", count)
            return
        token = page.next


async def fetch_all(page_fetcher: PageFetcher[T]) -> list[T]:
    """Fetch every page and return all items in order.

    Example:
        ```python
        async def fetch_page(cursor):
            res = await client.get_user_list(cursor=cursor)
            return Page(res["members"], res["next"])

        members = await fetch_all(fetch_page)
        ```
    """
    items: list[T] = []
    async for page in iterate_pages(page_fetcher):
        items.extend(page.items)
    return items
