"""Tests for providers.common.pagination module."""

from __future__ import annotations

from typing import Any

import pytest

from messaging_apis.providers.common import Page, fetch_all, iterate_pages


def make_fetcher(pages: dict[Any, Page]) -> tuple[Any, list[Any]]:
    """Build a page fetcher over ``pages`` that records every token it sees."""
    seen: list[Any] = []

    async def fetch_page(token: Any) -> Page:
        seen.append(token)
        return pages[token]

    return fetch_page, seen


class TestPage:
    """Tests for the Page model."""

    def test_has_next(self) -> None:
        """Test None and the empty string both end pagination."""
        assert Page(["a"], "c1").has_next is True
        assert Page(["a"], None).has_next is False
        assert Page(["a"], "").has_next is False

    def test_defaults(self) -> None:
        """Test an empty page has no items and no continuation."""
        page = Page()

        assert list(page.items) == []
        assert page.has_next is False


class TestFetchAll:
    """Tests for fetch_all."""

    @pytest.mark.anyio
    async def test_collects_all_pages_in_order(self) -> None:
        """Test items are concatenated and tokens are passed forward."""
        fetch_page, seen = make_fetcher(
            {
                None: Page(["U1", "U2"], "c1"),
                "c1": Page(["U3"], "c2"),
                "c2": Page(["U4"], None),
            }
        )

        result = await fetch_all(fetch_page)

        assert result == ["U1", "U2", "U3", "U4"]
        assert seen == [None, "c1", "c2"]

    @pytest.mark.anyio
    async def test_single_page(self) -> None:
        """Test exactly one request when the first page has no token."""
        fetch_page, seen = make_fetcher({None: Page(["only"], None)})

        assert await fetch_all(fetch_page) == ["only"]
        assert seen == [None]

    @pytest.mark.anyio
    async def test_empty_string_cursor_stops(self) -> None:
        """Test Slack's empty next_cursor ends the loop."""
        fetch_page, seen = make_fetcher({None: Page(["C1"], ""), "": Page(["never"], None)})

        assert await fetch_all(fetch_page) == ["C1"]
        assert seen == [None]

    @pytest.mark.anyio
    async def test_opaque_tokens_are_passed_through(self) -> None:
        """Test non-string tokens reach the fetcher untouched."""
        token = {"after": "QVFIU"}
        fetch_page, seen = make_fetcher({None: Page([1], token)})

        async def fetch(current: Any) -> Page:
            if current is None:
                return await fetch_page(None)
            seen.append(current)
            return Page([2], None)

        assert await fetch_all(fetch) == [1, 2]
        assert seen[-1] is token

    @pytest.mark.anyio
    async def test_error_propagates(self) -> None:
        """Test a failing page aborts the whole fetch."""

        async def fetch_page(token: Any) -> Page:
            if token is None:
                return Page(["U1"], "c1")
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            await fetch_all(fetch_page)


class TestIteratePages:
    """Tests for iterate_pages."""

    @pytest.mark.anyio
    async def test_yields_pages_lazily(self) -> None:
        """Test the next page is only requested once iteration continues."""
        fetch_page, seen = make_fetcher(
            {None: Page(["a"], "c1"), "c1": Page(["b"], None)}
        )

        pages = iterate_pages(fetch_page)
        first = await pages.__anext__()

        assert list(first.items) == ["a"]
        assert seen == [None]

        rest = [page async for page in pages]

        assert [list(page.items) for page in rest] == [["b"]]
        assert seen == [None, "c1"]
