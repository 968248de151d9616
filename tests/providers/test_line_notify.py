"""Tests for providers.line LINE Notify client."""

from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

import pytest
from pytest_httpx import HTTPXMock

from messaging_apis.core.config import LineNotifyConfig
from messaging_apis.providers.common import MessagingAPIError
from messaging_apis.providers.line import LineNotify

REDIRECT_URI = "https://example.com/callback"


@pytest.fixture
def notify() -> LineNotify:
    return LineNotify(
        client_id="client-id", client_secret="client-secret", redirect_uri=REDIRECT_URI
    )


def sent_form(httpx_mock: HTTPXMock, index: int = 0) -> dict[str, str]:
    content = httpx_mock.get_requests()[index].content.decode()
    return {key: values[0] for key, values in parse_qs(content).items()}


class TestLineNotify:
    """Tests for LineNotify."""

    def test_origins(self, notify: LineNotify) -> None:
        assert notify._bot.base_url == "https://notify-bot.line.me"
        assert notify._api.base_url == "https://notify-api.line.me"

    def test_from_config(self) -> None:
        client = LineNotify.from_config(
            LineNotifyConfig(
                client_id="id",
                client_secret="secret",
                redirect_uri=REDIRECT_URI,
                origin="http://localhost:9000",
                api_origin="http://localhost:9001",
            )
        )

        assert client.client_id == "id"
        assert client._bot.base_url == "http://localhost:9000"
        assert client._api.base_url == "http://localhost:9001"

    def test_get_auth_link(self, notify: LineNotify) -> None:
        link = notify.get_auth_link("csrf-state")

        parts = urlsplit(link)
        assert f"{parts.scheme}://{parts.netloc}{parts.path}" == (
            "https://notify-bot.line.me/oauth/authorize"
        )
        assert parse_qs(parts.query) == {
            "response_type": ["code"],
            "client_id": ["client-id"],
            "redirect_uri": [REDIRECT_URI],
            "scope": ["notify"],
            "state": ["csrf-state"],
        }

    @pytest.mark.anyio
    async def test_get_token(self, notify: LineNotify, httpx_mock: HTTPXMock) -> None:
        """Test the code exchange is form-encoded and the token is returned."""
        httpx_mock.add_response(json={"access_token": "personal-token"})

        async with notify:
            token = await notify.get_token("auth-code")

        request = httpx_mock.get_requests()[0]
        assert str(request.url) == "https://notify-bot.line.me/oauth/token"
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert sent_form(httpx_mock) == {
            "grant_type": "authorization_code",
            "code": "auth-code",
            "redirect_uri": REDIRECT_URI,
            "client_id": "client-id",
            "client_secret": "client-secret",
        }
        assert token == "personal-token"

    @pytest.mark.anyio
    async def test_get_status(self, notify: LineNotify, httpx_mock: HTTPXMock) -> None:
        status = {"status": 200, "message": "ok", "targetType": "USER", "target": "user name"}
        httpx_mock.add_response(json=status)

        async with notify:
            result = await notify.get_status("personal-token")

        request = httpx_mock.get_requests()[0]
        assert str(request.url) == "https://notify-api.line.me/api/status"
        assert request.method == "GET"
        assert request.headers["Authorization"] == "Bearer personal-token"
        assert result == status

    @pytest.mark.anyio
    async def test_send_notify(self, notify: LineNotify, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(json={"status": 200, "message": "ok"})

        async with notify:
            await notify.send_notify(
                "personal-token",
                "Build finished",
                sticker_package_id=1,
                sticker_id=2,
                notification_disabled=True,
            )

        request = httpx_mock.get_requests()[0]
        assert request.url.path == "/api/notify"
        assert request.headers["Authorization"] == "Bearer personal-token"
        assert sent_form(httpx_mock) == {
            "message": "Build finished",
            "stickerPackageId": "1",
            "stickerId": "2",
            "notificationDisabled": "true",
        }

    @pytest.mark.anyio
    async def test_revoke_token(self, notify: LineNotify, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(json={"status": 200, "message": "ok"})

        async with notify:
            await notify.revoke_token("personal-token")

        request = httpx_mock.get_requests()[0]
        assert request.method == "POST"
        assert request.url.path == "/api/revoke"
        assert request.headers["Authorization"] == "Bearer personal-token"

    @pytest.mark.anyio
    async def test_invalid_token(self, notify: LineNotify, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(
            status_code=401, json={"status": 401, "message": "Invalid access token"}
        )

        async with notify:
            with pytest.raises(MessagingAPIError) as exc_info:
                await notify.send_notify("bad-token", "hi")

        assert exc_info.value.message == "LINE Notify API - Invalid access token"
        assert exc_info.value.status_code == 401
