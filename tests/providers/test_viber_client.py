"""Tests for providers.viber client."""

from __future__ import annotations

import json

import pytest
from pytest_httpx import HTTPXMock

from messaging_apis.core.config import ViberConfig
from messaging_apis.providers.common import MessagingAPIError
from messaging_apis.providers.viber import ViberClient

OK = {"status": 0, "status_message": "ok", "message_token": 5741311803571721087}


@pytest.fixture
def viber() -> ViberClient:
    return ViberClient(access_token="viber-token", sender={"name": "Bot"})


def sent_json(httpx_mock: HTTPXMock, index: int = 0):
    return json.loads(httpx_mock.get_requests()[index].content)


class TestViberClient:
    """Tests for ViberClient."""

    def test_from_config(self) -> None:
        config = ViberConfig(access_token="t", sender={"name": "Bot"})

        client = ViberClient.from_config(config)

        assert client.sender == {"name": "Bot"}

    @pytest.mark.anyio
    async def test_send_text(self, viber: ViberClient, httpx_mock: HTTPXMock) -> None:
        """Test the auth header, default sender and camelCased envelope."""
        httpx_mock.add_response(json=OK)

        async with viber:
            result = await viber.send_text("U1", "Hello")

        request = httpx_mock.get_requests()[0]
        assert str(request.url) == "https://chatapi.viber.com/pa/send_message"
        assert request.headers["X-Viber-Auth-Token"] == "viber-token"
        assert sent_json(httpx_mock) == {
            "receiver": "U1",
            "sender": {"name": "Bot"},
            "type": "text",
            "text": "Hello",
        }
        assert result == {
            "status": 0,
            "statusMessage": "ok",
            "messageToken": 5741311803571721087,
        }

    @pytest.mark.anyio
    async def test_keyboard_is_pascal_cased(
        self, viber: ViberClient, httpx_mock: HTTPXMock
    ) -> None:
        """Test keyboard payloads keep PascalCase while other keys are snake_cased."""
        httpx_mock.add_response(json=OK)
        keyboard = {
            "type": "keyboard",
            "defaultHeight": True,
            "buttons": [{"action_type": "reply", "actionBody": "yes", "text": "Yes"}],
        }

        async with viber:
            await viber.send_text("U1", "Pick one", keyboard=keyboard, trackingData="t1")

        body = sent_json(httpx_mock)
        assert body["tracking_data"] == "t1"
        assert body["keyboard"] == {
            "Type": "keyboard",
            "DefaultHeight": True,
            "Buttons": [{"ActionType": "reply", "ActionBody": "yes", "Text": "Yes"}],
        }

    @pytest.mark.anyio
    async def test_carousel_content(self, viber: ViberClient, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(json=OK)
        rich_media = {"type": "rich_media", "buttonsGroupColumns": 6, "buttons": []}

        async with viber:
            await viber.send_carousel_content("U1", rich_media)

        body = sent_json(httpx_mock)
        assert body["min_api_version"] == 2
        assert body["rich_media"] == {"Type": "rich_media", "ButtonsGroupColumns": 6, "Buttons": []}

    @pytest.mark.anyio
    async def test_send_without_sender(self, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(json=OK)
        client = ViberClient(access_token="t")

        async with client:
            await client.send_location("U1", 1.5, 2.5)

        assert sent_json(httpx_mock) == {
            "receiver": "U1",
            "type": "location",
            "location": {"lat": 1.5, "lon": 2.5},
        }

    @pytest.mark.anyio
    async def test_status_error(self, viber: ViberClient, httpx_mock: HTTPXMock) -> None:
        """Test a non-zero status on HTTP 200 is raised."""
        httpx_mock.add_response(json={"status": 3, "status_message": "badData"})

        async with viber:
            with pytest.raises(MessagingAPIError) as exc_info:
                await viber.send_text("U1", "")

        assert exc_info.value.message == "Viber API - 3 badData"
        assert exc_info.value.response_body == {"status": 3, "status_message": "badData"}

    @pytest.mark.anyio
    async def test_broadcast_text(self, viber: ViberClient, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(
            json={
                "status": 0,
                "status_message": "ok",
                "failed_list": [
                    {"receiver": "U2", "status": 6, "status_message": "Not subscribed"}
                ],
            }
        )

        async with viber:
            result = await viber.broadcast_text(["U1", "U2"], "Hi all")

        assert sent_json(httpx_mock)["broadcast_list"] == ["U1", "U2"]
        assert result["failedList"][0]["statusMessage"] == "Not subscribed"

    @pytest.mark.anyio
    async def test_get_online_status(self, viber: ViberClient, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(
            json={
                "status": 0,
                "status_message": "ok",
                "users": [{"id": "U1", "online_status": 0, "online_status_message": "online"}],
            }
        )

        async with viber:
            users = await viber.get_online_status(["U1"])

        assert httpx_mock.get_requests()[0].url.path == "/pa/get_online"
        assert users == [{"id": "U1", "onlineStatus": 0, "onlineStatusMessage": "online"}]

    @pytest.mark.anyio
    async def test_set_and_remove_webhook(
        self, viber: ViberClient, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(json={"status": 0, "event_types": ["delivered"]})
        httpx_mock.add_response(json={"status": 0})

        async with viber:
            await viber.set_webhook("https://example.com/hook", ["delivered"], send_name=True)
            await viber.remove_webhook()

        assert sent_json(httpx_mock, 0) == {
            "url": "https://example.com/hook",
            "event_types": ["delivered"],
            "send_name": True,
        }
        assert sent_json(httpx_mock, 1) == {"url": ""}
