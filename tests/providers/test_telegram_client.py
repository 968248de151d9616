"""Tests for providers.telegram client."""

from __future__ import annotations

import json

import pytest
from pytest_httpx import HTTPXMock

from messaging_apis.core.config import TelegramConfig
from messaging_apis.providers.common import MessagingAPIError
from messaging_apis.providers.telegram import TelegramClient

TOKEN = "123456:ABC-DEF"


@pytest.fixture
def bot() -> TelegramClient:
    return TelegramClient(access_token=TOKEN)


def sent_json(httpx_mock: HTTPXMock, index: int = 0):
    return json.loads(httpx_mock.get_requests()[index].content)


class TestTelegramClient:
    """Tests for TelegramClient."""

    def test_from_config(self) -> None:
        client = TelegramClient.from_config(
            TelegramConfig(access_token=TOKEN, origin="http://localhost:8081")
        )

        assert client._api.base_url == f"http://localhost:8081/bot{TOKEN}/"

    @pytest.mark.anyio
    async def test_get_me(self, bot: TelegramClient, httpx_mock: HTTPXMock) -> None:
        """Test the result envelope is unwrapped and camelCased."""
        httpx_mock.add_response(
            json={"ok": True, "result": {"id": 1, "is_bot": True, "first_name": "Bot"}}
        )

        async with bot:
            me = await bot.get_me()

        request = httpx_mock.get_requests()[0]
        assert str(request.url) == f"https://api.telegram.org/bot{TOKEN}/getMe"
        assert request.method == "POST"
        assert me == {"id": 1, "isBot": True, "firstName": "Bot"}

    @pytest.mark.anyio
    async def test_send_message_options(self, bot: TelegramClient, httpx_mock: HTTPXMock) -> None:
        """Test camelCase options and nested markup are sent snake_cased."""
        httpx_mock.add_response(json={"ok": True, "result": {"message_id": 10}})

        async with bot:
            message = await bot.send_message(
                427770117,
                "hi",
                parseMode="Markdown",
                disable_notification=True,
                replyMarkup={"inlineKeyboard": [[{"text": "Go", "callbackData": "go"}]]},
            )

        assert sent_json(httpx_mock) == {
            "chat_id": 427770117,
            "text": "hi",
            "parse_mode": "Markdown",
            "disable_notification": True,
            "reply_markup": {"inline_keyboard": [[{"text": "Go", "callback_data": "go"}]]},
        }
        assert message == {"messageId": 10}

    @pytest.mark.anyio
    async def test_conflicting_options_are_rejected(
        self, bot: TelegramClient, httpx_mock: HTTPXMock
    ) -> None:
        async with bot:
            with pytest.raises(ValueError, match="until_date"):
                await bot.kick_chat_member(1, 2, until_date=10, untilDate=20)

        assert httpx_mock.get_requests() == []

    @pytest.mark.anyio
    async def test_error_envelope(self, bot: TelegramClient, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(
            status_code=400,
            json={"ok": False, "error_code": 400, "description": "Bad Request: chat not found"},
        )

        async with bot:
            with pytest.raises(MessagingAPIError) as exc_info:
                await bot.send_message(1, "hi")

        assert exc_info.value.message == "Telegram API - 400 Bad Request: chat not found"
        assert exc_info.value.status_code == 400

    @pytest.mark.anyio
    async def test_thumb_is_dropped(self, bot: TelegramClient, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(json={"ok": True, "result": {}})

        async with bot:
            await bot.send_document(1, "file-id", thumb="attach://thumb", caption="doc")

        assert sent_json(httpx_mock) == {"chat_id": 1, "document": "file-id", "caption": "doc"}

    @pytest.mark.anyio
    async def test_set_webhook_drops_certificate(
        self, bot: TelegramClient, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(json={"ok": True, "result": True})

        async with bot:
            result = await bot.set_webhook(
                "https://example.com/hook", certificate=b"pem", maxConnections=40
            )

        assert result is True
        assert sent_json(httpx_mock) == {"url": "https://example.com/hook", "max_connections": 40}

    @pytest.mark.anyio
    async def test_get_file_link(self, bot: TelegramClient, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(
            json={"ok": True, "result": {"file_id": "F1", "file_path": "photos/file_1.jpg"}}
        )

        async with bot:
            link = await bot.get_file_link("F1")

        assert link == f"https://api.telegram.org/file/bot{TOKEN}/photos/file_1.jpg"

    @pytest.mark.anyio
    async def test_send_poll_and_location(
        self, bot: TelegramClient, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(json={"ok": True, "result": {}})
        httpx_mock.add_response(json={"ok": True, "result": {}})

        async with bot:
            await bot.send_poll("@channel", "Lunch?", ("Pizza", "Sushi"))
            await bot.send_location(1, 25.03, 121.56, live_period=60)

        assert sent_json(httpx_mock, 0) == {
            "chat_id": "@channel",
            "question": "Lunch?",
            "options": ["Pizza", "Sushi"],
        }
        assert sent_json(httpx_mock, 1) == {
            "chat_id": 1,
            "latitude": 25.03,
            "longitude": 121.56,
            "live_period": 60,
        }

    @pytest.mark.anyio
    async def test_get_chat_members_count(
        self, bot: TelegramClient, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(json={"ok": True, "result": 6})

        async with bot:
            assert await bot.get_chat_members_count(-1001) == 6

        assert httpx_mock.get_requests()[0].url.path.endswith("/getChatMembersCount")

    @pytest.mark.anyio
    async def test_get_updates(self, bot: TelegramClient, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(
            json={
                "ok": True,
                "result": [{"update_id": 1, "message": {"message_id": 2, "chat": {"id": 3}}}],
            }
        )

        async with bot:
            updates = await bot.get_updates(limit=10, allowedUpdates=["message"])

        assert sent_json(httpx_mock) == {"limit": 10, "allowed_updates": ["message"]}
        assert updates == [{"updateId": 1, "message": {"messageId": 2, "chat": {"id": 3}}}]
