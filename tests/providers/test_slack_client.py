"""Tests for providers.slack OAuth and webhook clients."""

from __future__ import annotations

import json
from urllib.parse import parse_qs

import pytest
from pytest_httpx import HTTPXMock

from messaging_apis.core.config import SlackWebhookConfig
from messaging_apis.providers.common import MessagingAPIError
from messaging_apis.providers.slack import SlackOAuthClient, SlackWebhookClient

WEBHOOK_URL = "https://hooks.slack.com/services/T000/B000/XXXX"


@pytest.fixture
def slack() -> SlackOAuthClient:
    return SlackOAuthClient(access_token="xoxb-token")


def sent_form(httpx_mock: HTTPXMock, index: int = 0) -> dict[str, str]:
    content = httpx_mock.get_requests()[index].content.decode()
    return {key: values[0] for key, values in parse_qs(content).items()}


class TestSlackOAuthClient:
    """Tests for SlackOAuthClient."""

    @pytest.mark.anyio
    async def test_post_message_text(self, slack: SlackOAuthClient, httpx_mock: HTTPXMock) -> None:
        """Test messages are form-encoded with the token and camelCased back."""
        httpx_mock.add_response(
            json={"ok": True, "channel": "C1", "ts": "1.2", "message": {"bot_id": "B1"}}
        )

        async with slack:
            result = await slack.post_message("C1", "Hello")

        request = httpx_mock.get_requests()[0]
        assert str(request.url) == "https://slack.com/api/chat.postMessage"
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert sent_form(httpx_mock) == {"channel": "C1", "text": "Hello", "token": "xoxb-token"}
        assert result["message"] == {"botId": "B1"}

    @pytest.mark.anyio
    async def test_attachments_are_json_encoded(
        self, slack: SlackOAuthClient, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(json={"ok": True})

        async with slack:
            await slack.chat.post_message(
                channel="C1",
                attachments=[{"text": "hi", "callbackId": "cb", "actions": [{"name": "go"}]}],
                asUser=True,
            )

        form = sent_form(httpx_mock)
        assert json.loads(form["attachments"]) == [
            {"text": "hi", "callback_id": "cb", "actions": [{"name": "go"}]}
        ]
        assert form["as_user"] == "true"
        assert "text" not in form

    @pytest.mark.anyio
    async def test_metadata_keys_are_sent_untouched(
        self, slack: SlackOAuthClient, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(json={"ok": True})
        metadata = {"event_type": "task_created", "event_payload": {"taskId": "T1"}}

        async with slack:
            await slack.post_message("C1", "New task", metadata=metadata, unfurlLinks=False)

        form = sent_form(httpx_mock)
        assert json.loads(form["metadata"]) == metadata
        assert form["unfurl_links"] == "false"

    @pytest.mark.anyio
    async def test_ok_false_raises(self, slack: SlackOAuthClient, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(json={"ok": False, "error": "channel_not_found"})

        async with slack:
            with pytest.raises(MessagingAPIError) as exc_info:
                await slack.chat.update(channel="C404", ts="1.2", text="x")

        assert exc_info.value.message == "Slack API - channel_not_found"
        assert exc_info.value.status_code == 200

    @pytest.mark.anyio
    async def test_get_all_user_list(self, slack: SlackOAuthClient, httpx_mock: HTTPXMock) -> None:
        """Test cursor pagination stops at Slack's empty next_cursor."""
        httpx_mock.add_response(
            json={
                "ok": True,
                "members": [{"id": "U1", "real_name": "Ann"}],
                "response_metadata": {"next_cursor": "dXNlcjpVMEc5V0ZYTlo="},
            }
        )
        httpx_mock.add_response(
            json={
                "ok": True,
                "members": [{"id": "U2", "real_name": "Bob"}],
                "response_metadata": {"next_cursor": ""},
            }
        )

        async with slack:
            members = await slack.get_all_user_list(limit=1)

        assert members == [{"id": "U1", "realName": "Ann"}, {"id": "U2", "realName": "Bob"}]
        assert "cursor" not in sent_form(httpx_mock, 0)
        assert sent_form(httpx_mock, 1)["cursor"] == "dXNlcjpVMEc5V0ZYTlo="
        assert sent_form(httpx_mock, 1)["limit"] == "1"

    @pytest.mark.anyio
    async def test_get_user_info(self, slack: SlackOAuthClient, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(json={"ok": True, "user": {"id": "U1", "is_admin": False}})

        async with slack:
            user = await slack.get_user_info("U1")

        assert user == {"id": "U1", "isAdmin": False}

    @pytest.mark.anyio
    async def test_get_all_conversation_members(
        self, slack: SlackOAuthClient, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(
            json={"ok": True, "members": ["U1"], "response_metadata": {"next_cursor": "c2"}}
        )
        httpx_mock.add_response(json={"ok": True, "members": ["U2"]})

        async with slack:
            assert await slack.get_all_conversation_members("C1") == ["U1", "U2"]

    @pytest.mark.anyio
    async def test_scheduled_messages_list(
        self, slack: SlackOAuthClient, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(json={"ok": True, "scheduled_messages": []})

        async with slack:
            await slack.chat.scheduled_messages.list(channel="C1")

        assert httpx_mock.get_requests()[0].url.path == "/api/chat.scheduledMessages.list"

    @pytest.mark.anyio
    async def test_views_update_requires_an_id(self, slack: SlackOAuthClient) -> None:
        async with slack:
            with pytest.raises(ValueError, match="view_id or external_id"):
                await slack.views.update(view={"type": "modal"})

    @pytest.mark.anyio
    async def test_views_open(self, slack: SlackOAuthClient, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(json={"ok": True, "view": {"id": "V1"}})
        view = {"type": "modal", "title": {"type": "plain_text", "text": "Hi"}, "callbackId": "cb"}

        async with slack:
            await slack.views.open(trigger_id="T1", view=view)

        form = sent_form(httpx_mock)
        assert form["trigger_id"] == "T1"
        assert json.loads(form["view"])["callback_id"] == "cb"


class TestSlackWebhookClient:
    """Tests for SlackWebhookClient."""

    def test_empty_url_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="cannot be empty"):
            SlackWebhookClient(url="")

    def test_from_config(self) -> None:
        client = SlackWebhookClient.from_config(SlackWebhookConfig(url=WEBHOOK_URL))

        assert client.url == WEBHOOK_URL

    @pytest.mark.anyio
    async def test_send_text_posts_to_exact_url(self, httpx_mock: HTTPXMock) -> None:
        """Test the webhook URL is used verbatim, without a trailing slash."""
        httpx_mock.add_response(text="ok")

        async with SlackWebhookClient(url=WEBHOOK_URL) as hook:
            result = await hook.send_text("Deploy finished")

        request = httpx_mock.get_requests()[0]
        assert str(request.url) == WEBHOOK_URL
        assert json.loads(request.content) == {"text": "Deploy finished"}
        assert result == "ok"

    @pytest.mark.anyio
    async def test_send_attachment_keys_are_snake_cased(self, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(text="ok")

        async with SlackWebhookClient(url=WEBHOOK_URL) as hook:
            await hook.send_attachment({"fallback": "f", "authorName": "Bot"})

        assert json.loads(httpx_mock.get_requests()[0].content) == {
            "attachments": [{"fallback": "f", "author_name": "Bot"}]
        }

    @pytest.mark.anyio
    async def test_failure_text_becomes_message(self, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(status_code=400, text="invalid_payload")

        async with SlackWebhookClient(url=WEBHOOK_URL) as hook:
            with pytest.raises(MessagingAPIError) as exc_info:
                await hook.send_text("")

        assert exc_info.value.message == "Slack API - invalid_payload"
        assert exc_info.value.status_code == 400
