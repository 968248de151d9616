"""Tests for configuration models and loading."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from messaging_apis.core.config import (
    ClientConfigBase,
    LineConfig,
    MessagingConfig,
    MessengerConfig,
    SlackWebhookConfig,
    TelegramConfig,
    ViberConfig,
    WechatConfig,
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run from an empty directory with no MESSAGING_* variables set."""
    for key in list(os.environ):
        if key.upper().startswith("MESSAGING_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestVendorConfigs:
    """Tests for the per-vendor models."""

    def test_origin_is_normalised(self):
        """Test trailing slashes are stripped from origins."""
        config = ClientConfigBase(origin="http://localhost:8080/")

        assert config.origin == "http://localhost:8080"

    def test_origin_requires_scheme(self):
        with pytest.raises(ValidationError, match="origin must start with"):
            ClientConfigBase(origin="localhost:8080")

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            TelegramConfig(access_token="123:abc", timeout=0)

    def test_access_token_required(self):
        """Test an empty token is rejected."""
        with pytest.raises(ValidationError):
            LineConfig(access_token="")

    def test_messenger_defaults(self):
        """Test Messenger defaults to Graph API v6.0 without proof settings."""
        config = MessengerConfig(access_token="page-token")

        assert config.version == "6.0"
        assert config.skip_app_secret_proof is None

    def test_messenger_requires_secret_for_proof(self):
        """Test disabling the skip flag without a secret is rejected."""
        with pytest.raises(ValidationError, match="app_secret is required"):
            MessengerConfig(access_token="page-token", skip_app_secret_proof=False)

    def test_slack_webhook_url_validation(self):
        with pytest.raises(ValidationError, match="cannot be empty"):
            SlackWebhookConfig(url="")
        with pytest.raises(ValidationError, match="must start with"):
            SlackWebhookConfig(url="hooks.slack.com/services/T/B/X")

    def test_viber_sender_name_limit(self):
        """Test Viber sender names longer than 28 characters are rejected."""
        with pytest.raises(ValidationError):
            ViberConfig(access_token="t", sender={"name": "x" * 29})

        config = ViberConfig(access_token="t", sender={"name": "Bot"})
        assert config.sender.name == "Bot"
        assert config.sender.avatar is None

    def test_wechat_requires_credentials(self):
        with pytest.raises(ValidationError):
            WechatConfig(app_id="wx123")


class TestMessagingConfig:
    """Tests for the aggregated settings."""

    def test_defaults(self, clean_env):
        """Test no vendor is configured by default."""
        config = MessagingConfig()

        assert config.configured_vendors() == []
        assert config.logging.level == "INFO"

    def test_nested_environment_variables(self, clean_env, monkeypatch):
        """Test MESSAGING_<VENDOR>__<FIELD> variables fill vendor sections."""
        monkeypatch.setenv("MESSAGING_TELEGRAM__ACCESS_TOKEN", "123:abc")
        monkeypatch.setenv("MESSAGING_WECHAT__APP_ID", "wx123")
        monkeypatch.setenv("MESSAGING_WECHAT__APP_SECRET", "secret")

        config = MessagingConfig()

        assert config.telegram is not None
        assert config.telegram.access_token == "123:abc"
        assert config.wechat is not None
        assert config.wechat.app_id == "wx123"
        assert config.configured_vendors() == ["telegram", "wechat"]

    def test_dotenv_file(self, clean_env):
        """Test values are read from a .env file in the working directory."""
        (clean_env / ".env").write_text("MESSAGING_SLACK__ACCESS_TOKEN=xoxb-1\n", encoding="utf-8")

        config = MessagingConfig()

        assert config.slack is not None
        assert config.slack.access_token == "xoxb-1"

    def test_from_yaml(self, clean_env, monkeypatch):
        """Test YAML loading with environment variable expansion."""
        monkeypatch.setenv("LINE_TOKEN", "line-token")
        config_file = clean_env / "messaging.yaml"
        config_file.write_text(
            "\n".join(
                [
                    "logging:",
                    "  level: debug",
                    "line:",
                    "  access_token: ${LINE_TOKEN}",
                    "  channel_secret: shh",
                    "viber:",
                    "  access_token: viber-token",
                    "  sender:",
                    "    name: Sender",
                ]
            ),
            encoding="utf-8",
        )

        config = MessagingConfig.from_yaml(config_file)

        assert config.logging.level == "DEBUG"
        assert config.line is not None
        assert config.line.access_token == "line-token"
        assert config.viber is not None
        assert config.viber.sender.name == "Sender"
        assert config.configured_vendors() == ["line", "viber"]

    def test_from_yaml_missing_file(self, clean_env):
        with pytest.raises(FileNotFoundError):
            MessagingConfig.from_yaml(Path("missing.yaml"))

    def test_from_yaml_invalid_yaml(self, clean_env):
        config_file = clean_env / "broken.yaml"
        config_file.write_text("line: [unclosed", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid YAML"):
            MessagingConfig.from_yaml(config_file)

    def test_from_yaml_requires_mapping(self, clean_env):
        config_file = clean_env / "list.yaml"
        config_file.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ValueError, match="mapping"):
            MessagingConfig.from_yaml(config_file)

    def test_from_yaml_empty_file(self, clean_env):
        """Test an empty file yields the defaults."""
        config_file = clean_env / "empty.yaml"
        config_file.write_text("", encoding="utf-8")

        assert MessagingConfig.from_yaml(config_file).configured_vendors() == []
