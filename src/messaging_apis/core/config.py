"""Configuration management for the messaging API clients.

This module provides configuration models and loading functionality using Pydantic
for validation and type safety. Every vendor client can be built from its model
through ``Client.from_config(...)``; :class:`MessagingConfig` aggregates them and
can be filled from environment variables, a ``.env`` file or a YAML document.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_DOTENV_LOADED = False


def _load_env_once() -> None:
    """Load environment variables from a .env file exactly once."""

    global _DOTENV_LOADED
    if not _DOTENV_LOADED:
        load_dotenv()
        _DOTENV_LOADED = True


def _expand_env_vars(data: Any) -> Any:
    """Recursively expand environment variables in configuration data."""

    if isinstance(data, str):
        return os.path.expandvars(data)
    if isinstance(data, dict):
        return {key: _expand_env_vars(value) for key, value in data.items()}
    if isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    return data


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format for the file handler",
    )
    log_file: str | None = Field(default=None, description="Log file path")
    max_bytes: int = Field(default=10485760, description="Max log file size (10MB)")
    backup_count: int = Field(default=5, description="Number of backup files")
    show_path: bool = Field(default=False, description="Show source path in console output")

    @field_validator("level", mode="before")
    @classmethod
    def normalise_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value


class ClientConfigBase(BaseModel):
    """Settings shared by every vendor client."""

    origin: str | None = Field(
        default=None,
        description="Override the vendor's production API origin (testing or proxies)",
    )
    timeout: float = Field(default=30.0, gt=0.0, description="HTTP timeout in seconds")

    @field_validator("origin")
    @classmethod
    def validate_origin(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip().rstrip("/")
        if not value.startswith(("http://", "https://")):
            raise ValueError("origin must start with http:// or https://")
        return value


class LineConfig(ClientConfigBase):
    """Configuration for the LINE Messaging API client."""

    access_token: str = Field(..., min_length=1, description="Channel access token")
    channel_secret: str | None = Field(default=None, description="Channel secret")
    data_origin: str | None = Field(
        default=None, description="Override the content (data) API origin"
    )


class LineNotifyConfig(ClientConfigBase):
    """Configuration for the LINE Notify OAuth client."""

    client_id: str = Field(..., min_length=1, description="LINE Notify client ID")
    client_secret: str = Field(..., min_length=1, description="LINE Notify client secret")
    redirect_uri: str = Field(..., description="OAuth callback URL")
    api_origin: str | None = Field(
        default=None, description="Override the notify API origin"
    )


class MessengerConfig(ClientConfigBase):
    """Configuration for the Messenger Platform client."""

    access_token: str = Field(..., min_length=1, description="Page access token")
    app_id: str | None = Field(default=None, description="Facebook app ID")
    app_secret: str | None = Field(default=None, description="Facebook app secret")
    version: str = Field(default="6.0", description="Graph API version")
    skip_app_secret_proof: bool | None = Field(
        default=None,
        description="Skip appsecret_proof; defaults to True when no app secret is set",
    )

    @model_validator(mode="after")
    def validate_app_secret_proof(self) -> MessengerConfig:
        if self.skip_app_secret_proof is False and not self.app_secret:
            raise ValueError("app_secret is required when skip_app_secret_proof is false")
        return self


class SlackConfig(ClientConfigBase):
    """Configuration for the Slack Web API (OAuth token) client."""

    access_token: str = Field(..., min_length=1, description="Bot or user OAuth token")


class SlackWebhookConfig(ClientConfigBase):
    """Configuration for a Slack incoming webhook."""

    url: str = Field(..., description="Incoming webhook URL")

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        if not value:
            raise ValueError("Webhook URL cannot be empty")
        if not value.startswith(("http://", "https://")):
            raise ValueError("Webhook URL must start with http:// or https://")
        return value


class TelegramConfig(ClientConfigBase):
    """Configuration for the Telegram Bot API client."""

    access_token: str = Field(..., min_length=1, description="Bot token from BotFather")


class ViberSenderConfig(BaseModel):
    """Sender shown on outgoing Viber messages."""

    name: str = Field(..., max_length=28, description="Sender display name")
    avatar: str | None = Field(default=None, description="Sender avatar URL")


class ViberConfig(ClientConfigBase):
    """Configuration for the Viber REST bot API client."""

    access_token: str = Field(..., min_length=1, description="Viber auth token")
    sender: ViberSenderConfig = Field(..., description="Default message sender")


class WechatConfig(ClientConfigBase):
    """Configuration for the WeChat official account client."""

    app_id: str = Field(..., min_length=1, description="WeChat app ID")
    app_secret: str = Field(..., min_length=1, description="WeChat app secret")


class MessagingConfig(BaseSettings):
    """Aggregated configuration for all vendor clients.

    Values can come from keyword arguments, ``MESSAGING_*`` environment
    variables (nested with ``__``, e.g. ``MESSAGING_LINE__ACCESS_TOKEN``),
    a ``.env`` file, or :meth:`from_yaml`.
    """

    model_config = SettingsConfigDict(
        env_prefix="MESSAGING_",
        env_nested_delimiter="__",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    line: LineConfig | None = None
    line_notify: LineNotifyConfig | None = None
    messenger: MessengerConfig | None = None
    slack: SlackConfig | None = None
    slack_webhook: SlackWebhookConfig | None = None
    telegram: TelegramConfig | None = None
    viber: ViberConfig | None = None
    wechat: WechatConfig | None = None

    @classmethod
    def from_yaml(cls, path: str | Path) -> MessagingConfig:
        """Load configuration from a YAML file."""

        _load_env_once()
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, encoding="utf-8") as handle:
            try:
                config_data = yaml.safe_load(handle)
            except yaml.YAMLError as exc:
                raise ValueError(f"Invalid YAML in config file: {exc}") from exc

        if not config_data:
            config_data = {}
        if not isinstance(config_data, dict):
            raise ValueError("Configuration file must contain a mapping at the top level")

        config_data = _expand_env_vars(config_data)
        return cls(**config_data)

    def configured_vendors(self) -> list[str]:
        """Names of the vendor sections that are present."""
        vendors = ["line", "messenger", "slack", "slack_webhook", "telegram", "viber", "wechat"]
        return [name for name in vendors if getattr(self, name) is not None]
