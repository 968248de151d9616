"""Core modules for the messaging API clients.

This package contains:
- Configuration management (pydantic models, environment and YAML loading)
- Logging utilities
"""

from .config import (
    ClientConfigBase,
    LineConfig,
    LineNotifyConfig,
    LoggingConfig,
    MessagingConfig,
    MessengerConfig,
    SlackConfig,
    SlackWebhookConfig,
    TelegramConfig,
    ViberConfig,
    ViberSenderConfig,
    WechatConfig,
)
from .logger import get_logger, setup_logging

__all__ = [
    # Config
    "ClientConfigBase",
    "LineConfig",
    "LineNotifyConfig",
    "LoggingConfig",
    "MessagingConfig",
    "MessengerConfig",
    "SlackConfig",
    "SlackWebhookConfig",
    "TelegramConfig",
    "ViberConfig",
    "ViberSenderConfig",
    "WechatConfig",
    # Logging
    "get_logger",
    "setup_logging",
]
