"""Messaging APIs.

Async HTTP clients for six chat platforms, built on one shared
request/response pipeline:
- LINE Messaging API
- Messenger Platform (Graph API), with batch requests
- Slack Web API and incoming webhooks
- Telegram Bot API
- Viber chat API
- WeChat Official Account API

Example:
    ```python
    from messaging_apis import TelegramClient

    async with TelegramClient(access_token="123456:ABC") as bot:
        await bot.send_message(427770117, "Hello!")

    # Or build clients from configuration
    from messaging_apis import LineClient, MessagingConfig

    config = MessagingConfig.from_yaml("messaging.yaml")
    line = LineClient.from_config(config.line)
    ```
"""

from importlib.metadata import PackageNotFoundError, version

from .core import LoggingConfig, MessagingConfig, get_logger, setup_logging
from .providers import (
    BatchRequest,
    BatchRequestError,
    FileUpload,
    LineClient,
    LineNotify,
    MessagingAPIError,
    MessengerBatchQueue,
    MessengerClient,
    Page,
    SlackOAuthClient,
    SlackWebhookClient,
    TelegramClient,
    ViberClient,
    WechatClient,
    fetch_all,
)

__all__ = [
    "__version__",
    "LineClient",
    "LineNotify",
    "MessengerClient",
    "MessengerBatchQueue",
    "SlackOAuthClient",
    "SlackWebhookClient",
    "TelegramClient",
    "ViberClient",
    "WechatClient",
    "MessagingAPIError",
    "BatchRequestError",
    "BatchRequest",
    "FileUpload",
    "Page",
    "fetch_all",
    "MessagingConfig",
    "LoggingConfig",
    "get_logger",
    "setup_logging",
]

try:  # pragma: no cover - best-effort during development
    __version__ = version("messaging-apis")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
