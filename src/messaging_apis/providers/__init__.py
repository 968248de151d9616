"""Vendor API clients.

Directory Structure:
- common/: case conversion, request pipeline, pagination, errors
- line/: LINE Messaging API
- messenger/: Messenger Platform, batch builders and batch queue
- slack/: Slack Web API and incoming webhooks
- telegram/: Telegram Bot API
- viber/: Viber chat API
- wechat/: WeChat Official Account API

Use submodules directly for builders:
    from messaging_apis.providers.line import messages
    from messaging_apis.providers.messenger import batch
"""

from .common import (
    BatchRequest,
    BatchRequestError,
    FileUpload,
    MessagingAPIError,
    Page,
    RequestPipeline,
    ResultPolicy,
    fetch_all,
)
from .line import LineClient, LineNotify
from .messenger import MessengerBatchQueue, MessengerClient
from .slack import SlackOAuthClient, SlackWebhookClient
from .telegram import TelegramClient
from .viber import ViberClient
from .wechat import WechatClient

__all__ = [
    # Common
    "BatchRequest",
    "BatchRequestError",
    "FileUpload",
    "MessagingAPIError",
    "Page",
    "RequestPipeline",
    "ResultPolicy",
    "fetch_all",
    # Clients
    "LineClient",
    "LineNotify",
    "MessengerClient",
    "MessengerBatchQueue",
    "SlackOAuthClient",
    "SlackWebhookClient",
    "TelegramClient",
    "ViberClient",
    "WechatClient",
]
