"""Slack Web API and incoming webhook clients."""

from .client import SlackOAuthClient
from .namespaces import SlackChatAPI, SlackViewsAPI
from .webhook import SlackWebhookClient

__all__ = [
    "SlackOAuthClient",
    "SlackWebhookClient",
    "SlackChatAPI",
    "SlackViewsAPI",
]
