"""Telegram Bot API client."""

from .client import TelegramClient

__all__ = ["TelegramClient"]
