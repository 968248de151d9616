"""LINE Messaging API and LINE Notify clients, and message builders."""

from . import messages
from .client import LineClient
from .notify import LineNotify
from .rich_menu import detect_image_type

__all__ = [
    "LineClient",
    "LineNotify",
    "detect_image_type",
    "messages",
]
