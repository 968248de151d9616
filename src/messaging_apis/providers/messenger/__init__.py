"""Messenger Platform client, message and batch builders, and batch queue."""

from . import batch, messages
from .client import MessengerClient, app_secret_proof
from .queue import MessengerBatchQueue

__all__ = [
    "MessengerClient",
    "MessengerBatchQueue",
    "app_secret_proof",
    "batch",
    "messages",
]
