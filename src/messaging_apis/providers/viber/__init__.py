"""Viber chat API client."""

from .client import ViberClient, to_viber_message

__all__ = ["ViberClient", "to_viber_message"]
