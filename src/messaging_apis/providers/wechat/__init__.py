"""WeChat Official Account client."""

from .client import WechatClient

__all__ = ["WechatClient"]
