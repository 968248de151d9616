"""Base class for vendor API clients.

This module provides the connection lifecycle shared by all vendor clients.
A client owns one :class:`~.pipeline.RequestPipeline` per vendor origin and
opens or closes them together.
"""

from __future__ import annotations

from typing import Any

from ...core.logger import get_logger
from .pipeline import RequestPipeline, RequestHook

logger = get_logger("client")


class BaseAPIClient:
    """Async context-managed owner of one or more request pipelines.

    Subclasses build their pipelines in ``__init__`` and register them with
    :meth:`_register_pipeline`.

    Example:
        ```python
        async with TelegramClient(access_token="123:abc") as client:
            me = await client.get_me()
        ```
    """

    vendor: str = ""

    def __init__(self, on_request: RequestHook | None = None):
        self.on_request = on_request
        self._pipelines: list[RequestPipeline] = []

    def _register_pipeline(self, pipeline: RequestPipeline) -> RequestPipeline:
        self._pipelines.append(pipeline)
        return pipeline

    async def __aenter__(self) -> Any:
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def connect(self) -> None:
        """Initialize HTTP clients for every origin."""
        for pipeline in self._pipelines:
            await pipeline.connect()
        logger.debug("%s client connected", self.vendor)

    async def close(self) -> None:
        """Close HTTP clients."""
        for pipeline in self._pipelines:
            await pipeline.close()
        logger.debug("%s client closed", self.vendor)

    @property
    def is_connected(self) -> bool:
        return bool(self._pipelines) and all(p.is_connected for p in self._pipelines)
