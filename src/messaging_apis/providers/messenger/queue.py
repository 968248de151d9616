"""Batch queue that coalesces individual Messenger calls into Graph batches.

Callers push single :class:`~..common.models.BatchRequest` items and await
their own result; the queue submits up to 50 queued items per batch, either as
soon as 50 are waiting or on each periodic flush.

Example:
    ```python
    from messaging_apis.providers.messenger import MessengerBatchQueue, batch

    async with MessengerBatchQueue(client) as queue:
        results = await asyncio.gather(
            queue.push(batch.send_text("PSID_1", "Hello")),
            queue.push(batch.send_text("PSID_2", "Hello")),
        )
    ```
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from ...core.logger import get_logger
from ..common.errors import BatchRequestError
from ..common.models import BatchRequest
from .send import MAX_BATCH_SIZE

if TYPE_CHECKING:
    from .client import MessengerClient

logger = get_logger("messenger.queue")


class MessengerBatchQueue:
    """Queue of pending batch items with size and time based flushing.

    Args:
        client: Connected Messenger client used to submit batches.
        interval: Seconds between periodic flushes while running.
        max_size: Items per batch; a full queue flushes immediately.
    """

    def __init__(
        self,
        client: MessengerClient,
        *,
        interval: float = 1.0,
        max_size: int = MAX_BATCH_SIZE,
    ):
        if not 0 < max_size <= MAX_BATCH_SIZE:
            raise ValueError(f"max_size must be between 1 and {MAX_BATCH_SIZE}")
        self.client = client
        self.interval = interval
        self.max_size = max_size
        self._pending: list[tuple[BatchRequest, asyncio.Future[Any]]] = []
        self._runner: asyncio.Task[None] | None = None
        self._stopping = False
        self._wakeup = asyncio.Event()

    def __len__(self) -> int:
        return len(self._pending)

    async def __aenter__(self) -> MessengerBatchQueue:
        self.start()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.stop()

    def submit(self, request: BatchRequest) -> asyncio.Future[Any]:
        """Queue ``request`` and return the future of its slot."""
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._pending.append((request, future))
        return future

    async def push(self, request: BatchRequest) -> Any:
        """Queue ``request`` and wait for its result.

        Returns:
            The item's camelCased response body, or None when the vendor
            omitted it.

        Raises:
            BatchRequestError: If this item failed inside the batch.
            MessagingAPIError: If the whole batch request failed.
        """
        future = self.submit(request)
        if len(self._pending) >= self.max_size:
            await self.flush()
            # A full batch went out, so the next periodic flush starts over
            self._wakeup.set()
        return await future

    async def flush(self) -> None:
        """Submit up to ``max_size`` queued items as one batch."""
        items = self._pending[: self.max_size]
        del self._pending[: self.max_size]
        if not items:
            return

        logger.debug("Flushing %d batch request(s)", len(items))
        try:
            slots = await self.client.send_batch([request for request, _ in items])
        except asyncio.CancelledError:
            for _, future in items:
                future.cancel()
            raise
        except Exception as exc:
            for _, future in items:
                if not future.done():
                    future.set_exception(exc)
            return

        for (_, future), slot in zip(items, slots):
            if future.done():
                continue
            if isinstance(slot, BatchRequestError):
                future.set_exception(slot)
            else:
                future.set_result(slot)

    async def run(self) -> None:
        """Flush every ``interval`` seconds until :meth:`stop` is called.

        The interval restarts whenever a full batch is flushed by :meth:`push`.
        """
        while not self._stopping:
            try:
                await asyncio.wait_for(self._wakeup.wait(), self.interval)
            except asyncio.TimeoutError:
                while self._pending and not self._stopping:
                    await self.flush()
            else:
                self._wakeup.clear()

    def start(self) -> None:
        """Start periodic flushing in a background task."""
        if self._runner is None or self._runner.done():
            self._stopping = False
            self._wakeup = asyncio.Event()
            self._runner = asyncio.create_task(self.run())

    async def stop(self) -> None:
        """Stop periodic flushing and submit everything still queued.

        A flush already in flight is awaited, never cancelled.
        """
        if self._runner is not None:
            self._stopping = True
            self._wakeup.set()
            await self._runner
            self._runner = None
        while self._pending:
            await self.flush()
