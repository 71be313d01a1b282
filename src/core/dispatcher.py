"""Sequential message dispatch.

Telethon may run event handlers concurrently. Handlers only enqueue, and a
single worker drains the queue so messages are processed one at a time in
delivery order.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from core.models import InboundMessage

LOGGER = logging.getLogger(__name__)

MessageHandler = Callable[[InboundMessage], Awaitable[None]]


class SequentialDispatcher:
    """Single-worker queue in front of a message handler."""

    def __init__(self, handler: MessageHandler) -> None:
        self._handler = handler
        self._queue: asyncio.Queue[InboundMessage] = asyncio.Queue()
        self._worker: Optional[asyncio.Task] = None

    def submit(self, message: InboundMessage) -> None:
        self._queue.put_nowait(message)

    def start(self) -> asyncio.Task:
        """Start the worker task on the running loop."""

        if self._worker is None or self._worker.done():
            self._worker = asyncio.create_task(self._run(), name="relay-worker")
        return self._worker

    async def join(self) -> None:
        """Wait until every submitted message has been handled."""

        await self._queue.join()

    async def stop(self) -> None:
        if self._worker is None:
            return
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None

    async def _run(self) -> None:
        while True:
            message = await self._queue.get()
            try:
                await self._handler(message)
            except Exception:
                # Per-message failures must never stop the listener.
                LOGGER.exception("Error while processing message from chat %s", message.chat_id)
            finally:
                self._queue.task_done()
