"""
In-Memory Queue Store

FIFO store with the same contract as the Redis list store, for tests and
single-process development.

Concurrency:
- One ``asyncio.Condition`` per event loop guards the deque, so a batch
  push is visible all at once and each dequeue hands an envelope to exactly one consumer
- Envelopes are copied on push, so a producer mutating its envelope after
  pushing never affects the queued one
"""

import asyncio
from collections import deque
from collections.abc import Sequence

from queue_processor.core.config.constants import QUEUE_NAMESPACE, Stage
from queue_processor.core.logging import get_logger
from queue_processor.core.models import QueueItem

logger = get_logger(__name__)


class InMemoryQueueStore:
    """
    Process-local queue store.

    Usage:
        store = InMemoryQueueStore("scores")
        await store.push(QueueItem.wrap({"id": 1}))
        item = await store.try_dequeue(timeout=0.1)
    """

    def __init__(self, queue_name: str, namespace: str = QUEUE_NAMESPACE):
        self._name = f"{namespace}:{queue_name}"
        self._items: deque[QueueItem] = deque()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._condition: asyncio.Condition | None = None

    @property
    def name(self) -> str:
        return self._name

    def _get_condition(self) -> asyncio.Condition:
        # Rebind when reused from a later asyncio.run()
        loop = asyncio.get_running_loop()
        if self._condition is None or self._loop is not loop:
            self._loop = loop
            self._condition = asyncio.Condition()
        return self._condition

    async def push(self, items: QueueItem | Sequence[QueueItem]) -> None:
        batch = [items] if isinstance(items, QueueItem) else list(items)
        if not batch:
            return

        condition = self._get_condition()
        async with condition:
            self._items.extend(item.fresh_copy() for item in batch)
            condition.notify(len(batch))

        logger.debug("Items pushed", stage=Stage.QUEUE_PUSH, queue=self._name, count=len(batch))

    async def try_dequeue(self, timeout: float) -> QueueItem | None:
        condition = self._get_condition()
        async with condition:
            if not self._items and timeout > 0:
                try:
                    await asyncio.wait_for(
                        condition.wait_for(lambda: bool(self._items)), timeout
                    )
                except asyncio.TimeoutError:
                    return None

            if not self._items:
                return None
            return self._items.popleft()

    async def size(self) -> int:
        return len(self._items)

    async def clear(self) -> None:
        async with self._get_condition():
            self._items.clear()
        logger.info("Queue cleared", stage=Stage.QUEUE_CLEAR, queue=self._name)
