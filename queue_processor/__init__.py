"""
Queue Processor

Reliable at-least-once consumption of a shared Redis-backed work queue, with
bounded per-item retries and a per-run error threshold.

Usage:
------
```python
import asyncio

from queue_processor import QueueProcessor, QueueProcessorConfig, get_queue_store
from queue_processor.infrastructure.redis import get_redis_client

async def main():
    await get_redis_client().connect()
    processor = QueueProcessor(get_queue_store("redis", "score-index"), QueueProcessorConfig())
    processor.received += handle_score

    cancel = asyncio.Event()
    await processor.run(cancel)
```
"""

from queue_processor.core.config import QueueProcessorConfig, get_settings
from queue_processor.core.events import EventHook
from queue_processor.core.exceptions import (
    ErrorThresholdExceededError,
    ItemFailedError,
    QueueConnectionError,
    QueueProcessorError,
)
from queue_processor.core.models import QueueItem
from queue_processor.core.processor import BatchQueueProcessor, QueueProcessor, cancel_after
from queue_processor.infrastructure.message_queue import (
    InMemoryQueueStore,
    RedisQueueStore,
    get_queue_store,
)
from queue_processor.infrastructure.monitoring import ProcessorMetrics
from queue_processor.infrastructure.schema import SchemaRegistry

__version__ = "1.0.0"

__all__ = [
    "BatchQueueProcessor",
    "ErrorThresholdExceededError",
    "EventHook",
    "InMemoryQueueStore",
    "ItemFailedError",
    "ProcessorMetrics",
    "QueueConnectionError",
    "QueueItem",
    "QueueProcessor",
    "QueueProcessorConfig",
    "QueueProcessorError",
    "RedisQueueStore",
    "SchemaRegistry",
    "cancel_after",
    "get_queue_store",
    "get_settings",
]
