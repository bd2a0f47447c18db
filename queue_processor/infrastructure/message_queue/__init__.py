from .factory import QueueStoreFactory, get_queue_store
from .memory_queue import InMemoryQueueStore
from .redis_queue import EnvelopeSerializer, RedisQueueStore

__all__ = [
    "EnvelopeSerializer",
    "InMemoryQueueStore",
    "QueueStoreFactory",
    "RedisQueueStore",
    "get_queue_store",
]
