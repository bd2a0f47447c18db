"""
Queue Store Factory

Factory pattern for creating queue store instances by backend name.
Supports the shared Redis list store and the in-memory store.
"""

import redis.asyncio as redis
from pydantic import BaseModel

from queue_processor.core.config import constants
from queue_processor.core.config.settings import Settings, get_settings
from queue_processor.core.interfaces import QueueStore
from queue_processor.infrastructure.message_queue.memory_queue import InMemoryQueueStore
from queue_processor.infrastructure.message_queue.redis_queue import RedisQueueStore
from queue_processor.infrastructure.redis import get_redis_client


class QueueStoreFactory:
    """
    Factory for creating queue store instances.

    Supports:
    - Redis lists (RedisQueueStore)
    - Process memory (InMemoryQueueStore)
    """

    def __init__(self):
        self._store_types = {
            "redis": RedisQueueStore,
            "memory": InMemoryQueueStore,
        }

    def get(
        self,
        backend: str,
        queue_name: str,
        *,
        namespace: str = constants.QUEUE_NAMESPACE,
        redis_client: redis.Redis | None = None,
        payload_type: type[BaseModel] | None = None,
        push_retry_attempts: int = constants.PUSH_RETRY_ATTEMPTS,
    ) -> QueueStore:
        """
        Get a queue store instance.

        Args:
            backend: "redis" or "memory"
            queue_name: Logical queue name
            namespace: Key prefix
            redis_client: Connected client; defaults to the global client,
                which must already be connected
            payload_type: Optional pydantic model for Redis payloads
            push_retry_attempts: Redis push attempts on connection errors

        Returns:
            QueueStore

        Raises:
            ValueError: If backend is not supported
        """
        backend_lower = backend.lower()

        if backend_lower not in self._store_types:
            raise ValueError(
                f"Unknown queue backend: {backend}. "
                f"Available backends: {', '.join(self._store_types.keys())}"
            )

        if backend_lower == "memory":
            return InMemoryQueueStore(queue_name, namespace=namespace)

        return RedisQueueStore(
            redis_client if redis_client is not None else get_redis_client().client,
            queue_name,
            namespace=namespace,
            payload_type=payload_type,
            push_retry_attempts=push_retry_attempts,
        )

    def get_available(self) -> list[str]:
        """Names of the supported backends."""
        return list(self._store_types.keys())


_factory = QueueStoreFactory()


def get_queue_store(
    backend: str = "redis",
    queue_name: str | None = None,
    *,
    settings: Settings | None = None,
    redis_client: redis.Redis | None = None,
    payload_type: type[BaseModel] | None = None,
) -> QueueStore:
    """
    Build a queue store from settings.

    ``QUEUE_NAME``, ``QUEUE_NAMESPACE`` and ``QUEUE_PUSH_RETRY_ATTEMPTS`` fill
    in whatever the caller does not pass.
    """
    queue = (settings or get_settings()).queue
    return _factory.get(
        backend,
        queue_name or queue.QUEUE_NAME,
        namespace=queue.QUEUE_NAMESPACE,
        redis_client=redis_client,
        payload_type=payload_type,
        push_retry_attempts=queue.QUEUE_PUSH_RETRY_ATTEMPTS,
    )
