"""
Pytest Configuration and Shared Test Fixtures

This module provides pytest configuration and reusable fixtures for all tests.
All fixtures defined here are automatically available to all test files.
"""

import asyncio
import uuid

import pytest

from queue_processor.core.config import QueueProcessorConfig
from queue_processor.core.processor import BatchQueueProcessor, QueueProcessor
from queue_processor.infrastructure.message_queue import InMemoryQueueStore, RedisQueueStore
from queue_processor.infrastructure.monitoring import ProcessorMetrics

# pytest-asyncio runs in auto mode (see pyproject.toml)


# ============================================================================
# Fake Redis
# ============================================================================


class InMemoryRedis:
    """
    In-memory stand-in for ``redis.asyncio.Redis`` created with
    ``decode_responses=True``.

    Covers the list, set and string commands the queue store and the schema
    registry use.
    """

    def __init__(self):
        self.data = {}

    @staticmethod
    def _decode(value):
        return value.decode("utf-8") if isinstance(value, bytes) else str(value)

    async def ping(self):
        return True

    async def aclose(self):
        pass

    # Strings

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value):
        self.data[key] = self._decode(value)
        return True

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
        return removed

    # Lists

    async def rpush(self, key, *values):
        items = self.data.setdefault(key, [])
        items.extend(self._decode(v) for v in values)
        return len(items)

    async def lpop(self, key):
        items = self.data.get(key)
        if not items:
            return None
        value = items.pop(0)
        if not items:
            del self.data[key]
        return value

    async def blpop(self, keys, timeout=0):
        deadline = asyncio.get_running_loop().time() + timeout
        while True:
            for key in keys:
                value = await self.lpop(key)
                if value is not None:
                    return [key, value]
            if asyncio.get_running_loop().time() >= deadline:
                return None
            await asyncio.sleep(0.005)

    async def llen(self, key):
        return len(self.data.get(key, []))

    # Sets

    async def sadd(self, key, *members):
        items = self.data.setdefault(key, set())
        before = len(items)
        items.update(self._decode(m) for m in members)
        return len(items) - before

    async def srem(self, key, *members):
        items = self.data.get(key, set())
        removed = 0
        for member in members:
            if member in items:
                items.discard(member)
                removed += 1
        if not items:
            self.data.pop(key, None)
        return removed

    async def smembers(self, key):
        return set(self.data.get(key, set()))


@pytest.fixture
def in_memory_redis_client():
    """In-memory Redis client stub (decode_responses=True semantics)."""
    return InMemoryRedis()


# ============================================================================
# Queue Fixtures
# ============================================================================


@pytest.fixture
def queue_name():
    """Unique queue name per test, like the original per-test queues."""
    return f"test-{uuid.uuid4().hex[:8]}"


@pytest.fixture
def queue_config(queue_name):
    """Processor configuration with a short poll so tests stay fast."""
    return QueueProcessorConfig(queue_name=queue_name, poll_timeout=0.05)


@pytest.fixture
def memory_store(queue_name):
    return InMemoryQueueStore(queue_name)


@pytest.fixture
def redis_store(in_memory_redis_client, queue_name):
    return RedisQueueStore(in_memory_redis_client, queue_name)


@pytest.fixture
def metrics():
    return ProcessorMetrics()


@pytest.fixture
def processor(memory_store, queue_config, metrics):
    """QueueProcessor over the in-memory store, with metrics."""
    return QueueProcessor(memory_store, queue_config, metrics=metrics)


@pytest.fixture
def batch_processor(memory_store, queue_name, metrics):
    """BatchQueueProcessor taking up to 5 items per iteration."""
    config = QueueProcessorConfig(queue_name=queue_name, poll_timeout=0.05, batch_size=5)
    return BatchQueueProcessor(memory_store, config, metrics=metrics)


@pytest.fixture
def cancel_event():
    return asyncio.Event()
