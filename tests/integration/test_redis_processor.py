"""
Integration Tests: Consumption Loop over the Redis Store

Runs QueueProcessor end to end against RedisQueueStore. Uses the in-memory
Redis stub by default; set USE_REAL_REDIS=1 to run against a live server
configured through REDIS_HOST / REDIS_PORT.
"""

import asyncio
import os

import pytest
from pydantic import BaseModel

from queue_processor.core.config import QueueProcessorConfig
from queue_processor.core.exceptions import ErrorThresholdExceededError
from queue_processor.core.processor import BatchQueueProcessor, QueueProcessor, cancel_after
from queue_processor.infrastructure.message_queue import RedisQueueStore
from queue_processor.infrastructure.monitoring import ProcessorMetrics
from queue_processor.infrastructure.redis import RedisClient

RUN_TIMEOUT = 10


class ScoreItem(BaseModel):
    score_id: int
    user_id: int


@pytest.fixture
async def redis_backend(in_memory_redis_client):
    """Live Redis when USE_REAL_REDIS is set, otherwise the in-memory stub."""
    if os.getenv("USE_REAL_REDIS", "0").lower() not in ("1", "true", "yes"):
        yield in_memory_redis_client
        return

    client = RedisClient()
    yield await client.connect()
    await client.close()


@pytest.fixture
async def score_store(redis_backend, queue_name):
    store = RedisQueueStore(redis_backend, queue_name, payload_type=ScoreItem)
    yield store
    await store.clear()


@pytest.mark.integration
class TestRedisBackedProcessor:
    """QueueProcessor and BatchQueueProcessor over Redis lists."""

    async def test_typed_payloads_round_trip(self, score_store, queue_name):
        processor = QueueProcessor(score_store, QueueProcessorConfig(queue_name=queue_name, poll_timeout=0.05))
        cancel = asyncio.Event()
        received = []

        def handle(item):
            received.append(item.payload)
            if len(received) == 3:
                cancel.set()

        processor.received += handle

        await processor.push([ScoreItem(score_id=i, user_id=100 + i) for i in range(3)])
        await asyncio.wait_for(processor.run(cancel), RUN_TIMEOUT)

        assert [s.score_id for s in received] == [0, 1, 2]
        assert all(isinstance(s, ScoreItem) for s in received)

    async def test_retries_survive_the_wire(self, score_store, queue_name):
        metrics = ProcessorMetrics()
        processor = QueueProcessor(
            score_store, QueueProcessorConfig(queue_name=queue_name, poll_timeout=0.05), metrics=metrics
        )
        cancel = asyncio.Event()
        attempts = []

        def handle(item):
            attempts.append(item.total_retries)
            if len(attempts) == 4:
                cancel.set()
            raise RuntimeError("index unavailable")

        processor.received += handle

        await processor.push(ScoreItem(score_id=1, user_id=2))
        await asyncio.wait_for(processor.run(cancel), RUN_TIMEOUT)

        assert attempts == [0, 1, 2, 3]
        assert metrics.get_count("dropped", processor.name) == 1
        assert await processor.get_queue_size() == 0

    async def test_threshold_leaves_backlog_for_next_run(self, score_store, queue_name):
        config = QueueProcessorConfig(queue_name=queue_name, poll_timeout=0.05, error_threshold=2)
        failing = QueueProcessor(score_store, config)

        def fail(item):
            raise RuntimeError("outage")

        failing.received += fail

        await failing.push([ScoreItem(score_id=i, user_id=0) for i in range(5)])

        cancel = asyncio.Event()
        cancel_after(cancel, RUN_TIMEOUT)
        with pytest.raises(ErrorThresholdExceededError):
            await asyncio.wait_for(failing.run(cancel), RUN_TIMEOUT)

        recovered = []
        healthy = QueueProcessor(score_store, config)
        healthy.received += lambda item: recovered.append(item.payload.score_id)

        cancel = asyncio.Event()
        cancel.set()
        await asyncio.wait_for(healthy.run(cancel), RUN_TIMEOUT)

        # Item 2 tripped the breaker and was not pushed back
        assert sorted(recovered) == [0, 1, 3, 4]

    async def test_batch_processor_over_redis(self, score_store, queue_name):
        batches = []

        class BulkIndexer(BatchQueueProcessor):
            async def process_batch(self, items):
                batches.append([item.payload.score_id for item in items])

        config = QueueProcessorConfig(queue_name=queue_name, poll_timeout=0.05, batch_size=4)
        processor = BulkIndexer(score_store, config)

        await processor.push([ScoreItem(score_id=i, user_id=0) for i in range(6)])
        cancel = asyncio.Event()
        cancel.set()
        await asyncio.wait_for(processor.run(cancel), RUN_TIMEOUT)

        assert batches == [[0, 1, 2, 3], [4, 5]]
