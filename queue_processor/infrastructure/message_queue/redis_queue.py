"""
Redis List Queue Store

Architecture:
    RedisQueueStore (Public API)
        ├── EnvelopeSerializer (orjson wire codec)
        └── push retry (tenacity, connection errors only)

Key Layout:
    {namespace}:{queue_name}   e.g. "osu-queue:score-index"

Commands:
    - RPUSH key v1 v2 ...: one command per batch, so a batch is atomic
    - BLPOP key timeout: bounded blocking pop, atomic across consumers
    - LPOP key: non-blocking pop for a zero timeout
    - LLEN / DEL: size and clear

Why a plain list instead of Redis Streams?
    - The envelope carries its own retry count; failed items are pushed back
      as new entries, so no pending-entry bookkeeping is needed
    - Producers in other processes only need RPUSH
"""

from collections.abc import Sequence
from typing import Any

import orjson
import redis.asyncio as redis
from pydantic import BaseModel
from redis.exceptions import ConnectionError, RedisError, TimeoutError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter

from queue_processor.core.config import constants
from queue_processor.core.config.constants import Stage
from queue_processor.core.exceptions import QueueConnectionError, QueueSerializationError
from queue_processor.core.logging import get_logger
from queue_processor.core.models import QueueItem

logger = get_logger(__name__)


# =============================================================================
# LAYER 1: ENVELOPE SERIALIZATION
# =============================================================================


class EnvelopeSerializer:
    """
    Encodes envelopes as compact JSON.

    Wire format:
        {"data": <payload>, "total_retries": <int>}

    ``failed`` and ``exception`` are in-flight state and never hit the wire.
    """

    def __init__(self, payload_type: type[BaseModel] | None = None):
        self._payload_type = payload_type

    def encode(self, item: QueueItem) -> bytes:
        try:
            return orjson.dumps(item.to_dict())
        except TypeError as e:
            raise QueueSerializationError.from_exception(
                e, message=f"Payload is not JSON serializable: {e}"
            ) from e

    def decode(self, raw: str | bytes) -> QueueItem:
        try:
            data: Any = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            raise QueueSerializationError.from_exception(e, message=f"Malformed queue entry: {e}") from e

        if not isinstance(data, dict):
            raise QueueSerializationError(
                "Malformed queue entry: expected an object", details={"type": type(data).__name__}
            )
        return QueueItem.from_dict(data, payload_type=self._payload_type)


# =============================================================================
# LAYER 2: PUBLIC API
# =============================================================================


class RedisQueueStore:
    """
    Shared FIFO queue backed by a Redis list.

    Usage:
        client = await get_redis_client().connect()
        store = RedisQueueStore(client, "score-index")
        await store.push([QueueItem.wrap(p) for p in payloads])
        item = await store.try_dequeue(timeout=0.1)
    """

    def __init__(
        self,
        redis_client: redis.Redis,
        queue_name: str,
        namespace: str = constants.QUEUE_NAMESPACE,
        payload_type: type[BaseModel] | None = None,
        push_retry_attempts: int = constants.PUSH_RETRY_ATTEMPTS,
    ):
        """
        Args:
            redis_client: Connected ``redis.asyncio.Redis`` (decode_responses
                may be on or off)
            queue_name: Logical queue name
            namespace: Key prefix shared by every queue of the system
            payload_type: Optional pydantic model payloads are validated into
            push_retry_attempts: Push attempts on connection errors
        """
        self._redis = redis_client
        self._key = f"{namespace}:{queue_name}"
        self._serializer = EnvelopeSerializer(payload_type)
        self._rpush = self._create_push_with_retry(push_retry_attempts)

    @property
    def name(self) -> str:
        return self._key

    def _create_push_with_retry(self, attempts: int):
        """
        Wrap RPUSH with exponential backoff on transient connection errors.

        A retried RPUSH may duplicate a batch if the first attempt reached
        Redis before the connection dropped; consumers are at-least-once.
        """

        @retry(
            stop=stop_after_attempt(attempts),
            wait=wait_exponential_jitter(
                initial=constants.PUSH_RETRY_BASE_DELAY, max=constants.PUSH_RETRY_MAX_DELAY
            ),
            retry=retry_if_exception_type((ConnectionError, TimeoutError)),
            reraise=True,
            before_sleep=lambda retry_state: logger.warning(
                "Push retry",
                stage=Stage.QUEUE_PUSH,
                attempt=retry_state.attempt_number,
                queue=self._key,
            ),
        )
        async def _rpush(values: list[bytes]) -> int:
            return await self._redis.rpush(self._key, *values)

        return _rpush

    async def push(self, items: QueueItem | Sequence[QueueItem]) -> None:
        batch = [items] if isinstance(items, QueueItem) else list(items)
        if not batch:
            return

        values = [self._serializer.encode(item) for item in batch]

        try:
            await self._rpush(values)
        except RedisError as e:
            logger.error("Push failed", stage=Stage.QUEUE_ERROR, queue=self._key, error=str(e))
            raise QueueConnectionError.from_exception(
                e, message=f"Failed to push to {self._key}: {e}", queue=self._key, count=len(values)
            ) from e

        logger.debug("Items pushed", stage=Stage.QUEUE_PUSH, queue=self._key, count=len(values))

    async def try_dequeue(self, timeout: float) -> QueueItem | None:
        try:
            if timeout > 0:
                result = await self._redis.blpop([self._key], timeout=timeout)
                raw = result[1] if result else None
            else:
                raw = await self._redis.lpop(self._key)
        except RedisError as e:
            logger.error("Dequeue failed", stage=Stage.QUEUE_ERROR, queue=self._key, error=str(e))
            raise QueueConnectionError.from_exception(
                e, message=f"Failed to dequeue from {self._key}: {e}", queue=self._key
            ) from e

        if raw is None:
            return None

        return self._serializer.decode(raw)

    async def size(self) -> int:
        try:
            return int(await self._redis.llen(self._key))
        except RedisError as e:
            raise QueueConnectionError.from_exception(e, queue=self._key) from e

    async def clear(self) -> None:
        try:
            await self._redis.delete(self._key)
        except RedisError as e:
            raise QueueConnectionError.from_exception(e, queue=self._key) from e

        logger.info("Queue cleared", stage=Stage.QUEUE_CLEAR, queue=self._key)
