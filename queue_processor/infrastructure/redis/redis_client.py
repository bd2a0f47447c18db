"""
Redis Client with Connection Pooling

Owns the ``redis.asyncio`` connection pool shared by the queue store and the
schema registry.

Pool Configuration:
- Max connections: REDIS_MAX_CONNECTIONS (default 50)
- Socket timeout: REDIS_SOCKET_TIMEOUT, kept above the longest poll timeout so
  a blocking pop never trips it
- Decode responses: True (returns strings, not bytes)
"""

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool
from redis.exceptions import ConnectionError, TimeoutError

from queue_processor.core.config.constants import Stage
from queue_processor.core.config.settings import Settings, get_settings
from queue_processor.core.exceptions import QueueConnectionError
from queue_processor.core.logging import get_logger

logger = get_logger(__name__)


class RedisClient:
    """
    Async Redis connection holder.

    Usage:
        client = RedisClient()
        await client.connect()
        store = RedisQueueStore(client.client, "scores")
        ...
        await client.close()
    """

    def __init__(self, settings: Settings | None = None):
        self._settings = settings or get_settings()
        self._pool: ConnectionPool | None = None
        self._client: redis.Redis | None = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> redis.Redis:
        """
        The connected ``redis.asyncio.Redis`` instance.

        Raises:
            QueueConnectionError: If ``connect`` has not been awaited
        """
        if self._client is None:
            raise QueueConnectionError("Redis client is not connected; await connect() first")
        return self._client

    async def connect(self) -> redis.Redis:
        """
        Create the connection pool and verify it with PING.

        STAGE-REDIS.1: Connection establishment

        Returns:
            redis.Redis: Connected client (idempotent)

        Raises:
            QueueConnectionError: If Redis cannot be reached
        """
        if self._client is not None:
            return self._client

        cfg = self._settings.redis
        pool = ConnectionPool(
            host=cfg.REDIS_HOST,
            port=cfg.REDIS_PORT,
            db=cfg.REDIS_DB,
            password=cfg.REDIS_PASSWORD,
            max_connections=cfg.REDIS_MAX_CONNECTIONS,
            socket_connect_timeout=cfg.REDIS_SOCKET_CONNECT_TIMEOUT,
            socket_timeout=cfg.REDIS_SOCKET_TIMEOUT,
            decode_responses=True,
        )
        client = redis.Redis(connection_pool=pool)

        try:
            await client.ping()
        except (ConnectionError, TimeoutError) as e:
            await pool.disconnect()
            logger.error("Failed to connect to Redis", stage=Stage.REDIS, error=str(e))
            raise QueueConnectionError.from_exception(
                e,
                message=f"Failed to connect to Redis: {e}",
                host=cfg.REDIS_HOST,
                port=cfg.REDIS_PORT,
            ) from e

        self._pool = pool
        self._client = client
        logger.info(
            "Redis connected",
            stage=Stage.REDIS,
            host=cfg.REDIS_HOST,
            port=cfg.REDIS_PORT,
            max_connections=cfg.REDIS_MAX_CONNECTIONS,
        )
        return client

    async def ping(self) -> bool:
        """True if connected and Redis answers PING."""
        if self._client is None:
            return False
        try:
            return bool(await self._client.ping())
        except (ConnectionError, TimeoutError):
            return False

    async def close(self) -> None:
        """Close the client and disconnect the pool."""
        if self._client is not None:
            await self._client.aclose()
        if self._pool is not None:
            await self._pool.disconnect()

        self._client = None
        self._pool = None
        logger.info("Redis disconnected", stage=Stage.REDIS)


# =============================================================================
# GLOBAL INSTANCE (SINGLETON PATTERN)
# =============================================================================

_redis_client: RedisClient | None = None


def get_redis_client() -> RedisClient:
    """
    Get the global Redis client instance (singleton).

    Returns:
        RedisClient: Global (possibly not yet connected) client
    """
    global _redis_client

    if _redis_client is None:
        _redis_client = RedisClient()

    return _redis_client


async def close_redis() -> None:
    """Close and forget the global Redis client."""
    global _redis_client

    if _redis_client is not None:
        await _redis_client.close()
        _redis_client = None
