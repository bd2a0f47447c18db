"""
Schema Registry

Tracks which score index schema versions are deployed and which one is live.

Key Layout (prefix from SCHEMA_INDEX_PREFIX, empty by default):
    osu-queue:score-index:{prefix}active-schemas   SET of every deployed version
    osu-queue:score-index:{prefix}schema           STRING holding the live version

Invariant: the live version is always a member of the active set. Setting a
version live requires it to be active first, and the live version cannot be
removed until it is cleared.

Note:
    The check-then-write pairs are not transactional; concurrent deployers
    must coordinate externally.
"""

import redis.asyncio as redis
from redis.exceptions import RedisError

from queue_processor.core.config import constants
from queue_processor.core.config.constants import Stage
from queue_processor.core.exceptions import (
    SchemaIsCurrentError,
    SchemaNotActiveError,
    SchemaRegistryError,
)
from queue_processor.core.logging import get_logger

logger = get_logger(__name__)


class SchemaRegistry:
    """
    Redis-backed schema version registry.

    Usage:
        registry = SchemaRegistry(redis_client, index_prefix=settings.schema_registry.SCHEMA_INDEX_PREFIX)
        await registry.add_active_schema("v2")
        await registry.set_current_schema("v2")
        await registry.remove_active_schema("v1")
    """

    def __init__(self, redis_client: redis.Redis, index_prefix: str = ""):
        """
        Args:
            redis_client: Connected client created with ``decode_responses=True``
            index_prefix: Deployment prefix inserted before the key suffixes
        """
        self._redis = redis_client
        base = f"{constants.REDIS_KEY_SCHEMA_PREFIX}{index_prefix}"
        self._active_key = f"{base}{constants.REDIS_KEY_ACTIVE_SCHEMAS_SUFFIX}"
        self._current_key = f"{base}{constants.REDIS_KEY_CURRENT_SCHEMA_SUFFIX}"

    @property
    def active_schemas_key(self) -> str:
        return self._active_key

    @property
    def current_schema_key(self) -> str:
        return self._current_key

    async def add_active_schema(self, version: str) -> bool:
        """
        Add a version to the active set (it does not become live).

        Returns:
            True if the version was not active before
        """
        try:
            added = await self._redis.sadd(self._active_key, version)
        except RedisError as e:
            raise self._wrap(e, "add_active_schema", version) from e

        logger.info("Schema activated", stage=Stage.SCHEMA, version=version, added=bool(added))
        return bool(added)

    async def get_active_schemas(self) -> list[str]:
        """Every active version, past or future (unordered)."""
        try:
            members = await self._redis.smembers(self._active_key)
        except RedisError as e:
            raise self._wrap(e, "get_active_schemas") from e
        return list(members)

    async def get_current_schema(self) -> str:
        """The live version, or "" when none is set."""
        try:
            value = await self._redis.get(self._current_key)
        except RedisError as e:
            raise self._wrap(e, "get_current_schema") from e
        return value or ""

    async def set_current_schema(self, version: str) -> None:
        """
        Make an active version live.

        Raises:
            SchemaNotActiveError: If ``version`` is not in the active set
        """
        if version not in await self.get_active_schemas():
            raise SchemaNotActiveError(
                f"Schema {version!r} is not active; call add_active_schema first",
                details={"version": version},
            )

        try:
            await self._redis.set(self._current_key, version)
        except RedisError as e:
            raise self._wrap(e, "set_current_schema", version) from e

        logger.info("Current schema set", stage=Stage.SCHEMA, version=version)

    async def clear_current_schema(self) -> None:
        """Unset the live version."""
        try:
            await self._redis.delete(self._current_key)
        except RedisError as e:
            raise self._wrap(e, "clear_current_schema") from e

        logger.info("Current schema cleared", stage=Stage.SCHEMA)

    async def remove_active_schema(self, version: str) -> bool:
        """
        Remove a version from the active set.

        Returns:
            True if the version was active

        Raises:
            SchemaIsCurrentError: If ``version`` is live; clear it first
        """
        if await self.get_current_schema() == version:
            raise SchemaIsCurrentError(
                f"Schema {version!r} is current; call clear_current_schema first",
                details={"version": version},
            )

        try:
            removed = await self._redis.srem(self._active_key, version)
        except RedisError as e:
            raise self._wrap(e, "remove_active_schema", version) from e

        logger.info("Schema deactivated", stage=Stage.SCHEMA, version=version, removed=bool(removed))
        return bool(removed)

    @staticmethod
    def _wrap(error: RedisError, operation: str, version: str | None = None) -> SchemaRegistryError:
        logger.error("Schema registry command failed", stage=Stage.SCHEMA, operation=operation, error=str(error))
        return SchemaRegistryError.from_exception(error, operation=operation, version=version)
