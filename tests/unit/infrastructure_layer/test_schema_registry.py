"""
Unit Tests for the Schema Registry
"""

from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError

from queue_processor.core.exceptions import (
    SchemaIsCurrentError,
    SchemaNotActiveError,
    SchemaRegistryError,
)
from queue_processor.infrastructure.schema import SchemaRegistry


@pytest.fixture
def registry(in_memory_redis_client):
    return SchemaRegistry(in_memory_redis_client)


@pytest.mark.unit
class TestSchemaRegistryKeys:
    """Key layout with and without a deployment prefix."""

    def test_default_keys(self, registry):
        assert registry.active_schemas_key == "osu-queue:score-index:active-schemas"
        assert registry.current_schema_key == "osu-queue:score-index:schema"

    def test_prefixed_keys(self, in_memory_redis_client):
        registry = SchemaRegistry(in_memory_redis_client, index_prefix="staging_")

        assert registry.active_schemas_key == "osu-queue:score-index:staging_active-schemas"
        assert registry.current_schema_key == "osu-queue:score-index:staging_schema"


@pytest.mark.unit
class TestSchemaRegistry:
    """Test suite for SchemaRegistry."""

    async def test_add_active_schema(self, registry):
        assert await registry.add_active_schema("1") is True
        assert await registry.add_active_schema("1") is False

        assert await registry.get_active_schemas() == ["1"]

    async def test_current_schema_empty_when_unset(self, registry):
        assert await registry.get_current_schema() == ""

    async def test_set_current_requires_active(self, registry):
        with pytest.raises(SchemaNotActiveError):
            await registry.set_current_schema("2")

        assert await registry.get_current_schema() == ""

    async def test_set_and_clear_current(self, registry):
        await registry.add_active_schema("2")

        await registry.set_current_schema("2")
        assert await registry.get_current_schema() == "2"

        await registry.clear_current_schema()
        assert await registry.get_current_schema() == ""

    async def test_cannot_remove_current_schema(self, registry):
        await registry.add_active_schema("3")
        await registry.set_current_schema("3")

        with pytest.raises(SchemaIsCurrentError):
            await registry.remove_active_schema("3")

        assert "3" in await registry.get_active_schemas()

    async def test_remove_active_schema(self, registry):
        await registry.add_active_schema("1")
        await registry.add_active_schema("2")
        await registry.set_current_schema("2")

        assert await registry.remove_active_schema("1") is True
        assert await registry.remove_active_schema("1") is False
        assert await registry.get_active_schemas() == ["2"]

    async def test_deployment_rollover(self, registry):
        """Deploy v2 alongside v1, switch over, then retire v1."""
        await registry.add_active_schema("v1")
        await registry.set_current_schema("v1")

        await registry.add_active_schema("v2")
        await registry.set_current_schema("v2")
        await registry.remove_active_schema("v1")

        assert await registry.get_current_schema() == "v2"
        assert sorted(await registry.get_active_schemas()) == ["v2"]

    async def test_prefixes_are_isolated(self, in_memory_redis_client):
        production = SchemaRegistry(in_memory_redis_client)
        staging = SchemaRegistry(in_memory_redis_client, index_prefix="staging_")

        await staging.add_active_schema("9")

        assert await production.get_active_schemas() == []

    async def test_redis_errors_are_wrapped(self):
        redis_client = AsyncMock()
        redis_client.sadd.side_effect = ConnectionError("down")
        registry = SchemaRegistry(redis_client)

        with pytest.raises(SchemaRegistryError) as exc_info:
            await registry.add_active_schema("1")

        assert exc_info.value.details["operation"] == "add_active_schema"
