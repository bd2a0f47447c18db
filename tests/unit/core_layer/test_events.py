"""
Unit Tests for Event Hooks
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from queue_processor.core.events import EventHook


@pytest.mark.unit
class TestEventHook:
    """Test suite for EventHook."""

    async def test_fire_calls_in_registration_order(self):
        hook = EventHook("received")
        calls = []
        hook += lambda value: calls.append(("sync", value))

        async def async_callback(value):
            calls.append(("async", value))

        hook.subscribe(async_callback)

        await hook.fire(1)

        assert calls == [("sync", 1), ("async", 1)]

    async def test_fire_awaits_async_mocks(self):
        hook = EventHook("error")
        callback = AsyncMock()
        hook += callback

        await hook.fire("exc", "item")

        callback.assert_awaited_once_with("exc", "item")

    async def test_exceptions_propagate(self):
        hook = EventHook("received")
        hook += MagicMock(side_effect=RuntimeError("boom"))
        after = MagicMock()
        hook += after

        with pytest.raises(RuntimeError):
            await hook.fire(1)

        after.assert_not_called()

    async def test_unsubscribe(self):
        hook = EventHook("received")
        callback = MagicMock()
        hook += callback
        hook -= callback

        await hook.fire(1)

        callback.assert_not_called()
        assert len(hook) == 0

    def test_subscribe_works_as_decorator(self):
        hook = EventHook("received")

        @hook.subscribe
        def handle(item):
            return item

        assert handle(3) == 3
        assert len(hook) == 1

    def test_subscribe_rejects_non_callables(self):
        hook = EventHook("received")

        with pytest.raises(TypeError):
            hook.subscribe("not callable")

    def test_empty_hook_is_truthy(self):
        assert EventHook("received")

    def test_clear(self):
        hook = EventHook("received")
        hook += MagicMock()

        hook.clear()

        assert len(hook) == 0
