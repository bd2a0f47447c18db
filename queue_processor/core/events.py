"""
Event Hooks

Ordered observer lists the consumption loop fires synchronously.

Callbacks may be plain functions or coroutine functions; coroutine results
are awaited before the next callback runs, so callbacks always observe
registration order. Exceptions raised by a callback propagate to the caller
of ``fire``.
"""

import inspect
from collections.abc import Callable
from typing import Any, Generic, ParamSpec

P = ParamSpec("P")


class EventHook(Generic[P]):
    """
    Ordered list of callbacks sharing one signature.

    Usage:
        received: EventHook[[QueueItem]] = EventHook("received")
        received.subscribe(handle)
        received += log_item
        await received.fire(item)
    """

    def __init__(self, name: str):
        self.name = name
        self._callbacks: list[Callable[P, Any]] = []

    def subscribe(self, callback: Callable[P, Any]) -> Callable[P, Any]:
        """
        Register a callback.

        Returns the callback so this can be used as a decorator.
        """
        if not callable(callback):
            raise TypeError(f"{self.name} callback must be callable, got {type(callback).__name__}")
        self._callbacks.append(callback)
        return callback

    def unsubscribe(self, callback: Callable[P, Any]) -> None:
        """Remove a previously registered callback."""
        self._callbacks.remove(callback)

    def clear(self) -> None:
        self._callbacks.clear()

    def __iadd__(self, callback: Callable[P, Any]) -> "EventHook[P]":
        self.subscribe(callback)
        return self

    def __isub__(self, callback: Callable[P, Any]) -> "EventHook[P]":
        self.unsubscribe(callback)
        return self

    def __len__(self) -> int:
        return len(self._callbacks)

    def __bool__(self) -> bool:
        return True

    async def fire(self, *args: P.args, **kwargs: P.kwargs) -> None:
        """Invoke every callback in registration order."""
        # Snapshot so callbacks may subscribe further callbacks while firing
        for callback in list(self._callbacks):
            result = callback(*args, **kwargs)
            if inspect.isawaitable(result):
                await result
