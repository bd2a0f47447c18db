"""
Queue Store Protocol

This module defines the contract the consumption loop consumes from a durable,
shared queue store.

Architectural Decision: Protocol-based abstraction
- Production Redis list store and in-memory test double are interchangeable
- Facilitates testing with mock implementations
- Type-safe interface with runtime checking
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from queue_processor.core.models import QueueItem


@runtime_checkable
class QueueStore(Protocol):
    """
    Protocol for queue store implementations.

    Implementations:
    - RedisQueueStore: Shared, persistent Redis list
    - InMemoryQueueStore: Testing/development store with identical semantics

    Guarantees required from implementations:
    - ``push`` is atomic per call; a batch becomes visible all at once
    - ``try_dequeue`` is atomic; concurrent consumers never receive the same
      envelope from one dequeue
    - Adapter failures raise ``QueueConnectionError``

    An envelope returned by ``try_dequeue`` is in flight and is solely the
    caller's responsibility until acknowledged, dropped or pushed back.
    """

    @property
    def name(self) -> str:
        """Fully qualified queue name (namespace included)."""
        ...

    async def push(self, items: QueueItem | Sequence[QueueItem]) -> None:
        """
        Append one envelope or a batch of envelopes.

        Raises:
            QueueConnectionError: If the store is unreachable
        """
        ...

    async def try_dequeue(self, timeout: float) -> QueueItem | None:
        """
        Remove and return the next envelope.

        Args:
            timeout: Maximum wait in seconds; zero or less returns
                immediately when the queue is empty

        Returns:
            The next envelope, or None once ``timeout`` elapses

        Raises:
            QueueConnectionError: If the store is unreachable
        """
        ...

    async def size(self) -> int:
        """Approximate number of queued envelopes."""
        ...

    async def clear(self) -> None:
        """Remove every queued envelope (administrative/test only)."""
        ...
