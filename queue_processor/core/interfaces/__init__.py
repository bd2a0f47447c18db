"""
Core Interfaces Module

Protocols for core components, enabling dependency injection and testability.

Components:
-----------
- **message_queue.py**: QueueStore protocol for queue store implementations
"""

from queue_processor.core.interfaces.message_queue import QueueStore

__all__ = [
    "QueueStore",
]
