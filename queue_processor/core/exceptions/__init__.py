"""
Exception Module

Structured exception hierarchy for the queue processor.

Module Structure:
-----------------
- **base.py**: QueueProcessorError base class + ConfigurationError
- **queue.py**: Queue store adapter exceptions
- **processing.py**: Consumption loop exceptions
- **schema.py**: Schema registry exceptions

Usage:
------
```python
from queue_processor.core.exceptions import ErrorThresholdExceededError, QueueConnectionError
```
"""

from queue_processor.core.exceptions.base import ConfigurationError, QueueProcessorError
from queue_processor.core.exceptions.processing import (
    ErrorThresholdExceededError,
    ItemFailedError,
    ProcessingError,
)
from queue_processor.core.exceptions.queue import (
    QueueConnectionError,
    QueueError,
    QueueSerializationError,
)
from queue_processor.core.exceptions.schema import (
    SchemaIsCurrentError,
    SchemaNotActiveError,
    SchemaRegistryError,
)

__all__ = [
    # Base
    "QueueProcessorError",
    "ConfigurationError",
    # Queue
    "QueueError",
    "QueueConnectionError",
    "QueueSerializationError",
    # Processing
    "ProcessingError",
    "ItemFailedError",
    "ErrorThresholdExceededError",
    # Schema
    "SchemaRegistryError",
    "SchemaNotActiveError",
    "SchemaIsCurrentError",
]
