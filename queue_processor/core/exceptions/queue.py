"""
Queue Store Exceptions

All exceptions raised by queue store adapters (Redis list, in-memory).
"""

from queue_processor.core.exceptions.base import QueueProcessorError


class QueueError(QueueProcessorError):
    """Base exception for queue store errors."""
    pass


class QueueConnectionError(QueueError):
    """
    Raised when the queue store cannot be reached or a command fails.

    The consumption loop treats this as fatal to the current run: it is a
    transport failure, not a handler failure, so the retry policy does not
    apply to it.
    """
    pass


class QueueSerializationError(QueueError):
    """Raised when an envelope cannot be encoded or decoded."""
    pass
