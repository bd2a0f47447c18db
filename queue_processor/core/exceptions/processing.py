"""
Processing Exceptions

Exceptions raised by the consumption loop.
"""

from queue_processor.core.exceptions.base import QueueProcessorError


class ProcessingError(QueueProcessorError):
    """Base exception for consumption loop errors."""
    pass


class ItemFailedError(ProcessingError):
    """
    Synthesized when a handler marks an item as failed without raising.

    Handed to the ``error`` hook in place of a real exception.
    """
    pass


class ErrorThresholdExceededError(ProcessingError):
    """
    Raised from ``run`` when failures within one run exceed the threshold.

    The run stops; items still in the queue are untouched and a new run may
    resume them. ``details`` carries ``error_count`` and ``error_threshold``.
    """
    pass
