"""
Core Module

Foundational components: configuration, logging, exceptions, the queue item
envelope and the consumption loop.
"""

from .exceptions import (
    ConfigurationError,
    ErrorThresholdExceededError,
    ItemFailedError,
    QueueConnectionError,
    QueueError,
    QueueProcessorError,
)
from .logging import (
    clear_run_id,
    get_logger,
    get_run_id,
    log_stage,
    set_run_id,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "log_stage",
    "set_run_id",
    "get_run_id",
    "clear_run_id",
    "QueueProcessorError",
    "ConfigurationError",
    "QueueError",
    "QueueConnectionError",
    "ItemFailedError",
    "ErrorThresholdExceededError",
]
