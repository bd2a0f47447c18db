"""
Processor Configuration

Value object consumed by the consumption loop. Built from ``Settings`` in
production or directly in tests; the loop itself never touches the
environment.
"""

from dataclasses import dataclass

from queue_processor.core.config import constants
from queue_processor.core.config.settings import Settings, get_settings
from queue_processor.core.exceptions import ConfigurationError


@dataclass(frozen=True)
class QueueProcessorConfig:
    """
    Consumption loop configuration.

    Attributes:
        queue_name: Logical queue name (the store adds its namespace)
        max_retries: Failed attempts tolerated before an item is dropped
        error_threshold: Failures tolerated within one run before it aborts
        poll_timeout: Bounded wait of a single dequeue, in seconds
        batch_size: Items handed to a batch processor per iteration
    """

    queue_name: str = constants.DEFAULT_QUEUE_NAME
    max_retries: int = constants.MAX_RETRIES
    error_threshold: int = constants.ERROR_THRESHOLD
    poll_timeout: float = constants.POLL_TIMEOUT_SECONDS
    batch_size: int = constants.BATCH_SIZE

    def __post_init__(self):
        if not self.queue_name or not self.queue_name.strip():
            raise ConfigurationError("queue_name must not be empty")
        if self.max_retries < 0:
            raise ConfigurationError(
                "max_retries must be >= 0", details={"max_retries": self.max_retries}
            )
        if self.error_threshold < 0:
            raise ConfigurationError(
                "error_threshold must be >= 0", details={"error_threshold": self.error_threshold}
            )
        if not 0 < self.poll_timeout <= constants.MAX_POLL_TIMEOUT_SECONDS:
            raise ConfigurationError(
                f"poll_timeout must be in (0, {constants.MAX_POLL_TIMEOUT_SECONDS}]",
                details={"poll_timeout": self.poll_timeout},
            )
        if self.batch_size < 1:
            raise ConfigurationError(
                "batch_size must be >= 1", details={"batch_size": self.batch_size}
            )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "QueueProcessorConfig":
        """
        Build configuration from application settings.

        Args:
            settings: Settings instance (defaults to the global settings)

        Returns:
            QueueProcessorConfig
        """
        queue = (settings or get_settings()).queue
        return cls(
            queue_name=queue.QUEUE_NAME,
            max_retries=queue.QUEUE_MAX_RETRIES,
            error_threshold=queue.QUEUE_ERROR_THRESHOLD,
            poll_timeout=queue.QUEUE_POLL_TIMEOUT_SECONDS,
            batch_size=queue.QUEUE_BATCH_SIZE,
        )
