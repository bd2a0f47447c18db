"""
Base Exception Class

This module contains the base exception class that all other queue processor
exceptions inherit from. Specialized exceptions live in their themed modules.
"""

from typing import Any


class QueueProcessorError(Exception):
    """
    Base exception for all queue processor errors.

    All custom exceptions inherit from this class to enable:
    - Consistent error handling
    - Run ID correlation
    - Structured error logging

    Attributes:
        message: Error message
        run_id: Run ID for correlation (if available)
        details: Additional error details (dict)

    Example:
        raise ErrorThresholdExceededError(
            "Error threshold exceeded",
            run_id="run-1a2b",
            details={"error_count": 11, "error_threshold": 10}
        )
    """

    def __init__(
        self, message: str, run_id: str | None = None, details: dict[str, Any] | None = None
    ):
        self.message = message
        self.run_id = run_id
        self.details = (details or {}).copy()
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for logging.

        Returns:
            Dict with error_type, message, run_id, and details
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "run_id": self.run_id,
            "details": self.details,
        }

    def with_context(self, **context) -> "QueueProcessorError":
        """
        Add additional context to the error details.

        Returns:
            Self (for method chaining)
        """
        self.details.update(context)
        return self

    def __repr__(self) -> str:
        details_str = f", details={self.details}" if self.details else ""
        run_id_str = f", run_id='{self.run_id}'" if self.run_id else ""
        return f"{self.__class__.__name__}(message='{self.message}'{run_id_str}{details_str})"

    @classmethod
    def from_exception(
        cls,
        exc: BaseException,
        message: str | None = None,
        run_id: str | None = None,
        **details
    ) -> "QueueProcessorError":
        """
        Create an error from another exception.

        Useful for wrapping third-party exceptions (e.g. ``redis.RedisError``)
        with additional context.

        Example:
            >>> try:
            ...     await client.rpush(key, value)
            ... except RedisError as e:
            ...     raise QueueConnectionError.from_exception(e, queue="osu-queue:scores")
        """
        error_message = message or str(exc)
        error_details = {
            "original_error": exc.__class__.__name__,
            "original_message": str(exc),
            **details
        }
        return cls(error_message, run_id=run_id, details=error_details)


class ConfigurationError(QueueProcessorError):
    """Raised when configuration is invalid or missing."""
    pass
