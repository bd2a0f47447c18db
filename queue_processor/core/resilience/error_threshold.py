"""
Error Threshold Breaker

Fail-fast circuit breaker scoped to one consumption run.

MECHANISM OF ACTION:
-------------------
- **CLOSED**: The run keeps consuming. Each handler failure increments the
  counter.
- **OPEN**: The counter exceeded the threshold. The run aborts and raises;
  items still queued stay there for a future run.

Unlike a provider circuit breaker there is no half-open probe: a new run
starts with a fresh breaker (``reset``), which is how callers "close" it. The
breaker is local to one ``run`` call and never shared between concurrent runs.
"""

from queue_processor.core.config.constants import CircuitState, Stage
from queue_processor.core.logging import get_logger

logger = get_logger(__name__)


class ErrorThresholdBreaker:
    """
    Per-run failure counter with a trip threshold.

    Usage:
        breaker = ErrorThresholdBreaker(threshold=10)
        breaker.reset()
        breaker.record_failure()
        if breaker.is_open:
            raise ErrorThresholdExceededError(...)
    """

    def __init__(self, threshold: int):
        if threshold < 0:
            raise ValueError("threshold must be >= 0")
        self._threshold = threshold
        self._error_count = 0
        self._state = CircuitState.CLOSED

    @property
    def threshold(self) -> int:
        return self._threshold

    @property
    def error_count(self) -> int:
        return self._error_count

    @property
    def state(self) -> CircuitState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state == CircuitState.OPEN

    def reset(self) -> None:
        """Start counting afresh (called at the start of every run)."""
        self._error_count = 0
        self._state = CircuitState.CLOSED

    def record_failure(self) -> int:
        """
        Record one handler failure.

        Returns:
            The failure count including this one
        """
        self._error_count += 1

        if self._state == CircuitState.CLOSED and self._error_count > self._threshold:
            self._state = CircuitState.OPEN
            logger.warning(
                "Error threshold exceeded, opening breaker",
                stage=Stage.RUN_FAILURE,
                error_count=self._error_count,
                threshold=self._threshold,
            )

        return self._error_count
