"""
Retry and Error Policy

Pure decision function for a dispatched item.

Decision Table:
    succeeded                          -> ACKNOWLEDGE
    error_count > error_threshold      -> ABORT_RUN       (checked before retry)
    attempt_count + 1 > max_retries    -> DROP_EXHAUSTED
    otherwise                          -> REQUEUE

``attempt_count`` is the envelope's attempt count before the current failure
is recorded; ``error_count`` is the per-run failure count after it is
recorded. An item that always fails is therefore dispatched
``max_retries + 1`` times before it is dropped.

Once the threshold trips, the failing item is not requeued either: aborting
takes precedence over the retry decision.
"""

from dataclasses import dataclass
from enum import Enum

from queue_processor.core.config import constants
from queue_processor.core.models import QueueItem


class RetryDecision(str, Enum):
    """Outcome of dispatching one item."""

    ACKNOWLEDGE = "acknowledge"
    REQUEUE = "requeue"
    DROP_EXHAUSTED = "drop_exhausted"
    ABORT_RUN = "abort_run"


def decide(
    attempt_count: int,
    max_retries: int,
    error_count: int,
    error_threshold: int,
    *,
    succeeded: bool = False,
) -> RetryDecision:
    """
    Decide what happens to a dispatched item.

    Args:
        attempt_count: Failures the item had before this dispatch
        max_retries: Failures tolerated before the item is dropped
        error_count: Failures recorded in the current run, this one included
        error_threshold: Failures tolerated within one run
        succeeded: True if the handlers completed without failing the item

    Returns:
        RetryDecision
    """
    if succeeded:
        return RetryDecision.ACKNOWLEDGE

    if error_count > error_threshold:
        return RetryDecision.ABORT_RUN

    if attempt_count + 1 > max_retries:
        return RetryDecision.DROP_EXHAUSTED

    return RetryDecision.REQUEUE


@dataclass(frozen=True)
class RetryPolicy:
    """
    Retry limits bound to a processor.

    Attributes:
        max_retries: Failures tolerated before an item is dropped
        error_threshold: Failures tolerated within one run
    """

    max_retries: int = constants.MAX_RETRIES
    error_threshold: int = constants.ERROR_THRESHOLD

    def decide(self, item: QueueItem, error_count: int, *, succeeded: bool = False) -> RetryDecision:
        """Apply ``decide`` to an envelope."""
        return decide(
            item.total_retries,
            self.max_retries,
            error_count,
            self.error_threshold,
            succeeded=succeeded,
        )
