"""
Resilience Module

- **retry_policy.py**: Pure acknowledge/requeue/drop/abort decision
- **error_threshold.py**: Per-run fail-fast breaker
"""

from queue_processor.core.resilience.error_threshold import ErrorThresholdBreaker
from queue_processor.core.resilience.retry_policy import RetryDecision, RetryPolicy, decide

__all__ = [
    "ErrorThresholdBreaker",
    "RetryDecision",
    "RetryPolicy",
    "decide",
]
