"""
System Constants and Enumerations

This module defines constants and enumerations shared by the consumption
loop, the queue store adapters and the schema registry.

Architectural Decision: Centralized constants for maintainability
- Single source of truth for key prefixes and defaults
- Type-safe enums for state management
"""

from enum import Enum

# ============================================================================
# Stage Identifiers (for structured logging)
# ============================================================================


class Stage(str, Enum):
    """
    Processing stages used as the ``stage`` field of log entries.

    Format: {PREFIX}.{SEQUENCE}_{DESCRIPTIVE_NAME}
    """

    RUN_START = "RUN.0_START"
    RUN_DEQUEUE = "RUN.1_DEQUEUE"
    RUN_FAILURE = "RUN.2_FAILURE"
    RUN_STOP = "RUN.3_STOP"
    RUN_ABORT = "RUN.ERR_ABORT"

    QUEUE_PUSH = "QUEUE.PUSH"
    QUEUE_CLEAR = "QUEUE.CLEAR"
    QUEUE_ERROR = "QUEUE.ERR"

    SCHEMA = "SCHEMA"
    REDIS = "REDIS"


# ============================================================================
# Circuit Breaker States
# ============================================================================


class CircuitState(str, Enum):
    """
    Error-threshold breaker states.

    CLOSED: Normal operation, the run keeps consuming
    OPEN: Threshold exceeded, the run aborts
    """

    CLOSED = "closed"
    OPEN = "open"


# ============================================================================
# Processor Lifecycle
# ============================================================================


class ProcessorState(str, Enum):
    """
    Lifecycle of a single ``run`` invocation.

    IDLE -> RUNNING -> (DRAINING on cancel) -> STOPPED
    RUNNING -> ABORTED (error threshold exceeded or adapter failure)
    """

    IDLE = "idle"
    RUNNING = "running"
    DRAINING = "draining"
    STOPPED = "stopped"
    ABORTED = "aborted"


# ============================================================================
# Queue Defaults
# ============================================================================

QUEUE_NAMESPACE = "osu-queue"
DEFAULT_QUEUE_NAME = "default"

# Failed attempts tolerated before an item is dropped
MAX_RETRIES = 3

# Failures tolerated within one run before it aborts
ERROR_THRESHOLD = 10

# Bounded wait of a single dequeue; cancellation is observed at this cadence
POLL_TIMEOUT_SECONDS = 0.1
MAX_POLL_TIMEOUT_SECONDS = 5.0

BATCH_SIZE = 1

PUSH_RETRY_ATTEMPTS = 3
PUSH_RETRY_BASE_DELAY = 0.05
PUSH_RETRY_MAX_DELAY = 1.0

# ============================================================================
# Redis Key Prefixes
# ============================================================================

REDIS_KEY_SCHEMA_PREFIX = f"{QUEUE_NAMESPACE}:score-index:"
REDIS_KEY_ACTIVE_SCHEMAS_SUFFIX = "active-schemas"
REDIS_KEY_CURRENT_SCHEMA_SUFFIX = "schema"
