"""
Configuration Module

Components:
-----------
- **settings.py**: Pydantic-based configuration with environment variable loading
- **constants.py**: Key prefixes, defaults and enums
- **processor_config.py**: Value object consumed by the consumption loop

Usage:
------
```python
from queue_processor.core.config import QueueProcessorConfig, get_settings

settings = get_settings()
config = QueueProcessorConfig.from_settings(settings)
```

Environment Variables:
---------------------
```bash
REDIS_HOST=localhost
REDIS_PORT=6379

QUEUE_NAME=score-index
QUEUE_MAX_RETRIES=3
QUEUE_ERROR_THRESHOLD=10
QUEUE_POLL_TIMEOUT_SECONDS=0.1

SCHEMA_INDEX_PREFIX=

LOG_LEVEL=INFO
LOG_FORMAT=json
```
"""

from queue_processor.core.config.constants import (
    BATCH_SIZE,
    DEFAULT_QUEUE_NAME,
    ERROR_THRESHOLD,
    MAX_RETRIES,
    POLL_TIMEOUT_SECONDS,
    QUEUE_NAMESPACE,
    CircuitState,
    ProcessorState,
    Stage,
)
from queue_processor.core.config.processor_config import QueueProcessorConfig
from queue_processor.core.config.settings import Settings, get_settings, reload_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "reload_settings",
    "QueueProcessorConfig",
    # Enums
    "Stage",
    "CircuitState",
    "ProcessorState",
    # Defaults
    "QUEUE_NAMESPACE",
    "DEFAULT_QUEUE_NAME",
    "MAX_RETRIES",
    "ERROR_THRESHOLD",
    "POLL_TIMEOUT_SECONDS",
    "BATCH_SIZE",
]
