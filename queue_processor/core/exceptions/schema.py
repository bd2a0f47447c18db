"""
Schema Registry Exceptions
"""

from queue_processor.core.exceptions.base import QueueProcessorError


class SchemaRegistryError(QueueProcessorError):
    """Base exception for schema registry errors."""
    pass


class SchemaNotActiveError(SchemaRegistryError):
    """Raised when setting a live schema that is not in the active set."""
    pass


class SchemaIsCurrentError(SchemaRegistryError):
    """Raised when removing the live schema from the active set."""
    pass
