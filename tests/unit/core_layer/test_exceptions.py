"""
Unit Tests for Core Exceptions
"""

import pytest

from queue_processor.core.exceptions import (
    ConfigurationError,
    ErrorThresholdExceededError,
    ItemFailedError,
    ProcessingError,
    QueueConnectionError,
    QueueError,
    QueueProcessorError,
    QueueSerializationError,
    SchemaIsCurrentError,
    SchemaNotActiveError,
    SchemaRegistryError,
)


@pytest.mark.unit
class TestQueueProcessorError:
    """Test the base exception class."""

    def test_base_error_creation(self):
        error = QueueProcessorError("Test message")

        assert str(error) == "Test message"
        assert error.details == {}
        assert error.run_id is None

    def test_details_are_copied(self):
        details = {"key": "value"}
        error = QueueProcessorError("Test", details=details)

        details["key"] = "changed"

        assert error.details == {"key": "value"}

    def test_to_dict(self):
        error = ErrorThresholdExceededError(
            "Error threshold exceeded", run_id="run-1", details={"error_count": 11}
        )

        assert error.to_dict() == {
            "error_type": "ErrorThresholdExceededError",
            "message": "Error threshold exceeded",
            "run_id": "run-1",
            "details": {"error_count": 11},
        }

    def test_with_context_chains(self):
        error = QueueError("boom").with_context(queue="osu-queue:scores")

        assert error.details["queue"] == "osu-queue:scores"

    def test_repr_includes_run_id_and_details(self):
        error = QueueProcessorError("msg", run_id="run-9", details={"a": 1})

        assert repr(error) == "QueueProcessorError(message='msg', run_id='run-9', details={'a': 1})"

    def test_from_exception_wraps_original(self):
        original = ConnectionError("refused")

        error = QueueConnectionError.from_exception(original, queue="q")

        assert isinstance(error, QueueConnectionError)
        assert error.message == "refused"
        assert error.details == {
            "original_error": "ConnectionError",
            "original_message": "refused",
            "queue": "q",
        }


@pytest.mark.unit
class TestHierarchy:
    """Every error is catchable through its family base class."""

    @pytest.mark.parametrize(
        "error_type,base",
        [
            (ConfigurationError, QueueProcessorError),
            (QueueConnectionError, QueueError),
            (QueueSerializationError, QueueError),
            (ItemFailedError, ProcessingError),
            (ErrorThresholdExceededError, ProcessingError),
            (SchemaNotActiveError, SchemaRegistryError),
            (SchemaIsCurrentError, SchemaRegistryError),
            (SchemaRegistryError, QueueProcessorError),
        ],
    )
    def test_inheritance(self, error_type, base):
        assert issubclass(error_type, base)
