"""
Queue Item Envelope

Wraps a caller payload with the retry bookkeeping the consumption loop needs.

An envelope is owned exclusively by the loop while in flight. It is handed to
the ``received`` handlers for the duration of one dispatch, then either
discarded (acknowledged or exhausted) or replaced by a fresh envelope built
with ``for_retry`` and pushed back to the queue. The in-flight envelope and the
requeued one never share state.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from queue_processor.core.exceptions import QueueSerializationError

T = TypeVar("T")


@dataclass(eq=False)
class QueueItem(Generic[T]):
    """
    Envelope around a queued payload.

    Attributes:
        payload: Opaque caller data
        total_retries: Number of times this item has already failed; 0 on the
            first attempt, so handlers can tell a first attempt from a retry
        failed: Handlers set this to take the failure path without raising
        exception: Cause of the failure, if any; never serialized
    """

    payload: T
    total_retries: int = 0
    failed: bool = field(default=False)
    exception: BaseException | None = field(default=None, repr=False)

    @classmethod
    def wrap(cls, payload: T) -> "QueueItem[T]":
        """Build a fresh envelope for a first attempt."""
        if isinstance(payload, QueueItem):
            raise TypeError("payload is already a QueueItem; push it with push_items()")
        return cls(payload=payload)

    def for_retry(self) -> "QueueItem[T]":
        """
        Build the envelope that goes back to the queue after a failure.

        Returns:
            New envelope with the attempt count incremented and ``failed``
            cleared
        """
        return QueueItem(payload=self.payload, total_retries=self.total_retries + 1)

    def fresh_copy(self) -> "QueueItem[T]":
        """
        Build an unresolved copy with the same attempt count.

        Used when an in-flight item goes back to the queue without its
        dispatch being counted.
        """
        return replace(self, failed=False, exception=None)

    def to_dict(self) -> dict[str, Any]:
        """
        Wire representation used by the Redis store.

        Pydantic payloads are dumped to plain JSON-compatible data.
        """
        data = self.payload.model_dump(mode="json") if isinstance(self.payload, BaseModel) else self.payload
        return {"data": data, "total_retries": self.total_retries}

    @classmethod
    def from_dict(
        cls, data: dict[str, Any], payload_type: type[BaseModel] | None = None
    ) -> "QueueItem":
        """
        Rebuild an envelope from its wire representation.

        Args:
            data: Decoded wire dict
            payload_type: Optional pydantic model to validate the payload into

        Raises:
            QueueSerializationError: If the dict is not a valid envelope
        """
        try:
            payload = data["data"]
            total_retries = int(data.get("total_retries", 0))
            if payload_type is not None:
                payload = payload_type.model_validate(payload)
        except Exception as e:
            raise QueueSerializationError.from_exception(
                e, message=f"Invalid queue item: {e}", payload_type=getattr(payload_type, "__name__", None)
            ) from e

        return cls(payload=payload, total_retries=total_retries)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, QueueItem):
            return self.payload == other.payload
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.payload)
