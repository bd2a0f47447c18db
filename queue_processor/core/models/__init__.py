from .queue_item import QueueItem

__all__ = ["QueueItem"]
