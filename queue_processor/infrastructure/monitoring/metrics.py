"""
Processor Metrics with Prometheus Integration

Counters for the consumption loop outcomes plus a queue depth gauge, all
labelled by queue name.

Architectural Decision: prometheus-client for industry-standard metrics
- Each ProcessorMetrics owns its CollectorRegistry, so several processors (or
  tests) in one process never collide on metric names
- ``export()`` returns the text exposition for a scrape endpoint or a push
  gateway owned by the caller
"""

from prometheus_client import CollectorRegistry, Counter, Gauge, generate_latest


class ProcessorMetrics:
    """
    Metrics recorded by ``QueueProcessor``.

    Usage:
        metrics = ProcessorMetrics()
        processor = QueueProcessor(store, config, metrics=metrics)
        ...
        metrics.get_count("processed", queue="osu-queue:scores")
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry = registry or CollectorRegistry()

        self._received = Counter(
            "queue_items_received_total",
            "Items dispatched to received handlers",
            ["queue"],
            registry=self.registry,
        )
        self._processed = Counter(
            "queue_items_processed_total",
            "Items acknowledged after successful processing",
            ["queue"],
            registry=self.registry,
        )
        self._failed = Counter(
            "queue_items_failed_total",
            "Failed dispatches",
            ["queue"],
            registry=self.registry,
        )
        self._requeued = Counter(
            "queue_items_requeued_total",
            "Failed items pushed back for retry",
            ["queue"],
            registry=self.registry,
        )
        self._dropped = Counter(
            "queue_items_dropped_total",
            "Items dropped after exhausting retries",
            ["queue"],
            registry=self.registry,
        )
        self._aborted = Counter(
            "queue_runs_aborted_total",
            "Runs aborted by the error threshold",
            ["queue"],
            registry=self.registry,
        )
        self._depth = Gauge(
            "queue_depth",
            "Queue depth observed by the processor",
            ["queue"],
            registry=self.registry,
        )

        self._sample_names = {
            "received": "queue_items_received_total",
            "processed": "queue_items_processed_total",
            "failed": "queue_items_failed_total",
            "requeued": "queue_items_requeued_total",
            "dropped": "queue_items_dropped_total",
            "aborted": "queue_runs_aborted_total",
        }

    def record_received(self, queue: str) -> None:
        self._received.labels(queue=queue).inc()

    def record_processed(self, queue: str) -> None:
        self._processed.labels(queue=queue).inc()

    def record_failed(self, queue: str) -> None:
        self._failed.labels(queue=queue).inc()

    def record_requeued(self, queue: str) -> None:
        self._requeued.labels(queue=queue).inc()

    def record_dropped(self, queue: str) -> None:
        self._dropped.labels(queue=queue).inc()

    def record_aborted(self, queue: str) -> None:
        self._aborted.labels(queue=queue).inc()

    def set_queue_depth(self, queue: str, depth: int) -> None:
        self._depth.labels(queue=queue).set(depth)

    def get_count(self, outcome: str, queue: str) -> float:
        """
        Read back a counter value.

        Args:
            outcome: received, processed, failed, requeued, dropped or aborted
            queue: Queue label

        Raises:
            KeyError: If outcome is unknown
        """
        value = self.registry.get_sample_value(self._sample_names[outcome], {"queue": queue})
        return value or 0.0

    def export(self) -> bytes:
        """Prometheus text exposition of this registry."""
        return generate_latest(self.registry)
