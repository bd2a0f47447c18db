"""
Queue Processor - Consumption Loop

Architecture:
    QueueProcessor (Public API)
        ├── QueueStore (shared durable queue, injected)
        ├── RetryPolicy (acknowledge / requeue / drop / abort decision)
        ├── ErrorThresholdBreaker (one per run)
        ├── EventHook "received" (processing) and "error" (observability)
        └── ProcessorMetrics (optional)
    BatchQueueProcessor
        └── Same loop, up to ``batch_size`` items per iteration

Run Lifecycle:
    IDLE -> RUNNING -> (DRAINING) -> STOPPED
                    \\-> ABORTED (error threshold or adapter failure)

Delivery:
    At-least-once. An item taken from the queue is in flight until it is
    acknowledged, dropped after exhausting its retries, or pushed back. The
    loop never loses an in-flight item while it keeps running; when the error
    threshold trips, the failing item is the one that is not pushed back.

Cancellation:
    Cooperative and level-triggered. The cancel event is only checked between
    dispatches, so a handler always runs to completion. After cancellation the
    loop keeps consuming until it observes an empty queue.
"""

import asyncio
import uuid
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from queue_processor.core.config import QueueProcessorConfig
from queue_processor.core.config.constants import ProcessorState, Stage
from queue_processor.core.events import EventHook
from queue_processor.core.exceptions import ErrorThresholdExceededError, ItemFailedError
from queue_processor.core.interfaces import QueueStore
from queue_processor.core.logging import clear_run_id, get_logger, log_stage, set_run_id
from queue_processor.core.models import QueueItem
from queue_processor.core.resilience import ErrorThresholdBreaker, RetryDecision, RetryPolicy
from queue_processor.infrastructure.monitoring import ProcessorMetrics

logger = get_logger(__name__)

T = TypeVar("T")


def cancel_after(event: asyncio.Event, delay: float) -> asyncio.TimerHandle:
    """
    Set ``event`` after ``delay`` seconds on the running loop.

    Usage:
        cancel = asyncio.Event()
        cancel_after(cancel, 10)
        await processor.run(cancel)
    """
    return asyncio.get_running_loop().call_later(delay, event.set)


@dataclass
class _RunContext:
    """State owned by a single ``run`` invocation."""

    run_id: str
    breaker: ErrorThresholdBreaker
    stats: Counter = field(default_factory=Counter)


# =============================================================================
# LAYER 1: SINGLE-ITEM CONSUMPTION
# =============================================================================


class QueueProcessor(Generic[T]):
    """
    Consumes a shared queue, one item at a time.

    Handlers subscribe to ``received``; raising (or setting ``item.failed``)
    sends the item down the retry path. The ``error`` hook observes every
    failure together with its envelope.

    Usage:
        processor = QueueProcessor(store, QueueProcessorConfig(queue_name="scores"))

        @processor.received.subscribe
        async def handle(item: QueueItem[dict]):
            await index_score(item.payload)

        processor.error += lambda exc, item: print(exc, item.payload)

        await processor.push([{"id": 1}, {"id": 2}])
        await processor.run(cancel_event)

    Several processors (or several ``run`` calls) may consume the same queue
    concurrently; each run owns its breaker.
    """

    def __init__(
        self,
        store: QueueStore,
        config: QueueProcessorConfig | None = None,
        *,
        metrics: ProcessorMetrics | None = None,
    ):
        self._store = store
        self._config = config or QueueProcessorConfig()
        self._policy = RetryPolicy(self._config.max_retries, self._config.error_threshold)
        self._metrics = metrics
        self._state = ProcessorState.IDLE

        self.received: EventHook[[QueueItem[T]]] = EventHook("received")
        self.error: EventHook[[BaseException, QueueItem[T]]] = EventHook("error")

    @property
    def name(self) -> str:
        """Fully qualified queue name."""
        return self._store.name

    @property
    def config(self) -> QueueProcessorConfig:
        return self._config

    @property
    def state(self) -> ProcessorState:
        """Lifecycle state of the most recent run."""
        return self._state

    # -------------------------------------------------------------------------
    # Producer side
    # -------------------------------------------------------------------------

    async def push(self, payloads: T | list[T]) -> None:
        """
        Wrap payloads in fresh envelopes and enqueue them.

        A ``list`` is pushed as one atomic batch; wrap a list payload in
        ``QueueItem.wrap`` and use ``push_items`` to enqueue it as one item.
        """
        if isinstance(payloads, list):
            await self._store.push([QueueItem.wrap(payload) for payload in payloads])
        else:
            await self._store.push(QueueItem.wrap(payloads))

    async def push_items(self, items: QueueItem[T] | Sequence[QueueItem[T]]) -> None:
        """Enqueue pre-built envelopes (attempt counts are preserved)."""
        await self._store.push(items)

    async def get_queue_size(self) -> int:
        size = await self._store.size()
        if self._metrics:
            self._metrics.set_queue_depth(self.name, size)
        return size

    async def clear_queue(self) -> None:
        await self._store.clear()

    # -------------------------------------------------------------------------
    # Consumer side
    # -------------------------------------------------------------------------

    async def process(self, item: QueueItem[T]) -> None:
        """
        Handle one item.

        Fires ``received``. Subclasses may override this instead of
        subscribing handlers.
        """
        await self.received.fire(item)

    async def run(self, cancel: asyncio.Event) -> None:
        """
        Consume the queue until cancelled and drained.

        Args:
            cancel: Set to request a stop; checked between dispatches only

        Raises:
            ErrorThresholdExceededError: If failures within this run exceed
                ``error_threshold``; remaining items stay queued
            QueueConnectionError: If the store fails
        """
        ctx = _RunContext(
            run_id=f"run-{uuid.uuid4().hex[:12]}",
            breaker=ErrorThresholdBreaker(self._config.error_threshold),
        )
        ctx.breaker.reset()
        set_run_id(ctx.run_id)
        self._state = ProcessorState.RUNNING

        try:
            log_stage(
                logger,
                Stage.RUN_START,
                "Run started",
                queue=self.name,
                queue_size=await self.get_queue_size(),
                max_retries=self._config.max_retries,
                error_threshold=self._config.error_threshold,
            )

            while True:
                if cancel.is_set():
                    self._state = ProcessorState.DRAINING
                    if await self.get_queue_size() == 0:
                        break

                if not await self._consume(ctx) and cancel.is_set():
                    break

        except ErrorThresholdExceededError as e:
            self._state = ProcessorState.ABORTED
            if self._metrics:
                self._metrics.record_aborted(self.name)
            log_stage(logger, Stage.RUN_ABORT, "Run aborted", level="error", **e.details, **ctx.stats)
            raise
        except asyncio.CancelledError:
            self._state = ProcessorState.STOPPED
            log_stage(logger, Stage.RUN_STOP, "Run cancelled", level="warning", queue=self.name, **ctx.stats)
            raise
        except Exception as e:
            self._state = ProcessorState.ABORTED
            log_stage(
                logger,
                Stage.RUN_ABORT,
                "Run failed",
                level="error",
                queue=self.name,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise
        finally:
            clear_run_id()

        self._state = ProcessorState.STOPPED
        log_stage(logger, Stage.RUN_STOP, "Run stopped", queue=self.name, **ctx.stats)

    def run_sync(self, timeout: float | None = None) -> None:
        """
        Run on a fresh event loop.

        Args:
            timeout: Seconds until cancellation is requested; None runs until
                the process is interrupted
        """
        asyncio.run(self._run_with_timeout(timeout))

    async def _run_with_timeout(self, timeout: float | None) -> None:
        cancel = asyncio.Event()
        if timeout is not None:
            cancel_after(cancel, timeout)
        await self.run(cancel)

    async def _consume(self, ctx: _RunContext) -> bool:
        """
        One loop iteration.

        Returns:
            False if the poll timed out on an empty queue
        """
        item = await self._store.try_dequeue(self._config.poll_timeout)
        if item is None:
            return False

        logger.debug(
            "Item dequeued", stage=Stage.RUN_DEQUEUE, queue=self.name, total_retries=item.total_retries
        )
        self._record_received(ctx)
        try:
            try:
                await self.process(item)
            except Exception as e:
                item.failed = True
                item.exception = e

            await self._resolve(item, ctx)
        except asyncio.CancelledError:
            # Cancelled before the item was acknowledged, requeued or dropped
            await self._store.push(item.fresh_copy())
            raise
        return True

    # -------------------------------------------------------------------------
    # Outcome handling
    # -------------------------------------------------------------------------

    def _record_received(self, ctx: _RunContext) -> None:
        ctx.stats["received"] += 1
        if self._metrics:
            self._metrics.record_received(self.name)

    def _failure_of(self, item: QueueItem[T], ctx: _RunContext) -> BaseException:
        if item.exception is not None:
            return item.exception
        return ItemFailedError(
            "Item marked as failed by handler",
            run_id=ctx.run_id,
            details={"queue": self.name, "total_retries": item.total_retries},
        )

    async def _resolve(self, item: QueueItem[T], ctx: _RunContext) -> None:
        """
        Acknowledge, requeue, drop or abort for a dispatched item.

        Raises:
            ErrorThresholdExceededError: If this failure trips the breaker
        """
        if not item.failed:
            ctx.stats["processed"] += 1
            if self._metrics:
                self._metrics.record_processed(self.name)
            return

        error = self._failure_of(item, ctx)
        try:
            await self.error.fire(error, item)
        except Exception:
            await self._store.push(item.fresh_copy())
            raise

        error_count = ctx.breaker.record_failure()
        ctx.stats["failed"] += 1
        if self._metrics:
            self._metrics.record_failed(self.name)

        decision = self._policy.decide(item, error_count)

        if decision is RetryDecision.ABORT_RUN:
            raise ErrorThresholdExceededError(
                f"Error threshold of {self._config.error_threshold} exceeded",
                run_id=ctx.run_id,
                details={
                    "queue": self.name,
                    "error_count": error_count,
                    "error_threshold": self._config.error_threshold,
                },
            ) from error

        if decision is RetryDecision.DROP_EXHAUSTED:
            ctx.stats["dropped"] += 1
            if self._metrics:
                self._metrics.record_dropped(self.name)
            log_stage(
                logger,
                Stage.RUN_FAILURE,
                "Item dropped after exhausting retries",
                level="warning",
                queue=self.name,
                total_retries=item.total_retries,
                max_retries=self._config.max_retries,
                error_type=type(error).__name__,
            )
            return

        await self._store.push(item.for_retry())
        ctx.stats["requeued"] += 1
        if self._metrics:
            self._metrics.record_requeued(self.name)


# =============================================================================
# LAYER 2: BATCH CONSUMPTION
# =============================================================================


class BatchQueueProcessor(QueueProcessor[T]):
    """
    Consumes up to ``batch_size`` items per iteration.

    The first dequeue waits ``poll_timeout``; the rest of the batch is only
    what is already queued. Override ``process_batch`` to handle the whole
    batch at once (e.g. one bulk write); mark individual items failed with
    ``item.failed`` / ``item.exception``, or raise to fail the whole batch.

    Failed items go through the same retry path as in ``QueueProcessor``, in
    batch order. If the error threshold trips mid-batch, the failed items
    after the tripping one are pushed back unchanged before the run raises.
    """

    async def process_batch(self, items: list[QueueItem[T]]) -> None:
        """
        Handle one batch.

        Default: ``process`` each item in order; an exception only fails the
        item that raised it.
        """
        for item in items:
            try:
                await self.process(item)
            except Exception as e:
                item.failed = True
                item.exception = e

    async def _consume(self, ctx: _RunContext) -> bool:
        first = await self._store.try_dequeue(self._config.poll_timeout)
        if first is None:
            return False

        items = [first]
        # Items before this index are acknowledged, requeued, dropped or returned
        resolved = 0
        try:
            while len(items) < self._config.batch_size:
                item = await self._store.try_dequeue(0)
                if item is None:
                    break
                items.append(item)

            logger.debug("Batch dequeued", stage=Stage.RUN_DEQUEUE, queue=self.name, size=len(items))
            for _ in items:
                self._record_received(ctx)

            try:
                await self.process_batch(items)
            except Exception as e:
                for item in items:
                    item.failed = True
                    item.exception = e

            for index, item in enumerate(items):
                try:
                    await self._resolve(item, ctx)
                except Exception as e:
                    leftovers = items[index + 1 :]
                    resolved = index + 1
                    await self._return_unresolved(leftovers, ctx)
                    resolved = len(items)
                    if isinstance(e, ErrorThresholdExceededError):
                        for leftover in leftovers:
                            if leftover.failed:
                                await self.error.fire(self._failure_of(leftover, ctx), leftover)
                    raise
                resolved = index + 1
        except asyncio.CancelledError:
            unresolved = items[resolved:]
            if unresolved:
                await self._store.push([item.fresh_copy() for item in unresolved])
            raise

        return True

    async def _return_unresolved(self, items: list[QueueItem[T]], ctx: _RunContext) -> None:
        """Push back the failed items a raising ``_resolve`` left behind."""
        leftovers = [item for item in items if item.failed]
        for item in items:
            if not item.failed:
                await self._resolve(item, ctx)
        if not leftovers:
            return

        await self._store.push([item.fresh_copy() for item in leftovers])
        log_stage(
            logger,
            Stage.RUN_FAILURE,
            "Returned unresolved batch items",
            level="warning",
            queue=self.name,
            count=len(leftovers),
        )
