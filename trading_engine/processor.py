"""Worker pool that decodes raw trade events from one queue into another."""

from __future__ import annotations

import asyncio
import logging
from typing import NamedTuple

from trading_engine.codec import FlatBufCodec, SerializationError
from trading_engine.queue import LockFreeQueue, QueueFull
from trading_engine.trade_event import TradeEvent

logger = logging.getLogger(__name__)

_IDLE_SLEEP = 10e-6


class QueueStats(NamedTuple):
    """Snapshot of the processor's queues."""

    input_len: int
    output_len: int
    input_total: int
    output_total: int


class TradeEventProcessor:
    """Decodes serialized events from the input queue onto the output queue."""

    def __init__(self, queue_capacity: int) -> None:
        self._input: LockFreeQueue[bytes] = LockFreeQueue.bounded(queue_capacity)
        self._output: LockFreeQueue[TradeEvent] = LockFreeQueue.bounded(queue_capacity)
        self._codec = FlatBufCodec()
        self._processed = 0
        self._errors = 0
        self._running = False

    @property
    def input_queue(self) -> LockFreeQueue[bytes]:
        """Queue that receives serialized events."""
        return self._input

    @property
    def output_queue(self) -> LockFreeQueue[TradeEvent]:
        """Queue that receives decoded events."""
        return self._output

    @property
    def processed_count(self) -> int:
        """Number of events decoded and passed on."""
        return self._processed

    @property
    def error_count(self) -> int:
        """Number of buffers that could not be decoded."""
        return self._errors

    @property
    def running(self) -> bool:
        return self._running

    async def start(self, worker_count: int) -> None:
        """Run ``worker_count`` workers until ``stop`` is called."""
        self._running = True
        logger.info("Starting trade event processor with %d workers", worker_count)
        results = await asyncio.gather(
            *(self._worker(worker_id) for worker_id in range(worker_count)),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                logger.error("Worker task failed: %s", result)

    async def _worker(self, worker_id: int) -> None:
        logger.info("Worker %d started", worker_id)
        while self._running:
            data = self._input.dequeue()
            if data is None:
                await asyncio.sleep(_IDLE_SLEEP)
                continue
            try:
                event = self._codec.deserialize(data)
            except SerializationError as exc:
                logger.error("Worker %d: Failed to deserialize event: %s", worker_id, exc)
                self._errors += 1
            else:
                try:
                    self._output.enqueue(event)
                except QueueFull:
                    logger.warning("Worker %d: Output queue full, dropping event", worker_id)
                else:
                    self._processed += 1
            await asyncio.sleep(0)
        logger.info("Worker %d stopped", worker_id)

    def stop(self) -> None:
        """Ask all workers to finish."""
        self._running = False
        logger.info("Trade event processor stopped")

    def queue_stats(self) -> QueueStats:
        """Current queue lengths, total enqueued inputs and total dequeued outputs."""
        return QueueStats(
            input_len=len(self._input),
            output_len=len(self._output),
            input_total=self._input.enqueue_count(),
            output_total=self._output.dequeue_count(),
        )