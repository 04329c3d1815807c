"""Command that runs a synthetic producer and consumer through the processor."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import os
import time
from dataclasses import dataclass
from typing import Optional, Sequence

from trading_engine.codec import FlatBufCodec
from trading_engine.metrics import MetricsCollector
from trading_engine.processor import TradeEventProcessor
from trading_engine.queue import LockFreeQueue, QueueFull
from trading_engine.trade_event import OrderSide, TradeEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunSummary:
    """Final statistics of a run."""

    input_len: int
    output_len: int
    input_total: int
    output_total: int
    processed: int
    errors: int


def make_event(counter: int) -> TradeEvent:
    """Build the synthetic trade event number ``counter``."""
    return TradeEvent.trade_executed(
        "BTCUSDT",
        50000.0 + float(counter % 1000),
        1.0 + float(counter % 10),
        f"order_{counter}",
        OrderSide.BUY if counter % 2 == 0 else OrderSide.SELL,
        f"user_{counter % 100}",
        "binance",
    )


async def _produce(queue: LockFreeQueue[bytes], codec: FlatBufCodec) -> None:
    counter = 0
    while True:
        try:
            queue.enqueue(codec.serialize(make_event(counter)))
        except QueueFull:
            await asyncio.sleep(1e-6)
            continue
        counter += 1
        if counter % 1000 == 0:
            await asyncio.sleep(0.001)


async def _consume(queue: LockFreeQueue[TradeEvent], metrics: MetricsCollector) -> None:
    while True:
        start = time.perf_counter_ns()
        event = queue.dequeue()
        if event is not None:
            metrics.record_event(time.perf_counter_ns() - start)
            await asyncio.sleep(0)
        else:
            await asyncio.sleep(10e-6)


async def run(
    duration: float, workers: int, capacity: int, report_interval: int
) -> RunSummary:
    """Run the pipeline for ``duration`` seconds and return the final statistics."""
    processor = TradeEventProcessor(capacity)
    codec = FlatBufCodec()
    metrics = MetricsCollector()

    background = [
        asyncio.create_task(metrics.start_reporting(report_interval)),
        asyncio.create_task(_produce(processor.input_queue, codec)),
        asyncio.create_task(_consume(processor.output_queue, metrics)),
    ]
    processing = asyncio.create_task(processor.start(workers))

    try:
        await asyncio.sleep(duration)
        stats = processor.queue_stats()
        summary = RunSummary(
            input_len=stats.input_len,
            output_len=stats.output_len,
            input_total=stats.input_total,
            output_total=stats.output_total,
            processed=processor.processed_count,
            errors=processor.error_count,
        )
        logger.info(
            "Final stats - Input queue: %d, Output queue: %d, Total input: %d, "
            "Total output: %d, Processed: %d, Errors: %d",
            summary.input_len,
            summary.output_len,
            summary.input_total,
            summary.output_total,
            summary.processed,
            summary.errors,
        )
    finally:
        processor.stop()
        for task in background:
            task.cancel()
        for task in background:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        await processing
    return summary


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer: {text}")
    return value


def _positive_float(text: str) -> float:
    value = float(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive number: {text}")
    return value


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse arguments, run the pipeline and return the exit status."""
    parser = argparse.ArgumentParser(
        prog="trading-engine", description="Run the trading event processor."
    )
    parser.add_argument("--duration", type=_positive_float, default=30.0,
                        help="seconds to run (default: 30)")
    parser.add_argument("--workers", type=_positive_int, default=os.cpu_count() or 1,
                        help="number of decoding workers (default: CPU count)")
    parser.add_argument("--capacity", type=_positive_int, default=10000,
                        help="capacity of each queue (default: 10000)")
    parser.add_argument("--report-interval", type=_positive_int, default=5,
                        help="seconds between metric reports (default: 5)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    logger.info("Starting high-performance trading event processor")
    asyncio.run(run(args.duration, args.workers, args.capacity, args.report_interval))
    return 0