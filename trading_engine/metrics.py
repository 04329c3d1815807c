"""Counters for processed events, latency and throughput, with periodic reports."""

from __future__ import annotations

import asyncio
import logging
import threading
import time

logger = logging.getLogger(__name__)


class MetricsCollector:
    """Collects per-event latency and reports rates."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._events_processed = 0
        self._events_per_second = 0
        self._total_latency_ns = 0
        self._latency_count = 0
        self._last_reported = 0
        self._start_time = time.monotonic()

    def record_event(self, processing_time_ns: int) -> None:
        """Count one event that took ``processing_time_ns`` nanoseconds."""
        if processing_time_ns < 0:
            raise ValueError("processing time cannot be negative")
        with self._lock:
            self._events_processed += 1
            self._total_latency_ns += processing_time_ns
            self._latency_count += 1

    @property
    def events_processed(self) -> int:
        return self._events_processed

    @property
    def events_per_second(self) -> int:
        """Rate computed by the most recent report."""
        return self._events_per_second

    @property
    def average_latency_ns(self) -> float:
        """Mean recorded latency, or 0.0 when nothing was recorded."""
        with self._lock:
            total, count = self._total_latency_ns, self._latency_count
        return total / count if count > 0 else 0.0

    @property
    def throughput(self) -> float:
        """Events per second since the collector was created."""
        elapsed = time.monotonic() - self._start_time
        processed = self._events_processed
        return processed / elapsed if elapsed > 0 else 0.0

    def report_once(self, interval_secs: int) -> int:
        """Compute and log the rate over the last interval; return events per second."""
        if interval_secs <= 0:
            raise ValueError("interval must be positive")
        current = self._events_processed
        eps = (current - self._last_reported) // interval_secs
        self._events_per_second = eps
        logger.info(
            "Metrics - Processed: %d, EPS: %d, Avg Latency: %.2f\u03bcs, Throughput: %.2f/s",
            current,
            eps,
            self.average_latency_ns / 1000.0,
            self.throughput,
        )
        self._last_reported = current
        return eps

    async def start_reporting(self, interval_secs: int) -> None:
        """Report immediately and then every ``interval_secs`` seconds, forever."""
        if interval_secs <= 0:
            raise ValueError("interval must be positive")
        loop = asyncio.get_running_loop()
        next_tick = loop.time()
        while True:
            delay = next_tick - loop.time()
            if delay > 0:
                await asyncio.sleep(delay)
            self.report_once(interval_secs)
            next_tick += interval_secs