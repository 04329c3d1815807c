import asyncio

import pytest

from trading_engine.codec import FlatBufCodec
from trading_engine.processor import QueueStats, TradeEventProcessor
from trading_engine.trade_event import OrderSide, TradeEvent


async def _wait_until(predicate, timeout=2.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            return False
        await asyncio.sleep(0.005)
    return True


def _events():
    return [
        TradeEvent.order_placed(
            "BTCUSDT", 50000.0, 1.0, "order_1", OrderSide.BUY, "user_1", "binance"
        ),
        TradeEvent.trade_executed(
            "ETHUSDT", 3000.0, 2.0, "order_2", OrderSide.SELL, "user_2", "coinbase"
        ),
    ]


def test_fresh_processor_stats_are_zero():
    processor = TradeEventProcessor(10)
    assert processor.queue_stats() == QueueStats(0, 0, 0, 0)
    assert processor.processed_count == 0
    assert processor.error_count == 0


def test_queues_are_bounded_by_capacity():
    processor = TradeEventProcessor(1)
    processor.input_queue.enqueue(b"x")
    assert processor.input_queue.capacity == 1
    assert processor.output_queue.capacity == 1
    assert len(processor.input_queue) == 1


@pytest.mark.asyncio
async def test_event_processor_integration():
    processor = TradeEventProcessor(1000)
    codec = FlatBufCodec()
    task = asyncio.create_task(processor.start(2))
    await asyncio.sleep(0.1)

    test_events = _events()
    for event in test_events:
        processor.input_queue.enqueue(codec.serialize(event))

    await _wait_until(lambda: processor.processed_count >= len(test_events))

    processed = []
    while (event := processor.output_queue.dequeue()) is not None:
        processed.append(event)

    assert len(processed) == len(test_events)
    assert processor.processed_count >= len(test_events)
    assert sorted(e.order_id for e in processed) == ["order_1", "order_2"]
    assert {e.order_id: e for e in processed} == {e.order_id: e for e in test_events}

    processor.stop()
    await asyncio.wait_for(task, 1.0)
    assert processor.running is False


@pytest.mark.asyncio
async def test_invalid_buffer_counts_as_error():
    processor = TradeEventProcessor(10)
    task = asyncio.create_task(processor.start(1))
    processor.input_queue.enqueue(b"\x01\x02")
    assert await _wait_until(lambda: processor.error_count == 1)
    processor.stop()
    await asyncio.wait_for(task, 1.0)
    assert processor.processed_count == 0
    assert processor.output_queue.is_empty()


@pytest.mark.asyncio
async def test_full_output_queue_drops_event():
    processor = TradeEventProcessor(1)
    codec = FlatBufCodec()
    first, second = _events()
    task = asyncio.create_task(processor.start(1))

    processor.input_queue.enqueue(codec.serialize(first))
    assert await _wait_until(lambda: processor.processed_count == 1)
    processor.input_queue.enqueue(codec.serialize(second))
    assert await _wait_until(lambda: processor.input_queue.is_empty())
    await asyncio.sleep(0.02)

    processor.stop()
    await asyncio.wait_for(task, 1.0)
    assert processor.processed_count == 1
    assert processor.output_queue.dequeue() == first
    assert processor.output_queue.dequeue() is None


@pytest.mark.asyncio
async def test_queue_stats_after_processing():
    processor = TradeEventProcessor(100)
    codec = FlatBufCodec()
    task = asyncio.create_task(processor.start(2))
    for event in _events():
        processor.input_queue.enqueue(codec.serialize(event))
    assert await _wait_until(lambda: processor.processed_count == 2)
    processor.output_queue.dequeue()
    processor.stop()
    await asyncio.wait_for(task, 1.0)

    stats = processor.queue_stats()
    assert stats.input_len == 0
    assert stats.output_len == 1
    assert stats.input_total == 2
    assert stats.output_total == 1


@pytest.mark.asyncio
async def test_zero_workers_returns_immediately():
    processor = TradeEventProcessor(10)
    await asyncio.wait_for(processor.start(0), 1.0)
    assert processor.processed_count == 0
    assert processor.running is True