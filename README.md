# trading-engine

This package is an asyncio pipeline for trade events. Its parts work like this:

- `TradeEvent` records are encoded into a compact binary table layout.
- The encoded events are pushed onto a bounded input queue.
- A pool of workers decodes them and moves them to an output queue.
- A metrics collector counts the events and tracks their latency and throughput.

## Installation

```
pip install .
```

To install the test dependencies and run the tests:

```
pip install ".[test]"
pytest
```

## Command line

```
trading-engine
```

This command runs a demonstration pipeline made of three parts:

- a producer that generates synthetic `BTCUSDT` trades,
- the decoding worker pool,
- a consumer that records per-event latency.

A metrics line is logged when the run starts and again after each report interval. When the run ends, the final statistics are logged:

- input queue length,
- output queue length,
- total input,
- total output,
- processed count,
- error count.

Options:

| Option | Meaning | Default |
| --- | --- | --- |
| `--duration SECONDS` | how long to run | 30 |
| `--workers N` | number of decoding workers | CPU count |
| `--capacity N` | capacity of each queue | 10000 |
| `--report-interval SECONDS` | seconds between metric reports | 5 |

All values must be positive.

The same run is available from code as `trading_engine.cli.run(duration, workers, capacity, report_interval)`. It is a coroutine and returns a `RunSummary` with these fields:

- `input_len`
- `output_len`
- `input_total`
- `output_total`
- `processed`
- `errors`

`trading_engine.cli.make_event(counter)` builds the synthetic event that the producer uses.

## Library use

### Events and the codec

```python
from trading_engine.trade_event import TradeEvent, EventType, OrderSide
from trading_engine.codec import FlatBufCodec, SerializationError

event = TradeEvent.trade_executed(
    "ETHUSDT", 3000.0, 2.5, "order_789", OrderSide.SELL, "user_123", "coinbase"
)
codec = FlatBufCodec()
data = codec.serialize(event)        # bytes
restored = codec.deserialize(data)   # raises SerializationError on bad input
```

`TradeEvent.create(event_type, ...)`, `TradeEvent.order_placed(...)` and `TradeEvent.trade_executed(...)` each give the event a random UUID string as its `event_id`. They also set `timestamp` to the current time in milliseconds.

`EventType` has these members:

- `ORDER_PLACED`
- `ORDER_CANCELLED`
- `ORDER_FILLED`
- `TRADE_EXECUTED`
- `PRICE_UPDATE`

`OrderSide` has `BUY` and `SELL`.

`deserialize` raises `SerializationError` in these cases:

- the buffer is truncated or malformed,
- a string is not valid UTF-8,
- the event type or side code is unknown.

Fields that are absent from a buffer decode to empty strings or zeros.

### Queues

```python
from trading_engine.queue import LockFreeQueue, QueueFull

queue = LockFreeQueue.bounded(100)   # same as LockFreeQueue(100)
queue.enqueue(1)                     # raises QueueFull (with .item) when at capacity
queue.dequeue()                      # -> 1, or None when empty
len(queue), queue.is_empty(), queue.capacity
queue.enqueue_count(), queue.dequeue_count()

unbounded = LockFreeQueue.unbounded()   # capacity is None
```

The queue is safe to share between threads. Only successful operations are counted. A capacity below 1 raises `ValueError`.

### Processor

```python
import asyncio
from trading_engine.processor import TradeEventProcessor

async def demo(data: bytes) -> None:
    processor = TradeEventProcessor(1000)
    task = asyncio.create_task(processor.start(2))
    processor.input_queue.enqueue(data)
    await asyncio.sleep(0.1)
    print(processor.output_queue.dequeue())
    print(processor.processed_count, processor.error_count, processor.queue_stats())
    processor.stop()
    await task
```

`start(worker_count)` runs the workers until `stop()` is called. Buffers that cannot be decoded are counted in `error_count`. Events that do not fit in the output queue are dropped, and a warning is logged for each one.

`queue_stats()` returns a `QueueStats` named tuple with these fields:

- `input_len`
- `output_len`
- `input_total`: the total enqueued on the input queue
- `output_total`: the total dequeued from the output queue

### Metrics

```python
from trading_engine.metrics import MetricsCollector

metrics = MetricsCollector()
metrics.record_event(1500)           # nanoseconds; negative values raise ValueError
metrics.events_processed, metrics.average_latency_ns, metrics.throughput
metrics.report_once(5)               # logs and returns events per second over the interval
metrics.events_per_second
```

`start_reporting(interval_secs)` is a coroutine. It calls `report_once` immediately and then once per interval, until it is cancelled.

## What it does not do

The command only drives synthetic events through the pipeline. The package does not connect to any exchange or market data feed. It does not match or execute orders. It keeps no history beyond in-memory counters.