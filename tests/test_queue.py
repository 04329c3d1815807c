import threading
import time

import pytest

from trading_engine.queue import LockFreeQueue, QueueFull


def test_queue_operations():
    queue = LockFreeQueue.bounded(100)
    queue.enqueue(1)
    queue.enqueue(2)
    assert len(queue) == 2

    assert queue.dequeue() == 1
    assert queue.dequeue() == 2
    assert queue.dequeue() is None
    assert queue.is_empty()


def test_full_queue_rejects_and_returns_item():
    queue = LockFreeQueue.bounded(2)
    queue.enqueue("a")
    queue.enqueue("b")
    with pytest.raises(QueueFull) as info:
        queue.enqueue("c")
    assert info.value.item == "c"
    assert len(queue) == 2
    assert queue.enqueue_count() == 2


def test_zero_capacity_is_rejected():
    with pytest.raises(ValueError):
        LockFreeQueue.bounded(0)


def test_unbounded_queue_accepts_many_items():
    queue = LockFreeQueue.unbounded()
    for i in range(20000):
        queue.enqueue(i)
    assert len(queue) == 20000
    assert queue.capacity is None
    assert queue.dequeue() == 0


def test_counters_only_count_successes():
    queue = LockFreeQueue.bounded(1)
    queue.enqueue(10)
    with pytest.raises(QueueFull):
        queue.enqueue(11)
    assert queue.dequeue() == 10
    assert queue.dequeue() is None
    assert queue.enqueue_count() == 1
    assert queue.dequeue_count() == 1


def test_enqueue_dequeue_throughput_case():
    queue = LockFreeQueue.bounded(10000)
    for i in range(1000):
        queue.enqueue(i)
    drained = [queue.dequeue() for _ in range(1000)]
    assert drained == list(range(1000))
    assert queue.is_empty()
    assert queue.enqueue_count() == 1000
    assert queue.dequeue_count() == 1000


def test_concurrent_queue_access():
    queue = LockFreeQueue.bounded(1000)
    producer_count = 4
    consumer_count = 2
    items_per_producer = 1000
    total = producer_count * items_per_producer

    consumed = []
    lock = threading.Lock()

    def producer(producer_id):
        for i in range(items_per_producer):
            value = producer_id * items_per_producer + i
            while True:
                try:
                    queue.enqueue(value)
                    break
                except QueueFull:
                    time.sleep(0)

    def consumer():
        while True:
            with lock:
                if len(consumed) >= total:
                    return
            item = queue.dequeue()
            if item is None:
                time.sleep(0)
                continue
            with lock:
                consumed.append(item)

    threads = [
        threading.Thread(target=producer, args=(pid,)) for pid in range(producer_count)
    ]
    threads += [threading.Thread(target=consumer) for _ in range(consumer_count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    assert not any(thread.is_alive() for thread in threads)
    assert len(consumed) >= total
    assert sorted(consumed) == list(range(total))
    assert queue.dequeue_count() == total