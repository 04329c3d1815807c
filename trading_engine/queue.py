"""Thread-safe FIFO queue with an optional capacity and operation counters."""

from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Generic, Optional, TypeVar

T = TypeVar("T")


class QueueFull(Exception):
    """Raised when an item is offered to a bounded queue that is full."""

    def __init__(self, item: object) -> None:
        super().__init__("queue is full")
        self.item = item


class LockFreeQueue(Generic[T]):
    """A FIFO queue shared between threads.

    ``capacity=None`` gives an unbounded queue. Successful enqueues and
    dequeues are counted.
    """

    def __init__(self, capacity: Optional[int] = None) -> None:
        if capacity is not None and capacity < 1:
            raise ValueError("capacity must be non-zero")
        self._capacity = capacity
        self._items: Deque[T] = deque()
        self._lock = threading.Lock()
        self._enqueued = 0
        self._dequeued = 0

    @classmethod
    def bounded(cls, capacity: int) -> LockFreeQueue[T]:
        """Create a queue that holds at most ``capacity`` items."""
        return cls(capacity)

    @classmethod
    def unbounded(cls) -> LockFreeQueue[T]:
        """Create a queue without a size limit."""
        return cls(None)

    @property
    def capacity(self) -> Optional[int]:
        return self._capacity

    def enqueue(self, item: T) -> None:
        """Append ``item``; raise QueueFull (carrying the item) if there is no room."""
        with self._lock:
            if self._capacity is not None and len(self._items) >= self._capacity:
                raise QueueFull(item)
            self._items.append(item)
            self._enqueued += 1

    def dequeue(self) -> Optional[T]:
        """Remove and return the oldest item, or None if the queue is empty."""
        with self._lock:
            if not self._items:
                return None
            self._dequeued += 1
            return self._items.popleft()

    def __len__(self) -> int:
        return len(self._items)

    def is_empty(self) -> bool:
        return not self._items

    def enqueue_count(self) -> int:
        """Number of items successfully enqueued so far."""
        return self._enqueued

    def dequeue_count(self) -> int:
        """Number of items successfully dequeued so far."""
        return self._dequeued