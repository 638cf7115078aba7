from __future__ import annotations

import threading

import pytest

from s3purge.workqueue import CLOSED, QueueClosedError, WorkQueue


def test_get_returns_items_in_order_then_closed() -> None:
    queue = WorkQueue(["a", "b"], close=True)

    assert queue.get() == "a"
    assert queue.get() == "b"
    assert queue.get() is CLOSED
    assert queue.get() is CLOSED


def test_put_after_close_raises() -> None:
    queue: WorkQueue[str] = WorkQueue()
    queue.close()

    with pytest.raises(QueueClosedError):
        queue.put("x")


def test_get_on_open_empty_queue_times_out() -> None:
    queue: WorkQueue[str] = WorkQueue()

    with pytest.raises(TimeoutError):
        queue.get(timeout=0.01)


def test_close_wakes_blocked_consumers() -> None:
    queue: WorkQueue[int] = WorkQueue()
    seen: list[object] = []

    def consume() -> None:
        seen.append(queue.get(timeout=5))

    threads = [threading.Thread(target=consume) for _ in range(3)]
    for t in threads:
        t.start()
    queue.close()
    for t in threads:
        t.join(timeout=5)

    assert seen == [CLOSED, CLOSED, CLOSED]


def test_concurrent_consumers_take_every_item_once() -> None:
    items = list(range(2000))
    queue = WorkQueue(items, close=True)
    taken: list[int] = []
    lock = threading.Lock()

    def consume() -> None:
        while True:
            item = queue.get(timeout=5)
            if item is CLOSED:
                return
            with lock:
                taken.append(item)

    threads = [threading.Thread(target=consume) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)

    assert sorted(taken) == items
    assert len(queue) == 0


def test_closed_sentinel_is_a_single_falsy_instance() -> None:
    sentinel_type = type(CLOSED)

    assert sentinel_type() is CLOSED
    assert not CLOSED
    assert repr(CLOSED) == "CLOSED"
    assert isinstance(WorkQueue(close=True).get(), sentinel_type)
