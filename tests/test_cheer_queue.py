import pytest

from cheerbridge.core.exceptions import EmptyQueueError, EntryNotFoundError, InvalidIndexError
from cheerbridge.services import CheerQueue
from cheerbridge.shared.models import CheerEntry


def _entry(n: int) -> CheerEntry:
    return CheerEntry(user=f"user{n}", message=f"message {n}", bits=n)


@pytest.fixture
def queue() -> CheerQueue:
    q = CheerQueue()
    for n in range(1, 5):
        q.enqueue(_entry(n))
    return q


def test_dequeue_is_fifo(queue: CheerQueue) -> None:
    users = [queue.dequeue_front().user for _ in range(4)]
    assert users == ["user1", "user2", "user3", "user4"]
    assert len(queue) == 0


def test_dequeue_empty_raises() -> None:
    with pytest.raises(EmptyQueueError):
        CheerQueue().dequeue_front()


def test_remove_at_keeps_relative_order(queue: CheerQueue) -> None:
    removed = queue.remove_at(1)

    assert removed.user == "user2"
    assert [e.user for e in queue.snapshot()] == ["user1", "user3", "user4"]


@pytest.mark.parametrize("index", [-1, 4, 99])
def test_remove_at_out_of_range_leaves_queue_unchanged(queue: CheerQueue, index: int) -> None:
    before = queue.snapshot()

    with pytest.raises(InvalidIndexError) as exc_info:
        queue.remove_at(index)

    assert exc_info.value.length == 4
    assert queue.snapshot() == before


def test_remove_by_id(queue: CheerQueue) -> None:
    target = queue.snapshot()[2]

    removed = queue.remove_by_id(target.id)

    assert removed is target
    assert [e.user for e in queue.snapshot()] == ["user1", "user2", "user4"]


def test_remove_by_unknown_id(queue: CheerQueue) -> None:
    with pytest.raises(EntryNotFoundError):
        queue.remove_by_id("missing")
    assert len(queue) == 4


def test_snapshot_is_a_copy(queue: CheerQueue) -> None:
    snapshot = queue.snapshot()
    snapshot.clear()
    assert len(queue) == 4


def test_entry_ids_are_unique() -> None:
    ids = {_entry(1).id for _ in range(200)}
    assert len(ids) == 200
