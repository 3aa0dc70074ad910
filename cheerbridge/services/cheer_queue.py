"""In-memory FIFO of pending cheers.

Positional removal is kept for the admin page, but indices shift whenever the
processor dequeues; callers that can should remove by entry id instead.
"""

from __future__ import annotations

import logging
import threading
from collections import deque

from cheerbridge.core.exceptions import EmptyQueueError, EntryNotFoundError, InvalidIndexError
from cheerbridge.shared.models import CheerEntry

logger = logging.getLogger(__name__)


class CheerQueue:
    """Ordered store of cheers. Every operation holds the same lock and never awaits."""

    def __init__(self) -> None:
        self._entries: deque[CheerEntry] = deque()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def enqueue(self, entry: CheerEntry) -> None:
        with self._lock:
            self._entries.append(entry)
            size = len(self._entries)
        logger.debug(f"Queued cheer {entry.id} from {entry.user} ({entry.bits} bits), size={size}")

    def dequeue_front(self) -> CheerEntry:
        """Remove and return the oldest cheer."""
        with self._lock:
            if not self._entries:
                raise EmptyQueueError()
            return self._entries.popleft()

    def remove_at(self, index: int) -> CheerEntry:
        """Remove the cheer at *index*; the queue is untouched when out of range."""
        with self._lock:
            length = len(self._entries)
            if index < 0 or index >= length:
                raise InvalidIndexError(index, length)
            entry = self._entries[index]
            del self._entries[index]
        logger.debug(f"Removed cheer at index {index}: {entry.id}")
        return entry

    def remove_by_id(self, entry_id: str) -> CheerEntry:
        with self._lock:
            for entry in self._entries:
                if entry.id == entry_id:
                    self._entries.remove(entry)
                    break
            else:
                raise EntryNotFoundError(entry_id)
        logger.debug(f"Removed cheer {entry_id}")
        return entry

    def snapshot(self) -> list[CheerEntry]:
        """Copy of the current queue, oldest first."""
        with self._lock:
            return list(self._entries)
