"""Fan-out of TTS announcements to connected overlay clients.

Each overlay holds one server-sent-events connection backed by a LiveClient
queue. Broadcasts go to whoever is connected at that moment; there is no
backlog for clients that connect later.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

CLIENT_QUEUE_SIZE = 32


@dataclass
class LiveClient:
    id: int
    queue: asyncio.Queue[dict | None] = field(
        default_factory=lambda: asyncio.Queue(maxsize=CLIENT_QUEUE_SIZE)
    )

    async def next_event(self) -> dict | None:
        """Wait for the next payload. None means the bus is closing."""
        return await self.queue.get()


class LiveNotificationBus:
    def __init__(self) -> None:
        self._clients: dict[int, LiveClient] = {}
        self._ids = itertools.count(1)

    @property
    def client_count(self) -> int:
        return len(self._clients)

    def subscribe(self) -> LiveClient:
        client = LiveClient(id=next(self._ids))
        self._clients[client.id] = client
        logger.info(f"New SSE connection established: {client.id}")
        return client

    def unsubscribe(self, client_id: int) -> None:
        if self._clients.pop(client_id, None) is not None:
            logger.info(f"SSE connection closed: {client_id}")

    def broadcast(self, audio_url: str, message: str) -> int:
        """Send one announcement to every current client. Returns how many accepted it."""
        payload = {"audioUrl": audio_url, "message": message}
        clients = list(self._clients.values())
        logger.info(f"Notifying {len(clients)} SSE clients: {audio_url}")

        delivered = 0
        for client in clients:
            try:
                client.queue.put_nowait(payload)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning(f"SSE client {client.id} is not keeping up, dropping event")
        return delivered

    def close(self) -> None:
        """Wake every client with an end-of-stream marker. Call on shutdown."""
        for client in list(self._clients.values()):
            try:
                client.queue.put_nowait(None)
            except asyncio.QueueFull:
                # Make room for the end-of-stream marker
                client.queue.get_nowait()
                client.queue.put_nowait(None)
        self._clients.clear()
