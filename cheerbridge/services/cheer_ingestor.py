"""Turns chat cheers (and test injections) into queue entries."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cheerbridge.services.cheer_queue import CheerQueue
from cheerbridge.shared.message_limits import get_character_limit, truncate_message
from cheerbridge.shared.models import CheerEntry

if TYPE_CHECKING:
    import twitchio

logger = logging.getLogger(__name__)


class CheerIngestor:
    """Applies the character-limit policy and appends to the queue. No network I/O."""

    def __init__(self, queue: CheerQueue) -> None:
        self.queue = queue

    def ingest(self, user: str, message: str, bits: int) -> CheerEntry:
        limit = get_character_limit(bits)
        entry = CheerEntry(user=user, message=truncate_message(message, limit), bits=bits)
        self.queue.enqueue(entry)
        logger.info(f"Cheer added to queue: {entry.user} ({entry.bits} bits)")
        return entry

    def ingest_chat_message(self, payload: twitchio.ChatMessage) -> CheerEntry | None:
        """Queue *payload* if it carries bits; plain chat is ignored."""
        cheer = payload.cheer
        if cheer is None or not cheer.bits:
            return None

        user = payload.chatter.display_name or payload.chatter.name or "unknown"
        return self.ingest(user, payload.text or "", int(cheer.bits))
