"""Cheer listener: queues every chat message that carries bits."""

import logging

import twitchio
from twitchio.ext import commands

from cheerbridge.services.cheer_ingestor import CheerIngestor

LOGGER: logging.Logger = logging.getLogger("CheersComponent")


class CheersComponent(commands.Component):
    """Chat cheer ingest. Only touches the in-memory queue."""

    def __init__(self, ingestor: CheerIngestor) -> None:
        self.ingestor = ingestor

    @commands.Component.listener()
    async def event_message(self, payload: twitchio.ChatMessage) -> None:
        try:
            entry = self.ingestor.ingest_chat_message(payload)
        except Exception as e:
            LOGGER.exception(f"Failed to queue cheer from {payload.chatter.name}: {e}")
            return

        if entry is not None:
            broadcaster = payload.broadcaster.name if payload.broadcaster else "?"
            LOGGER.info(f"[{broadcaster}] Cheer: {entry.user} ({entry.bits} bits)")
