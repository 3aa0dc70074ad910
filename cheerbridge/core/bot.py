"""Twitch chat bot: reads one channel's chat and feeds cheers to the ingestor."""

from __future__ import annotations

import logging
from collections.abc import Callable

import twitchio
from twitchio import eventsub
from twitchio.ext import commands

from cheerbridge.components.cheers import CheersComponent
from cheerbridge.services.cheer_ingestor import CheerIngestor

LOGGER: logging.Logger = logging.getLogger("Bot")


class CheerBot(commands.Bot):
    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        bot_id: str,
        access_token: str,
        refresh_token: str,
        channel: str,
        ingestor: CheerIngestor,
        on_ready: Callable[[], None] | None = None,
    ) -> None:
        self._access_token = access_token
        self._refresh_token = refresh_token
        self.channel_login = channel
        self.ingestor = ingestor
        self._on_ready = on_ready
        self.broadcaster_id: str | None = None

        super().__init__(
            client_id=client_id,
            client_secret=client_secret,
            bot_id=bot_id,
            prefix="!",
        )

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    async def setup_hook(self) -> None:
        await self.add_component(CheersComponent(self.ingestor))
        await self.subscribe_channel_chat()

    async def subscribe_channel_chat(self) -> None:
        users = await self.fetch_users(logins=[self.channel_login])
        if not users:
            raise RuntimeError(f"Twitch channel not found: {self.channel_login}")

        self.broadcaster_id = users[0].id
        subscription = eventsub.ChatMessageSubscription(
            broadcaster_user_id=self.broadcaster_id, user_id=self.bot_id
        )
        await self.subscribe_websocket(payload=subscription)
        LOGGER.info(f"Subscribed to chat for channel: {self.channel_login} ({self.broadcaster_id})")

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    async def load_tokens(self, path: str | None = None) -> None:
        resp: twitchio.authentication.ValidateTokenPayload = await self.add_token(
            self._access_token, self._refresh_token
        )
        LOGGER.info(f"Loaded token for {resp.login or 'unknown'} ({resp.user_id})")

    async def save_tokens(self, path: str | None = None) -> None:
        # Tokens live in the environment only
        return

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    async def event_ready(self) -> None:
        LOGGER.info("Successfully logged in as: %s", self.bot_id)
        if self._on_ready is not None:
            self._on_ready()

    async def event_eventsub_error(self, error: Exception) -> None:
        LOGGER.error(f"EventSub error: {error}")
