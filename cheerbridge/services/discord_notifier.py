"""Cross-posts processed cheers to a Discord text channel."""

from __future__ import annotations

import logging
from collections.abc import Callable

import discord

from cheerbridge.core.exceptions import DispatchError
from cheerbridge.shared.models import CheerEntry

logger = logging.getLogger(__name__)


def format_cheer_message(cheer: CheerEntry, url: str | None) -> str:
    text = cheer.announcement
    if url:
        text += f"\n{url}"
    return text


def _default_client() -> discord.Client:
    # REST only: login() + fetch_channel() never open the gateway
    return discord.Client(intents=discord.Intents.none())


class DiscordNotifier:
    """Best-effort sender. Every call logs in, sends once, and closes again."""

    def __init__(
        self,
        token: str,
        channel_id: int | None,
        client_factory: Callable[[], discord.Client] = _default_client,
    ) -> None:
        self.token = token
        self.channel_id = channel_id
        self._client_factory = client_factory

    @property
    def is_configured(self) -> bool:
        return bool(self.token and self.channel_id)

    async def notify(self, text: str) -> None:
        """Send *text* to the configured channel. Raises DispatchError on any failure."""
        if not self.is_configured:
            raise DispatchError("Discord token or channel is not configured")

        try:
            async with self._client_factory() as client:
                await client.login(self.token)
                channel = await client.fetch_channel(self.channel_id)
                if not isinstance(channel, discord.abc.Messageable):
                    raise DispatchError(f"Discord channel {self.channel_id} cannot receive messages")
                await channel.send(text)
        except DispatchError:
            raise
        except (discord.DiscordException, OSError, TimeoutError) as e:
            raise DispatchError(f"{type(e).__name__}: {e}") from e

        logger.info(f"Message sent to Discord channel {self.channel_id}")

    async def notify_cheer(self, cheer: CheerEntry, url: str | None) -> None:
        await self.notify(format_cheer_message(cheer, url))
