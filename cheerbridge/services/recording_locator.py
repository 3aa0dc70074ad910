"""Resolves the live session's VOD and a timestamped link to the current moment."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from cheerbridge.core.exceptions import LocatorError, StreamNotLiveError
from cheerbridge.services.twitch_api import TwitchAPIClient
from cheerbridge.shared.models import RecordingLink

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def format_timestamp(elapsed_seconds: int) -> str:
    """Twitch ``?t=`` value. Minutes are not folded into hours (90m0s, not 1h30m0s)."""
    minutes, seconds = divmod(max(elapsed_seconds, 0), 60)
    return f"{minutes}m{seconds}s"


def parse_started_at(value: str) -> datetime:
    """Parse Helix ``started_at`` (RFC 3339, trailing Z) as an aware datetime."""
    started = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if started.tzinfo is None:
        started = started.replace(tzinfo=UTC)
    return started


class RecordingLocator:
    def __init__(
        self,
        twitch_api: TwitchAPIClient,
        web_url: str = "https://www.twitch.tv",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.twitch_api = twitch_api
        self.web_url = web_url.rstrip("/")
        self._clock = clock

    async def locate(self, channel: str) -> RecordingLink:
        """Build a VOD deep link for *channel* at the current stream offset.

        Raises:
            StreamNotLiveError: the channel is offline.
            LocatorError: a Helix call failed or no archive exists yet.
        """
        stream = await self.twitch_api.get_stream_by_login(channel)
        if not stream:
            raise StreamNotLiveError(channel)

        try:
            started_at = parse_started_at(stream["started_at"])
            broadcaster_id = stream["user_id"]
        except (KeyError, ValueError) as e:
            raise LocatorError(f"Malformed stream payload: {e}") from e

        elapsed = max(int((self._clock() - started_at).total_seconds()), 0)

        vod = await self.twitch_api.get_latest_archive(broadcaster_id)
        if not vod or not vod.get("id"):
            raise LocatorError(f"No archived VOD for broadcaster {broadcaster_id}")

        recording_id = vod["id"]
        minutes, seconds = divmod(elapsed, 60)
        url = f"{self.web_url}/{channel}/v/{recording_id}?t={format_timestamp(elapsed)}"
        logger.debug(f"Located VOD {recording_id} at {minutes}m{seconds}s for {channel}")

        return RecordingLink(
            url=url,
            recording_id=recording_id,
            elapsed_minutes=minutes,
            elapsed_seconds=seconds,
        )
