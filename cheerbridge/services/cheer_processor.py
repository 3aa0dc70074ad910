"""Drives one cheer from the queue to the overlay.

One call to ``process_next`` is one cycle:

    IDLE -> DEQUEUING -> LOCATING -> DISPATCHING -> SYNTHESIZING
         -> PERSISTING -> BROADCASTING -> CLEANUP_SCHEDULED -> IDLE

Locating and dispatching are soft: failures are logged and the cycle goes on
without a VOD link. Synthesis and persisting are hard: the error propagates and
the dequeued cheer is dropped, not re-queued.

The Discord post does not depend on the VOD lookup: when the stream is offline
or the archive cannot be found, the post goes out with the attribution text
only.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum

from cheerbridge.core.exceptions import (
    DispatchError,
    EmptyQueueError,
    LocatorError,
    StreamNotLiveError,
)
from cheerbridge.services.audio_store import AudioArtifactStore
from cheerbridge.services.cheer_queue import CheerQueue
from cheerbridge.services.discord_notifier import DiscordNotifier
from cheerbridge.services.live_bus import LiveNotificationBus
from cheerbridge.services.recording_locator import RecordingLocator
from cheerbridge.services.tts_service import ElevenLabsTTS
from cheerbridge.shared.models import CheerEntry

logger = logging.getLogger(__name__)


class CycleState(str, Enum):
    IDLE = "idle"
    DEQUEUING = "dequeuing"
    LOCATING = "locating"
    DISPATCHING = "dispatching"
    SYNTHESIZING = "synthesizing"
    PERSISTING = "persisting"
    BROADCASTING = "broadcasting"
    CLEANUP_SCHEDULED = "cleanup_scheduled"


@dataclass
class ProcessResult:
    cheer: CheerEntry
    url: str | None
    audio_url: str


class CheerProcessor:
    """Single-consumer orchestrator; a lock keeps cycles from overlapping.

    Discord is notified on every cycle, with or without a VOD link.
    """

    def __init__(
        self,
        *,
        queue: CheerQueue,
        channel: str,
        locator: RecordingLocator | None,
        notifier: DiscordNotifier,
        tts: ElevenLabsTTS,
        audio_store: AudioArtifactStore,
        bus: LiveNotificationBus,
    ) -> None:
        self.queue = queue
        self.channel = channel
        self.locator = locator
        self.notifier = notifier
        self.tts = tts
        self.audio_store = audio_store
        self.bus = bus
        self.state = CycleState.IDLE
        self._cycle_lock = asyncio.Lock()

    def _enter(self, state: CycleState) -> None:
        self.state = state
        logger.debug(f"Cycle state: {state.value}")

    async def process_next(self) -> ProcessResult | None:
        """Process the oldest cheer. Returns None when the queue is empty.

        Raises:
            SynthesisError: TTS failed; the cheer is lost.
            ArtifactError: the audio file could not be written; the cheer is lost.
        """
        async with self._cycle_lock:
            try:
                return await self._run_cycle()
            finally:
                self._enter(CycleState.IDLE)

    async def _run_cycle(self) -> ProcessResult | None:
        self._enter(CycleState.DEQUEUING)
        try:
            cheer = self.queue.dequeue_front()
        except EmptyQueueError:
            logger.debug("No cheers in queue")
            return None

        logger.info(f"Processing cheer {cheer.id} from {cheer.user} ({cheer.bits} bits)")

        self._enter(CycleState.LOCATING)
        url = await self._locate()

        self._enter(CycleState.DISPATCHING)
        await self._dispatch(cheer, url)

        self._enter(CycleState.SYNTHESIZING)
        text = cheer.announcement
        audio = await self.tts.synthesize(text)

        self._enter(CycleState.PERSISTING)
        artifact = await self.audio_store.write(audio)

        self._enter(CycleState.BROADCASTING)
        self.bus.broadcast(artifact.url, text)

        self._enter(CycleState.CLEANUP_SCHEDULED)
        self.audio_store.schedule_deletion(artifact)

        logger.info(f"TTS audio prepared and notification sent for cheer {cheer.id}")
        return ProcessResult(cheer=cheer, url=url, audio_url=artifact.url)

    async def _locate(self) -> str | None:
        if self.locator is None or not self.channel:
            logger.debug("Recording locator not configured, skipping VOD link")
            return None
        try:
            link = await self.locator.locate(self.channel)
        except StreamNotLiveError as e:
            logger.info(f"{e}, continuing without VOD link")
            return None
        except LocatorError as e:
            logger.warning(f"Error getting stream info: {e}")
            return None
        except Exception as e:
            logger.exception(f"Unexpected error locating VOD: {e}")
            return None
        return link.url

    async def _dispatch(self, cheer: CheerEntry, url: str | None) -> None:
        if not self.notifier.is_configured:
            logger.debug("Discord not configured, skipping notification")
            return
        try:
            await self.notifier.notify_cheer(cheer, url)
        except DispatchError as e:
            logger.warning(f"Error sending to Discord: {e}")
        except Exception as e:
            logger.exception(f"Unexpected error sending to Discord: {e}")
