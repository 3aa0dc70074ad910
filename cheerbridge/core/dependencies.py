"""Dependency injection utilities for FastAPI

Every service is a process-wide singleton built lazily from settings.
Tests swap them out with ``app.dependency_overrides``.
"""

import logging

from cheerbridge.core.config import get_settings
from cheerbridge.services import (
    AudioArtifactStore,
    CheerIngestor,
    CheerProcessor,
    CheerQueue,
    DiscordNotifier,
    ElevenLabsTTS,
    LiveNotificationBus,
    RecordingLocator,
    TwitchAPIClient,
)

logger = logging.getLogger(__name__)


# ============================================
# Core State
# ============================================

_cheer_queue: CheerQueue | None = None
_live_bus: LiveNotificationBus | None = None
_audio_store: AudioArtifactStore | None = None


def get_cheer_queue() -> CheerQueue:
    global _cheer_queue
    if _cheer_queue is None:
        _cheer_queue = CheerQueue()
    return _cheer_queue


def get_cheer_ingestor() -> CheerIngestor:
    return CheerIngestor(get_cheer_queue())


def get_live_bus() -> LiveNotificationBus:
    global _live_bus
    if _live_bus is None:
        _live_bus = LiveNotificationBus()
    return _live_bus


def get_audio_store() -> AudioArtifactStore:
    global _audio_store
    if _audio_store is None:
        settings = get_settings()
        _audio_store = AudioArtifactStore(
            directory=settings.audio_dir,
            url_prefix=settings.audio_url_prefix,
            ttl_seconds=settings.audio_ttl_seconds,
        )
    return _audio_store


# ============================================
# External API Clients
# ============================================

_twitch_api: TwitchAPIClient | None = None
_tts: ElevenLabsTTS | None = None


def get_twitch_api() -> TwitchAPIClient | None:
    """Get shared TwitchAPIClient singleton, or None when credentials are missing."""
    global _twitch_api
    if _twitch_api is None:
        settings = get_settings()
        try:
            _twitch_api = TwitchAPIClient(
                client_id=settings.twitch_client_id,
                client_secret=settings.twitch_client_secret,
                user_token=settings.twitch_access_token,
            )
        except ValueError as e:
            logger.warning(f"Twitch API disabled: {e}")
            return None
    return _twitch_api


def get_tts() -> ElevenLabsTTS:
    global _tts
    if _tts is None:
        settings = get_settings()
        _tts = ElevenLabsTTS(
            api_key=settings.eleven_labs_api_key,
            voice_id=settings.eleven_labs_voice_id,
            model_id=settings.eleven_labs_model_id,
            stability=settings.tts_stability,
            similarity_boost=settings.tts_similarity_boost,
        )
    return _tts


def get_discord_notifier() -> DiscordNotifier:
    settings = get_settings()
    return DiscordNotifier(token=settings.discord_token, channel_id=settings.discord_channel_id)


# ============================================
# Orchestrator
# ============================================

_processor: CheerProcessor | None = None


def get_cheer_processor() -> CheerProcessor:
    """Shared processor; its lock only serializes cycles if there is exactly one."""
    global _processor
    if _processor is None:
        settings = get_settings()
        twitch_api = get_twitch_api()
        locator = (
            RecordingLocator(twitch_api, web_url=settings.twitch_web_url) if twitch_api else None
        )
        _processor = CheerProcessor(
            queue=get_cheer_queue(),
            channel=settings.twitch_channel,
            locator=locator,
            notifier=get_discord_notifier(),
            tts=get_tts(),
            audio_store=get_audio_store(),
            bus=get_live_bus(),
        )
    return _processor


async def close_services() -> None:
    """Flush timers and close shared clients. Call on app shutdown."""
    global _cheer_queue, _live_bus, _audio_store, _twitch_api, _tts, _processor

    if _live_bus is not None:
        _live_bus.close()
    if _audio_store is not None:
        await _audio_store.flush()
    if _twitch_api is not None:
        await _twitch_api.close()
    if _tts is not None:
        await _tts.close()

    _cheer_queue = None
    _live_bus = None
    _audio_store = None
    _twitch_api = None
    _tts = None
    _processor = None
