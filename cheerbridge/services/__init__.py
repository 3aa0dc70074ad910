"""Services layer - the cheer pipeline

Each component of the pipeline is a plain class initialized with its
collaborators and wired together in core.dependencies.
"""

from .audio_store import AudioArtifactStore
from .cheer_ingestor import CheerIngestor
from .cheer_processor import CheerProcessor, CycleState, ProcessResult
from .cheer_queue import CheerQueue
from .discord_notifier import DiscordNotifier
from .live_bus import LiveClient, LiveNotificationBus
from .recording_locator import RecordingLocator
from .tts_service import ElevenLabsTTS
from .twitch_api import TwitchAPIClient

__all__ = [
    "AudioArtifactStore",
    "CheerIngestor",
    "CheerProcessor",
    "CheerQueue",
    "CycleState",
    "DiscordNotifier",
    "ElevenLabsTTS",
    "LiveClient",
    "LiveNotificationBus",
    "ProcessResult",
    "RecordingLocator",
    "TwitchAPIClient",
]
