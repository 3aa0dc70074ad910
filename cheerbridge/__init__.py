"""cheerbridge - Twitch cheers to TTS overlay and Discord."""

__version__ = "1.0.0"
