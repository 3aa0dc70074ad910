import pytest

from cheerbridge.core import dependencies
from cheerbridge.core.config import get_settings

_ENV_VARS = (
    "TWITCH_CLIENT_ID",
    "TWITCH_CLIENT_SECRET",
    "TWITCH_BOT_ID",
    "TWITCH_ACCESS_TOKEN",
    "TWITCH_REFRESH_TOKEN",
    "TWITCH_CHANNEL",
    "ELEVEN_LABS_API_KEY",
    "DISCORD_TOKEN",
    "DISCORD_CHANNEL_ID",
)

_SINGLETONS = ("_cheer_queue", "_live_bus", "_audio_store", "_twitch_api", "_tts", "_processor")


@pytest.fixture(autouse=True)
def settings_env(monkeypatch, tmp_path):
    """Isolate settings and service singletons for every test."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("AUDIO_DIR", str(tmp_path / "audio"))
    monkeypatch.setenv("ENABLE_CHAT_INGEST", "false")
    monkeypatch.setenv("ENABLE_KEEP_ALIVE", "false")
    monkeypatch.setenv("ENVIRONMENT", "test")

    for name in _SINGLETONS:
        monkeypatch.setattr(dependencies, name, None)

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
