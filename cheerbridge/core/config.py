"""Application configuration using Pydantic Settings"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# === Path Configuration ===
PACKAGE_DIR = Path(__file__).parent.parent
PUBLIC_DIR = PACKAGE_DIR / "public"
DATA_DIR = PACKAGE_DIR.parent / "data"


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=PACKAGE_DIR.parent / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Twitch
    twitch_client_id: str = Field(default="", description="Twitch application Client ID")
    twitch_client_secret: str = Field(default="", description="Twitch application Client Secret")
    twitch_bot_id: str = Field(default="", description="User ID of the account reading chat")
    twitch_access_token: str = Field(default="", description="User access token for the bot")
    twitch_refresh_token: str = Field(default="", description="Refresh token for the bot")
    twitch_channel: str = Field(default="", description="Channel login to watch for cheers")
    twitch_web_url: str = Field(default="https://www.twitch.tv", description="Base URL for VOD links")

    # ElevenLabs
    eleven_labs_api_key: str = Field(default="", description="ElevenLabs API key")
    eleven_labs_voice_id: str = Field(default="iP95p4xoKVk53GoZ742B", description="Voice ID")
    eleven_labs_model_id: str = Field(default="eleven_monolingual_v1", description="TTS model")
    tts_stability: float = Field(default=0.5, ge=0.0, le=1.0, description="Voice stability")
    tts_similarity_boost: float = Field(default=0.5, ge=0.0, le=1.0, description="Similarity boost")

    # Discord
    discord_token: str = Field(default="", description="Discord bot token")
    discord_channel_id: int | None = Field(
        default=None, description="Discord channel receiving cheer posts"
    )

    # Audio artifacts
    audio_dir: Path = Field(default=DATA_DIR / "audio", description="Directory for TTS audio files")
    audio_url_prefix: str = Field(default="/audio", description="Public URL prefix for audio files")
    audio_ttl_seconds: float = Field(default=60.0, gt=0, description="Seconds before audio deletion")

    # Features
    enable_chat_ingest: bool = Field(default=True, description="Connect to Twitch chat on startup")

    # Environment
    environment: str = Field(default="development", description="Environment name")
    log_level: str = Field(default="INFO", description="Logging level")

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3000, description="Server port")

    # Keep-Alive
    enable_keep_alive: bool = Field(default=True, description="Enable heartbeat task")
    keep_alive_interval: int = Field(default=300, description="Heartbeat interval in seconds")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            logger.warning(f"Invalid log level '{v}', defaulting to INFO")
            return "INFO"
        return v_upper

    @field_validator("twitch_channel")
    @classmethod
    def normalize_channel(cls, v: str) -> str:
        """Channel logins are lowercase and never carry a leading '#'"""
        return v.strip().lstrip("#").lower()

    @field_validator("discord_channel_id", mode="before")
    @classmethod
    def empty_channel_id_is_unset(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("audio_url_prefix")
    @classmethod
    def validate_audio_url_prefix(cls, v: str) -> str:
        if not v.startswith("/"):
            v = "/" + v
        return v.rstrip("/")

    @property
    def chat_configured(self) -> bool:
        """Check if every credential needed to read Twitch chat is present"""
        return all(
            (
                self.twitch_client_id,
                self.twitch_client_secret,
                self.twitch_bot_id,
                self.twitch_access_token,
                self.twitch_channel,
            )
        )

    @property
    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
