"""Data models for queued cheers and the artifacts a processing cycle produces."""

from __future__ import annotations

import secrets
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path


def _new_entry_id() -> str:
    return secrets.token_hex(6)


@dataclass
class CheerEntry:
    """A bits donation waiting in the queue."""

    user: str
    message: str
    bits: int
    id: str = field(default_factory=_new_entry_id)

    @property
    def announcement(self) -> str:
        """Attribution text used for TTS, the overlay and Discord."""
        return f"Cheer from {self.user}: {self.message}"

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class RecordingLink:
    """Deep link into the current stream's VOD."""

    url: str
    recording_id: str
    elapsed_minutes: int
    elapsed_seconds: int


@dataclass
class TtsArtifact:
    """Transient audio file served to the overlay."""

    name: str
    path: Path
    url: str
    created_at: datetime
