"""Shared data models for cheerbridge services."""

from .cheer import CheerEntry, RecordingLink, TtsArtifact

__all__ = [
    "CheerEntry",
    "RecordingLink",
    "TtsArtifact",
]
