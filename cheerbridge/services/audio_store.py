"""Transient TTS audio files served to the overlay and deleted after a fixed delay."""

from __future__ import annotations

import asyncio
import logging
import secrets
from datetime import UTC, datetime
from pathlib import Path

from cheerbridge.core.exceptions import ArtifactError
from cheerbridge.shared.models import TtsArtifact

logger = logging.getLogger(__name__)


class AudioArtifactStore:
    """Writes uniquely named MP3 files and owns their deletion timers.

    Timers are tracked by artifact name so shutdown can delete pending
    files immediately instead of leaking them.
    """

    def __init__(self, directory: Path, url_prefix: str = "/audio", ttl_seconds: float = 60.0):
        self.directory = Path(directory)
        self.url_prefix = url_prefix.rstrip("/")
        self.ttl_seconds = ttl_seconds
        self._pending: dict[str, asyncio.Task] = {}

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    async def write(self, audio: bytes) -> TtsArtifact:
        """Persist *audio* under a collision-resistant name. Raises ArtifactError."""
        name = f"cheer_{secrets.token_hex(8)}.mp3"
        path = self.directory / name
        try:
            await asyncio.to_thread(self._write_file, path, audio)
        except OSError as e:
            raise ArtifactError(f"Failed to write {path}: {e}") from e

        logger.info(f"TTS audio file written to {path}")
        return TtsArtifact(
            name=name,
            path=path,
            url=f"{self.url_prefix}/{name}",
            created_at=datetime.now(UTC),
        )

    def _write_file(self, path: Path, audio: bytes) -> None:
        self.ensure_directory()
        path.write_bytes(audio)

    def schedule_deletion(self, artifact: TtsArtifact) -> asyncio.Task:
        """Delete *artifact* once after ttl_seconds. Fire-and-forget."""
        task = asyncio.create_task(self._delete_later(artifact))
        self._pending[artifact.name] = task
        task.add_done_callback(lambda _: self._pending.pop(artifact.name, None))
        return task

    async def _delete_later(self, artifact: TtsArtifact) -> None:
        await asyncio.sleep(self.ttl_seconds)
        await asyncio.to_thread(self._delete_file, artifact.path)

    @staticmethod
    def _delete_file(path: Path) -> None:
        try:
            path.unlink()
            logger.info(f"Deleted file: {path}")
        except OSError as e:
            logger.error(f"Error deleting file {path}: {e}")

    async def flush(self) -> int:
        """Cancel every pending timer and delete its file now. Call on shutdown."""
        tasks = dict(self._pending)
        for task in tasks.values():
            task.cancel()
        await asyncio.gather(*tasks.values(), return_exceptions=True)

        for name in tasks:
            await asyncio.to_thread(self._delete_file, self.directory / name)
        if tasks:
            logger.info(f"Flushed {len(tasks)} pending audio files")
        return len(tasks)
