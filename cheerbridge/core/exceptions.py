"""Error types shared across the cheer pipeline.

Soft failures (StreamNotLiveError, LocatorError, DispatchError) are handled
inside the processor; SynthesisError and ArtifactError abort a cycle and are
reported to the caller of POST /process.
"""

from typing import Any


class CheerBridgeError(Exception):
    """Base class for all cheerbridge errors."""


class EmptyQueueError(CheerBridgeError):
    """Raised when dequeuing from an empty cheer queue."""

    def __init__(self) -> None:
        super().__init__("No cheers in queue")


class InvalidIndexError(CheerBridgeError):
    """Raised when a positional removal falls outside the queue."""

    def __init__(self, index: int, length: int) -> None:
        super().__init__(f"Invalid index {index} for queue of length {length}")
        self.index = index
        self.length = length


class EntryNotFoundError(CheerBridgeError):
    def __init__(self, entry_id: str) -> None:
        super().__init__(f"No cheer with id {entry_id}")
        self.entry_id = entry_id


class StreamNotLiveError(CheerBridgeError):
    """The channel has no live stream right now. Expected, not a fault."""

    def __init__(self, channel: str) -> None:
        super().__init__(f"No active stream found for {channel}")
        self.channel = channel


class LocatorError(CheerBridgeError):
    """Stream or VOD lookup failed."""


class DispatchError(CheerBridgeError):
    """Posting the cheer to Discord failed."""


class SynthesisError(CheerBridgeError):
    """Wrap transport or API failures when requesting TTS audio."""

    def __init__(self, detail: Any, status_code: int | None = None) -> None:
        super().__init__(str(detail))
        self.detail = detail
        self.status_code = status_code


class ArtifactError(CheerBridgeError):
    """Writing the TTS audio file failed."""
