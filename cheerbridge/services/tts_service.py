"""ElevenLabs text-to-speech client."""

import logging

import httpx

from cheerbridge.core.exceptions import SynthesisError

logger = logging.getLogger(__name__)

ELEVENLABS_BASE = "https://api.elevenlabs.io/v1/text-to-speech"


class ElevenLabsTTS:
    """Synthesizes announcement text into MP3 bytes.

    Uses a shared httpx.AsyncClient for connection reuse across cycles.
    Failures raise SynthesisError; nothing is retried.
    """

    def __init__(
        self,
        api_key: str,
        voice_id: str,
        model_id: str = "eleven_monolingual_v1",
        stability: float = 0.5,
        similarity_boost: float = 0.5,
        http: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key
        self.voice_id = voice_id
        self.model_id = model_id
        self.stability = stability
        self.similarity_boost = similarity_boost

        self._http = http or httpx.AsyncClient(timeout=30.0)

        if not api_key:
            logger.warning("No ElevenLabs API key configured. TTS will fail.")

    async def close(self) -> None:
        """Close the shared HTTP client. Call on app shutdown."""
        await self._http.aclose()

    async def synthesize(self, text: str) -> bytes:
        """Return raw MP3 audio for *text*."""
        if not self.api_key:
            raise SynthesisError("ElevenLabs API key not configured")

        payload = {
            "text": text,
            "model_id": self.model_id,
            "voice_settings": {
                "stability": self.stability,
                "similarity_boost": self.similarity_boost,
            },
        }
        headers = {
            "xi-api-key": self.api_key,
            "Content-Type": "application/json",
            "Accept": "audio/mpeg",
        }

        logger.info(f"Sending TTS request to ElevenLabs: {text[:50]}")
        try:
            response = await self._http.post(
                f"{ELEVENLABS_BASE}/{self.voice_id}",
                headers=headers,
                json=payload,
            )
        except httpx.HTTPError as e:
            raise SynthesisError(f"{type(e).__name__}: {e}") from e

        if not response.is_success:
            raise SynthesisError(response.text or response.reason_phrase, response.status_code)

        audio = response.content
        logger.info(f"Received TTS response from ElevenLabs, size: {len(audio)}")
        return audio
