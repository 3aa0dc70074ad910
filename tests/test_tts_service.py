import json

import httpx
import pytest

from cheerbridge.core.exceptions import SynthesisError
from cheerbridge.services import ElevenLabsTTS


def _tts(handler, api_key: str = "xi-key") -> ElevenLabsTTS:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ElevenLabsTTS(api_key=api_key, voice_id="voice-1", http=http)


@pytest.mark.asyncio
async def test_synthesize_returns_audio_bytes() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=b"ID3audio", headers={"Content-Type": "audio/mpeg"})

    audio = await _tts(handler).synthesize("Cheer from alice: hi")

    assert audio == b"ID3audio"
    request = seen[0]
    assert request.url.path == "/v1/text-to-speech/voice-1"
    assert request.headers["xi-api-key"] == "xi-key"
    body = json.loads(request.content)
    assert body["text"] == "Cheer from alice: hi"
    assert body["model_id"] == "eleven_monolingual_v1"
    assert body["voice_settings"] == {"stability": 0.5, "similarity_boost": 0.5}


@pytest.mark.asyncio
async def test_error_status_carries_upstream_detail() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, text='{"detail": "invalid_api_key"}')

    with pytest.raises(SynthesisError) as exc_info:
        await _tts(handler).synthesize("text")

    assert exc_info.value.status_code == 401
    assert "invalid_api_key" in str(exc_info.value.detail)


@pytest.mark.asyncio
async def test_transport_failure_raises_synthesis_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(SynthesisError):
        await _tts(handler).synthesize("text")


@pytest.mark.asyncio
async def test_missing_api_key_fails_without_request() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200)

    with pytest.raises(SynthesisError):
        await _tts(handler, api_key="").synthesize("text")
    assert calls == []
