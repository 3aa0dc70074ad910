from datetime import UTC, datetime, timedelta

import httpx
import pytest

from cheerbridge.core.exceptions import LocatorError, StreamNotLiveError
from cheerbridge.services import RecordingLocator, TwitchAPIClient
from cheerbridge.services.recording_locator import format_timestamp

STARTED_AT = "2026-10-19T12:00:00Z"


def _fixed_clock(minutes: int, seconds: int):
    now = datetime(2026, 10, 19, 12, 0, 0, tzinfo=UTC) + timedelta(minutes=minutes, seconds=seconds)
    return lambda: now


def _helix_handler(streams: list[dict], videos: list[dict], requests: list[httpx.Request]):
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path == "/oauth2/token":
            return httpx.Response(200, json={"access_token": "app-token", "expires_in": 3600})
        if request.url.path == "/helix/streams":
            return httpx.Response(200, json={"data": streams})
        if request.url.path == "/helix/videos":
            return httpx.Response(200, json={"data": videos})
        return httpx.Response(404)

    return handler


def _client(handler, **kwargs) -> TwitchAPIClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TwitchAPIClient(client_id="cid", http=http, **kwargs)


@pytest.mark.asyncio
async def test_locate_builds_timestamped_vod_link() -> None:
    requests: list[httpx.Request] = []
    handler = _helix_handler(
        [{"user_id": "42", "started_at": STARTED_AT}], [{"id": "987654"}], requests
    )
    locator = RecordingLocator(_client(handler, client_secret="secret"), clock=_fixed_clock(5, 30))

    link = await locator.locate("somechannel")

    assert link.url == "https://www.twitch.tv/somechannel/v/987654?t=5m30s"
    assert (link.elapsed_minutes, link.elapsed_seconds) == (5, 30)

    helix = [r for r in requests if r.url.path.startswith("/helix")]
    assert helix[0].url.params["user_login"] == "somechannel"
    assert helix[1].url.params["user_id"] == "42"
    assert helix[1].url.params["type"] == "archive"
    assert helix[0].headers["Authorization"] == "Bearer app-token"
    assert helix[0].headers["Client-Id"] == "cid"


@pytest.mark.asyncio
async def test_long_streams_keep_minutes_only() -> None:
    handler = _helix_handler([{"user_id": "42", "started_at": STARTED_AT}], [{"id": "1"}], [])
    locator = RecordingLocator(_client(handler, client_secret="secret"), clock=_fixed_clock(95, 7))

    link = await locator.locate("somechannel")

    assert link.url.endswith("?t=95m7s")


@pytest.mark.asyncio
async def test_user_token_is_used_without_client_secret() -> None:
    requests: list[httpx.Request] = []
    handler = _helix_handler([{"user_id": "42", "started_at": STARTED_AT}], [{"id": "1"}], requests)
    locator = RecordingLocator(_client(handler, user_token="user-token"), clock=_fixed_clock(0, 1))

    await locator.locate("somechannel")

    assert all(r.url.path != "/oauth2/token" for r in requests)
    assert requests[0].headers["Authorization"] == "Bearer user-token"


@pytest.mark.asyncio
async def test_offline_channel_raises_not_live() -> None:
    handler = _helix_handler([], [], [])
    locator = RecordingLocator(_client(handler, client_secret="secret"))

    with pytest.raises(StreamNotLiveError):
        await locator.locate("somechannel")


@pytest.mark.asyncio
async def test_missing_vod_raises_locator_error() -> None:
    handler = _helix_handler([{"user_id": "42", "started_at": STARTED_AT}], [], [])
    locator = RecordingLocator(_client(handler, client_secret="secret"))

    with pytest.raises(LocatorError):
        await locator.locate("somechannel")


@pytest.mark.asyncio
async def test_helix_error_status_raises_locator_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="upstream down")

    locator = RecordingLocator(_client(handler, user_token="user-token"))

    with pytest.raises(LocatorError):
        await locator.locate("somechannel")


@pytest.mark.asyncio
async def test_transport_error_raises_locator_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    locator = RecordingLocator(_client(handler, user_token="user-token"))

    with pytest.raises(LocatorError):
        await locator.locate("somechannel")


def test_client_requires_credentials() -> None:
    with pytest.raises(ValueError):
        TwitchAPIClient(client_id="cid")


def test_format_timestamp() -> None:
    assert format_timestamp(0) == "0m0s"
    assert format_timestamp(61) == "1m1s"
    assert format_timestamp(-5) == "0m0s"
