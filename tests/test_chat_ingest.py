import asyncio

import pytest

from cheerbridge import app as app_module
from cheerbridge.core.config import get_settings


class FakeBot:
    """Stands in for CheerBot; ``start`` runs the scripted behaviour."""

    script = None

    def __init__(self, *, on_ready=None, **kwargs) -> None:
        self.on_ready = on_ready

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return None

    async def start(self, **kwargs) -> None:
        await type(self).script(self)


@pytest.fixture
def sleeps(monkeypatch):
    """Record backoff delays; stop the loop after six retries."""
    delays: list[float] = []

    async def fake_sleep(delay):
        delays.append(delay)
        if len(delays) >= 6:
            raise asyncio.CancelledError

    monkeypatch.setattr(app_module, "CheerBot", FakeBot)
    monkeypatch.setattr(app_module, "_chat_running", False)
    monkeypatch.setattr(app_module.asyncio, "sleep", fake_sleep)
    return delays


@pytest.mark.asyncio
async def test_backoff_doubles_while_bot_never_connects(sleeps, monkeypatch) -> None:
    async def fail_before_ready(bot):
        raise RuntimeError("invalid token")

    monkeypatch.setattr(FakeBot, "script", fail_before_ready)

    with pytest.raises(asyncio.CancelledError):
        await app_module._chat_ingest_loop(get_settings())

    assert sleeps == [5, 10, 20, 40, 60, 60]
    assert app_module._chat_running is False


@pytest.mark.asyncio
async def test_backoff_resets_after_a_connected_session(sleeps, monkeypatch) -> None:
    seen_running: list[bool] = []

    async def drop_after_ready(bot):
        bot.on_ready()
        seen_running.append(app_module._chat_running)
        raise ConnectionError("websocket closed")

    monkeypatch.setattr(FakeBot, "script", drop_after_ready)

    with pytest.raises(asyncio.CancelledError):
        await app_module._chat_ingest_loop(get_settings())

    assert sleeps == [5, 5, 5, 5, 5, 5]
    assert all(seen_running)
    assert app_module._chat_running is False


@pytest.mark.asyncio
async def test_clean_stop_does_not_retry(sleeps, monkeypatch) -> None:
    async def stop(bot):
        bot.on_ready()

    monkeypatch.setattr(FakeBot, "script", stop)

    await app_module._chat_ingest_loop(get_settings())

    assert sleeps == []
    assert app_module._chat_running is False
