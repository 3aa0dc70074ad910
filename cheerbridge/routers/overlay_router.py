"""Overlay routes: the TTS event stream and the OBS / admin pages."""

import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse
from sse_starlette.sse import EventSourceResponse

from cheerbridge.core.config import PUBLIC_DIR
from cheerbridge.core.dependencies import get_live_bus
from cheerbridge.services import LiveClient, LiveNotificationBus

logger = logging.getLogger(__name__)

router = APIRouter(tags=["overlay"])


async def stream_client_events(client: LiveClient, bus: LiveNotificationBus, request: Request):
    """Yield SSE events for *client* until it disconnects or the bus closes."""
    try:
        while True:
            payload = await client.next_event()
            if payload is None:
                break
            if await request.is_disconnected():
                break
            yield {"data": json.dumps(payload)}
    finally:
        bus.unsubscribe(client.id)


@router.get("/tts-stream", response_model=None)
async def tts_stream(
    request: Request,
    bus: LiveNotificationBus = Depends(get_live_bus),
) -> EventSourceResponse:
    """Server-sent events carrying {audioUrl, message} for each processed cheer."""
    client = bus.subscribe()
    return EventSourceResponse(stream_client_events(client, bus, request))


@router.get("/obs", include_in_schema=False)
async def obs_page() -> FileResponse:
    return FileResponse(PUBLIC_DIR / "obs.html")


@router.get("/admin", include_in_schema=False)
async def admin_page() -> FileResponse:
    return FileResponse(PUBLIC_DIR / "admin.html")
