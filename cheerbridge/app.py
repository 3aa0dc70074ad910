"""FastAPI application factory"""

import asyncio
import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles

from cheerbridge import __version__
from cheerbridge.core.bot import CheerBot
from cheerbridge.core.config import Settings, get_settings
from cheerbridge.core.dependencies import (
    close_services,
    get_audio_store,
    get_cheer_ingestor,
    get_cheer_processor,
    get_cheer_queue,
    get_live_bus,
)
from cheerbridge.core.logging import setup_logging
from cheerbridge.routers import overlay_router, queue_router

logger = logging.getLogger(__name__)

# Track server start time
_start_time: float = 0.0
_heartbeat_task: asyncio.Task | None = None
_chat_task: asyncio.Task | None = None
_chat_running: bool = False

CHAT_RETRY_INITIAL = 5
CHAT_RETRY_MAX = 60


async def _heartbeat(interval: int = 300) -> None:
    """Periodic heartbeat: log uptime and queue depth"""
    while True:
        await asyncio.sleep(interval)
        uptime = int(time.time() - _start_time)
        logger.info(
            f"Heartbeat: uptime={uptime}s, queue={len(get_cheer_queue())}, "
            f"clients={get_live_bus().client_count}, chat={_chat_running}"
        )


def _mark_chat_ready() -> None:
    global _chat_running
    _chat_running = True


async def _chat_ingest_loop(settings: Settings) -> None:
    """Run the Twitch chat bot, restarting it with backoff when it fails.

    The delay only resets once the bot has actually reached ready; a bot that
    keeps failing before connecting backs off 5s, 10s, 20s ... up to 60s.
    """
    global _chat_running
    delay = CHAT_RETRY_INITIAL
    while True:
        try:
            async with CheerBot(
                client_id=settings.twitch_client_id,
                client_secret=settings.twitch_client_secret,
                bot_id=settings.twitch_bot_id,
                access_token=settings.twitch_access_token,
                refresh_token=settings.twitch_refresh_token,
                channel=settings.twitch_channel,
                ingestor=get_cheer_ingestor(),
                on_ready=_mark_chat_ready,
            ) as bot:
                logger.info(f"Connecting to Twitch chat: {settings.twitch_channel}")
                await bot.start(with_adapter=False, save_tokens=False)
            logger.info("Twitch chat bot stopped")
            return
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if _chat_running:
                delay = CHAT_RETRY_INITIAL
            logger.error(
                f"Error connecting to Twitch chat: {type(e).__name__}: {e}, "
                f"retrying in {delay}s"
            )
        finally:
            _chat_running = False

        await asyncio.sleep(delay)
        delay = min(delay * 2, CHAT_RETRY_MAX)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle startup and shutdown"""
    global _start_time, _heartbeat_task, _chat_task
    _start_time = time.time()

    settings = get_settings()

    # Startup
    logger.info("Starting cheerbridge server")
    logger.info(f"Environment: {settings.environment}")

    # Build the pipeline eagerly so configuration problems surface at boot
    get_cheer_processor()

    if not settings.enable_chat_ingest:
        logger.info("Twitch chat ingest disabled")
    elif not settings.chat_configured:
        logger.warning("Twitch credentials incomplete, chat ingest disabled")
    else:
        _chat_task = asyncio.create_task(_chat_ingest_loop(settings))

    if settings.enable_keep_alive:
        _heartbeat_task = asyncio.create_task(_heartbeat(settings.keep_alive_interval))
        logger.info(f"Heartbeat started (interval={settings.keep_alive_interval}s)")

    yield

    # Shutdown
    logger.info("Shutting down cheerbridge server")
    for task in (_chat_task, _heartbeat_task):
        if task:
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
    _chat_task = None
    _heartbeat_task = None
    try:
        await close_services()
    except Exception as e:
        logger.exception(f"Error during shutdown: {e}")


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    settings = get_settings()

    # Setup logging first
    setup_logging(settings)

    app = FastAPI(
        title="cheerbridge",
        description="Twitch cheer queue with TTS overlay and Discord cross-posting",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url=None,
    )

    # Register routers
    app.include_router(queue_router.router)
    app.include_router(overlay_router.router)

    # Transient TTS audio
    get_audio_store().ensure_directory()
    app.mount(
        settings.audio_url_prefix,
        StaticFiles(directory=settings.audio_dir),
        name="audio",
    )

    # Liveness probe, no external dependency
    @app.get("/health")
    async def health():
        """Liveness check"""
        return {
            "status": "healthy",
            "uptime_seconds": int(time.time() - _start_time),
        }

    @app.get("/status")
    async def status():
        """Pipeline status for the admin page"""
        processor = get_cheer_processor()
        return {
            "service": "cheerbridge",
            "version": __version__,
            "uptime_seconds": int(time.time() - _start_time),
            "queue_length": len(get_cheer_queue()),
            "overlay_clients": get_live_bus().client_count,
            "pending_audio_files": get_audio_store().pending_count,
            "cycle_state": processor.state.value,
            "chat_running": _chat_running,
            "environment": settings.environment,
        }

    @app.api_route("/ping", methods=["GET", "HEAD"], response_class=PlainTextResponse)
    async def ping():
        """Ping endpoint"""
        return "pong"

    logger.info("FastAPI application configured")

    return app
