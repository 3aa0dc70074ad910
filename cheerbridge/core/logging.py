"""Logging configuration"""

import logging

from rich.console import Console
from rich.logging import RichHandler

from cheerbridge.core.config import Settings


def setup_logging(settings: Settings) -> None:
    """Configure application logging with Rich handler"""

    level = getattr(logging, settings.log_level, logging.INFO)

    try:
        console = Console(
            force_terminal=True,
            width=120,
        )

        rich_handler = RichHandler(
            console=console,
            show_time=True,
            show_level=True,
            show_path=False,
            markup=True,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            tracebacks_width=120,
        )

        rich_handler.setFormatter(
            logging.Formatter(fmt="%(message)s", datefmt="[%Y-%m-%d %H:%M:%S]")
        )

        # force=True: uvicorn configures the root logger first
        logging.basicConfig(
            level=level,
            format="%(message)s",
            datefmt="[%Y-%m-%d %H:%M:%S]",
            handlers=[rich_handler],
            force=True,
        )
    except Exception as e:
        logging.basicConfig(
            level=level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            force=True,
        )
        logging.getLogger(__name__).warning(
            f"Rich logging setup failed: {e}, using standard logging"
        )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    if level == logging.DEBUG:
        logging.getLogger("twitchio").setLevel(logging.DEBUG)
        logging.getLogger("twitchio.eventsub").setLevel(logging.DEBUG)
        logging.getLogger("httpx").setLevel(logging.INFO)
    else:
        logging.getLogger("twitchio").setLevel(logging.INFO)
        logging.getLogger("twitchio.eventsub").setLevel(logging.INFO)
        logging.getLogger("twitchio.http").setLevel(logging.WARNING)
        logging.getLogger("twitchio.websockets").setLevel(logging.WARNING)
        logging.getLogger("httpx").setLevel(logging.WARNING)

    logging.getLogger("discord").setLevel(logging.WARNING)
    logging.getLogger("discord.http").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.ERROR)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging: {settings.log_level} | Env: {settings.environment}")
