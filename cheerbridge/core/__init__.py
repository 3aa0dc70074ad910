"""Core modules: settings, logging, errors and service wiring."""

from .config import PUBLIC_DIR, Settings, get_settings
from .logging import setup_logging

__all__ = [
    "PUBLIC_DIR",
    "Settings",
    "get_settings",
    "setup_logging",
]
