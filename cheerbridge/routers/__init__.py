"""API Routers package

Routers are organized by audience: the admin queue API and the overlay.
"""

from . import overlay_router, queue_router

__all__ = [
    "overlay_router",
    "queue_router",
]
