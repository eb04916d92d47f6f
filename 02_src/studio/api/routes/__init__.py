"""API routes."""

from .lanes import create_lanes_router
from .media import create_media_router

__all__ = ["create_lanes_router", "create_media_router"]
