"""API router package for endpoint composition."""

from .health import api_create_health_router
from .proxy import api_create_proxy_router
from .sync import api_create_sync_router

__all__ = ["api_create_health_router", "api_create_proxy_router", "api_create_sync_router"]
