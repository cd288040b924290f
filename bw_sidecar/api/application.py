"""FastAPI application factory for the sidecar proxy front.

Route order defines the route table: `/healthz` and `/sync` are matched
first, every other path falls through to the reverse proxy.
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from bw_sidecar.adapters import ReverseProxyAdapter
from bw_sidecar.jobs import SyncService

from .routers import api_create_health_router, api_create_proxy_router, api_create_sync_router

access_logger = logging.getLogger("bw_sidecar.access")


def create_api_application(sync_service: SyncService, reverse_proxy: ReverseProxyAdapter) -> FastAPI:
    """Create the FastAPI application instance for the sidecar.

    Interactive docs and the OpenAPI document are disabled so that their
    paths are proxied like any other request.

    Args:
        sync_service: Job-layer sync executor behind `/sync`.
        reverse_proxy: Adapter forwarding all other traffic to `bw serve`.

    Returns:
        FastAPI: Application with health, sync and proxy routes.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if sync_service is None:
        raise ValueError("sync_service must not be None")
    if reverse_proxy is None:
        raise ValueError("reverse_proxy must not be None")

    @asynccontextmanager
    async def lifespan(_application: FastAPI):
        await reverse_proxy.adapter_open()
        try:
            yield
        finally:
            await reverse_proxy.adapter_close()

    application = FastAPI(
        title="Bitwarden Serve Sidecar",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    @application.middleware("http")
    async def access_log(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        access_logger.info(
            "%s %s -> %s (%.2fms)",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000.0,
        )
        return response

    application.include_router(api_create_health_router())
    application.include_router(api_create_sync_router(sync_service=sync_service))
    application.include_router(api_create_proxy_router(reverse_proxy=reverse_proxy))

    return application
