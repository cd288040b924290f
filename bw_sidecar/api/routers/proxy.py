"""Catch-all router forwarding every other request to the backing service."""

from fastapi import APIRouter, Request
from fastapi.responses import Response

from bw_sidecar.adapters import ReverseProxyAdapter

from .common import ALL_HTTP_METHODS


def api_create_proxy_router(reverse_proxy: ReverseProxyAdapter) -> APIRouter:
    """Create reverse proxy router.

    Must be included after the fixed routes so it only receives unmatched paths.

    Args:
        reverse_proxy: Adapter forwarding requests to `bw serve`.

    Returns:
        APIRouter: Router with a single catch-all route.

    Raises:
        ValueError: Raised when reverse_proxy is invalid.
    """

    if reverse_proxy is None:
        raise ValueError("reverse_proxy must not be None")

    router = APIRouter(tags=["proxy"])

    @router.api_route("/{proxy_path:path}", methods=ALL_HTTP_METHODS, include_in_schema=False)
    async def api_proxy_passthrough(request: Request, proxy_path: str) -> Response:
        _ = proxy_path
        return await reverse_proxy.adapter_forward(request)

    return router
