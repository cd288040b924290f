"""Health endpoint router reporting liveness of the sidecar itself."""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from .common import ALL_HTTP_METHODS


def api_create_health_router() -> APIRouter:
    """Create liveness router.

    The response does not depend on backing service state.

    Returns:
        APIRouter: Router exposing `/healthz`.

    Raises:
        RuntimeError: Raised if router construction fails.
    """

    router = APIRouter(tags=["health"])

    @router.api_route("/healthz", methods=ALL_HTTP_METHODS)
    async def api_health_status() -> PlainTextResponse:
        """Return fixed liveness body.

        Returns:
            PlainTextResponse: HTTP 200 with body `OK`.

        Raises:
            RuntimeError: This handler does not raise runtime errors.
        """

        return PlainTextResponse("OK", status_code=200)

    return router
