"""Sync endpoint router for on-demand vault sync."""

from fastapi import APIRouter, Request, status
from fastapi.responses import PlainTextResponse

from bw_sidecar.jobs import SyncService

from .common import ALL_HTTP_METHODS


def api_create_sync_router(sync_service: SyncService) -> APIRouter:
    """Create sync router.

    The route accepts every method so non-POST requests get 405 here instead
    of falling through to the reverse proxy.

    Args:
        sync_service: Job-layer sync executor.

    Returns:
        APIRouter: Router exposing `/sync`.

    Raises:
        ValueError: Raised when sync_service is invalid.
    """

    if sync_service is None:
        raise ValueError("sync_service must not be None")

    router = APIRouter(tags=["sync"])

    @router.api_route("/sync", methods=ALL_HTTP_METHODS)
    def api_sync_trigger(request: Request) -> PlainTextResponse:
        """Run one vault sync and report the outcome.

        Args:
            request: Inbound request, used for method dispatch.

        Returns:
            PlainTextResponse: 200 on success, 500 with command output on
            failure, 405 for any method other than POST.

        Raises:
            RuntimeError: Raised when the sync runner fails unexpectedly.
        """

        if request.method != "POST":
            return PlainTextResponse(
                "Method not allowed",
                status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
                headers={"Allow": "POST"},
            )

        outcome = sync_service.job_execute_sync()
        if not outcome.succeeded:
            return PlainTextResponse(
                f"Sync failed: {outcome.output}",
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return PlainTextResponse("Sync successful", status_code=status.HTTP_200_OK)

    return router
