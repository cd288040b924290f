"""Streaming reverse proxy adapter targeting the local `bw serve` API."""

from __future__ import annotations

import logging
from typing import Final

import httpx
from starlette.background import BackgroundTask
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response, StreamingResponse

logger = logging.getLogger(__name__)


class ReverseProxyAdapter:
    """Single-host reverse proxy that preserves the inbound `Host` header."""

    _HOP_BY_HOP_HEADERS: Final[frozenset[str]] = frozenset(
        {
            "connection",
            "keep-alive",
            "proxy-authenticate",
            "proxy-authorization",
            "proxy-connection",
            "te",
            "trailer",
            "transfer-encoding",
            "upgrade",
        }
    )

    def __init__(
        self,
        target_base_url: str,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout_seconds: float | None = None,
    ):
        """Initialize reverse proxy adapter.

        Args:
            target_base_url: Scheme, host and port of the backing service.
            transport: Optional transport override, used by tests.
            timeout_seconds: Optional upstream timeout; None waits indefinitely.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when target URL is blank or not absolute.
        """

        normalized_target = target_base_url.strip().rstrip("/")
        if not normalized_target:
            raise ValueError("target_base_url must not be blank")
        target_url = httpx.URL(normalized_target)
        if not target_url.scheme or not target_url.host:
            raise ValueError("target_base_url must be an absolute http(s) URL")

        self._target_url = target_url
        self._transport = transport
        self._timeout = httpx.Timeout(timeout_seconds)
        self._client: httpx.AsyncClient | None = None

    def adapter_target_label(self) -> str:
        """Return proxy target URL for diagnostics.

        Returns:
            str: Target base URL.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        return str(self._target_url)

    async def adapter_open(self) -> None:
        """Create the pooled upstream client if it does not exist yet."""

        self._adapter_client()

    async def adapter_close(self) -> None:
        """Close the pooled upstream client."""

        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def adapter_forward(self, request: Request) -> Response:
        """Forward one inbound request and stream the upstream response back.

        Args:
            request: Inbound Starlette request.

        Returns:
            Response: Upstream response streamed unmodified, or 502 when the
            backing service is unreachable.

        Raises:
            RuntimeError: Raised for unexpected non-transport failures.
        """

        client = self._adapter_client()
        upstream_request = client.build_request(
            method=request.method,
            url=self._adapter_upstream_url(request),
            headers=self._adapter_forward_headers(request),
            content=await request.body(),
        )

        try:
            upstream_response = await client.send(upstream_request, stream=True)
        except httpx.TransportError as error:
            logger.warning("proxy error for %s %s: %s", request.method, request.url.path, error)
            return PlainTextResponse("Bad Gateway", status_code=502)

        response = StreamingResponse(
            upstream_response.aiter_raw(),
            status_code=upstream_response.status_code,
            background=BackgroundTask(upstream_response.aclose),
        )
        response.raw_headers = [
            (name, value)
            for name, value in upstream_response.headers.raw
            if name.decode("latin-1").lower() not in self._HOP_BY_HOP_HEADERS
        ]
        return response

    def _adapter_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                transport=self._transport,
                timeout=self._timeout,
                follow_redirects=False,
            )
        return self._client

    def _adapter_upstream_url(self, request: Request) -> httpx.URL:
        raw_path = request.scope.get("raw_path") or request.url.path.encode("utf-8")
        query_string = request.scope.get("query_string", b"")
        if query_string:
            raw_path = raw_path + b"?" + query_string
        return self._target_url.copy_with(raw_path=raw_path)

    def _adapter_forward_headers(self, request: Request) -> list[tuple[str, str]]:
        connection_tokens = {
            token.strip().lower()
            for token in request.headers.get("connection", "").split(",")
            if token.strip()
        }
        excluded_headers = self._HOP_BY_HOP_HEADERS | connection_tokens | {"content-length"}

        forwarded_headers = [
            (name, value)
            for name, value in request.headers.items()
            if name.lower() not in excluded_headers and name.lower() != "x-forwarded-for"
        ]

        client_host = request.client.host if request.client else None
        prior_forwarded_for = request.headers.get("x-forwarded-for")
        if client_host:
            forwarded_for = f"{prior_forwarded_for}, {client_host}" if prior_forwarded_for else client_host
            forwarded_headers.append(("x-forwarded-for", forwarded_for))
        elif prior_forwarded_for:
            forwarded_headers.append(("x-forwarded-for", prior_forwarded_for))
        return forwarded_headers
