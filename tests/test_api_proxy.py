"""Regression tests for reverse-proxy forwarding to the backing service."""
# pylint: disable=duplicate-code

from __future__ import annotations

import httpx
from fastapi.testclient import TestClient

from bw_sidecar.adapters import CommandResult, ReverseProxyAdapter, VaultCliAdapter
from bw_sidecar.api.application import create_api_application
from bw_sidecar.jobs import SyncService


_DEFAULT_BODY = b'{"success": true, "data": {"object": "list", "data": []}}'


class _RecordingBackend:
    """Mock backing service recording forwarded requests."""

    def __init__(
        self,
        status_code: int = 200,
        body: bytes = _DEFAULT_BODY,
        content_type: str = "application/json",
    ):
        """Initialize backend stub.

        Args:
            status_code: Status returned for every request.
            body: Raw body returned for every request.
            content_type: Content type of the returned body.

        Returns:
            None: Initializer does not return values.

        Raises:
            RuntimeError: This stub does not raise runtime errors.
        """

        self._status_code = status_code
        self._body = body
        self._content_type = content_type
        self.requests: list[httpx.Request] = []
        self.bodies: list[bytes] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        """Record request and return an unread streamed response.

        Args:
            request: Forwarded request.

        Returns:
            httpx.Response: Fresh response whose body has not been consumed.

        Raises:
            RuntimeError: This stub does not raise runtime errors.
        """

        self.requests.append(request)
        self.bodies.append(request.read())
        return httpx.Response(
            self._status_code,
            headers={
                "Content-Type": self._content_type,
                "Content-Length": str(len(self._body)),
                "X-Backend": "bw-serve",
            },
            stream=httpx.ByteStream(self._body),
        )


def _build_client(handler) -> TestClient:
    """Create test client with the reverse proxy bound to a mock transport.

    Args:
        handler: Mock transport handler.

    Returns:
        TestClient: Client bound to a fresh application.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    vault_cli = VaultCliAdapter(
        command_runner=lambda arguments, environment_overrides=None: CommandResult(
            arguments=tuple(arguments), exit_code=0, output=""
        )
    )
    return TestClient(
        create_api_application(
            sync_service=SyncService(vault_cli=vault_cli, credential="session"),
            reverse_proxy=ReverseProxyAdapter("http://localhost:8088", transport=httpx.MockTransport(handler)),
        )
    )


def test_api_proxy_forwards_method_path_query_body_and_host() -> None:
    """Forward every request detail and relay the upstream response.

    Returns:
        None: Assertions validate forwarded request and relayed response.

    Raises:
        AssertionError: Raised when forwarding loses information.
    """

    backend = _RecordingBackend()

    with _build_client(backend) as client:
        response = client.post(
            "/object/item?organizationId=org-1&search=a%20b",
            content=b'{"name": "login"}',
            headers={"Content-Type": "application/json", "X-Custom": "kept"},
        )

    assert response.status_code == 200
    assert response.json() == {"success": True, "data": {"object": "list", "data": []}}
    assert response.headers["x-backend"] == "bw-serve"

    forwarded_request = backend.requests[0]
    assert forwarded_request.method == "POST"
    assert forwarded_request.url.host == "localhost"
    assert forwarded_request.url.port == 8088
    assert forwarded_request.url.path == "/object/item"
    assert forwarded_request.url.params["organizationId"] == "org-1"
    assert forwarded_request.url.params["search"] == "a b"
    assert forwarded_request.headers["host"] == "testserver"
    assert forwarded_request.headers["x-custom"] == "kept"
    assert forwarded_request.headers["content-type"] == "application/json"
    assert backend.bodies[0] == b'{"name": "login"}'


def test_api_proxy_relays_upstream_error_status_unchanged() -> None:
    """Relay non-2xx upstream statuses and bodies without rewriting them.

    Returns:
        None: Assertions validate status passthrough.

    Raises:
        AssertionError: Raised when upstream status is rewritten.
    """

    backend = _RecordingBackend(status_code=404, body=b"Not found.", content_type="text/plain; charset=utf-8")

    with _build_client(backend) as client:
        response = client.get("/object/item/missing-id")

    assert response.status_code == 404
    assert response.text == "Not found."


def test_api_proxy_forwards_documentation_paths() -> None:
    """Proxy paths that a default FastAPI app would answer locally.

    Returns:
        None: Assertions validate docs paths are not shadowed.

    Raises:
        AssertionError: Raised when docs paths are answered locally.
    """

    backend = _RecordingBackend()

    with _build_client(backend) as client:
        client.get("/docs")
        client.get("/openapi.json")

    assert [request.url.path for request in backend.requests] == ["/docs", "/openapi.json"]


def test_api_proxy_returns_bad_gateway_when_backend_unreachable() -> None:
    """Return 502 when the backing service refuses the connection.

    Returns:
        None: Assertions validate gateway error mapping.

    Raises:
        AssertionError: Raised when transport failure is not mapped.
    """

    def _refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with _build_client(_refuse) as client:
        response = client.get("/status")

    assert response.status_code == 502
    assert response.text == "Bad Gateway"


def test_adapters_reverse_proxy_rejects_relative_target() -> None:
    """Reject targets without scheme and host.

    Returns:
        None: Assertions validate constructor guard.

    Raises:
        AssertionError: Raised when relative target is accepted.
    """

    try:
        ReverseProxyAdapter("localhost-only")
    except ValueError as error:
        assert "absolute" in str(error)
    else:
        raise AssertionError("relative target must be rejected")
