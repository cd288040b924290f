"""Regression tests for the periodic sync scheduler."""

from __future__ import annotations

import logging
import threading

import httpx
import pytest

from bw_sidecar.jobs import PeriodicSyncScheduler


def test_jobs_periodic_sync_invalid_interval_falls_back_to_two_minutes(caplog: pytest.LogCaptureFixture) -> None:
    """Fall back to two minutes and log a warning for invalid intervals.

    Args:
        caplog: Pytest log capture fixture.

    Returns:
        None: Assertions validate interval fallback.

    Raises:
        AssertionError: Raised when fallback is not applied.
    """

    with caplog.at_level(logging.WARNING):
        scheduler = PeriodicSyncScheduler(interval_text="every-so-often")

    assert scheduler.interval_seconds == 120.0
    assert "BW_SYNC_INTERVAL" in caplog.text
    assert PeriodicSyncScheduler(interval_text="0s").interval_seconds == 120.0
    assert PeriodicSyncScheduler(interval_text="30s").interval_seconds == 30.0


def test_jobs_periodic_sync_trigger_posts_json_to_sync_endpoint() -> None:
    """POST to the sidecar sync URL with a JSON content type.

    Returns:
        None: Assertions validate trigger request.

    Raises:
        AssertionError: Raised when trigger request differs.
    """

    captured_requests: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        captured_requests.append(request)
        return httpx.Response(200, text="Sync successful")

    scheduler = PeriodicSyncScheduler()
    sync_url = scheduler.job_sync_url(host="localhost", port=8087)

    with httpx.Client(transport=httpx.MockTransport(_handler)) as client:
        triggered = scheduler.job_trigger_once(client=client, sync_url=sync_url)

    assert triggered is True
    assert captured_requests[0].method == "POST"
    assert str(captured_requests[0].url) == "http://localhost:8087/sync"
    assert captured_requests[0].headers["content-type"] == "application/json"


def test_jobs_periodic_sync_trigger_logs_non_200_without_raising(caplog: pytest.LogCaptureFixture) -> None:
    """Log status and body of a failed sync response.

    Args:
        caplog: Pytest log capture fixture.

    Returns:
        None: Assertions validate failure logging.

    Raises:
        AssertionError: Raised when failure is not logged.
    """

    scheduler = PeriodicSyncScheduler()
    transport = httpx.MockTransport(lambda request: httpx.Response(500, text="Sync failed: boom"))

    with caplog.at_level(logging.WARNING), httpx.Client(transport=transport) as client:
        triggered = scheduler.job_trigger_once(client=client, sync_url="http://localhost:8087/sync")

    assert triggered is False
    assert "Periodic sync failed with status code: 500, body: Sync failed: boom" in caplog.text


def test_jobs_periodic_sync_trigger_logs_connection_error_without_raising(caplog: pytest.LogCaptureFixture) -> None:
    """Log transport failures and keep running.

    Args:
        caplog: Pytest log capture fixture.

    Returns:
        None: Assertions validate network failure logging.

    Raises:
        AssertionError: Raised when network failure escapes.
    """

    def _refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    scheduler = PeriodicSyncScheduler()

    with caplog.at_level(logging.WARNING), httpx.Client(transport=httpx.MockTransport(_refuse)) as client:
        triggered = scheduler.job_trigger_once(client=client, sync_url="http://localhost:8087/sync")

    assert triggered is False
    assert "Periodic sync failed: " in caplog.text


def test_jobs_periodic_sync_loop_keeps_triggering_after_failures_until_stopped() -> None:
    """Continue triggering after failures and exit once stopped.

    Returns:
        None: Assertions validate loop continuation and shutdown.

    Raises:
        AssertionError: Raised when loop stops early or never exits.
    """

    call_count = 0
    third_call = threading.Event()

    def _handler(request: httpx.Request) -> httpx.Response:
        nonlocal call_count
        call_count += 1
        if call_count >= 3:
            third_call.set()
        return httpx.Response(500, text="Sync failed: offline")

    scheduler = PeriodicSyncScheduler(interval_text="10ms", transport=httpx.MockTransport(_handler))

    loop_thread = scheduler.job_start(host="localhost", port=8087)
    assert third_call.wait(timeout=5.0)
    scheduler.job_stop()
    loop_thread.join(timeout=5.0)

    assert loop_thread.is_alive() is False
    assert loop_thread.daemon is True
    assert call_count >= 3


def test_jobs_periodic_sync_preset_stop_event_prevents_any_trigger() -> None:
    """Never trigger when stopped before the first interval elapses.

    Returns:
        None: Assertions validate no-trigger shutdown.

    Raises:
        AssertionError: Raised when a trigger is sent after stop.
    """

    requests_seen: list[httpx.Request] = []
    stop_event = threading.Event()
    stop_event.set()
    scheduler = PeriodicSyncScheduler(
        interval_text="10ms",
        transport=httpx.MockTransport(lambda request: requests_seen.append(request) or httpx.Response(200)),
        stop_event=stop_event,
    )

    scheduler.job_run_periodic_sync(host="localhost", port=8087)

    assert requests_seen == []
