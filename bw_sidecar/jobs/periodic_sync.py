"""Job-layer periodic sync loop that calls the sidecar's own `/sync` endpoint."""

from __future__ import annotations

import logging
import threading
from typing import Final

import httpx

from bw_sidecar.adapters import SidecarNetworkError
from bw_sidecar.config import config_format_duration, config_parse_duration_or_default

logger = logging.getLogger(__name__)

DEFAULT_SYNC_INTERVAL_SECONDS: Final[float] = 120.0


class PeriodicSyncScheduler:
    """Triggers `POST /sync` on a fixed interval and never stops on failure."""

    def __init__(
        self,
        interval_text: str = "2m",
        request_timeout_seconds: float = 30.0,
        transport: httpx.BaseTransport | None = None,
        stop_event: threading.Event | None = None,
    ):
        """Initialize periodic sync scheduler.

        Args:
            interval_text: Duration string; invalid values fall back to two minutes.
            request_timeout_seconds: HTTP timeout for each sync trigger.
            transport: Optional transport override, used by tests.
            stop_event: Optional event that ends the loop when set.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when the request timeout is not positive.
        """

        if request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")

        self._interval_seconds = config_parse_duration_or_default(
            interval_text,
            default_seconds=DEFAULT_SYNC_INTERVAL_SECONDS,
            setting_name="BW_SYNC_INTERVAL",
        )
        self._request_timeout_seconds = request_timeout_seconds
        self._transport = transport
        self._stop_event = stop_event or threading.Event()

    @property
    def interval_seconds(self) -> float:
        """Resolved interval between sync triggers in seconds."""

        return self._interval_seconds

    def job_sync_url(self, host: str, port: int) -> str:
        """Return the sidecar sync endpoint URL.

        Args:
            host: Sidecar host name.
            port: Sidecar proxy port.

        Returns:
            str: Sync endpoint URL.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        return f"http://{host}:{port}/sync"

    def job_start(self, host: str, port: int) -> threading.Thread:
        """Run the periodic loop on a daemon thread.

        Args:
            host: Sidecar host name.
            port: Sidecar proxy port.

        Returns:
            threading.Thread: Started loop thread.

        Raises:
            RuntimeError: Raised when the thread cannot be started.
        """

        loop_thread = threading.Thread(
            target=self.job_run_periodic_sync,
            kwargs={"host": host, "port": port},
            name="bw-periodic-sync",
            daemon=True,
        )
        loop_thread.start()
        return loop_thread

    def job_stop(self) -> None:
        """Ask the loop to exit after its current iteration."""

        self._stop_event.set()

    def job_run_periodic_sync(self, host: str, port: int) -> None:
        """Trigger sync every interval until the stop event is set.

        Args:
            host: Sidecar host name.
            port: Sidecar proxy port.

        Returns:
            None: Runs until stopped.

        Raises:
            RuntimeError: Trigger failures are logged, never raised.
        """

        sync_url = self.job_sync_url(host=host, port=port)
        logger.info(
            "Starting periodic sync every %s targeting %s",
            config_format_duration(self._interval_seconds),
            sync_url,
        )

        with httpx.Client(timeout=self._request_timeout_seconds, transport=self._transport) as client:
            while not self._stop_event.wait(self._interval_seconds):
                logger.info("Periodic sync triggered...")
                self.job_trigger_once(client=client, sync_url=sync_url)

    def job_trigger_once(self, client: httpx.Client, sync_url: str) -> bool:
        """Send one sync trigger and log any failure.

        Args:
            client: Open HTTP client.
            sync_url: Sidecar sync endpoint URL.

        Returns:
            bool: True when the sidecar answered 200.

        Raises:
            RuntimeError: Failures are logged and reported as False.
        """

        try:
            response = self._job_post_sync(client=client, sync_url=sync_url)
        except SidecarNetworkError as error:
            logger.warning("Periodic sync failed: %s", error)
            return False

        if response.status_code != httpx.codes.OK:
            logger.warning(
                "Periodic sync failed with status code: %d, body: %s",
                response.status_code,
                response.text,
            )
            return False
        return True

    def _job_post_sync(self, client: httpx.Client, sync_url: str) -> httpx.Response:
        try:
            return client.post(sync_url, headers={"Content-Type": "application/json"})
        except httpx.HTTPError as error:
            raise SidecarNetworkError(f"sync request to {sync_url} failed: {error}") from error
