"""Job-layer readiness poller for the local `bw serve` status endpoint."""

from __future__ import annotations

import json
import logging
import time
from typing import Final

import httpx

from bw_sidecar.adapters import ReadinessTimeoutError
from bw_sidecar.domain import RetryPolicy, domain_is_unlocked

logger = logging.getLogger(__name__)


class ReadinessPoller:
    """Polls `GET /status` until the vault reports unlocked or the budget runs out."""

    _STATUS_HOST: Final[str] = "127.0.0.1"

    def __init__(
        self,
        policy: RetryPolicy,
        request_timeout_seconds: float = 2.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize readiness poller.

        Args:
            policy: Attempt count and interval between attempts.
            request_timeout_seconds: Per-request HTTP timeout.
            transport: Optional transport override, used by tests.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when config values are invalid.
        """

        if policy is None:
            raise ValueError("policy must not be None")
        if request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")

        self._policy = policy
        self._request_timeout_seconds = request_timeout_seconds
        self._transport = transport

    def job_status_url(self, port: int) -> str:
        """Return status endpoint URL for the backing service port.

        Args:
            port: Backing service port.

        Returns:
            str: Status endpoint URL.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        return f"http://{self._STATUS_HOST}:{port}/status"

    def job_wait_for_ready(self, port: int) -> None:
        """Block until the backing service reports an unlocked vault.

        Each attempt that fails to connect, returns non-200 or returns a body
        that is not JSON counts against the same attempt budget as a locked
        status.

        Args:
            port: Backing service port.

        Returns:
            None: Returns as soon as one attempt sees an unlocked status.

        Raises:
            ReadinessTimeoutError: Raised when all attempts are exhausted.
        """

        status_url = self.job_status_url(port)
        logger.info("Waiting for 'bw serve' to become ready and unlocked...")

        with httpx.Client(timeout=self._request_timeout_seconds, transport=self._transport) as client:
            for attempt_index in range(self._policy.max_attempts):
                if attempt_index > 0 and self._policy.interval_seconds > 0:
                    time.sleep(self._policy.interval_seconds)

                if self._job_poll_once(client=client, status_url=status_url, attempt_number=attempt_index + 1):
                    return

        raise ReadinessTimeoutError(
            f"timeout waiting for bw serve to become unlocked after {self._policy.max_attempts} attempts"
        )

    def _job_poll_once(self, client: httpx.Client, status_url: str, attempt_number: int) -> bool:
        """Run one status request and evaluate the unlock predicate.

        Args:
            client: Open HTTP client.
            status_url: Status endpoint URL.
            attempt_number: One-based attempt counter for diagnostics.

        Returns:
            bool: True when the payload reports an unlocked vault.

        Raises:
            RuntimeError: Transport and decode failures are reported as False.
        """

        try:
            response = client.get(status_url)
        except httpx.HTTPError as error:
            logger.debug("status attempt %d: request failed: %s", attempt_number, error)
            return False

        if response.status_code != httpx.codes.OK:
            logger.debug("status attempt %d: HTTP %d", attempt_number, response.status_code)
            return False

        try:
            payload = json.loads(response.content)
        except ValueError:
            logger.debug("status attempt %d: body is not valid JSON", attempt_number)
            return False

        if domain_is_unlocked(payload):
            return True
        logger.debug("status attempt %d: vault not unlocked yet", attempt_number)
        return False
