"""Job-layer vault sync execution with optional single-flight coalescing."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future

from bw_sidecar.adapters import VaultCliAdapter
from bw_sidecar.domain import SyncOutcome

logger = logging.getLogger(__name__)


class SyncService:
    """Runs `bw sync` for manual and periodic triggers.

    With coalescing enabled, a caller arriving while a sync is running does
    not start another `bw sync`; it waits for the running one and receives
    the same outcome. With coalescing disabled every caller spawns its own
    process and overlapping runs are not serialized.
    """

    def __init__(self, vault_cli: VaultCliAdapter, credential: str, coalesce_concurrent: bool = True):
        """Initialize sync service.

        Args:
            vault_cli: Adapter for `bw sync`.
            credential: Session key forwarded to the sync command.
            coalesce_concurrent: Whether overlapping callers share one run.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies are invalid.
        """

        if vault_cli is None:
            raise ValueError("vault_cli must not be None")

        self._vault_cli = vault_cli
        self._credential = credential
        self._coalesce_concurrent = coalesce_concurrent
        self._state_lock = threading.Lock()
        self._in_flight: Future[SyncOutcome] | None = None

    def job_sync_in_progress(self) -> bool:
        """Return whether a coalesced sync run is currently executing.

        Returns:
            bool: True while a shared run is in flight.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        with self._state_lock:
            return self._in_flight is not None

    def job_execute_sync(self) -> SyncOutcome:
        """Run or join one vault sync and return its outcome.

        Returns:
            SyncOutcome: Exit status and combined output of the sync command.

        Raises:
            RuntimeError: Raised for unexpected runner failures; non-zero exit
                codes are reported through the outcome instead.
        """

        if not self._coalesce_concurrent:
            return self._job_run_sync_command()

        with self._state_lock:
            shared_run = self._in_flight
            owns_run = shared_run is None
            if owns_run:
                shared_run = Future()
                self._in_flight = shared_run

        if not owns_run:
            logger.info("Sync already in progress, waiting for its result")
            return shared_run.result()

        try:
            outcome = self._job_run_sync_command()
        except BaseException as error:
            shared_run.set_exception(error)
            raise
        else:
            shared_run.set_result(outcome)
            return outcome
        finally:
            with self._state_lock:
                self._in_flight = None

    def _job_run_sync_command(self) -> SyncOutcome:
        logger.info("Executing 'bw sync'...")
        result = self._vault_cli.adapter_sync(session=self._credential)
        outcome = SyncOutcome(
            succeeded=result.command_succeeded(),
            exit_code=result.exit_code,
            output=result.output,
        )
        if outcome.succeeded:
            logger.info("Sync successful.")
        else:
            logger.warning("Sync failed: %s", outcome.output.strip())
        return outcome
