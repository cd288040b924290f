"""Job-layer launcher for the long-running `bw serve` process."""

from __future__ import annotations

import logging
import os
import sys
import threading
from typing import Callable

from bw_sidecar.adapters import SESSION_ENV_NAME, ProcessRunnerPort, VaultCliAdapter

logger = logging.getLogger(__name__)


def job_exit_process_fatally(message: str) -> None:
    """Print a fatal diagnostic and terminate the whole process with status 1.

    `os._exit` is used because the caller runs on a background thread, where
    `SystemExit` would only end that thread.

    Args:
        message: Diagnostic text printed after the `FATAL:` prefix.

    Returns:
        None: This function does not return.

    Raises:
        RuntimeError: This function does not raise; it terminates the process.
    """

    print(f"FATAL: {message}", file=sys.stderr, flush=True)
    sys.stdout.flush()
    os._exit(1)


class BackingServiceLauncher:
    """Starts `bw serve` on a daemon thread and treats its exit as fatal."""

    def __init__(
        self,
        vault_cli: VaultCliAdapter,
        process_runner: ProcessRunnerPort,
        fatal_handler: Callable[[str], None] = job_exit_process_fatally,
    ):
        """Initialize backing service launcher.

        Args:
            vault_cli: Adapter providing the `bw serve` argument grammar.
            process_runner: Runner that blocks until the process exits.
            fatal_handler: Called with a diagnostic once the process is gone.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies are invalid.
        """

        if vault_cli is None:
            raise ValueError("vault_cli must not be None")
        if process_runner is None:
            raise ValueError("process_runner must not be None")
        if fatal_handler is None:
            raise ValueError("fatal_handler must not be None")

        self._vault_cli = vault_cli
        self._process_runner = process_runner
        self._fatal_handler = fatal_handler

    def job_start_backing_service(self, port: int, credential: str) -> threading.Thread:
        """Start `bw serve` bound to all interfaces on a background thread.

        Args:
            port: Port for the backing API.
            credential: Session key passed as `--session` and `BW_SESSION`.

        Returns:
            threading.Thread: Started daemon thread supervising the process.

        Raises:
            ValueError: Raised when the credential is blank.
        """

        if not credential.strip():
            raise ValueError("credential must not be blank")

        logger.info("Starting 'bw serve' on internal port %d", port)
        supervisor_thread = threading.Thread(
            target=self._job_run_backing_service,
            kwargs={"port": port, "credential": credential},
            name="bw-serve",
            daemon=True,
        )
        supervisor_thread.start()
        return supervisor_thread

    def _job_run_backing_service(self, port: int, credential: str) -> None:
        arguments = self._vault_cli.adapter_serve_arguments(port=port, session=credential)
        try:
            exit_code = self._process_runner(arguments, {SESSION_ENV_NAME: credential})
        except OSError as error:
            self._fatal_handler(f"'bw serve' process failed: {error}")
            return

        self._fatal_handler(f"'bw serve' process failed: exit status {exit_code}")
