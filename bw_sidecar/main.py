"""Main module entrypoint for the sidecar process.

Startup order: login and unlock, start `bw serve`, wait for an unlocked
status, then start periodic sync and serve the proxy front. Any startup
failure prints a `FATAL:` line to stderr and exits with status 1.
"""

import argparse
import logging
import sys
from typing import Any, Callable, NoReturn

import uvicorn

from bw_sidecar.adapters import (
    CommandError,
    CommandRunnerPort,
    ConfigurationError,
    ProcessRunnerPort,
    ReadinessTimeoutError,
    adapter_run_command,
    adapter_run_process,
)
from bw_sidecar.bootstrap import (
    bootstrap_create_application,
    bootstrap_create_authentication_sequencer,
    bootstrap_create_backing_service_launcher,
    bootstrap_create_periodic_sync_scheduler,
    bootstrap_create_readiness_poller,
    bootstrap_create_vault_cli,
)
from bw_sidecar.config import AppSettings, SettingsLoadError, config_load_settings, config_setup_logging

logger = logging.getLogger(__name__)


def main_exit_fatal(message: str) -> NoReturn:
    """Print a fatal startup diagnostic and exit with status 1.

    Args:
        message: Diagnostic text printed after the `FATAL:` prefix.

    Returns:
        NoReturn: This function always exits.

    Raises:
        SystemExit: Always raised with exit status 1.
    """

    print(f"FATAL: {message}", file=sys.stderr, flush=True)
    raise SystemExit(1)


def main_run_sidecar(
    settings: AppSettings,
    command_runner: CommandRunnerPort = adapter_run_command,
    process_runner: ProcessRunnerPort = adapter_run_process,
    server_runner: Callable[..., Any] = uvicorn.run,
) -> None:
    """Run the full startup sequence, then serve the proxy front.

    Args:
        settings: Validated runtime settings.
        command_runner: Runner for captured `bw` invocations.
        process_runner: Runner for the long-lived `bw serve` process.
        server_runner: ASGI server entrypoint; blocks while serving.

    Returns:
        None: Returns only when the server stops.

    Raises:
        SystemExit: Raised with status 1 on any startup failure.
    """

    vault_cli = bootstrap_create_vault_cli(settings, command_runner=command_runner)

    try:
        credential = bootstrap_create_authentication_sequencer(settings, vault_cli).job_login_and_get_session()
    except (ConfigurationError, CommandError) as error:
        main_exit_fatal(f"Bitwarden login failed: {error}")

    bootstrap_create_backing_service_launcher(vault_cli, process_runner=process_runner).job_start_backing_service(
        port=settings.bw_serve_port,
        credential=credential,
    )

    try:
        bootstrap_create_readiness_poller(settings).job_wait_for_ready(port=settings.bw_serve_port)
    except ReadinessTimeoutError as error:
        main_exit_fatal(f"Bitwarden serve API failed to initialize: {error}")

    logger.info("Bitwarden serve API is ready and unlocked. Authentication successful.")

    application = bootstrap_create_application(settings, vault_cli=vault_cli, credential=credential)

    if settings.bw_disable_sync:
        logger.info("Automatic sync is disabled.")
    else:
        bootstrap_create_periodic_sync_scheduler(settings).job_start(
            host=settings.bw_proxy_host,
            port=settings.bw_proxy_port,
        )

    logger.info("Starting proxy server on port %d", settings.bw_proxy_port)
    try:
        server_runner(application, host="0.0.0.0", port=settings.bw_proxy_port, log_config=None)
    except OSError as error:
        main_exit_fatal(f"Proxy server failed: {error}")
    except SystemExit as error:
        # uvicorn logs bind failures and exits with a non-zero status.
        if error.code in (None, 0):
            raise
        main_exit_fatal(f"Proxy server failed: exit status {error.code}")


def main(argv: list[str] | None = None) -> None:
    """Parse arguments, load settings and run the sidecar.

    Args:
        argv: Optional argument list; defaults to `sys.argv[1:]`.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SystemExit: Raised with status 1 on configuration or startup failure.
    """

    argument_parser = argparse.ArgumentParser(description="Bitwarden serve sidecar with proxy, health and sync endpoints")
    argument_parser.add_argument(
        "--env-file",
        dest="env_file",
        type=str,
        default=None,
        help="Optional dotenv file read in addition to process environment (default: .env)",
    )
    parsed_arguments = argument_parser.parse_args(argv)

    try:
        settings = config_load_settings(env_file=parsed_arguments.env_file)
    except SettingsLoadError as error:
        main_exit_fatal(str(error))

    config_setup_logging(settings.log_level)
    main_run_sidecar(settings)


if __name__ == "__main__":
    main()
