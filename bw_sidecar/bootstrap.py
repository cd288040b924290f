"""Application bootstrap wiring for startup sequencing and dependency assembly."""

from fastapi import FastAPI

from bw_sidecar.adapters import (
    CommandRunnerPort,
    ProcessRunnerPort,
    ReverseProxyAdapter,
    VaultCliAdapter,
    adapter_run_command,
    adapter_run_process,
)
from bw_sidecar.api import create_api_application
from bw_sidecar.config import AppSettings, config_parse_duration_or_default
from bw_sidecar.domain import RetryPolicy
from bw_sidecar.jobs import (
    AuthenticationConfig,
    AuthenticationSequencer,
    BackingServiceLauncher,
    PeriodicSyncScheduler,
    ReadinessPoller,
    SyncService,
)


def bootstrap_create_vault_cli(
    settings: AppSettings,
    command_runner: CommandRunnerPort = adapter_run_command,
) -> VaultCliAdapter:
    """Build the `bw` CLI adapter.

    Args:
        settings: Validated runtime settings.
        command_runner: Runner used for captured invocations.

    Returns:
        VaultCliAdapter: Adapter bound to the configured executable.

    Raises:
        ValueError: Raised when the executable setting is blank.
    """

    return VaultCliAdapter(command_runner=command_runner, executable=settings.bw_cli_path)


def bootstrap_create_authentication_sequencer(
    settings: AppSettings,
    vault_cli: VaultCliAdapter,
) -> AuthenticationSequencer:
    """Build the login sequencer from configured secrets.

    Args:
        settings: Validated runtime settings.
        vault_cli: CLI adapter.

    Returns:
        AuthenticationSequencer: Sequencer ready to run.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    return AuthenticationSequencer(
        vault_cli=vault_cli,
        config=AuthenticationConfig(
            client_id=settings.bw_clientid.get_secret_value() if settings.bw_clientid else None,
            client_secret=settings.bw_clientsecret.get_secret_value() if settings.bw_clientsecret else None,
            password=settings.bw_password.get_secret_value() if settings.bw_password else None,
            server_host=settings.bw_host,
        ),
    )


def bootstrap_create_backing_service_launcher(
    vault_cli: VaultCliAdapter,
    process_runner: ProcessRunnerPort = adapter_run_process,
) -> BackingServiceLauncher:
    """Build the `bw serve` launcher with the process-terminating fatal handler.

    Args:
        vault_cli: CLI adapter.
        process_runner: Runner with inherited output streams.

    Returns:
        BackingServiceLauncher: Launcher ready to start the backing service.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    return BackingServiceLauncher(vault_cli=vault_cli, process_runner=process_runner)


def bootstrap_create_retry_policy(settings: AppSettings) -> RetryPolicy:
    """Build readiness retry policy from settings.

    Args:
        settings: Validated runtime settings.

    Returns:
        RetryPolicy: Attempts and interval for readiness polling.

    Raises:
        ValueError: Raised when the resolved policy is invalid.
    """

    return RetryPolicy(
        max_attempts=settings.bw_serve_wait_retries,
        interval_seconds=config_parse_duration_or_default(
            settings.bw_serve_wait_interval,
            default_seconds=1.0,
            setting_name="BW_SERVE_WAIT_INTERVAL",
            allow_zero=True,
        ),
    )


def bootstrap_create_readiness_poller(settings: AppSettings) -> ReadinessPoller:
    """Build readiness poller from settings.

    Args:
        settings: Validated runtime settings.

    Returns:
        ReadinessPoller: Poller for the backing service status endpoint.

    Raises:
        ValueError: Raised when the resolved policy is invalid.
    """

    return ReadinessPoller(policy=bootstrap_create_retry_policy(settings))


def bootstrap_create_application(
    settings: AppSettings,
    vault_cli: VaultCliAdapter,
    credential: str,
) -> FastAPI:
    """Assemble the proxy front application.

    Args:
        settings: Validated runtime settings.
        vault_cli: CLI adapter used by the sync endpoint.
        credential: Session key for `bw sync`.

    Returns:
        FastAPI: Application with health, sync and proxy routes.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    sync_service = SyncService(
        vault_cli=vault_cli,
        credential=credential,
        coalesce_concurrent=settings.bw_sync_coalesce,
    )
    reverse_proxy = ReverseProxyAdapter(target_base_url=settings.settings_proxy_target_url())
    return create_api_application(sync_service=sync_service, reverse_proxy=reverse_proxy)


def bootstrap_create_periodic_sync_scheduler(settings: AppSettings) -> PeriodicSyncScheduler:
    """Build periodic sync scheduler from settings.

    Args:
        settings: Validated runtime settings.

    Returns:
        PeriodicSyncScheduler: Scheduler with resolved interval.

    Raises:
        ValueError: Raised when scheduler config is invalid.
    """

    return PeriodicSyncScheduler(interval_text=settings.bw_sync_interval)
