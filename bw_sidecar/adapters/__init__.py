"""Adapter layer package for CLI, process and HTTP integration boundaries."""

from .command_runner import adapter_build_child_environment, adapter_run_command, adapter_run_process
from .interfaces import CommandResult, CommandRunnerPort, ProcessRunnerPort
from .reverse_proxy import ReverseProxyAdapter
from .sidecar_errors import (
	CommandError,
	ConfigurationError,
	ReadinessTimeoutError,
	SidecarError,
	SidecarNetworkError,
)
from .vault_cli import (
	CLIENT_ID_ENV_NAME,
	CLIENT_SECRET_ENV_NAME,
	PASSWORD_ENV_NAME,
	SESSION_ENV_NAME,
	VaultCliAdapter,
)

__all__ = [
	"CLIENT_ID_ENV_NAME",
	"CLIENT_SECRET_ENV_NAME",
	"CommandError",
	"CommandResult",
	"CommandRunnerPort",
	"ConfigurationError",
	"PASSWORD_ENV_NAME",
	"ProcessRunnerPort",
	"ReadinessTimeoutError",
	"ReverseProxyAdapter",
	"SESSION_ENV_NAME",
	"SidecarError",
	"SidecarNetworkError",
	"VaultCliAdapter",
	"adapter_build_child_environment",
	"adapter_run_command",
	"adapter_run_process",
]
