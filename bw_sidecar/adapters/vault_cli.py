"""Bitwarden CLI adapter encoding the `bw` argument grammar."""

from __future__ import annotations

from typing import Final, Sequence

from .interfaces import CommandResult, CommandRunnerPort
from .sidecar_errors import CommandError

PASSWORD_ENV_NAME: Final[str] = "BW_PASSWORD"
SESSION_ENV_NAME: Final[str] = "BW_SESSION"
CLIENT_ID_ENV_NAME: Final[str] = "BW_CLIENTID"
CLIENT_SECRET_ENV_NAME: Final[str] = "BW_CLIENTSECRET"


class VaultCliAdapter:
    """Adapter for the `bw` subcommands used by the sidecar."""

    _REDACTED: Final[str] = "<redacted>"
    _SECRET_FLAGS: Final[frozenset[str]] = frozenset({"--session"})

    def __init__(self, command_runner: CommandRunnerPort, executable: str = "bw"):
        """Initialize CLI adapter.

        Args:
            command_runner: Injected runner used for every captured invocation.
            executable: Path or name of the `bw` executable.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies are invalid.
        """

        if command_runner is None:
            raise ValueError("command_runner must not be None")
        normalized_executable = executable.strip()
        if not normalized_executable:
            raise ValueError("executable must not be blank")

        self._command_runner = command_runner
        self._executable = normalized_executable

    def adapter_configure_server(self, host: str) -> None:
        """Point the CLI at a custom Bitwarden server.

        Args:
            host: Server base URL.

        Returns:
            None: Configuration is persisted by the CLI as side effect.

        Raises:
            CommandError: Raised when `bw config server` exits non-zero.
        """

        result = self._command_runner(self._adapter_arguments("config", "server", host))
        self._adapter_raise_for_failure(result, label="bw config server")

    def adapter_login_apikey(self, client_id: str, client_secret: str) -> None:
        """Log in with API key credentials.

        Args:
            client_id: Personal API key client id.
            client_secret: Personal API key client secret.

        Returns:
            None: Login state is persisted by the CLI as side effect.

        Raises:
            CommandError: Raised when `bw login --apikey` exits non-zero.
        """

        result = self._command_runner(
            self._adapter_arguments("login", "--apikey"),
            {CLIENT_ID_ENV_NAME: client_id, CLIENT_SECRET_ENV_NAME: client_secret},
        )
        self._adapter_raise_for_failure(result, label="bw login")

    def adapter_unlock_raw(self, password: str) -> str:
        """Unlock the vault and return the raw session key.

        Args:
            password: Master password, handed to the CLI through its environment.

        Returns:
            str: Trimmed session key printed by `bw unlock --raw`.

        Raises:
            CommandError: Raised when unlock exits non-zero or prints no session key.
        """

        result = self._command_runner(
            self._adapter_arguments("unlock", "--passwordenv", PASSWORD_ENV_NAME, "--raw"),
            {PASSWORD_ENV_NAME: password},
        )
        self._adapter_raise_for_failure(result, label="bw unlock")

        session_key = result.output.strip()
        if not session_key:
            raise CommandError(
                "bw unlock failed: command returned an empty session key",
                arguments=result.arguments,
                exit_code=result.exit_code,
                output=result.output,
            )
        return session_key

    def adapter_serve_arguments(self, port: int, session: str) -> tuple[str, ...]:
        """Build the `bw serve` argument vector.

        Args:
            port: Port for the local API.
            session: Session key from unlock.

        Returns:
            tuple[str, ...]: Argument vector for a process runner.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        return self._adapter_arguments("serve", "--hostname", "0.0.0.0", "--port", str(port), "--session", session)

    def adapter_sync(self, session: str) -> CommandResult:
        """Pull the latest vault state from the server.

        Args:
            session: Session key from unlock.

        Returns:
            CommandResult: Raw result; callers decide how to surface failures.

        Raises:
            RuntimeError: This method does not raise for non-zero exit codes.
        """

        return self._command_runner(self._adapter_arguments("sync"), {SESSION_ENV_NAME: session})

    def adapter_redact_arguments(self, arguments: Sequence[str]) -> tuple[str, ...]:
        """Replace secret flag values in an argument vector.

        Args:
            arguments: Argument vector possibly carrying a session key.

        Returns:
            tuple[str, ...]: Argument vector safe for logs and error messages.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        redacted: list[str] = []
        redact_next = False
        for argument in arguments:
            redacted.append(self._REDACTED if redact_next else argument)
            redact_next = argument in self._SECRET_FLAGS
        return tuple(redacted)

    def _adapter_arguments(self, *arguments: str) -> tuple[str, ...]:
        return (self._executable, *arguments)

    def _adapter_raise_for_failure(self, result: CommandResult, label: str) -> None:
        if result.command_succeeded():
            return
        raise CommandError(
            f"{label} failed: {result.output.strip()} - exit status {result.exit_code}",
            arguments=self.adapter_redact_arguments(result.arguments),
            exit_code=result.exit_code,
            output=result.output,
        )
