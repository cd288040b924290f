"""Job-layer authentication sequence: configure server, login, unlock."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from bw_sidecar.adapters import ConfigurationError, VaultCliAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthenticationConfig:
    """Credentials and server settings used by the login sequence.

    Attributes:
        client_id: API key client id, None when not configured.
        client_secret: API key client secret, None when not configured.
        password: Master password, None when not configured.
        server_host: Optional custom Bitwarden server URL.
    """

    client_id: str | None = field(default=None, repr=False)
    client_secret: str | None = field(default=None, repr=False)
    password: str | None = field(default=None, repr=False)
    server_host: str | None = None


class AuthenticationSequencer:
    """Runs the `bw` login flow and returns a session credential."""

    def __init__(self, vault_cli: VaultCliAdapter, config: AuthenticationConfig):
        """Initialize authentication sequencer.

        Args:
            vault_cli: Adapter for `bw` subcommands.
            config: Credentials and server settings.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies are invalid.
        """

        if vault_cli is None:
            raise ValueError("vault_cli must not be None")
        if config is None:
            raise ValueError("config must not be None")

        self._vault_cli = vault_cli
        self._config = config

    def job_login_and_get_session(self) -> str:
        """Log in with the API key, unlock the vault and return the session key.

        Returns:
            str: Trimmed session key from `bw unlock --raw`.

        Raises:
            ConfigurationError: Raised when client id, client secret or password is missing.
            CommandError: Raised when any `bw` step exits non-zero.
        """

        client_id = (self._config.client_id or "").strip()
        client_secret = (self._config.client_secret or "").strip()
        password = self._config.password or ""
        if not client_id or not client_secret or not password:
            raise ConfigurationError(
                "missing one or more required environment variables (BW_CLIENTID, BW_CLIENTSECRET, BW_PASSWORD)"
            )

        logger.info("Executing Bitwarden login...")
        if self._config.server_host:
            logger.info("Configuring bw-cli to use the supplied host %s", self._config.server_host)
            self._vault_cli.adapter_configure_server(self._config.server_host)

        self._vault_cli.adapter_login_apikey(client_id=client_id, client_secret=client_secret)
        logger.info("Logged in successfully")

        logger.info("Unlocking vault...")
        return self._vault_cli.adapter_unlock_raw(password=password)
