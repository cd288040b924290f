"""Typed runtime settings with dotenv support and startup validation."""

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class AppSettings(BaseSettings):
    """Sidecar settings for vault login, backing service and proxy runtime.

    Environment variable names map directly to field names in uppercase.
    Example: `bw_serve_port` reads from `BW_SERVE_PORT`. Empty variables are
    treated as unset.

    Attributes:
        bw_host: Optional custom Bitwarden server URL.
        bw_clientid: API key client id; required by login.
        bw_clientsecret: API key client secret; required by login.
        bw_password: Master password; required by unlock.
        bw_cli_path: `bw` executable name or path.
        bw_serve_port: Internal port for `bw serve`.
        bw_proxy_port: Public port for the sidecar proxy.
        bw_proxy_host: Host used by periodic sync to reach the sidecar itself.
        bw_disable_sync: Disables periodic sync when the variable is `true`.
        bw_sync_interval: Periodic sync interval as a duration string.
        bw_sync_coalesce: Whether overlapping sync requests share one `bw sync` run.
        bw_serve_wait_retries: Readiness poll attempts.
        bw_serve_wait_interval: Delay between readiness polls as a duration string.
        log_level: Root logging level name.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
    )

    bw_host: str | None = Field(default=None)
    bw_clientid: SecretStr | None = Field(default=None)
    bw_clientsecret: SecretStr | None = Field(default=None)
    bw_password: SecretStr | None = Field(default=None)
    bw_cli_path: str = Field(default="bw", min_length=1)
    bw_serve_port: int = Field(default=8088, ge=1, le=65535)
    bw_proxy_port: int = Field(default=8087, ge=1, le=65535)
    bw_proxy_host: str = Field(default="localhost", min_length=1)
    bw_disable_sync: bool = Field(default=False)
    bw_sync_interval: str = Field(default="2m")
    bw_sync_coalesce: bool = Field(default=True)
    bw_serve_wait_retries: int = Field(default=30, ge=1)
    bw_serve_wait_interval: str = Field(default="1s")
    log_level: str = Field(default="INFO")

    @field_validator("bw_host")
    @classmethod
    def _validate_optional_host(cls, value: str | None) -> str | None:
        if value is None:
            return None
        stripped_value = value.strip()
        return stripped_value or None

    @field_validator("bw_cli_path", "bw_proxy_host")
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @field_validator("bw_disable_sync", mode="before")
    @classmethod
    def _validate_disable_flag(cls, value: object) -> object:
        # Only the literal `true` disables sync; any other text keeps it enabled.
        if isinstance(value, str):
            return value.strip().lower() == "true"
        return value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized_value = value.strip().upper()
        if normalized_value not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"unsupported log level {value!r}")
        return normalized_value

    def settings_proxy_target_url(self) -> str:
        """Return backing service base URL used by the reverse proxy.

        Returns:
            str: `http://localhost:<bw_serve_port>`.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        return f"http://localhost:{self.bw_serve_port}"


def config_load_settings(env_file: str | None = None) -> AppSettings:
    """Load and validate runtime settings from environment and dotenv.

    Args:
        env_file: Optional dotenv path overriding the default `.env`.

    Returns:
        AppSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when settings are invalid.
    """

    try:
        if env_file is not None:
            return AppSettings(_env_file=env_file)
        return AppSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error
