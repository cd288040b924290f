"""Project-native typed exceptions for sidecar startup and sync failures."""

from __future__ import annotations

from typing import Sequence


class SidecarError(Exception):
    """Base exception for sidecar-level failures."""


class ConfigurationError(SidecarError, ValueError):
    """Required vault credentials are missing from runtime configuration."""


class CommandError(SidecarError, RuntimeError):
    """External `bw` command exited with a non-zero status.

    Attributes:
        arguments: Redacted command arguments used for diagnostics.
        exit_code: Process exit status.
        output: Combined stdout and stderr captured from the process.
    """

    def __init__(
        self,
        message: str,
        arguments: Sequence[str] = (),
        exit_code: int | None = None,
        output: str = "",
    ):
        super().__init__(message)
        self.arguments = tuple(arguments)
        self.exit_code = exit_code
        self.output = output


class ReadinessTimeoutError(SidecarError, TimeoutError):
    """Backing service did not report an unlocked vault within the retry budget."""


class SidecarNetworkError(SidecarError, ConnectionError):
    """Transport-level failure while calling a local HTTP endpoint."""
