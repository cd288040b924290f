"""Regression tests for `bw serve` launch and supervision."""

from __future__ import annotations

from typing import Mapping, Sequence

import pytest

from bw_sidecar.adapters import CommandResult, VaultCliAdapter
from bw_sidecar.jobs import BackingServiceLauncher


class _ProcessRunnerStub:
    """Process runner stub returning a fixed exit code or raising OSError."""

    def __init__(self, exit_code: int = 0, error: OSError | None = None):
        """Initialize process runner stub.

        Args:
            exit_code: Exit status returned by the fake process.
            error: Optional start failure raised instead.

        Returns:
            None: Initializer does not return values.

        Raises:
            RuntimeError: This stub does not raise runtime errors.
        """

        self._exit_code = exit_code
        self._error = error
        self.calls: list[tuple[tuple[str, ...], dict[str, str]]] = []

    def __call__(
        self,
        arguments: Sequence[str],
        environment_overrides: Mapping[str, str] | None = None,
    ) -> int:
        """Record invocation and simulate process termination.

        Args:
            arguments: Command arguments.
            environment_overrides: Child environment overrides.

        Returns:
            int: Configured exit status.

        Raises:
            OSError: Raised when configured.
        """

        self.calls.append((tuple(arguments), dict(environment_overrides or {})))
        if self._error is not None:
            raise self._error
        return self._exit_code


def _build_launcher(process_runner: _ProcessRunnerStub, fatal_messages: list[str]) -> BackingServiceLauncher:
    """Create launcher capturing fatal diagnostics instead of exiting.

    Args:
        process_runner: Process runner stub.
        fatal_messages: List receiving fatal diagnostics.

    Returns:
        BackingServiceLauncher: Launcher under test.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    vault_cli = VaultCliAdapter(
        command_runner=lambda arguments, environment_overrides=None: CommandResult(
            arguments=tuple(arguments), exit_code=0, output=""
        )
    )
    return BackingServiceLauncher(
        vault_cli=vault_cli,
        process_runner=process_runner,
        fatal_handler=fatal_messages.append,
    )


def test_jobs_backing_service_launches_serve_with_session() -> None:
    """Start `bw serve` on all interfaces with the session credential.

    Returns:
        None: Assertions validate launch arguments and environment.

    Raises:
        AssertionError: Raised when launch arguments differ.
    """

    process_runner = _ProcessRunnerStub(exit_code=1)
    fatal_messages: list[str] = []

    thread = _build_launcher(process_runner, fatal_messages).job_start_backing_service(port=8088, credential="tok")
    thread.join(timeout=5.0)

    assert thread.daemon is True
    assert process_runner.calls == [
        (
            ("bw", "serve", "--hostname", "0.0.0.0", "--port", "8088", "--session", "tok"),
            {"BW_SESSION": "tok"},
        )
    ]


@pytest.mark.parametrize("exit_code", [0, 1, 137])
def test_jobs_backing_service_exit_with_any_status_is_fatal(exit_code: int) -> None:
    """Report every backing process exit to the fatal handler.

    Args:
        exit_code: Exit status of the fake process.

    Returns:
        None: Assertions validate fatal reporting.

    Raises:
        AssertionError: Raised when an exit is not treated as fatal.
    """

    fatal_messages: list[str] = []

    thread = _build_launcher(_ProcessRunnerStub(exit_code=exit_code), fatal_messages).job_start_backing_service(
        port=8088, credential="tok"
    )
    thread.join(timeout=5.0)

    assert fatal_messages == [f"'bw serve' process failed: exit status {exit_code}"]


def test_jobs_backing_service_start_failure_is_fatal() -> None:
    """Report an executable start failure to the fatal handler.

    Returns:
        None: Assertions validate start-failure reporting.

    Raises:
        AssertionError: Raised when start failure is swallowed.
    """

    fatal_messages: list[str] = []
    process_runner = _ProcessRunnerStub(error=FileNotFoundError("No such file or directory: 'bw'"))

    thread = _build_launcher(process_runner, fatal_messages).job_start_backing_service(port=8088, credential="tok")
    thread.join(timeout=5.0)

    assert len(fatal_messages) == 1
    assert fatal_messages[0].startswith("'bw serve' process failed: ")
    assert "No such file or directory" in fatal_messages[0]


def test_jobs_backing_service_rejects_blank_credential() -> None:
    """Refuse to launch without a session credential.

    Returns:
        None: Assertions validate credential guard.

    Raises:
        AssertionError: Raised when blank credential is accepted.
    """

    process_runner = _ProcessRunnerStub()

    with pytest.raises(ValueError, match="credential"):
        _build_launcher(process_runner, []).job_start_backing_service(port=8088, credential="  ")

    assert process_runner.calls == []
