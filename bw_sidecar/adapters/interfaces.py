"""Typed interfaces for adapter-layer responsibilities."""

from dataclasses import dataclass
from typing import Mapping, Protocol, Sequence


@dataclass(frozen=True)
class CommandResult:
    """Result contract for one captured external command execution.

    Attributes:
        arguments: Full argument vector that was executed.
        exit_code: Process exit status.
        output: Combined stdout and stderr text.
    """

    arguments: tuple[str, ...]
    exit_code: int
    output: str

    def command_succeeded(self) -> bool:
        """Return whether the process exited with status zero.

        Returns:
            bool: True when exit code is zero.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        return self.exit_code == 0


class CommandRunnerPort(Protocol):
    """Port for running one short-lived command and capturing its output."""

    def __call__(
        self,
        arguments: Sequence[str],
        environment_overrides: Mapping[str, str] | None = None,
    ) -> CommandResult:
        """Run command to completion with combined output capture.

        Args:
            arguments: Executable followed by its arguments.
            environment_overrides: Variables added on top of the parent environment.

        Returns:
            CommandResult: Exit status and combined output.

        Raises:
            RuntimeError: Raised for unexpected runner failures.
        """


class ProcessRunnerPort(Protocol):
    """Port for running one long-lived command with inherited output streams."""

    def __call__(
        self,
        arguments: Sequence[str],
        environment_overrides: Mapping[str, str] | None = None,
    ) -> int:
        """Run command until it exits and return its exit status.

        Args:
            arguments: Executable followed by its arguments.
            environment_overrides: Variables added on top of the parent environment.

        Returns:
            int: Process exit status.

        Raises:
            OSError: Raised when the executable cannot be started.
        """
