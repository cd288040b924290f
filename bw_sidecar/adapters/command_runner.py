"""Subprocess-backed command runners used for `bw` CLI invocation."""

from __future__ import annotations

import os
import subprocess
from typing import Final, Mapping, Sequence

from .interfaces import CommandResult

_EXECUTABLE_NOT_FOUND_EXIT_CODE: Final[int] = 127


def adapter_build_child_environment(environment_overrides: Mapping[str, str] | None) -> dict[str, str]:
    """Build child process environment from parent environment and overrides.

    Args:
        environment_overrides: Optional variables that replace inherited values.

    Returns:
        dict[str, str]: Environment mapping for the child process.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    child_environment = dict(os.environ)
    if environment_overrides:
        child_environment.update(environment_overrides)
    return child_environment


def adapter_run_command(
    arguments: Sequence[str],
    environment_overrides: Mapping[str, str] | None = None,
) -> CommandResult:
    """Run one command to completion and capture combined stdout and stderr.

    Args:
        arguments: Executable followed by its arguments.
        environment_overrides: Variables added on top of the parent environment.

    Returns:
        CommandResult: Exit status and combined output. A missing executable is
        reported as exit code 127 with the OS error text as output.

    Raises:
        ValueError: Raised when arguments are empty.
    """

    argument_vector = tuple(arguments)
    if not argument_vector:
        raise ValueError("arguments must not be empty")

    try:
        completed_process = subprocess.run(
            argument_vector,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            env=adapter_build_child_environment(environment_overrides),
            check=False,
        )
    except OSError as error:
        return CommandResult(
            arguments=argument_vector,
            exit_code=_EXECUTABLE_NOT_FOUND_EXIT_CODE,
            output=str(error),
        )

    return CommandResult(
        arguments=argument_vector,
        exit_code=completed_process.returncode,
        output=completed_process.stdout.decode("utf-8", errors="replace"),
    )


def adapter_run_process(
    arguments: Sequence[str],
    environment_overrides: Mapping[str, str] | None = None,
) -> int:
    """Run one long-lived command with inherited stdout and stderr.

    Args:
        arguments: Executable followed by its arguments.
        environment_overrides: Variables added on top of the parent environment.

    Returns:
        int: Process exit status once the process terminates.

    Raises:
        ValueError: Raised when arguments are empty.
        OSError: Raised when the executable cannot be started.
    """

    argument_vector = tuple(arguments)
    if not argument_vector:
        raise ValueError("arguments must not be empty")

    with subprocess.Popen(argument_vector, env=adapter_build_child_environment(environment_overrides)) as process:
        return process.wait()
