"""Typed domain models shared across runtime layers.

This module provides simple data contracts for readiness polling and sync
results.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RetryPolicy:
    """Readiness polling budget.

    Attributes:
        max_attempts: Number of status requests before giving up.
        interval_seconds: Delay between consecutive attempts.
    """

    max_attempts: int = 30
    interval_seconds: float = 1.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.interval_seconds < 0:
            raise ValueError("interval_seconds must be >= 0")


@dataclass(frozen=True)
class SyncOutcome:
    """Result contract for one vault sync attempt.

    Attributes:
        succeeded: Whether the sync command exited with status zero.
        exit_code: Sync command exit status.
        output: Combined command output used as failure diagnostics.
    """

    succeeded: bool
    exit_code: int
    output: str
