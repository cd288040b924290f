"""Domain models used across application layer boundaries."""

from .models import RetryPolicy, SyncOutcome
from .status import UNLOCKED_STATUS, domain_is_unlocked

__all__ = ["RetryPolicy", "SyncOutcome", "UNLOCKED_STATUS", "domain_is_unlocked"]
