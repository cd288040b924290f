"""Job layer package for startup sequencing and sync workflows."""

from .authentication import AuthenticationConfig, AuthenticationSequencer
from .backing_service import BackingServiceLauncher, job_exit_process_fatally
from .periodic_sync import DEFAULT_SYNC_INTERVAL_SECONDS, PeriodicSyncScheduler
from .readiness import ReadinessPoller
from .sync_service import SyncService

__all__ = [
	"AuthenticationConfig",
	"AuthenticationSequencer",
	"BackingServiceLauncher",
	"DEFAULT_SYNC_INTERVAL_SECONDS",
	"PeriodicSyncScheduler",
	"ReadinessPoller",
	"SyncService",
	"job_exit_process_fatally",
]
